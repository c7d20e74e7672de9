# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Interactive prompting for values that were not supplied.

When `--interactive` is set, the CLI asks for every missing argument and
option that declares a `prompt`. The parser never renders a prompt itself:
it builds one `PromptDescriptor` per missing item with `prompt_for()` and
hands the list to a `Prompter`, which returns a name → value mapping.

An item's `prompt` may be `True` (use everything derived from its type) or a
mapping that overrides any of `message`, `kind`, `initial`, `choices`,
`min`, and `max`.

Prompt kinds:
- "input": free text, validated by the item's type.
- "numeral": a number, optionally bounded by `min`/`max`.
- "confirm": a yes/no question.
- "select": one of the item's choices, with completion.

`SessionPrompter` is the default implementation, built on
`prompt_toolkit.PromptSession.prompt_async`.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import (
    AnyFormattedText,
    FormattedText,
    merge_formatted_text,
)
from prompt_toolkit.validation import Validator
from pydantic import BaseModel, ConfigDict, Field

from tasklane.logger import logger
from tasklane.parser.option_types import coerce_bool, convert, stringify, typer_for
from tasklane.parser.schema import Item
from tasklane.themes import OneColors
from tasklane.validators import (
    array_validator,
    choice_validator,
    number_range_validator,
    type_validator,
    yes_no_validator,
)

PROMPT_KINDS = ("input", "numeral", "confirm", "select")


class PromptDescriptor(BaseModel):
    """
    Everything a `Prompter` needs to ask for one value.

    Attributes:
        name (str): Name of the argument or option being filled.
        message (str): Question shown to the user.
        kind (str): One of "input", "numeral", "confirm", "select".
        initial (Any): Pre-filled answer.
        choices (list[str]): Allowed answers for "select" prompts.
        validator (Validator | None): Prompt Toolkit validator for the raw text.
        coerce (Callable): Converts the raw answer into the item's value type.
    """

    name: str
    message: str
    kind: str = "input"
    initial: Any = None
    choices: list[str] = Field(default_factory=list)
    validator: Validator | None = None
    coerce: Callable[[str], Awaitable[Any]]

    model_config = ConfigDict(arbitrary_types_allowed=True)


def prompt_for(
    item: Item,
    context: Mapping[str, Any] | None = None,
    initial: Any = None,
) -> PromptDescriptor:
    """Build the prompt descriptor for `item`."""
    overrides: Mapping[str, Any] = item.prompt if isinstance(item.prompt, Mapping) else {}
    typer = typer_for(item.type)
    choices = [stringify(choice) for choice in overrides.get("choices", item.choices)]

    kind = overrides.get("kind") or overrides.get("type")
    if not kind:
        kind = "select" if choices and not item.array else typer.prompt
    if kind not in PROMPT_KINDS:
        raise ValueError(f"Unknown prompt kind '{kind}' for {item.name}")

    if initial is None:
        initial = overrides.get("initial")
    if initial is None:
        initial = item.default_for(dict(context or {}))

    if item.array:
        minimum, maximum = item.arity
        validator = array_validator(item.type, minimum, maximum)
    elif kind == "confirm":
        validator = yes_no_validator()
    elif kind == "numeral":
        validator = number_range_validator(overrides.get("min"), overrides.get("max"))
    elif kind == "select":
        validator = choice_validator(choices)
    else:
        validator = type_validator(item.type, item.choices)

    async def coerce(text: str) -> Any:
        text = text.strip()
        if item.array:
            return [await convert(item.type, part) for part in text.split(", ") if part]
        if kind == "confirm":
            return coerce_bool({"y": "yes", "n": "no"}.get(text.lower(), text))
        if kind == "select":
            for choice in item.choices:
                if stringify(choice).upper() == text.upper():
                    return choice
        return await convert(item.type, text)

    return PromptDescriptor(
        name=item.name,
        message=overrides.get("message") or item.description or item.name,
        kind=kind,
        initial=initial,
        choices=choices,
        validator=validator,
        coerce=coerce,
    )


class Prompter:
    """Asks the user for values. Subclasses decide how."""

    async def prompt(self, descriptors: Sequence[PromptDescriptor]) -> dict[str, Any]:
        raise NotImplementedError


class SessionPrompter(Prompter):
    """
    Prompts one descriptor at a time with a Prompt Toolkit session.

    Example:
        >>> prompter = SessionPrompter()
        >>> answers = await prompter.prompt([prompt_for(option, options)])
    """

    def __init__(
        self,
        session: PromptSession | None = None,
        prefix: AnyFormattedText = FormattedText([(OneColors.CYAN, "❓ ")]),
    ) -> None:
        self._session = session
        self.prefix = prefix

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession()
        return self._session

    def _message(self, descriptor: PromptDescriptor) -> AnyFormattedText:
        if descriptor.kind == "confirm":
            suffix = " [Y/n] > "
        elif descriptor.kind == "select":
            suffix = f" ({', '.join(descriptor.choices)}) > "
        else:
            suffix = " > "
        return merge_formatted_text(
            [
                self.prefix,
                descriptor.message,
                FormattedText([(OneColors.LIGHT_YELLOW_b, suffix)]),
            ]
        )

    async def ask(self, descriptor: PromptDescriptor) -> str:
        completer = WordCompleter(descriptor.choices) if descriptor.choices else None
        return await self.session.prompt_async(
            self._message(descriptor),
            default=stringify(descriptor.initial),
            validator=descriptor.validator,
            completer=completer,
        )

    async def prompt(self, descriptors: Sequence[PromptDescriptor]) -> dict[str, Any]:
        answers: dict[str, Any] = {}
        for descriptor in descriptors:
            text = await self.ask(descriptor)
            answers[descriptor.name] = await descriptor.coerce(text)
            logger.debug("Prompted value for '%s'.", descriptor.name)
        return answers
