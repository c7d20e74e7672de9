# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Parser state machine that turns tokens into a `ParseResult`.

`Parser.parse()` walks the token list once. Each token is handled by the
first rule that applies:

1. `-` is the stdin sentinel and must bind to a stream-typed option or argument.
2. A token made only of dashes is the double-dash separator. Afterwards every
   token is positional.
3. A token starting with `-` is a flag: `--name=value`, `--no-name`,
   `--name` (opens the option for the next token), `-x`, or a bundle of
   boolean short flags such as `-abc`.
4. If an option is open, the token is offered to it as a value.
5. A token naming a reachable command descends into that command, as long as
   no positional argument has been bound yet.
6. Anything else binds to the next positional argument slot that accepts it.

`Parser.verify()` runs afterwards, once defaults and prompts have had a chance
to fill gaps, and enforces required items and array arity.

Each `parse()` call builds a fresh `ParseState`, so a `Parser` can be reused
for sequential parses but must not be shared between concurrent ones.
"""
from __future__ import annotations

import io
import re
import sys
from dataclasses import dataclass, field
from typing import Any, Sequence

from tasklane.exceptions import (
    CountError,
    DemandError,
    InvalidTypeError,
    NotFoundError,
    ParseError,
)
from tasklane.logger import logger
from tasklane.parser.option_types import OptionType, coerce_bool, convert, is_choice, validate
from tasklane.parser.schema import (
    HELP_COMMAND,
    HELP_OPTION,
    Argument,
    Command,
    Item,
    Option,
    ParseSpec,
    find_item,
)
from tasklane.parser.tokenizer import token_offset, tokenize

DOUBLE_DASH = re.compile(r"-{2,}")
NEGATIVE_NUMBER = re.compile(r"-\d+(\.\d+)?([eE][-+]?\d+)?")


@dataclass
class ParseState:
    """Mutable cursor for a single `parse()` call."""

    tokens: list[str] = field(default_factory=list)
    index: int = 0
    token: str = ""
    commands: list[Command] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)
    arguments: list[Argument] = field(default_factory=list)
    command_path: list[str] = field(default_factory=list)
    saw_double_dash: bool = False
    can_get_commands: bool = True
    argument_index: int = 0
    pending: Option | None = None
    help: bool = False

    @property
    def offset(self) -> int:
        """Byte offset of the current token in the space-joined command line."""
        if self.index >= len(self.tokens):
            line = " ".join(self.tokens)
            return len(line) + 1 if line else 0
        return token_offset(self.tokens, self.index)


@dataclass
class ParseResult:
    command_path: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    arguments: dict[str, Any] = field(default_factory=dict)
    help: bool = False

    def close(self) -> None:
        """Close the files opened for stream items. Stdin stays open."""
        stdin = getattr(sys.stdin, "buffer", None)
        for value in (*self.options.values(), *self.arguments.values()):
            for item in value if isinstance(value, list) else [value]:
                if isinstance(item, io.IOBase) and item is not stdin:
                    item.close()


class Parser:
    """
    Parses an argument vector against a `ParseSpec`.

    Example:
        >>> parser = Parser(spec)
        >>> result = await parser.parse(["build", "--watch", "src"])
        >>> await parser.verify(result)
    """

    def __init__(self, spec: ParseSpec) -> None:
        self.spec = spec.with_help()
        self.spec.check()
        self.tokens: list[str] = []
        self._state = ParseState()
        self._result = ParseResult()

    @property
    def state(self) -> ParseState:
        return self._state

    @property
    def result(self) -> ParseResult:
        """The result of the last parse, partial when parsing failed."""
        return self._result

    async def parse(self, argv: Sequence[str] | str) -> ParseResult:
        self.tokens = tokenize(argv)
        self._state = ParseState(tokens=self.tokens)
        self._result = ParseResult()
        self._load_command_data()
        logger.debug("Parsing tokens: %s", self.tokens)
        if not self.tokens:
            if self.spec.config.require_command:
                raise DemandError("command", self._state)
            return self._result

        state = self._state
        config = self.spec.config
        for index, token in enumerate(self.tokens):
            state.index = index
            state.token = token
            if token == "-":
                await self._process_stdin()
            elif config.use_double_dash and DOUBLE_DASH.fullmatch(token):
                await self._flush_pending()
                state.saw_double_dash = True
                state.can_get_commands = False
            elif (
                state.pending is not None
                and not state.saw_double_dash
                and NEGATIVE_NUMBER.fullmatch(token)
                and await self.accepts(state.pending, token)
            ):
                await self._process_pending()
            elif not state.saw_double_dash and token.startswith("-"):
                await self._process_flag()
            elif state.pending is not None:
                await self._process_pending()
            else:
                await self._process_free_token()

        state.index = len(self.tokens)
        state.token = ""
        await self._flush_pending()
        self._result.command_path = list(state.command_path)
        return self._result

    async def verify(self, result: ParseResult) -> None:
        """
        Enforce required items, array arity, and command selection.

        Raises:
            DemandError: A required argument, option, or command is missing.
            CountError: An array holds fewer than `min` or more than `max` values.
        """
        self._result = result
        self._state = ParseState(
            tokens=self.tokens,
            index=len(self.tokens),
            command_path=list(result.command_path),
            can_get_commands=False,
        )
        self._load_command_data()
        state = self._state

        for argument in state.arguments:
            value = result.arguments.get(argument.name)
            if argument.array:
                self._check_count("argument", argument, value)
            elif value is None and argument.required:
                raise DemandError("argument", state, argument.name)

        for option in state.options:
            value = result.options.get(option.name)
            if value is None:
                if option.required:
                    raise DemandError("option", state, option.name)
            elif option.array:
                self._check_count("option", option, value)

        if self.spec.config.require_command and not result.command_path:
            raise DemandError("command", state)
        command = self._current_command()
        if command and command.require_subcommand and command.children:
            raise DemandError("command", state)

    def _check_count(self, kind: str, item: Item, value: Any) -> None:
        if value is None:
            values: list[Any] = []
        elif isinstance(value, (list, tuple)):
            values = list(value)
        else:
            values = [value]
        minimum, maximum = item.arity
        if not minimum <= len(values) <= maximum:
            raise CountError(kind, item.name, len(values), item.arity, self._state)

    def _parse_error(self, message: str, extra: int = 0) -> ParseError:
        state = self._state
        reason = f"{message}: {state.token}" if state.token else message
        return ParseError(reason, state, self.tokens, state.offset + extra)

    def _current_command(self) -> Command | None:
        path = self._state.command_path
        if not path:
            return None
        commands = self.spec.resolve_path(path)
        if len(commands) != len(path):
            return None
        return commands[-1]

    def _load_command_data(self) -> None:
        state = self._state
        chain = self.spec.resolve_path(state.command_path)
        command = chain[-1] if chain and len(chain) == len(state.command_path) else None
        state.commands = list(command.children if command else self.spec.commands)
        options = list(self.spec.options)
        for node in chain:
            options.extend(node.options)
        state.options = [option for option in options if option.cli]
        arguments = command.arguments if command else self.spec.arguments
        state.arguments = sorted(arguments, key=lambda argument: argument.order)
        state.argument_index = 0

    def _get_option(self, name: str) -> Option:
        if name in ("h", HELP_OPTION.name):
            return HELP_OPTION
        option = find_item(self._state.options, name)
        if option is None:
            raise NotFoundError("option", name, self._state)
        return option

    def _has_option(self, name: str) -> bool:
        return name in ("h", HELP_OPTION.name) or any(
            option.name == name or name in option.aliases
            for option in self._state.options
        )

    async def accepts(self, item: Item, value: str) -> bool:
        """True when `value` converts to `item`'s type and is one of its choices."""
        parts = value.split(", ") if item.array else [value]
        for part in parts:
            if not await validate(item.type, part):
                return False
            if not await is_choice(item.type, part, item.choices):
                return False
        return True

    async def _set_option(self, option: Option, value: str) -> None:
        result = self._result
        if option.name == HELP_OPTION.name:
            result.help = self._state.help = coerce_bool(value)
        elif option.array:
            current = result.options.get(option.name, [])
            values = [await convert(option.type, part) for part in value.split(", ")]
            result.options[option.name] = [*current, *values]
        else:
            if option.name in result.options:
                raise CountError("option", option.name, 2, (1, 1), self._state)
            result.options[option.name] = await convert(option.type, value)

    async def _set_argument(self, argument: Argument, value: str) -> bool:
        """Bind `value` and return True when the cursor should advance."""
        converted = await convert(argument.type, value)
        if argument.array:
            values = [*self._result.arguments.get(argument.name, []), converted]
            self._result.arguments[argument.name] = values
            return len(values) >= argument.arity[1]
        self._result.arguments[argument.name] = converted
        return True

    async def _flush_pending(self) -> None:
        """Close the open option when no value arrived for it."""
        state = self._state
        option = state.pending
        if option is None:
            return
        state.pending = None
        if option.is_boolean:
            await self._set_option(option, "true")
        elif option.array and option.name in self._result.options:
            return
        elif state.token:
            raise self._parse_error(f"Missing value for option {option.name}")
        else:
            raise self._parse_error("Unexpected end of input")

    async def _process_stdin(self) -> None:
        state = self._state
        option = state.pending
        if option is not None:
            if option.type is not OptionType.STREAM:
                raise self._parse_error("Unexpected token")
            await self._set_option(option, state.token)
            state.pending = None
        else:
            if state.argument_index < len(state.arguments):
                argument = state.arguments[state.argument_index]
            else:
                argument = None
            if argument is None or argument.type is not OptionType.STREAM:
                raise self._parse_error("Unexpected token")
            if await self._set_argument(argument, state.token):
                state.argument_index += 1
        state.can_get_commands = False

    async def _process_flag(self) -> None:
        state = self._state
        config = self.spec.config
        await self._flush_pending()
        token = state.token
        body = token.lstrip("-")
        if not body:
            raise self._parse_error("Unexpected token")

        if token.startswith("--"):
            if "=" in body:
                key, _, value = body.partition("=")
                if not key:
                    raise self._parse_error("Unexpected token", 1)
                if not value:
                    raise self._parse_error("Unexpected space", 2 + len(key) + 1)
                option = self._get_option(key)
                if not await self.accepts(option, value):
                    raise InvalidTypeError(
                        "option", option.name, value, state, option.choices, option.type_name
                    )
                await self._set_option(option, value)
            elif (
                config.no_prefix
                and body.startswith(config.no_prefix)
                and not self._has_option(body)
            ):
                enabled = True
                name = body
                while name.startswith(config.no_prefix):
                    enabled = not enabled
                    name = name[len(config.no_prefix) :]
                option = self._get_option(name)
                if not option.is_boolean:
                    raise self._parse_error(
                        f'{config.no_prefix} can only be applied to options of type "boolean"'
                    )
                await self._set_option(option, "true" if enabled else "false")
            else:
                state.pending = self._get_option(body)
            return

        if body[0].isdigit():
            raise self._parse_error("Unexpected token")
        if len(body) == 1:
            state.pending = self._get_option(body)
            return
        for letter in body:
            option = self._get_option(letter)
            if not option.is_boolean:
                raise self._parse_error(
                    f'Flag -{letter} in -{body} does not have type "boolean"'
                )
            await self._set_option(option, "true")

    async def _process_pending(self) -> None:
        state = self._state
        option = state.pending
        assert option is not None, "An open option is required"
        if await self.accepts(option, state.token):
            await self._set_option(option, state.token)
            if not option.array:
                state.pending = None
        elif option.is_boolean:
            state.pending = None
            await self._set_option(option, "true")
            await self._process_free_token()
        elif option.array and option.name in self._result.options:
            state.pending = None
            await self._process_free_token()
        else:
            raise InvalidTypeError(
                "option", option.name, state.token, state, option.choices, option.type_name
            )

    def _try_command(self) -> bool:
        state = self._state
        token = state.token
        if token == HELP_COMMAND.name:
            state.help = self._result.help = True
            return True
        if not (state.can_get_commands or state.help):
            return False
        command = find_item(state.commands, token)
        if command is None or command.name == HELP_COMMAND.name:
            return False
        state.command_path.append(command.name)
        self._load_command_data()
        return True

    def _offers_commands(self) -> bool:
        return any(command.name != HELP_COMMAND.name for command in self._state.commands)

    async def _process_free_token(self) -> None:
        state = self._state
        if self._try_command():
            return
        if state.can_get_commands and self._offers_commands():
            current = self._current_command()
            must_pick = (
                (self.spec.config.require_command and not state.command_path)
                or (current is not None and current.require_subcommand)
                or not state.arguments
            )
            if must_pick:
                raise NotFoundError("command", state.token, state)
        await self._process_argument()

    async def _process_argument(self) -> None:
        state = self._state
        state.can_get_commands = False
        tried: list[Argument] = []
        while True:
            if state.argument_index >= len(state.arguments):
                if tried:
                    if len(tried) == 1 and not tried[0].array:
                        argument = tried[0]
                        raise InvalidTypeError(
                            "argument",
                            argument.name,
                            state.token,
                            state,
                            argument.choices,
                            argument.type_name,
                        )
                    raise self._parse_error("No argument can accept this token")
                if state.argument_index:
                    previous = state.arguments[state.argument_index - 1]
                    value = self._result.arguments.get(previous.name)
                    if previous.array and isinstance(value, list):
                        raise CountError(
                            "argument", previous.name, len(value) + 1, previous.arity, state
                        )
                    raise CountError("argument", previous.name, 2, (1, 1), state)
                raise self._parse_error("Unexpected argument")

            argument = state.arguments[state.argument_index]
            if await self.accepts(argument, state.token):
                if await self._set_argument(argument, state.token):
                    state.argument_index += 1
                return
            tried.append(argument)
            state.argument_index += 1
