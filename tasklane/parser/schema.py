# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Schema entities consumed by the parser.

`Option`, `Argument`, and `Command` are immutable descriptions of what a
program accepts. They are normally assembled by the builders in
`tasklane.builder` and collected into a `ParseSpec`, which also carries the
`ParserConfig` toggles (require a command, honor `--`, negation prefix).

Names must be unique within the set of items visible at any single parse
position (the root items plus every command on the active path), and aliases
may not collide with another visible name or alias. `ParseSpec.check()`
enforces this before parsing begins.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Mapping

from tasklane.exceptions import SchemaError
from tasklane.parser.option_types import OptionType, TypeSpec, typer_for
from tasklane.utils import camelcase


@dataclass(frozen=True)
class Item:
    """Fields shared by options and positional arguments."""

    name: str
    type: TypeSpec = OptionType.STRING
    description: str = ""
    array: bool = False
    required: bool = False
    choices: tuple[Any, ...] = ()
    min: int | None = None
    max: float | None = None
    default: Any = None
    prompt: Mapping[str, Any] | bool | None = None

    @property
    def is_boolean(self) -> bool:
        return self.type is OptionType.BOOLEAN

    @property
    def type_name(self) -> str:
        return typer_for(self.type).name

    @property
    def arity(self) -> tuple[int, float]:
        minimum = self.min if self.min is not None else (1 if self.required else 0)
        maximum = self.max if self.max is not None else float("inf")
        return minimum, maximum

    def default_for(self, context: dict[str, Any] | None = None) -> Any:
        """
        Resolve the default value for this item.

        Callable defaults receive the already-resolved context. Items without a
        declared default resolve to nothing when they are required, an empty
        list when they are arrays, and the type's default otherwise.
        """
        if callable(self.default) and not isinstance(self.default, type):
            return self.default(context or {})
        if self.default is not None:
            return self.default
        if self.required:
            return None
        if self.array:
            return []
        return typer_for(self.type).default()

    def get_choice_text(self) -> str:
        """Get the choice text for the item."""
        if self.choices:
            return f"{{{','.join(str(choice) for choice in self.choices)}}}"
        return self.type_name


@dataclass(frozen=True)
class Option(Item):
    """A named flag, bindable as `--name`, `--name=value`, or a short alias."""

    aliases: tuple[str, ...] = ()
    cli: bool = True
    config: bool = True
    help: bool = True

    @property
    def flags(self) -> list[str]:
        return [f"--{self.name}" if len(self.name) > 1 else f"-{self.name}"] + [
            f"--{alias}" if len(alias) > 1 else f"-{alias}" for alias in self.aliases
        ]


@dataclass(frozen=True)
class Argument(Item):
    """A positional item bound by declared order."""

    order: int = 0


@dataclass(frozen=True)
class Command:
    """A command node: its own options, arguments, and sub-commands."""

    name: str
    description: str = ""
    aliases: tuple[str, ...] = ()
    children: tuple[Command, ...] = ()
    options: tuple[Option, ...] = ()
    arguments: tuple[Argument, ...] = ()
    require_subcommand: bool = False

    def find(self, name: str) -> Command | None:
        return find_item(self.children, name)

    def walk(self) -> Iterator[Command]:
        """Yield this command and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class ParserConfig:
    require_command: bool = False
    use_double_dash: bool = True
    no_prefix: str = "no-"


@dataclass(frozen=True)
class ParseSpec:
    options: tuple[Option, ...] = ()
    arguments: tuple[Argument, ...] = ()
    commands: tuple[Command, ...] = ()
    config: ParserConfig = field(default_factory=ParserConfig)

    def with_help(self) -> ParseSpec:
        """Return a copy that also declares the reserved help option and command."""
        options = self.options
        commands = self.commands
        if not any(option.name == HELP_OPTION.name for option in options):
            options = (*options, HELP_OPTION)
        if not any(command.name == HELP_COMMAND.name for command in commands):
            commands = (*commands, HELP_COMMAND)
        return replace(self, options=options, commands=commands)

    def all_options(self) -> list[Option]:
        """Root options followed by the options of every command in the tree."""
        options = list(self.options)
        for command in self.commands:
            for node in command.walk():
                options.extend(node.options)
        return options

    def resolve_path(self, path: list[str]) -> list[Command]:
        """Return the command objects named by `path`, stopping at the first miss."""
        commands: list[Command] = []
        candidates = self.commands
        for name in path:
            command = find_item(candidates, name)
            if command is None:
                break
            commands.append(command)
            candidates = command.children
        return commands

    def check(self) -> None:
        """
        Raise `SchemaError` if any parse position sees duplicate names or aliases.
        """
        self._check_level(list(self.options), self.arguments, self.commands, "root")

    def _check_level(
        self,
        options: list[Option],
        arguments: tuple[Argument, ...],
        commands: tuple[Command, ...],
        where: str,
    ) -> None:
        _check_unique(options, where, "option")
        _check_unique(arguments, where, "argument")
        _check_unique(commands, where, "command")
        for command in commands:
            self._check_level(
                options + list(command.options),
                command.arguments,
                command.children,
                f"{where} {command.name}",
            )


def find_item(items, name: str):
    """
    Find an item by exact name, then camel-cased name, then alias, then
    camel-cased alias.
    """
    camel = camelcase(name)
    for match in (
        lambda item: item.name == name,
        lambda item: item.name == camel,
        lambda item: name in getattr(item, "aliases", ()),
        lambda item: camel in getattr(item, "aliases", ()),
    ):
        for item in items:
            if match(item):
                return item
    return None


def _check_unique(items, where: str, kind: str) -> None:
    seen: dict[str, str] = {}
    for item in items:
        for label in (item.name, *getattr(item, "aliases", ())):
            if label in seen and seen[label] != item.name:
                raise SchemaError(
                    f"{kind.capitalize()} '{label}' of '{item.name}' collides with "
                    f"'{seen[label]}' in {where}"
                )
            if label in seen:
                raise SchemaError(f"Duplicate {kind} '{label}' in {where}")
            seen[label] = item.name


HELP_OPTION = Option(
    name="help",
    aliases=("h",),
    type=OptionType.BOOLEAN,
    description="Output help information",
    default=False,
    config=False,
)

HELP_COMMAND = Command(name="help", description="Output help information")
