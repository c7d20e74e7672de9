# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Fluent builders for declaring a program's commands, options, and arguments.

Each builder takes the item's name in its constructor, returns itself from
every chained call, and produces an immutable schema entity from `build()`:

    cli = (
        CLIBuilder("deploy")
        .config(version="1.2.0")
        .option(OptionBuilder("dryRun").alias("n").describe("Print only"))
        .command(
            CommandBuilder("push")
            .describe("Push a release")
            .argument(ArgumentBuilder("target").required())
        )
        .build()
    )

Options default to the boolean type, so an option declared without a type is
a plain flag. Arguments default to strings.

`CLIBuilder.build()` freezes the builder. Further changes raise `SchemaError`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Mapping

from tasklane.cli_config import CLIConfig
from tasklane.exceptions import SchemaError
from tasklane.parser.option_types import OptionType, TypeSpec
from tasklane.parser.schema import Argument, Command, Option, ParseSpec

if TYPE_CHECKING:
    from tasklane.cli import CLI


def _prompt(message: str | None, overrides: dict[str, Any]) -> Mapping[str, Any] | bool:
    if message:
        overrides["message"] = message
    return overrides or True


class OptionBuilder:
    """Builds an `Option`, bindable as `--name`."""

    def __init__(self, name: str) -> None:
        if not name:
            raise SchemaError("Options need a name")
        self._fields: dict[str, Any] = {"name": name, "type": OptionType.BOOLEAN}

    def describe(self, description: str) -> OptionBuilder:
        self._fields["description"] = description
        return self

    desc = description = describe

    def alias(self, *aliases: str) -> OptionBuilder:
        self._fields["aliases"] = (*self._fields.get("aliases", ()), *aliases)
        return self

    def type(self, type_: TypeSpec | str) -> OptionBuilder:
        self._fields["type"] = OptionType(type_) if isinstance(type_, str) else type_
        return self

    def choices(self, *choices: Any) -> OptionBuilder:
        self._fields["choices"] = (*self._fields.get("choices", ()), *choices)
        return self

    def array(self, array: bool = True) -> OptionBuilder:
        self._fields["array"] = array
        return self

    def min(self, minimum: int) -> OptionBuilder:
        self._fields["min"] = minimum
        return self

    def max(self, maximum: float) -> OptionBuilder:
        self._fields["max"] = maximum
        return self

    def required(self, required: bool = True) -> OptionBuilder:
        self._fields["required"] = required
        return self

    def default(self, value: Any | Callable[[dict[str, Any]], Any]) -> OptionBuilder:
        self._fields["default"] = value
        return self

    def where(self, cli: bool = True, config: bool = True, help: bool = True) -> OptionBuilder:
        """Set command-line, config-file, and help visibility at once."""
        self._fields.update(cli=cli, config=config, help=help)
        return self

    def cli(self, visible: bool = True) -> OptionBuilder:
        self._fields["cli"] = visible
        return self

    def config(self, visible: bool = True) -> OptionBuilder:
        self._fields["config"] = visible
        return self

    def help(self, visible: bool = True) -> OptionBuilder:
        self._fields["help"] = visible
        return self

    def prompt(self, message: str | None = None, **overrides: Any) -> OptionBuilder:
        self._fields["prompt"] = _prompt(message, overrides)
        return self

    def build(self) -> Option:
        return Option(**self._fields)

    create = build


class ArgumentBuilder:
    """Builds a positional `Argument`."""

    def __init__(self, name: str) -> None:
        if not name:
            raise SchemaError("Arguments need a name")
        self._fields: dict[str, Any] = {"name": name}

    def describe(self, description: str) -> ArgumentBuilder:
        self._fields["description"] = description
        return self

    desc = description = describe

    def type(self, type_: TypeSpec | str) -> ArgumentBuilder:
        self._fields["type"] = OptionType(type_) if isinstance(type_, str) else type_
        return self

    def choices(self, *choices: Any) -> ArgumentBuilder:
        self._fields["choices"] = (*self._fields.get("choices", ()), *choices)
        return self

    def required(self, required: bool = True) -> ArgumentBuilder:
        self._fields["required"] = required
        return self

    def array(self, array: bool = True) -> ArgumentBuilder:
        self._fields["array"] = array
        return self

    def min(self, minimum: int) -> ArgumentBuilder:
        self._fields["min"] = minimum
        return self

    def max(self, maximum: float) -> ArgumentBuilder:
        self._fields["max"] = maximum
        return self

    def order(self, order: int) -> ArgumentBuilder:
        """Position hint. Lower orders bind first."""
        self._fields["order"] = order
        return self

    def default(self, value: Any) -> ArgumentBuilder:
        self._fields["default"] = value
        return self

    def prompt(self, message: str | None = None, **overrides: Any) -> ArgumentBuilder:
        self._fields["prompt"] = _prompt(message, overrides)
        return self

    def build(self) -> Argument:
        return Argument(**self._fields)

    create = build


def _argument(value: ArgumentBuilder | Argument, position: int) -> Argument:
    if isinstance(value, ArgumentBuilder):
        if "order" not in value._fields:
            value.order(position)
        return value.build()
    if isinstance(value, Argument):
        return value
    raise SchemaError(f"Expected an argument, got {type(value).__name__}")


def _option(value: OptionBuilder | Option) -> Option:
    if isinstance(value, OptionBuilder):
        return value.build()
    if isinstance(value, Option):
        return value
    raise SchemaError(f"Expected an option, got {type(value).__name__}")


def _command(value: CommandBuilder | Command) -> Command:
    if isinstance(value, CommandBuilder):
        return value.build()
    if isinstance(value, Command):
        return value
    raise SchemaError(f"Expected a command, got {type(value).__name__}")


class CommandBuilder:
    """Builds a `Command` with its own options, arguments, and sub-commands."""

    def __init__(self, name: str) -> None:
        if not name:
            raise SchemaError("Commands need a name")
        self.name = name
        self._description = ""
        self._aliases: list[str] = []
        self._children: list[Command] = []
        self._options: list[Option] = []
        self._arguments: list[Argument] = []
        self._require_subcommand = False

    def describe(self, description: str) -> CommandBuilder:
        self._description = description
        return self

    desc = description = describe

    def alias(self, *aliases: str) -> CommandBuilder:
        self._aliases.extend(aliases)
        return self

    def command(self, command: CommandBuilder | Command) -> CommandBuilder:
        self._children.append(_command(command))
        return self

    def option(self, option: OptionBuilder | Option) -> CommandBuilder:
        self._options.append(_option(option))
        return self

    def argument(self, argument: ArgumentBuilder | Argument) -> CommandBuilder:
        self._arguments.append(_argument(argument, len(self._arguments)))
        return self

    def require_subcommand(self, required: bool = True) -> CommandBuilder:
        self._require_subcommand = required
        return self

    def build(self) -> Command:
        return Command(
            name=self.name,
            description=self._description,
            aliases=tuple(self._aliases),
            children=tuple(self._children),
            options=tuple(self._options),
            arguments=tuple(self._arguments),
            require_subcommand=self._require_subcommand,
        )

    create = build


class CLIBuilder:
    """Declares a whole program and builds its `CLI`."""

    def __init__(self, name: str, version: str = "") -> None:
        self._config = CLIConfig(name=name, version=version)
        self._commands: list[Command] = []
        self._options: list[Option] = []
        self._arguments: list[Argument] = []
        self._frozen = False

    def _assert_unfrozen(self, operation: str) -> None:
        if self._frozen:
            raise SchemaError(f"Cannot run .{operation}() after the CLI was built")

    def command(self, command: CommandBuilder | Command) -> CLIBuilder:
        self._assert_unfrozen("command")
        self._commands.append(_command(command))
        return self

    def option(self, option: OptionBuilder | Option) -> CLIBuilder:
        self._assert_unfrozen("option")
        self._options.append(_option(option))
        return self

    def argument(self, argument: ArgumentBuilder | Argument) -> CLIBuilder:
        self._assert_unfrozen("argument")
        self._arguments.append(_argument(argument, len(self._arguments)))
        return self

    def config(self, **overrides: Any) -> CLIBuilder:
        """Adjust `CLIConfig` fields, e.g. `.config(version="2.0", require_command=True)`."""
        self._assert_unfrozen("config")
        unknown = set(overrides) - set(CLIConfig.model_fields)
        if unknown:
            raise SchemaError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
        self._config = self._config.model_copy(update=overrides)
        return self

    def get_config(self) -> CLIConfig:
        return self._config.model_copy()

    @property
    def parse_spec(self) -> ParseSpec:
        return ParseSpec(
            options=tuple(self._options),
            arguments=tuple(self._arguments),
            commands=tuple(self._commands),
            config=self._config.parser_config,
        )

    def build(self) -> CLI:
        from tasklane.cli import CLI

        self._frozen = True
        return CLI(self.get_config(), self.parse_spec)

