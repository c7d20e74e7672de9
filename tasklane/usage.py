# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Static help and usage text.

`usage()` renders the top-level help for a program, `command_usage()` the
help for a single command, and `oneline()` the single usage line printed
under parse diagnostics. The first two return Rich `Text` so brackets in the
usage syntax are never mistaken for markup. `oneline()` returns plain text.

Only options that are visible on the command line and in help are listed.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from rich.text import Text

from tasklane.cli_config import CLIConfig
from tasklane.parser.option_types import stringify
from tasklane.parser.schema import Argument, Command, Item, Option, ParseSpec
from tasklane.utils import dashcase

NAME_WIDTH = 20
NO_DESCRIPTION = "[No Description Provided]"
BRACES = {"{": "}", "[": "]", "<": ">", "(": ")", "": ""}


def wrap(text: str, brace: str) -> str:
    return f"{brace}{text}{BRACES[brace]}"


def flag_name(name: str) -> str:
    return f"-{name}" if len(name) == 1 else f"--{name}"


def option_flags(option: Option, no_prefix: str = "no-") -> list[str]:
    """Every spelling of an option, shortest first, including negations."""
    names = [dashcase(option.name), *option.aliases]
    spelled: list[str] = []
    for name in names:
        spelled.append(name)
        if option.is_boolean and len(name) != 1 and no_prefix:
            spelled.append(no_prefix + name)
    return [flag_name(name) for name in sorted(spelled, key=len)]


def argument_name(argument: Argument) -> str:
    suffix = "..." if argument.array else ""
    return wrap(argument.name + suffix, "<" if argument.required else "[")


def default_text(item: Item) -> str:
    if item.required:
        return "[required]"
    if callable(item.default):
        return ""
    return stringify(item.default_for({}))


def _visible(options: Iterable[Option]) -> list[Option]:
    return [option for option in options if option.cli and option.help]


def oneline(
    program: str,
    command: str,
    arguments: Sequence[Argument],
    options: Sequence[Option],
    no_prefix: str = "no-",
) -> str:
    """
    One usage line: program, command, required options, then arguments.

    >>> oneline("app", "build", [Argument("src", required=True)], [])
    'app build <src>'
    """
    words = [program.strip(), command.strip()]
    for option in _visible(options):
        if not option.required:
            continue
        flags = option_flags(option, no_prefix)
        text = " | ".join(flags)
        if not option.is_boolean:
            if len(flags) > 1:
                text = wrap(text, "(")
            text += "=value"
        words.append(wrap(text, "<"))
    ordered = sorted(arguments, key=lambda argument: argument.order)
    words.extend(argument_name(argument) for argument in ordered)
    return " ".join(word for word in words if word)


def _row(text: Text, name: str, *columns: str) -> None:
    text.append("  ")
    text.append(f"{name:<{NAME_WIDTH}}", style="usage.name")
    for index, column in enumerate(columns):
        if index:
            text.append("  ")
        text.append(column, style="usage.meta" if index == len(columns) - 1 else None)
    text.append("\n")


def _section(text: Text, title: str) -> None:
    text.append(f"{title}\n", style="usage.section")


def _arguments(text: Text, arguments: Sequence[Argument]) -> None:
    for argument in sorted(arguments, key=lambda argument: argument.order):
        _row(
            text,
            argument.name,
            argument.description or NO_DESCRIPTION,
            default_text(argument),
        )


def _options(text: Text, options: Sequence[Option], no_prefix: str) -> None:
    for option in _visible(options):
        flags = ", ".join(option_flags(option, no_prefix))
        if option.choices or not option.is_boolean:
            flags = f"{flags} {option.get_choice_text()}"
        _row(
            text,
            option.name,
            flags,
            option.description or NO_DESCRIPTION,
            default_text(option),
        )


def _commands(text: Text, commands: Sequence[Command]) -> None:
    for command in commands:
        _row(text, command.name, command.description or NO_DESCRIPTION)


def usage(
    spec: ParseSpec,
    config: CLIConfig,
    header: bool = True,
    do_args: bool = True,
    do_options: bool = True,
    do_usage: bool = True,
    do_commands: bool = True,
) -> Text:
    """Render help for a whole program."""
    text = Text()
    if header:
        text.append(f"{config.name} v{config.version}\n", style="usage.header")
        text.append("\n")
    if do_usage:
        _section(text, "Usage:")
        if not config.require_command:
            line = oneline(config.name, "", spec.arguments, spec.options, config.no_prefix)
            text.append(f"  {line}\n")
    if spec.commands and do_commands:
        if do_usage:
            brace = "<" if config.require_command else "["
            text.append(f"  {config.name} {wrap('command', brace)}\n")
            text.append("\n")
        _section(text, "Commands:")
        _commands(text, spec.commands)
    text.append("\n")
    if spec.arguments and do_args:
        _section(text, "Arguments:")
        _arguments(text, spec.arguments)
        text.append("\n")
    if _visible(spec.options) and do_options:
        _section(text, "Options:")
        _options(text, spec.options, config.no_prefix)
    text.rstrip()
    return text


def command_usage(command: Command, config: CLIConfig, program: str = "") -> Text:
    """Render help for one command. `program` is the invocation prefix."""
    text = Text()
    if len(command.children) > 1 and not command.arguments:
        prefix = f"{program} " if program else ""
        text.append(f"{prefix}{command.name} <command>\n")
    else:
        line = oneline(
            program, command.name, command.arguments, command.options, config.no_prefix
        )
        text.append(f"{line}\n")
    if command.description:
        text.append("\n")
        text.append(f"{command.description}\n")
    text.append("\n")
    if command.aliases:
        _section(text, "Aliases:")
        text.append(f"  {', '.join(command.aliases)}\n\n")
    if command.children:
        _section(text, "Sub-commands:")
        _commands(text, command.children)
        text.append("\n")
    if command.arguments:
        _section(text, "Arguments:")
        _arguments(text, command.arguments)
        text.append("\n")
    if _visible(command.options):
        _section(text, "Options:")
        _options(text, command.options, config.no_prefix)
    text.rstrip()
    return text
