# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The `CLI` run loop: parse, resolve configuration, dispatch, and display.

`CLI.run(argv)` is the whole lifecycle of one invocation:

1. Parse argv against the program's `ParseSpec`.
2. Merge option values from config files and defaults under the
   command-line values, and prompt for missing items in interactive mode.
3. Verify required items and array arity.
4. Handle the built-in behaviors: help, `--version`, and the `config`
   command.
5. Find the first handler registered for the command path, call it, and run
   whatever it returns as a tree of tasks under a live `Display`.

Every parse, config, and dispatch failure is printed as a short diagnostic
on stderr and reported as `False`. An exception from a handler is logged and
also reported as `False`. It never escapes `run()`.

Handler paths:
- A command name matches when it is the first command. The remaining
  commands are passed to the handler as its `rest` path.
- `"*"` matches exactly one command of any name.
- `"**"` matches anything, including no command at all.
- A list matches element by element. `"*"` consumes one command into `rest`,
  `"**"` consumes all remaining commands, and commands left over after the
  last element are passed on in `rest`.
"""
from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace
from typing import Any, Awaitable, Callable, Sequence, Union

from rich.console import Console
from rich.text import Text

from tasklane.builder import ArgumentBuilder, CommandBuilder, OptionBuilder
from tasklane.cli_config import CLIConfig
from tasklane.config import config_target, load_sources, merge_defaults, save_config
from tasklane.console import console as default_console
from tasklane.console import error_console as default_error_console
from tasklane.display import Display, DisplayOptions
from tasklane.exceptions import (
    ConfigError,
    CountError,
    DemandError,
    InvalidTypeError,
    NotFoundError,
    ParseError,
    TasklaneError,
)
from tasklane.log_level import LogLevel
from tasklane.logger import logger
from tasklane.parser.option_types import OptionType, stringify
from tasklane.parser.parser import Parser, ParseResult
from tasklane.parser.schema import HELP_COMMAND, Argument, Command, Option, ParseSpec, find_item
from tasklane.parser.suggestions import suggest_commands
from tasklane.prompt import Prompter, SessionPrompter, prompt_for
from tasklane.task import RunContext, Task, TaskRuntime, named
from tasklane.usage import command_usage, oneline, usage
from tasklane.utils import add_file_handler, indent, resolve, running_in_ci

HandlerPath = Union[str, Sequence[str]]
Handler = Callable[
    [dict[str, Any], dict[str, Any], list[str], "CLI"], Union[Any, Awaitable[Any]]
]

CONFIG_COMMAND_NAME = "config"


def builtin_options(error_console: Console) -> list[Option]:
    """Options every program accepts."""
    return [
        OptionBuilder("version")
        .describe("Output version information")
        .alias("v")
        .build(),
        OptionBuilder("color")
        .describe("Allow using colors")
        .default(lambda _: error_console.color_system is not None)
        .build(),
        OptionBuilder("logLevel")
        .describe("Log level to use")
        .alias("level")
        .type(OptionType.STRING)
        .choices(*(level.value for level in LogLevel.choices()))
        .default(LogLevel.NOTICE.value)
        .build(),
        OptionBuilder("interactive")
        .describe("Prompt for values that were not provided")
        .alias("i")
        .default(False)
        .config(False)
        .build(),
        OptionBuilder("config")
        .describe("Configuration file to use instead of discovered ones")
        .alias("c")
        .type(OptionType.PATH)
        .default("")
        .config(False)
        .build(),
        OptionBuilder("ci")
        .describe("Disable the live task display")
        .default(lambda _: running_in_ci())
        .help(False)
        .build(),
        OptionBuilder("logFile")
        .describe("File to write a debug log to")
        .type(OptionType.STRING)
        .default("")
        .build(),
    ]


def config_command() -> Command:
    def global_option() -> OptionBuilder:
        return (
            OptionBuilder("global")
            .alias("g")
            .describe("Set global configuration")
            .default(False)
            .config(False)
        )

    return (
        CommandBuilder(CONFIG_COMMAND_NAME)
        .describe("Get or set configuration")
        .command(
            CommandBuilder("get")
            .describe("Get a config option")
            .argument(
                ArgumentBuilder("name").describe("Name of the config option to get").required()
            )
        )
        .command(
            CommandBuilder("set")
            .describe("Set a config option")
            .argument(ArgumentBuilder("name").describe("Config option to set").required())
            .argument(ArgumentBuilder("value").describe("Value to set it to").required())
            .option(global_option())
        )
        .command(CommandBuilder("list").alias("ls").describe("List configuration"))
        .command(
            CommandBuilder("setup")
            .alias("set-all")
            .describe("Set configuration from flags or prompts")
            .option(global_option())
        )
        .require_subcommand()
        .build()
    )


def match_path(handler_path: HandlerPath, command_path: Sequence[str]) -> list[str] | None:
    """Return the `rest` path when `handler_path` matches, else None."""
    command = list(command_path)
    if isinstance(handler_path, str):
        if handler_path == "**":
            return command
        if command and handler_path == command[0]:
            return command[1:]
        if len(command) == 1 and handler_path == "*":
            return command
        return None

    rest: list[str] = []
    for index, element in enumerate(handler_path):
        if element == "**":
            return rest + command[index:]
        if index >= len(command):
            return None
        if element == "*":
            rest.append(command[index])
        elif element != command[index]:
            return None
    return rest + command[len(handler_path) :]


class CLI:
    """
    A command-line program.

    Normally created by `CLIBuilder.build()`.

    Example:
        >>> cli = CLIBuilder("app").command(CommandBuilder("build")).build()
        >>> cli.on("build", lambda args, opts, rest, cli: build_steps)
        >>> cli.main()
    """

    def __init__(
        self,
        config: CLIConfig,
        spec: ParseSpec,
        console: Console | None = None,
        error_console: Console | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self.config = config
        self.console = console or default_console
        self.error_console = error_console or default_error_console
        self.prompter = prompter or SessionPrompter()
        self.spec = replace(
            spec,
            options=(*spec.options, *builtin_options(self.error_console)),
            commands=(*spec.commands, config_command()),
            config=config.parser_config,
        )
        self.parser = Parser(self.spec)
        self.handlers: list[tuple[HandlerPath, Handler]] = []
        self.context: RunContext | None = None
        self.runtime: TaskRuntime | None = None

    @property
    def name(self) -> str:
        return self.config.name

    def on(self, path: HandlerPath | Handler, handler: Handler | None = None):
        """
        Register a handler for a command path, or for everything when called
        with only a handler. Without a handler and with a path, returns a
        decorator:

            @cli.on("build")
            def build(arguments, options, rest, cli): ...
        """
        if handler is None:
            if callable(path):
                self.handlers.append(("**", path))
                return path

            def register(handler: Handler) -> Handler:
                return self.on(path, handler)

            return register
        if not callable(handler):
            raise TypeError(f"Handler for {path!r} is not callable")
        self.handlers.append((path, handler))  # type: ignore[arg-type]
        return handler

    named = staticmethod(named)

    def task(self, name: str, key: str | None = None) -> Task:
        """Create a top-level task in the running invocation."""
        if self.runtime is None:
            raise TasklaneError("Tasks can only be created while a handler is running")
        return self.runtime.task(name, key)

    def _error(self, text: str) -> None:
        self.error_console.print(Text(text), highlight=False)

    async def run(self, argv: Sequence[str] | str | None = None) -> bool:
        """
        Run the program once.

        Files opened for stream items are closed once the run is over.

        Returns:
            bool: True if the invocation succeeded.
        """
        try:
            return await self._run(argv)
        finally:
            self.parser.result.close()

    async def _run(self, argv: Sequence[str] | str | None) -> bool:
        if argv is None:
            argv = sys.argv[1:]
        all_options = self.spec.all_options()
        try:
            result = await self.parser.parse(argv)
            cli_options = dict(result.options)
            state = self.parser.state
            provided = {
                **await load_sources(self.name, all_options, cli_options.get("config")),
                **cli_options,
            }
            if provided.get("interactive") and not result.help:
                provided.update(await self._prompt_options(state.options, provided))
            options = merge_defaults(all_options, provided)
            options["logLevel"] = LogLevel(options["logLevel"])
            result.options = options
            if options.get("interactive") and not result.help:
                result.arguments.update(
                    await self._prompt_arguments(state.arguments, result, options)
                )
            for argument in state.arguments:
                if argument.name not in result.arguments:
                    value = argument.default_for({**options, **result.arguments})
                    if value is not None:
                        result.arguments[argument.name] = value
            if not result.help:
                await self.parser.verify(result)
        except ParseError as error:
            self._report(error)
            return False
        except ConfigError as error:
            self._error(f"{self.name}: {error}")
            return False

        if options.get("color") is False:
            self.console.no_color = True
            self.error_console.no_color = True
        if result.help:
            return self._print_help(result.command_path)
        if options.get("version"):
            self.console.print(Text(f"{self.config.name} v{self.config.version}"))
            return True
        if result.command_path[:1] == [CONFIG_COMMAND_NAME]:
            return await self._run_config(result, cli_options)

        for path, handler in self.handlers:
            rest = match_path(path, result.command_path)
            if rest is not None:
                return await self._dispatch(handler, result, rest)
        self._error(f"No handler found for: {' '.join(result.command_path)}")
        return False

    def main(self, argv: Sequence[str] | str | None = None) -> None:
        """Run the program and exit the process with its status."""
        try:
            ok = asyncio.run(self.run(argv))
        except KeyboardInterrupt:
            logger.info("KeyboardInterrupt. Exiting.")
            sys.exit(130)
        sys.exit(0 if ok else 1)

    async def _prompt_options(
        self, options: Sequence[Option], provided: dict[str, Any]
    ) -> dict[str, Any]:
        descriptors = [
            prompt_for(option, provided)
            for option in options
            if option.prompt and option.cli and option.name not in provided
        ]
        if not descriptors:
            return {}
        return await self.prompter.prompt(descriptors)

    async def _prompt_arguments(
        self, arguments: Sequence[Argument], result: ParseResult, options: dict[str, Any]
    ) -> dict[str, Any]:
        context = {**options, **result.arguments}
        descriptors = [
            prompt_for(argument, context)
            for argument in arguments
            if argument.prompt and result.arguments.get(argument.name) in (None, [])
        ]
        if not descriptors:
            return {}
        return await self.prompter.prompt(descriptors)

    def _usage_line(self, error: ParseError, command: str = "", target=None) -> str:
        state = error.state
        path = state.command_path if state else []
        program = " ".join([self.name, *path])
        if target is not None:
            arguments, options = target.arguments, target.options
        else:
            arguments = state.arguments if state else []
            options = state.options if state else []
        return oneline(program, command, arguments, options, self.config.no_prefix)

    def _report(self, error: ParseError) -> None:
        """Print the diagnostic for a parse-time error."""
        name = self.name
        state = error.state
        if isinstance(error, InvalidTypeError):
            self._error(str(error))
        elif isinstance(error, CountError):
            self._error(f"{name}: {error}")
        elif isinstance(error, DemandError):
            self._error(f"{name}: {error}")
            if error.kind == "command":
                commands = [
                    command.name
                    for command in (state.commands if state else [])
                    if command.name != HELP_COMMAND.name
                ]
                self._error(indent("Possible commands:", 4))
                self._error(indent(", ".join(commands), 8))
            else:
                self._error("Usage:")
                self._error(indent(self._usage_line(error), 4))
        elif isinstance(error, NotFoundError):
            self._error(f"{name}: {error}")
            if error.kind == "command":
                self._suggest(error)
            else:
                self._error("Usage:")
                self._error(indent(self._usage_line(error), 4))
        else:
            self._error(f"{name}: {error.render()}")

    def _suggest(self, error: NotFoundError) -> None:
        state = error.state
        candidates = [
            command
            for command in (state.commands if state else [])
            if command.name != HELP_COMMAND.name
        ]
        close = suggest_commands(error.item, candidates)
        path = " ".join([self.name, *(state.command_path if state else [])])
        if len(close) == 1:
            command = close[0]
            self._error(f"Did you mean {command.name}?")
            self._error(indent(self._usage_line(error, command.name, command), 4))
        elif close:
            self._error("Did you mean one of these?")
            for command in close:
                description = f": {command.description}" if command.description else ""
                self._error(f"   {path} {command.name}{description}")
        else:
            self.error_console.print(
                usage(self.spec, self.config, header=False, do_args=False, do_options=False)
            )

    def _print_help(self, path: list[str]) -> bool:
        if not path:
            self.error_console.print(usage(self.spec, self.config))
            return True
        commands = self.spec.resolve_path(path)
        if len(commands) != len(path):
            self._error(f"Command not found: {' '.join(path)}")
            return False
        program = " ".join([self.name, *(command.name for command in commands[:-1])])
        self.error_console.print(command_usage(commands[-1], self.config, program))
        return True

    async def _run_config(self, result: ParseResult, cli_options: dict[str, Any]) -> bool:
        options = result.options
        subcommand = result.command_path[1] if len(result.command_path) > 1 else ""
        config_options = [option for option in self.spec.all_options() if option.config]
        target = config_target(self.name, options.get("config"), bool(options.get("global")))

        if subcommand == "get":
            option = find_item(self.spec.all_options(), result.arguments["name"])
            if option is None:
                self._error(f"Cannot find option {result.arguments['name']}")
                return False
            self.console.print(Text(stringify(options.get(option.name))))
            return True
        if subcommand == "set":
            name = result.arguments["name"]
            value = result.arguments["value"]
            option = find_item(config_options, name)
            if option is None:
                self._error(f"Cannot find option {name}")
                return False
            if not await self.parser.accepts(option, value):
                error = InvalidTypeError(
                    "option", option.name, value, None, option.choices, option.type_name
                )
                self._error(str(error))
                return False
            save_config(target, {option.name: value})
            return True
        if subcommand == "list":
            for key, value in options.items():
                self.console.print(Text(f"{key} = {stringify(value)}"), highlight=False)
            return True
        if subcommand == "setup":
            to_set = {
                option.name: cli_options[option.name]
                for option in config_options
                if option.name in cli_options
            }
            descriptors = [
                prompt_for(option, options, initial=options.get(option.name))
                for option in config_options
                if option.prompt
            ]
            if descriptors:
                to_set.update(await self.prompter.prompt(descriptors))
            save_config(target, to_set)
            return True
        return False

    async def _dispatch(self, handler: Handler, result: ParseResult, rest: list[str]) -> bool:
        options = result.options
        level: LogLevel = options["logLevel"]
        display = Display(
            self.name,
            self.error_console,
            DisplayOptions(
                log_level=level,
                log_format=self.config.log_format,
                log_levels=self.config.log_levels,
                progress_format=self.config.progress_format,
                refresh_interval=self.config.refresh_interval,
                term=not options.get("ci") and self.error_console.is_terminal,
            ),
        )
        context = RunContext(
            name=self.name,
            sink=display.sink,
            arguments=result.arguments,
            options=options,
        )
        display.bind(lambda: context.current_task)
        self.context = context
        self.runtime = TaskRuntime(context)

        root = logging.getLogger()
        previous_level = root.level
        file_handler = None
        if options.get("logFile"):
            file_handler = add_file_handler(options["logFile"])
            root.setLevel(logging.DEBUG)

        await display.start()
        try:
            value = await resolve(handler(result.arguments, options, rest, self))
            ok = await self.runtime.run(value)
        except Exception as error:
            logger.exception("Handler for '%s' failed: %s", " ".join(result.command_path), error)
            ok = False
        finally:
            await display.stop()
            if file_handler is not None:
                root.removeHandler(file_handler)
                file_handler.close()
                root.setLevel(previous_level)
            self.runtime = None
        return ok
