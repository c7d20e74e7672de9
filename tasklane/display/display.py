# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Wires the task view, the live renderer, and logging together for one run.

`Display` owns a `TaskView` and, when attached to a terminal, a `Renderer`
that redraws it. Its `sink` is what the task runtime reports to. While the
display is started, a `TaskLogHandler` sits on the root logger and routes log
records into the task tree:

- A record tagged with a task key (every record from `task.log`) becomes
  that task's inline message.
- An untagged record is attributed to the current serially running task, when
  there is one.
- Anything else is printed as its own line.

In plain mode (`--ci`, or output that is not a terminal) nothing is redrawn.
Task events and log lines at or above the selected level are printed as they
arrive.
"""
from __future__ import annotations

import logging
import re
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from tasklane.display.renderer import DEFAULT_PROGRESS_FORMAT, Renderer
from tasklane.display.view import TaskView
from tasklane.log_level import LogLevel
from tasklane.task.events import LoggingSink, SinkGroup, TaskEventSink

PLACEHOLDER = re.compile(r"\{(\w+)\}")

DEFAULT_LOG_LEVELS: dict[LogLevel, str] = {
    LogLevel.ERROR: "[log.error]✖[/]",
    LogLevel.WARN: "[log.warn]⚠[/]",
    LogLevel.NOTICE: "[log.notice]★[/]",
    LogLevel.INFO: "[log.info]ℹ[/]",
    LogLevel.VERBOSE: "[log.verbose]…[/]",
    LogLevel.SILLY: "[log.silly]→[/]",
}


class DisplayOptions(BaseModel):
    log_level: LogLevel = LogLevel.NOTICE
    log_format: str = "{message}"
    log_levels: dict[LogLevel, str] = Field(
        default_factory=lambda: dict(DEFAULT_LOG_LEVELS)
    )
    progress_format: str = DEFAULT_PROGRESS_FORMAT
    refresh_interval: float = 0.1
    term: bool = True

    model_config = ConfigDict(arbitrary_types_allowed=True)


class TaskLogHandler(logging.Handler):
    """Routes log records into the task tree of a `Display`."""

    def __init__(self, display: Display, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.display = display
        self.addFilter(lambda record: not record.name.startswith("tasklane.output"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.display.handle_record(record)
        except Exception:
            self.handleError(record)


class Display:
    """
    Task display for one run.

    Example:
        >>> display = Display("app", options=DisplayOptions(term=False))
        >>> context = RunContext(name="app", sink=display.sink)
        >>> display.bind(lambda: context.current_task)
        >>> await display.start()
        >>> await TaskRuntime(context).run(handler_result)
        >>> await display.stop()
    """

    def __init__(
        self,
        name: str,
        console: Console,
        options: DisplayOptions | None = None,
    ) -> None:
        self.name = name
        self.console = console
        self.options = options or DisplayOptions()
        self.view = TaskView(name, echo=None if self.options.term else self._echo)
        self.renderer = Renderer(
            self.view,
            console,
            progress_format=self.options.progress_format,
            refresh_interval=self.options.refresh_interval,
        )
        self.sink: TaskEventSink = SinkGroup([self.view, LoggingSink()])
        self.handler = TaskLogHandler(self, level=self.options.log_level.levelno)
        self._current: Callable[[], str | None] = lambda: None
        self._root_level: int | None = None

    def bind(self, current: Callable[[], str | None]) -> None:
        """Supply the lookup for the current serially running task."""
        self._current = current

    async def start(self) -> None:
        root = logging.getLogger()
        self._root_level = root.level
        if root.level == logging.NOTSET or root.level > self.handler.level:
            root.setLevel(self.handler.level)
        root.addHandler(self.handler)
        if self.options.term:
            await self.renderer.start()

    async def stop(self) -> None:
        root = logging.getLogger()
        root.removeHandler(self.handler)
        if self._root_level is not None:
            root.setLevel(self._root_level)
            self._root_level = None
        if self.options.term:
            await self.renderer.stop()

    def _echo(self, line: str) -> None:
        self.console.print(Text(f"{self.name} {line}"), highlight=False)

    def _print(self, markup: str) -> None:
        line = Text.from_markup(markup)
        if self.renderer.running:
            self.renderer.print_above(line)
        else:
            self.console.print(line, highlight=False)

    def format_record(self, record: logging.LogRecord) -> str:
        level = LogLevel.from_levelno(record.levelno)
        context = {
            "message": record.getMessage(),
            "level": level.value,
            "name": record.name,
            "task": getattr(record, "task", "") or "",
        }
        return PLACEHOLDER.sub(
            lambda match: context.get(match.group(1), ""), self.options.log_format
        )

    def handle_record(self, record: logging.LogRecord) -> None:
        glyph = self.options.log_levels.get(LogLevel.from_levelno(record.levelno), "")
        text = self.format_record(record)
        key = getattr(record, "task", None)
        if key not in self.view.nodes:
            current = self._current()
            key = current if current in self.view.nodes else None
        if key is None:
            self._print(f"{glyph} {escape(f'[{self.name}] {text}')}")
        elif self.options.term:
            self.view.get(key).message = Text.from_markup(
                f"{glyph} {escape(text)}"
            ).plain
        else:
            self._print(f"{glyph} {escape(f'[{key}] {text}')}")
