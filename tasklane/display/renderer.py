# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Live terminal rendering of a `TaskView`.

The `Renderer` redraws the whole task tree on a fixed tick from a background
asyncio task. Before drawing a frame it erases exactly as many lines as the
previous frame occupied, so the tree updates in place without scrolling. The
cursor is hidden while the renderer runs and shown again when it stops.

Each task renders as one line: a status glyph (an animated spinner while
running), the task name in bold, and its trailing state. Finished tasks show
their message and elapsed time. Running tasks show their message, one inline
progress bar, or a short breakdown when several trackers are active.
Sub-tasks render indented beneath their parent.

Progress text comes from a format string with named placeholders:
`{name}`, `{key}`, `{value}`, `{total}`, `{percent}`, `{time}`, `{bar}`,
and `{done}`.
"""
from __future__ import annotations

import asyncio
import re
import time

from rich.console import Console
from rich.control import Control, ControlType
from rich.spinner import Spinner
from rich.text import Text

from tasklane.display.view import TaskNode, TaskView
from tasklane.logger import logger
from tasklane.task.events import TaskStatus
from tasklane.task.progress import ProgressData
from tasklane.utils import format_duration

DEFAULT_PROGRESS_FORMAT = "{name} {bar} {percent} ({value} / {total}) [{time}]"
PLACEHOLDER = re.compile(r"\{(\w+)\}")
INDENT = "  "
ARROW = "→"
MIN_BAR_WIDTH = 5

STATUS_GLYPHS = {
    TaskStatus.PENDING: ("❯", "task.pending"),
    TaskStatus.COMPLETE: ("✔", "task.complete"),
    TaskStatus.ERRORED: ("✖", "task.errored"),
    TaskStatus.SKIPPED: ("↓", "task.skipped"),
}


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def render_bar(value: float, total: float, width: int) -> str:
    """A fixed-width `[===---]` bar with `width` segments."""
    width = max(round(width), MIN_BAR_WIDTH)
    ratio = value / total if total > 0 else 1.0
    complete = min(round(ratio * width), width)
    return f"[{'=' * complete}{'-' * (width - complete)}]"


class Renderer:
    """
    Draws a `TaskView` to a Rich console.

    Attributes:
        view (TaskView): The task tree to draw.
        console (Console): Destination console, normally stderr.
        progress_format (str): Format string for progress bars.
        refresh_interval (float): Seconds between frames.
    """

    def __init__(
        self,
        view: TaskView,
        console: Console,
        progress_format: str = DEFAULT_PROGRESS_FORMAT,
        refresh_interval: float = 0.1,
        spinner: str = "dots",
    ) -> None:
        self.view = view
        self.console = console
        self.progress_format = progress_format
        self.refresh_interval = refresh_interval
        self.spinner = Spinner(spinner)
        self._started = time.monotonic()
        self._previous_lines = 0
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Hide the cursor and start redrawing in the background."""
        if self._running:
            return
        self._running = True
        self._started = time.monotonic()
        self.console.show_cursor(False)
        self._task = asyncio.create_task(self._loop())
        logger.debug("Renderer started with a %.2fs refresh interval.", self.refresh_interval)

    async def stop(self) -> None:
        """Draw a final frame, stop the loop, and show the cursor again."""
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.draw()
        self.console.line()
        self._previous_lines = 0
        self.console.show_cursor(True)

    async def _loop(self) -> None:
        while True:
            self.draw()
            await asyncio.sleep(self.refresh_interval)

    def erase(self) -> None:
        """Erase the lines drawn by the previous frame."""
        if not self._previous_lines:
            return
        codes: list = []
        for index in range(self._previous_lines):
            codes.append((ControlType.ERASE_IN_LINE, 2))
            if index < self._previous_lines - 1:
                codes.append((ControlType.CURSOR_UP, 1))
        codes.append(ControlType.CARRIAGE_RETURN)
        self.console.control(Control(*codes))
        self._previous_lines = 0

    def draw(self) -> None:
        frame = self.render()
        self.erase()
        if not frame.plain:
            return
        self._previous_lines = len(
            self.console.render_lines(frame, self.console.options, pad=False)
        )
        self.console.print(frame, end="", soft_wrap=False)

    def print_above(self, line: Text | str) -> None:
        """Print a line above the live frame. The next tick redraws the tree."""
        self.erase()
        self.console.print(line)

    def render(self, now: float | None = None) -> Text:
        """Render the whole tree as a single Text."""
        now = time.monotonic() if now is None else now
        lines: list[Text] = []
        for key in self.view.roots:
            lines.extend(self._render_node(self.view.nodes[key], 0, now))
        return Text("\n").join(lines)

    def _icon(self, node: TaskNode, now: float) -> Text:
        if node.status is TaskStatus.RUNNING:
            frames = self.spinner.frames
            elapsed_ms = (now - self._started) * 1000
            frame = int(elapsed_ms / self.spinner.interval) % len(frames)
            return Text(frames[frame], style="task.running")
        glyph, style = STATUS_GLYPHS[node.status]
        return Text(glyph, style=style)

    def _render_node(self, node: TaskNode, level: int, now: float) -> list[Text]:
        head = Text.assemble(self._icon(node, now), " ", (node.name, "task.name"))
        lines = [head]
        message = node.message
        if node.status in (TaskStatus.COMPLETE, TaskStatus.ERRORED):
            head.append(f" - {message or node.status.value} ")
            head.append(format_duration(node.elapsed(now)), style="task.time")
        elif node.status is TaskStatus.RUNNING:
            if node.children:
                if message:
                    head.append(f" - {message}")
                for key in node.children:
                    child = self.view.nodes[key]
                    lines.extend(
                        Text(INDENT) + line
                        for line in self._render_node(child, level + 1, now)
                    )
                return lines
            active = node.active_progress
            if len(active) > 1:
                if message:
                    head.append(f" - {message}")
                width = self.console.width - (level + 1) * len(INDENT) - 2
                for progress in active:
                    lines.append(
                        Text.assemble(
                            INDENT,
                            (ARROW, "task.arrow"),
                            " ",
                            self.render_progress(progress, node, width, now),
                        )
                    )
            elif len(active) == 1:
                head.append(" - ")
                width = (
                    self.console.width
                    - level * len(INDENT)
                    - head.cell_len
                    - len(message or "")
                    - 10
                )
                head.append(self.render_progress(active[0], node, width, now))
                if message:
                    head.append(f" {message}")
            elif message:
                head.append(f" {message}")
            for text in node.messages:
                lines.append(Text.assemble(INDENT, (ARROW, "task.arrow"), f" {text}"))
        return lines

    def render_progress(
        self, progress: ProgressData, node: TaskNode | None, width: int, now: float | None = None
    ) -> str:
        """Substitute progress placeholders into the configured format."""
        now = time.monotonic() if now is None else now
        elapsed = node.elapsed(now) if node else now - self._started
        context = {
            "name": progress.name,
            "key": progress.key,
            "value": format_number(progress.value),
            "total": format_number(progress.total),
            "percent": f"{progress.ratio * 100:.3g}%",
            "time": format_duration(elapsed, 1),
            "bar": "",
            "done": "true" if progress.done else "false",
        }
        # the bar gets whatever width the rest of the line leaves over
        bar_width = width - len(self._substitute(context)) - 2
        context["bar"] = render_bar(progress.value, progress.total, bar_width)
        return self._substitute(context)

    def _substitute(self, context: dict[str, str]) -> str:
        return PLACEHOLDER.sub(
            lambda match: context.get(match.group(1), ""), self.progress_format
        )
