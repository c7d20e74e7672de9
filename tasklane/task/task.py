# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Live task objects handed to handlers.

A `Task` is created, started, and then terminated by exactly one of
`complete()`, `error()`, or `skip()`. Each transition is reported to the
event sink of the owning `RunContext`. Handlers receive their `Task` as the
first argument and may use it to report output, attach progress trackers,
create sub-tasks, or end themselves early.

`task.log` is a `logging.LoggerAdapter` that tags every record with the
task's key, so the display can attribute the line to the right node.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tasklane.task.events import TaskStatus
from tasklane.task.progress import ProgressTracker

if TYPE_CHECKING:
    from tasklane.task.context import RunContext

task_logger = logging.getLogger("tasklane.task")


class Task:
    """
    One unit of work in the execution tree.

    Attributes:
        name (str): Display name.
        key (str): Identifier unique within the run, used to correlate events.
        parent (str | None): Key of the parent task, if any.
        status (TaskStatus): Current lifecycle state.
        log (logging.LoggerAdapter): Logger bound to this task.
    """

    def __init__(
        self,
        name: str,
        context: RunContext,
        key: str | None = None,
        parent: str | None = None,
    ) -> None:
        self.name = name
        self.context = context
        self.key = context.unique_key(key or name)
        self.parent = parent
        self.status = TaskStatus.PENDING
        self.log = logging.LoggerAdapter(task_logger, {"task": self.key})
        self.context.sink.emit_create(self.key, self.name, self.parent)

    @property
    def done(self) -> bool:
        return self.status.is_terminal

    def task(self, name: str, key: str | None = None) -> Task:
        """Create a sub-task nested under this one."""
        return Task(name, self.context, key=key, parent=self.key)

    def start(self) -> None:
        if self.status is not TaskStatus.PENDING:
            return
        self.status = TaskStatus.RUNNING
        self.context.sink.emit_start(self.key)

    def skip(self) -> None:
        if self.done:
            return
        self.status = TaskStatus.SKIPPED
        self.context.sink.emit_skip(self.key)

    def complete(self, message: str | None = None) -> None:
        if self.done:
            return
        if message:
            self.context.sink.emit_output(self.key, message)
        self.status = TaskStatus.COMPLETE
        self.context.sink.emit_complete(self.key)

    def error(self, error: BaseException | str | None = None) -> None:
        if self.done:
            return
        self.status = TaskStatus.ERRORED
        self.context.errors.append(self.key)
        self.context.sink.emit_error(self.key, error)

    def output(self, text: str) -> None:
        """Replace the task's inline status text."""
        text = text.strip()
        if text:
            self.context.sink.emit_output(self.key, text)

    def message(self, text: str) -> None:
        """Append a line to the task's message log."""
        text = text.strip()
        if text:
            self.context.sink.emit_message(self.key, text)

    def progress(
        self, name: str, total: float = 100, key: str | None = None
    ) -> ProgressTracker:
        """Attach a progress tracker to this task."""
        return ProgressTracker(
            name, self.context.sink, key=key or name, parent=self.key, total=total
        )

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, key={self.key!r}, status={self.status})"
