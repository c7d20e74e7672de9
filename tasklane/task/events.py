# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Task lifecycle events and the sinks that receive them.

Live `Task` objects never talk to the display directly. Every state change is
reported to a `TaskEventSink` injected through the run context, and the
display builds its own read view purely from those calls.

Classes:
    TaskStatus: Lifecycle states of a task node.
    TaskEvent: Kinds of events a sink receives.
    TaskEventSink: Base sink. Every `emit_*` method is a no-op.
    SinkGroup: Fans events out to several sinks, logging and skipping sinks
        that raise.
    LoggingSink: Writes each event as a DEBUG record on `tasklane.output`.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from tasklane.logger import logger

if TYPE_CHECKING:
    from tasklane.task.progress import ProgressData

output_logger = logging.getLogger("tasklane.output")


class TaskStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SKIPPED = "skipped"
    COMPLETE = "complete"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SKIPPED, TaskStatus.COMPLETE, TaskStatus.ERRORED)

    def __str__(self) -> str:
        return self.value


class TaskEvent(Enum):
    CREATE = "create"
    START = "start"
    OUTPUT = "output"
    MESSAGE = "message"
    COMPLETE = "complete"
    ERROR = "error"
    SKIP = "skip"
    PROGRESS = "progress"

    def __str__(self) -> str:
        return self.value


class TaskEventSink:
    """Receives task lifecycle events. Subclasses override what they need."""

    def emit_create(self, key: str, name: str, parent: str | None = None) -> None:
        pass

    def emit_start(self, key: str) -> None:
        pass

    def emit_output(self, key: str, text: str) -> None:
        pass

    def emit_message(self, key: str, text: str) -> None:
        pass

    def emit_complete(self, key: str) -> None:
        pass

    def emit_error(self, key: str, error: BaseException | str | None = None) -> None:
        pass

    def emit_skip(self, key: str) -> None:
        pass

    def emit_progress(self, key: str, data: ProgressData) -> None:
        pass


class SinkGroup(TaskEventSink):
    """
    Forwards every event to each registered sink in order.

    A sink that raises is logged and skipped so one broken consumer cannot
    stop the run or starve the others.
    """

    def __init__(self, sinks: Iterable[TaskEventSink] = ()) -> None:
        self._sinks: list[TaskEventSink] = list(sinks)

    def register(self, sink: TaskEventSink) -> None:
        self._sinks.append(sink)

    def _dispatch(self, event: TaskEvent, key: str, *args) -> None:
        for sink in self._sinks:
            try:
                getattr(sink, f"emit_{event.value}")(key, *args)
            except Exception as sink_error:
                logger.warning(
                    "[Sink:%s] raised an exception during '%s' for '%s': %s",
                    type(sink).__name__,
                    event,
                    key,
                    sink_error,
                )

    def emit_create(self, key: str, name: str, parent: str | None = None) -> None:
        self._dispatch(TaskEvent.CREATE, key, name, parent)

    def emit_start(self, key: str) -> None:
        self._dispatch(TaskEvent.START, key)

    def emit_output(self, key: str, text: str) -> None:
        self._dispatch(TaskEvent.OUTPUT, key, text)

    def emit_message(self, key: str, text: str) -> None:
        self._dispatch(TaskEvent.MESSAGE, key, text)

    def emit_complete(self, key: str) -> None:
        self._dispatch(TaskEvent.COMPLETE, key)

    def emit_error(self, key: str, error: BaseException | str | None = None) -> None:
        self._dispatch(TaskEvent.ERROR, key, error)

    def emit_skip(self, key: str) -> None:
        self._dispatch(TaskEvent.SKIP, key)

    def emit_progress(self, key: str, data: ProgressData) -> None:
        self._dispatch(TaskEvent.PROGRESS, key, data)


class LoggingSink(TaskEventSink):
    """Mirrors task events into the log so file handlers keep a full record."""

    def emit_create(self, key: str, name: str, parent: str | None = None) -> None:
        output_logger.debug("[%s] create %s", parent or "-", name, extra={"task": key})

    def emit_start(self, key: str) -> None:
        output_logger.debug("start %s", key, extra={"task": key})

    def emit_output(self, key: str, text: str) -> None:
        output_logger.debug("%s: %s", key, text, extra={"task": key})

    def emit_message(self, key: str, text: str) -> None:
        output_logger.debug("%s: %s", key, text, extra={"task": key})

    def emit_complete(self, key: str) -> None:
        output_logger.debug("complete %s", key, extra={"task": key})

    def emit_error(self, key: str, error: BaseException | str | None = None) -> None:
        output_logger.debug("error %s: %s", key, error, extra={"task": key})

    def emit_skip(self, key: str) -> None:
        output_logger.debug("skip %s", key, extra={"task": key})

    def emit_progress(self, key: str, data: ProgressData) -> None:
        output_logger.debug(
            "%s: %s / %s", data.name, data.value, data.total, extra={"task": data.parent}
        )
