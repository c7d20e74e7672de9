# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Read view of the task tree, built purely from task events.

`TaskView` is a `TaskEventSink`. It keeps one `TaskNode` per task key, the
ordered list of root keys, and the progress trackers that are not attached to
any task. It never touches live `Task` objects: everything it knows arrived
as an event.

When an `echo` callable is supplied, every event is also described as a
single plain line, which is how the display reports progress when it is not
attached to a terminal.
"""
from __future__ import annotations

import time
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from tasklane.task.events import TaskEventSink, TaskStatus
from tasklane.task.progress import ProgressData
from tasklane.utils import format_duration


class TaskNode(BaseModel):
    """
    Display state of one task.

    Attributes:
        name (str): Display name.
        key (str): Task key.
        parent (str | None): Parent task key.
        status (TaskStatus): Lifecycle state.
        start_time (float | None): Monotonic time of the start event.
        end_time (float | None): Monotonic time of the terminal event.
        message (str | None): Latest inline message.
        messages (list[str]): Appended message log.
        children (list[str]): Keys of sub-tasks, in creation order.
        progress (list[ProgressData]): Trackers attached to this task.
    """

    name: str
    key: str
    parent: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    start_time: float | None = None
    end_time: float | None = None
    message: str | None = None
    messages: list[str] = Field(default_factory=list)
    children: list[str] = Field(default_factory=list)
    progress: list[ProgressData] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def elapsed(self, now: float) -> float:
        if self.start_time is None:
            return 0.0
        return (self.end_time if self.end_time is not None else now) - self.start_time

    @property
    def active_progress(self) -> list[ProgressData]:
        return [progress for progress in self.progress if not progress.done]


class TaskView(TaskEventSink):
    """Maintains `TaskNode`s keyed by task key."""

    def __init__(
        self,
        name: str = "",
        echo: Callable[[str], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.echo = echo
        self.clock = clock
        self.roots: list[str] = []
        self.nodes: dict[str, TaskNode] = {}
        self.progress: list[ProgressData] = []

    def get(self, key: str) -> TaskNode:
        node = self.nodes.get(key)
        if node is None:
            raise KeyError(f"No task with key {key}")
        return node

    def _echo(self, line: str) -> None:
        if self.echo:
            self.echo(line)

    def emit_create(self, key: str, name: str, parent: str | None = None) -> None:
        if key in self.nodes:
            raise ValueError(f"Duplicate task of key {key}")
        if parent:
            self.get(parent).children.append(key)
        else:
            self.roots.append(key)
        self.nodes[key] = TaskNode(name=name, key=key, parent=parent)
        self._echo(f"[{parent or self.name}] create {name}")

    def emit_start(self, key: str) -> None:
        node = self.get(key)
        node.status = TaskStatus.RUNNING
        node.start_time = self.clock()
        self._echo(f"start {node.name}")

    def emit_skip(self, key: str) -> None:
        node = self.get(key)
        node.status = TaskStatus.SKIPPED
        node.end_time = self.clock()
        self._echo(f"skip {node.name}")

    def emit_error(self, key: str, error: BaseException | str | None = None) -> None:
        node = self.get(key)
        if isinstance(error, BaseException):
            node.message = str(error) or type(error).__name__
        elif error:
            node.message = error
        node.status = TaskStatus.ERRORED
        node.end_time = self.clock()
        self._echo(f"error {node.name}" + (f": {node.message}" if node.message else ""))

    def emit_complete(self, key: str) -> None:
        node = self.get(key)
        node.status = TaskStatus.COMPLETE
        node.end_time = self.clock()
        self._echo(
            f"{node.name} complete in {format_duration(node.elapsed(node.end_time), 2)}"
        )
        if node.parent and node.message:
            self.get(node.parent).message = node.message

    def emit_output(self, key: str, text: str) -> None:
        node = self.get(key)
        node.message = text
        self._echo(f"{node.name}: {text}")

    def emit_message(self, key: str, text: str) -> None:
        node = self.get(key)
        node.messages.append(text)
        self._echo(f"{node.name}: {text}")

    def emit_progress(self, key: str, data: ProgressData) -> None:
        trackers = self.get(data.parent).progress if data.parent else self.progress
        for index, existing in enumerate(trackers):
            if existing.key == key:
                trackers[index] = data
                break
        else:
            trackers.append(data)
        prefix = f"[{data.parent}] " if data.parent else ""
        mark = "✔" if data.done else "○"
        self._echo(f"{prefix}{data.name}: {data.value:g} / {data.total:g} {mark}")
