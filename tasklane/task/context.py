# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Run-scoped state shared by the task runtime.

`RunContext` replaces any process-wide event bus: it owns the event sink every
task reports to, the parsed arguments and options handed to handlers, the set
of task keys already issued, and the "current task" pointer used to attribute
log records that do not name a task explicitly.

The current task pointer is only moved by serially started tasks. Tasks
started inside a concurrent group leave it alone, so interleaved branches
cannot steal each other's log lines.
"""
from __future__ import annotations

import time
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tasklane.task.events import TaskEventSink


class RunContext(BaseModel):
    """
    Captures the state of one handler execution.

    Attributes:
        name (str): Program name, used for unnamed top-level work.
        sink (TaskEventSink): Receiver for every task lifecycle event.
        arguments (dict): Parsed positional arguments.
        options (dict): Resolved options, after config files and defaults.
        current_task (str | None): Key of the most recent serially started task.
        errors (list[str]): Keys of tasks that ended in error.
        start_time (float | None): High-resolution start time.
        end_time (float | None): High-resolution end time.
        start_wall (datetime | None): Wall-clock timestamp when the run began.
    """

    name: str
    sink: TaskEventSink = Field(default_factory=TaskEventSink)
    arguments: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)
    current_task: str | None = None
    keys: set[str] = Field(default_factory=set)
    errors: list[str] = Field(default_factory=list)

    start_time: float | None = None
    end_time: float | None = None
    start_wall: datetime | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def start_timer(self):
        self.start_wall = datetime.now()
        self.start_time = time.perf_counter()

    def stop_timer(self):
        self.end_time = time.perf_counter()

    @property
    def duration(self) -> float | None:
        if self.start_time is None:
            return None
        if self.end_time is None:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time

    @property
    def success(self) -> bool:
        return not self.errors

    def unique_key(self, key: str) -> str:
        """Reserve `key`, adding a numeric suffix if it was already issued."""
        candidate = key
        suffix = 2
        while candidate in self.keys:
            candidate = f"{key}-{suffix}"
            suffix += 1
        self.keys.add(candidate)
        return candidate

    def set_current(self, key: str) -> None:
        self.current_task = key

    def clear_current(self, key: str, previous: str | None = None) -> None:
        """Restore `previous` if `key` is still the current task."""
        if self.current_task == key:
            self.current_task = previous
