"""
Tasklane CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .context import RunContext
from .events import LoggingSink, SinkGroup, TaskEvent, TaskEventSink, TaskStatus
from .progress import ProgressData, ProgressTracker
from .runnable import (
    Call,
    Descriptor,
    Parallel,
    Runnable,
    Series,
    TerminalValue,
    named,
    to_runnable,
)
from .runtime import TaskRuntime
from .task import Task

__all__ = [
    "Call",
    "Descriptor",
    "LoggingSink",
    "Parallel",
    "ProgressData",
    "ProgressTracker",
    "RunContext",
    "Runnable",
    "Series",
    "SinkGroup",
    "Task",
    "TaskEvent",
    "TaskEventSink",
    "TaskRuntime",
    "TaskStatus",
    "TerminalValue",
    "named",
    "to_runnable",
]
