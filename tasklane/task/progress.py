# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Progress trackers attached to tasks.

A `ProgressTracker` holds a value/total pair that only ever increases. Each
change is published to the event sink as an immutable `ProgressData`
snapshot, so the display never shares state with the tracker. `done` becomes
true exactly when the value reaches the total or `finish()` is called.
"""
from __future__ import annotations

from dataclasses import dataclass

from tasklane.task.events import TaskEventSink


@dataclass(frozen=True)
class ProgressData:
    name: str
    key: str
    parent: str | None
    value: float
    total: float
    done: bool

    @property
    def ratio(self) -> float:
        if self.total <= 0:
            return 1.0
        return min(self.value / self.total, 1.0)


class ProgressTracker:
    """
    A monotonically increasing counter reported to the task display.

    Example:
        >>> progress = task.progress("Downloading", total=len(files))
        >>> for file in files:
        ...     await fetch(file)
        ...     progress.update(1)
    """

    def __init__(
        self,
        name: str,
        sink: TaskEventSink,
        key: str | None = None,
        parent: str | None = None,
        total: float = 100,
    ) -> None:
        self.name = name
        self.key = key or name
        self.parent = parent
        self.sink = sink
        self._total = total
        self._value: float = 0
        self._done = False
        self._publish()

    @property
    def value(self) -> float:
        return self._value

    @property
    def total(self) -> float:
        return self._total

    @property
    def done(self) -> bool:
        return self._done

    def update(self, amount: float, total: float | None = None) -> None:
        """Advance by `amount`, optionally growing the total."""
        if amount < 0:
            raise ValueError("Progress can only increase")
        if total is not None:
            if total < self._total:
                raise ValueError("Progress total can only increase")
            self._total = total
        self._value = min(self._value + amount, self._total)
        if self._value >= self._total:
            self._done = True
        self._publish()

    def write(self, chunk: bytes | str) -> int:
        """Count a chunk of data passing through, e.g. while copying a stream."""
        self.update(len(chunk))
        return len(chunk)

    def finish(self) -> None:
        self._done = True
        self._publish()

    def snapshot(self) -> ProgressData:
        return ProgressData(
            name=self.name,
            key=self.key,
            parent=self.parent,
            value=self._value,
            total=self._total,
            done=self._done,
        )

    def _publish(self) -> None:
        self.sink.emit_progress(self.key, self.snapshot())

    def __repr__(self) -> str:
        return f"ProgressTracker(name={self.name!r}, value={self._value}, total={self._total})"
