# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Drives a handler's return value as a tree of task nodes.

`TaskRuntime.run()` adapts the value with `to_runnable()` and walks it:

- A named `Call` or a `Descriptor` gets its own task node. The node is
  created, started, and given exactly one terminal event. An exception from
  its handler is caught at the node and reported as that node's error.
- An anonymous callable (a lambda) runs inline under its parent. At the top
  level it gets a node named after the program.
- A `Series` runs members in order and stops at the first failed member.
- A `Parallel` group starts every member before awaiting any of them and waits
  for all of them. One failure never cancels its siblings.
- A `TerminalValue` feeds output into the enclosing task.

A node whose subtree failed is itself marked as errored, so failure bubbles
up to the roots and `run()` returns False.
"""
from __future__ import annotations

import asyncio
import signal
from collections.abc import AsyncIterable
from typing import Any

from tasklane.exceptions import TaskError
from tasklane.logger import logger
from tasklane.task.context import RunContext
from tasklane.task.events import TaskStatus
from tasklane.task.runnable import (
    Call,
    Descriptor,
    Parallel,
    Runnable,
    Series,
    TerminalValue,
    to_runnable,
)
from tasklane.task.task import Task
from tasklane.utils import resolve


class TaskRuntime:
    """
    Runs runnables against a `RunContext`.

    Example:
        >>> runtime = TaskRuntime(RunContext(name="app", sink=display))
        >>> ok = await runtime.run([download, [verify, index]])
    """

    def __init__(self, context: RunContext) -> None:
        self.context = context

    def task(self, name: str, key: str | None = None) -> Task:
        """Create a new top-level task."""
        return Task(name, self.context, key=key)

    async def run(self, value: Any) -> bool:
        """Run `value` to completion and report whether every task succeeded."""
        self.context.start_timer()
        try:
            runnable = to_runnable(value)
            if isinstance(runnable, TerminalValue) and runnable.value is not None:
                ok = await self._execute(
                    self.task(self.context.name), lambda *_: runnable, serial=True
                )
            else:
                ok = await self._run(runnable, None, serial=True)
        finally:
            self.context.stop_timer()
        logger.debug(
            "Run finished in %.3fs with %d failed task(s).",
            self.context.duration or 0.0,
            len(self.context.errors),
        )
        return ok and self.context.success

    async def _run(self, runnable: Runnable, parent: Task | None, serial: bool) -> bool:
        if isinstance(runnable, Call):
            if runnable.name:
                task = self._create(runnable.name, None, parent)
                return await self._execute(task, runnable.fn, serial)
            if parent is None:
                return await self._execute(self.task(self.context.name), runnable.fn, serial)
            result = await resolve(
                runnable.fn(parent, self.context.arguments, self.context.options)
            )
            return await self._run(to_runnable(result), parent, serial)
        if isinstance(runnable, Descriptor):
            task = self._create(runnable.name, runnable.key, parent)
            return await self._execute(task, runnable.handler, serial)
        if isinstance(runnable, Series):
            return await self._run_series(runnable, parent, serial)
        if isinstance(runnable, Parallel):
            return await self._run_parallel(runnable, parent)
        if isinstance(runnable, TerminalValue):
            return await self._consume(runnable.value, parent)
        raise TypeError(f"Unknown runnable: {runnable!r}")

    def _create(self, name: str, key: str | None, parent: Task | None) -> Task:
        if parent is None:
            return self.task(name, key)
        return parent.task(name, key)

    async def _execute(self, task: Task, handler, serial: bool) -> bool:
        context = self.context
        previous = context.current_task
        if serial:
            context.set_current(task.key)
        failures = len(context.errors)
        task.start()
        try:
            result = await resolve(handler(task, context.arguments, context.options))
            ok = await self._run(to_runnable(result), task, serial)
        except Exception as error:
            logger.debug("[%s] Task raised an exception.", task.key, exc_info=True)
            task.error(error)
            ok = False
        else:
            if not ok:
                failed = len(context.errors) - failures
                task.error(TaskError(f"{failed or 1} sub-task(s) failed"))
            else:
                task.complete()
        finally:
            if serial:
                context.clear_current(task.key, previous)
        return ok and task.status is not TaskStatus.ERRORED

    async def _run_series(self, series: Series, parent: Task | None, serial: bool) -> bool:
        if isinstance(series.items, AsyncIterable):
            async for item in series.items:
                if not await self._run(self._adapt(item), parent, serial):
                    return False
            return True
        for item in series.items:
            if not await self._run(self._adapt(item), parent, serial):
                return False
        return True

    async def _run_parallel(self, group: Parallel, parent: Task | None) -> bool:
        results = await asyncio.gather(
            *(self._run(self._adapt(item), parent, serial=False) for item in group.items),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return all(results)

    @staticmethod
    def _adapt(item: Any) -> Runnable:
        if isinstance(item, list):
            return Parallel(tuple(item))
        return to_runnable(item)

    async def _consume(self, value: Any, parent: Task | None) -> bool:
        if value is None:
            return True
        if parent is None:
            raise TaskError(f"Nothing to attach {type(value).__name__} output to")
        if isinstance(value, str):
            parent.output(value)
            return True
        if isinstance(value, asyncio.subprocess.Process):
            return await self._consume_process(value, parent)
        await self._consume_stream(value, parent)
        return True

    async def _consume_stream(self, stream, task: Task) -> None:
        if isinstance(stream, asyncio.StreamReader):
            async for line in stream:
                task.output(_decode(line))
            return
        while True:
            line = await asyncio.to_thread(stream.readline)
            if not line:
                break
            task.output(_decode(line))

    async def _consume_process(self, process: asyncio.subprocess.Process, task: Task) -> bool:
        streams = [stream for stream in (process.stdout, process.stderr) if stream]
        await asyncio.gather(*(self._consume_stream(stream, task) for stream in streams))
        code = await process.wait()
        if code == 0:
            return True
        if code < 0:
            try:
                reason = f"Process exited with signal {signal.Signals(-code).name}"
            except ValueError:
                reason = f"Process exited with signal {-code}"
        else:
            reason = f"Process exited with code {code}"
        task.error(reason)
        return False


def _decode(line: bytes | str) -> str:
    if isinstance(line, bytes):
        return line.decode(errors="replace")
    return line
