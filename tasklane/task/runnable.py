# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The closed set of shapes a handler may return.

Handlers return plain Python values. `to_runnable()` adapts each value into
exactly one of five tagged variants so the runtime can dispatch on type:

- `Call`: a callable `fn(task, arguments, options)` whose return value is run
  next. Its display name labels the task node created for it.
- `Descriptor`: an explicit `{name, key, handler}` triple.
- `Series`: members run one after another. Lists, tuples, generators, and
  async generators all become a `Series`.
- `Parallel`: members run concurrently. A list nested inside a list is a
  `Parallel` group, so `["a", ["b", "c"]]` runs `a`, then `b` and `c` together.
- `TerminalValue`: a string (completion message), a byte stream (one output
  event per line), an `asyncio.subprocess.Process`, or `None`.
"""
from __future__ import annotations

import asyncio
import functools
import io
from collections.abc import AsyncIterable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class Call:
    fn: Callable[..., Any]
    name: str | None = None


@dataclass(frozen=True)
class Descriptor:
    name: str
    handler: Callable[..., Any]
    key: str | None = None


@dataclass(frozen=True)
class Series:
    items: Iterable[Any] | AsyncIterable[Any]


@dataclass(frozen=True)
class Parallel:
    items: tuple[Any, ...]


@dataclass(frozen=True)
class TerminalValue:
    value: Any = None


Runnable = Union[Call, Descriptor, Series, Parallel, TerminalValue]
RUNNABLE_TYPES = (Call, Descriptor, Series, Parallel, TerminalValue)


def named(fn: F, name: str) -> F:
    """Attach a display name to a callable task."""
    fn.display_name = name  # type: ignore[attr-defined]
    return fn


def display_name(fn: Callable[..., Any]) -> str | None:
    """The label used for a callable's task node, or None for anonymous callables."""
    name = getattr(fn, "display_name", None)
    if name:
        return name
    if isinstance(fn, functools.partial):
        return display_name(fn.func)
    name = getattr(fn, "__name__", None)
    if not name or name == "<lambda>":
        return None
    return name


def is_byte_stream(value: Any) -> bool:
    if isinstance(value, asyncio.StreamReader):
        return True
    if isinstance(value, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return hasattr(value, "readline") and hasattr(value, "read")


def to_runnable(value: Any) -> Runnable:
    """
    Adapt a handler return value into a tagged runnable.

    Raises:
        TypeError: If the value has no runnable interpretation.
    """
    if isinstance(value, RUNNABLE_TYPES):
        return value
    if value is None or isinstance(value, str):
        return TerminalValue(value)
    if isinstance(value, asyncio.subprocess.Process) or is_byte_stream(value):
        return TerminalValue(value)
    if isinstance(value, Mapping) and callable(value.get("handler")):
        return Descriptor(
            name=value.get("name") or display_name(value["handler"]) or "",
            handler=value["handler"],
            key=value.get("key"),
        )
    if callable(value):
        return Call(value, display_name(value))
    if isinstance(value, (list, tuple)):
        return Series(
            tuple(
                Parallel(tuple(item)) if isinstance(item, (list, tuple)) else item
                for item in value
            )
        )
    if isinstance(value, (Iterable, AsyncIterable)) and not isinstance(
        value, (bytes, bytearray, Mapping)
    ):
        return Series(value)
    raise TypeError(f"Cannot run {type(value).__name__} as a task")
