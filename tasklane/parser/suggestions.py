# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Edit-distance suggestions for mistyped command names."""
from __future__ import annotations

from typing import Iterable

from tasklane.parser.schema import Command
from tasklane.utils import edit_distance

SUGGESTION_RATIO = 0.4


def is_close(item: str, candidate: str, ratio: float = SUGGESTION_RATIO) -> bool:
    """True when `candidate` is within `ratio * len(item)` edits of `item`."""
    return candidate != item and edit_distance(item, candidate) < len(item) * ratio


def suggest_commands(
    item: str, commands: Iterable[Command], ratio: float = SUGGESTION_RATIO
) -> list[Command]:
    """Return the commands whose names are close to `item`, in declaration order."""
    return [command for command in commands if is_close(item, command.name, ratio)]
