# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""utils.py"""
from __future__ import annotations

import inspect
import logging
import os
import re
from typing import Any

import pythonjsonlogger.json
from rich.logging import RichHandler

DURATION_SCALES: list[tuple[str, int]] = [
    ("y", 365 * 24 * 60 * 60 * 1000),
    ("w", 7 * 24 * 60 * 60 * 1000),
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
    ("ms", 1),
]


async def resolve(value: Any) -> Any:
    """Await `value` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def camelcase(text: str) -> str:
    """Convert a space or hyphen delimited name to camel case.

    >>> camelcase("log-level")
    'logLevel'
    """
    first, *rest = re.split(r"[ -]", text)
    return first.lower() + "".join(part[:1].upper() + part[1:].lower() for part in rest)


def dashcase(text: str) -> str:
    """Convert a camel case name to lowercase words joined by hyphens."""
    result = ""
    for char in text:
        lower = char.lower()
        if char != lower:
            result += "-"
        result += lower
    return result


def indent(text: str, level: int) -> str:
    return "\n".join(" " * level + line for line in text.split("\n"))


def format_duration(seconds: float, depth: int = 3) -> str:
    """Render a duration as its largest `depth` units, e.g. `1m 5s 120ms`."""
    parts = []
    remaining = max(round(seconds * 1000), 0)
    for name, scale in DURATION_SCALES:
        if len(parts) >= depth:
            break
        amount, remaining = divmod(remaining, scale)
        if amount:
            parts.append(f"{amount}{name}")
    return " ".join(parts) or "0ms"


def edit_distance(first: str, second: str) -> int:
    """
    Edit distance between two strings, counting an insertion, deletion,
    substitution, or swap of two adjacent characters as one edit.

    >>> edit_distance("buidl", "build")
    1
    """
    rows = [list(range(len(second) + 1))]
    for i in range(1, len(first) + 1):
        row = [i] + [0] * len(second)
        for j in range(1, len(second) + 1):
            cost = first[i - 1] != second[j - 1]
            row[j] = min(
                rows[i - 1][j] + 1,
                row[j - 1] + 1,
                rows[i - 1][j - 1] + cost,
            )
            if (
                i > 1
                and j > 1
                and first[i - 1] == second[j - 2]
                and first[i - 2] == second[j - 1]
            ):
                row[j] = min(row[j], rows[i - 2][j - 2] + 1)
        rows.append(row)
    return rows[-1][-1]


def running_in_container() -> bool:
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as f:
            content = f.read()
            return (
                "docker" in content
                or "kubepods" in content
                or "containerd" in content
                or "podman" in content
            )
    except OSError:
        return False


def running_in_ci() -> bool:
    return any(
        os.getenv(variable)
        for variable in ("CI", "CONTINUOUS_INTEGRATION", "BUILD_NUMBER", "RUN_ID")
    )


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
):
    """
    Configure logging for Tasklane with support for both CLI-friendly and
    structured JSON output.

    Args:
        mode (str | None):
            Logging output mode. Can be:
                - "cli": human-readable Rich console logs (default outside containers)
                - "json": machine-readable JSON logs (default inside containers)
            If not provided, it will use the `TASKLANE_LOG_MODE` environment
            variable or fallback based on container detection.
        log_filename (str | None):
            Path to a log file. No file handler is installed when omitted.
        json_log_to_file (bool):
            Whether to format file logs as JSON instead of plain text.
        file_log_level (int):
            Logging level for file output. Defaults to `logging.DEBUG`.
        console_log_level (int):
            Logging level for console output. Defaults to `logging.WARNING`.

    Raises:
        ValueError: If an invalid logging `mode` is passed.
    """
    if not mode:
        mode = os.getenv("TASKLANE_LOG_MODE") or (
            "json" if running_in_container() else "cli"
        )

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if root.hasHandlers():
        root.handlers.clear()

    if mode == "cli":
        console_handler: RichHandler | logging.StreamHandler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=True,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    elif mode == "json":
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            pythonjsonlogger.json.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        )
    else:
        raise ValueError(f"Invalid log mode: {mode}")

    console_handler.setLevel(console_log_level)
    root.addHandler(console_handler)

    if log_filename:
        add_file_handler(log_filename, json_log_to_file, file_log_level)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    logger = logging.getLogger("tasklane")
    logger.propagate = True
    logger.debug("Logging initialized in '%s' mode.", mode)


def add_file_handler(
    log_filename: str,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
) -> logging.FileHandler:
    """Attach a file handler to the root logger and return it."""
    file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
    file_handler.setLevel(file_log_level)
    if json_log_to_file:
        file_handler.setFormatter(
            pythonjsonlogger.json.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        )
    else:
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logging.getLogger().addHandler(file_handler)
    return file_handler
