# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `LogLevel`, the ordered set of severities selectable with `--logLevel`.

Each member maps onto a standard `logging` level number. Three names that the
standard library lacks are registered with `logging.addLevelName` on import:
NOTICE (25), VERBOSE (15) and SILLY (5).

Example:
    LogLevel("warning") → LogLevel.WARN (via alias)
    LogLevel.NOTICE.levelno → 25
"""
from __future__ import annotations

import logging
from enum import Enum

NOTICE = 25
VERBOSE = 15
SILLY = 5

logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(VERBOSE, "VERBOSE")
logging.addLevelName(SILLY, "SILLY")


class LogLevel(Enum):
    """
    Minimum severity shown by the task display.

    Members are declared from most to least severe.

    Aliases:
        "warning" → "warn"
        "debug" → "verbose"
        "trace" → "silly"
    """

    ERROR = "error"
    WARN = "warn"
    NOTICE = "notice"
    INFO = "info"
    VERBOSE = "verbose"
    SILLY = "silly"

    @classmethod
    def choices(cls) -> list[LogLevel]:
        """Return a list of all log levels, most severe first."""
        return list(cls)

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "warning": "warn",
            "debug": "verbose",
            "trace": "silly",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> LogLevel:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    @classmethod
    def from_levelno(cls, levelno: int) -> LogLevel:
        """Return the most severe member whose level does not exceed `levelno`."""
        for member in cls:
            if levelno >= member.levelno:
                return member
        return cls.SILLY

    @property
    def levelno(self) -> int:
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.NOTICE: NOTICE,
            LogLevel.INFO: logging.INFO,
            LogLevel.VERBOSE: VERBOSE,
            LogLevel.SILLY: SILLY,
        }[self]

    def __str__(self) -> str:
        """Return the string representation of the log level."""
        return self.value
