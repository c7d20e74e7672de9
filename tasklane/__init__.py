"""
Tasklane CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .builder import ArgumentBuilder, CLIBuilder, CommandBuilder, OptionBuilder
from .cli import CLI, match_path
from .cli_config import CLIConfig
from .exceptions import (
    ConfigError,
    CountError,
    DemandError,
    InvalidTypeError,
    NotFoundError,
    ParseError,
    SchemaError,
    TaskError,
    TasklaneError,
)
from .log_level import LogLevel
from .parser import OptionType
from .task import Call, Descriptor, Parallel, Series, Task, TerminalValue, named
from .utils import setup_logging

logger = logging.getLogger("tasklane")


__all__ = [
    "ArgumentBuilder",
    "CLI",
    "CLIBuilder",
    "CLIConfig",
    "Call",
    "CommandBuilder",
    "ConfigError",
    "CountError",
    "DemandError",
    "Descriptor",
    "InvalidTypeError",
    "LogLevel",
    "NotFoundError",
    "OptionBuilder",
    "OptionType",
    "Parallel",
    "ParseError",
    "SchemaError",
    "Series",
    "Task",
    "TaskError",
    "TasklaneError",
    "TerminalValue",
    "match_path",
    "named",
    "setup_logging",
]
