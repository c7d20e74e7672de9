"""
Tasklane CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .option_types import OptionType, convert, stringify, typer_for, validate
from .parser import Parser, ParseResult, ParseState
from .schema import (
    HELP_COMMAND,
    HELP_OPTION,
    Argument,
    Command,
    Option,
    ParserConfig,
    ParseSpec,
)
from .suggestions import suggest_commands
from .tokenizer import normalize_argv, tokenize, tokenize_argv

__all__ = [
    "Argument",
    "Command",
    "HELP_COMMAND",
    "HELP_OPTION",
    "Option",
    "OptionType",
    "ParseResult",
    "ParseSpec",
    "ParseState",
    "Parser",
    "ParserConfig",
    "convert",
    "normalize_argv",
    "stringify",
    "suggest_commands",
    "tokenize",
    "tokenize_argv",
    "typer_for",
    "validate",
]
