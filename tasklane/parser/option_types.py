# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Type coercion registry for options and arguments.

Every primitive type tag maps to a `Typer`: a `validate` predicate, a
`coerce` conversion, a `default` factory, and the prompt kind used when the
value is requested interactively. A plain callable may be used instead of a
tag; it is treated as a custom converter that accepts any input and may be
synchronous or asynchronous.

Functions:
- typer_for: Look up (or wrap) the `Typer` for a type tag or converter.
- validate: Check a raw string against a type.
- convert: Coerce a raw string, awaiting custom async converters.
- is_choice: Check a raw string against declared choices.
- stringify: Render a coerced value back into command-line text.
"""
from __future__ import annotations

import glob
import math
import sys
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Sequence, Union
from urllib.parse import SplitResult, urlsplit

from dateutil import parser as date_parser

from tasklane.utils import resolve

TRUTHY = {"true", "t", "1", "yes", "on"}
FALSY = {"false", "f", "0", "no", "off"}
GLOB_CHARS = ("*", "?", "[")


class OptionType(Enum):
    """
    Primitive value types understood by the parser.

    Aliases:
        "str" → "string"
        "int", "float" → "number"
        "bool" → "boolean"
        "datetime" → "date"
        "file" → "stream"
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    URL = "url"
    PATH = "path"
    DATE = "date"
    STREAM = "stream"

    @classmethod
    def choices(cls) -> list[OptionType]:
        """Return a list of all option types."""
        return list(cls)

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "str": "string",
            "int": "number",
            "float": "number",
            "bool": "boolean",
            "datetime": "date",
            "file": "stream",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> OptionType:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


Converter = Callable[[str], Union[Any, Awaitable[Any]]]
TypeSpec = Union[OptionType, Converter]


@dataclass(frozen=True)
class Typer:
    name: str
    validate: Callable[[str], bool]
    coerce: Converter
    default: Callable[[], Any]
    prompt: str = "input"


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts various truthy and falsy representations such as 'true', 'yes',
    '0', 'off', etc.
    """
    if isinstance(value, bool):
        return value
    value = value.strip().lower()
    if value in TRUTHY:
        return True
    elif value in FALSY:
        return False
    return bool(value)


def _is_bool(value: str) -> bool:
    return value.strip().lower() in TRUTHY | FALSY


def _is_number(value: str) -> bool:
    try:
        return not math.isnan(float(value))
    except ValueError:
        return False


def coerce_number(value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        return float(value)


def _is_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and (bool(parts.netloc) or parts.scheme == "file")


def _is_glob(value: str) -> bool:
    return any(char in value for char in GLOB_CHARS)


def _is_path(value: str) -> bool:
    return _is_glob(value) or Path(value).expanduser().exists()


def coerce_path(value: str) -> Path | list[Path]:
    if _is_glob(value):
        return sorted(Path(match).resolve() for match in glob.glob(value, recursive=True))
    return Path(value).expanduser().resolve()


def _is_date(value: str) -> bool:
    try:
        date_parser.parse(value)
    except (ValueError, OverflowError):
        return False
    return True


def _is_stream(value: str) -> bool:
    return value == "-" or Path(value).expanduser().is_file()


def coerce_stream(value: str):
    if value == "-":
        return sys.stdin.buffer
    return open(Path(value).expanduser().resolve(), "rb")


TYPERS: dict[OptionType, Typer] = {
    OptionType.STRING: Typer("string", lambda _: True, str, lambda: ""),
    OptionType.NUMBER: Typer("number", _is_number, coerce_number, lambda: 0, "numeral"),
    OptionType.BOOLEAN: Typer("boolean", _is_bool, coerce_bool, lambda: False, "confirm"),
    OptionType.URL: Typer("url", _is_url, urlsplit, lambda: None),
    OptionType.PATH: Typer("path", _is_path, coerce_path, Path.cwd),
    OptionType.DATE: Typer("date", _is_date, date_parser.parse, datetime.now),
    OptionType.STREAM: Typer("stream", _is_stream, coerce_stream, lambda: None),
}


def typer_for(type_: TypeSpec) -> Typer:
    """Return the `Typer` for a type tag, wrapping custom converters."""
    if isinstance(type_, OptionType):
        return TYPERS[type_]
    if isinstance(type_, str):
        return TYPERS[OptionType(type_)]
    if not callable(type_):
        raise TypeError(f"{type_!r} is neither an option type nor a converter")
    return Typer(
        name=getattr(type_, "__name__", type(type_).__name__),
        validate=lambda _: True,
        coerce=type_,
        default=lambda: None,
    )


def type_name(type_: TypeSpec) -> str:
    return typer_for(type_).name


async def validate(type_: TypeSpec, value: str) -> bool:
    return bool(await resolve(typer_for(type_).validate(value)))


async def convert(type_: TypeSpec, value: str) -> Any:
    return await resolve(typer_for(type_).coerce(value))


async def is_choice(type_: TypeSpec, value: str, choices: Sequence[Any]) -> bool:
    """
    True when `value` is one of `choices`, or no choices are declared.

    Values are compared after conversion. Streams are compared by their raw
    text so that checking a choice never opens the file.
    """
    if not choices:
        return True
    if type_ is OptionType.STREAM:
        return value in choices
    return await convert(type_, value) in choices


def stringify(value: Any) -> str:
    """Render a value as it would be written on the command line."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, SplitResult):
        return value.geturl()
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple, set)):
        return ", ".join(stringify(item) for item in value)
    return str(value)
