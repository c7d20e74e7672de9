from datetime import datetime
from pathlib import Path

import pytest

from tasklane.parser.option_types import (
    OptionType,
    coerce_bool,
    convert,
    stringify,
    type_name,
    typer_for,
    validate,
)


@pytest.mark.parametrize(
    "type_, value",
    [
        (OptionType.NUMBER, "42"),
        (OptionType.NUMBER, "-3.5"),
        (OptionType.BOOLEAN, "true"),
        (OptionType.BOOLEAN, "yes"),
        (OptionType.BOOLEAN, "off"),
        (OptionType.DATE, "2024-01-01"),
        (OptionType.STRING, "hello world"),
        (OptionType.URL, "https://example.com/path?q=1"),
    ],
)
@pytest.mark.asyncio
async def test_coerce_stringify_round_trip(type_, value):
    coerced = await convert(type_, value)
    assert await convert(type_, stringify(coerced)) == coerced


@pytest.mark.asyncio
async def test_number_coercion_keeps_integers_integral():
    assert await convert(OptionType.NUMBER, "42") == 42
    assert isinstance(await convert(OptionType.NUMBER, "42"), int)
    assert await convert(OptionType.NUMBER, "2.5") == 2.5


@pytest.mark.asyncio
async def test_validation():
    assert await validate(OptionType.NUMBER, "1e3")
    assert not await validate(OptionType.NUMBER, "ten")
    assert not await validate(OptionType.NUMBER, "nan")
    assert await validate(OptionType.BOOLEAN, "ON")
    assert not await validate(OptionType.BOOLEAN, "maybe")
    assert not await validate(OptionType.URL, "example.com")
    assert await validate(OptionType.DATE, "March 3 2021")
    assert not await validate(OptionType.DATE, "not a date")
    assert await validate(OptionType.STRING, "")


@pytest.mark.asyncio
async def test_path_type(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    assert await validate(OptionType.PATH, str(target))
    assert not await validate(OptionType.PATH, str(tmp_path / "missing"))
    assert await convert(OptionType.PATH, str(target)) == target.resolve()


@pytest.mark.asyncio
async def test_path_glob_expands_sorted(tmp_path):
    (tmp_path / "b.py").write_text("")
    (tmp_path / "a.py").write_text("")
    matches = await convert(OptionType.PATH, str(tmp_path / "*.py"))
    assert [path.name for path in matches] == ["a.py", "b.py"]


@pytest.mark.asyncio
async def test_stream_type_opens_files(tmp_path):
    target = tmp_path / "data.bin"
    target.write_bytes(b"abc")
    assert await validate(OptionType.STREAM, "-")
    assert await validate(OptionType.STREAM, str(target))
    stream = await convert(OptionType.STREAM, str(target))
    try:
        assert stream.read() == b"abc"
    finally:
        stream.close()


@pytest.mark.asyncio
async def test_custom_converters_may_be_async():
    async def shout(value: str) -> str:
        return value.upper()

    assert await validate(shout, "anything")
    assert await convert(shout, "hi") == "HI"
    assert type_name(shout) == "shout"


def test_type_aliases():
    assert OptionType("int") is OptionType.NUMBER
    assert OptionType("Bool") is OptionType.BOOLEAN
    assert OptionType("file") is OptionType.STREAM
    with pytest.raises(ValueError):
        OptionType("complex")


def test_defaults():
    assert typer_for(OptionType.STRING).default() == ""
    assert typer_for(OptionType.NUMBER).default() == 0
    assert typer_for(OptionType.BOOLEAN).default() is False
    assert typer_for(OptionType.PATH).default() == Path.cwd()
    assert isinstance(typer_for(OptionType.DATE).default(), datetime)


def test_typer_for_rejects_non_callables():
    with pytest.raises(TypeError):
        typer_for(42)


def test_coerce_bool():
    assert coerce_bool("T") is True
    assert coerce_bool(" no ") is False
    assert coerce_bool(True) is True


def test_stringify():
    assert stringify(None) == ""
    assert stringify(False) == "false"
    assert stringify([1, "a", True]) == "1, a, true"
    assert stringify(OptionType.URL) == "url"
    assert stringify(datetime(2024, 1, 1)) == "2024-01-01T00:00:00"
