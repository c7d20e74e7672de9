import logging

import pytest
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler

from tasklane.utils import (
    add_file_handler,
    camelcase,
    dashcase,
    edit_distance,
    format_duration,
    indent,
    resolve,
    running_in_ci,
    setup_logging,
)


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    "text, expected",
    [("log-level", "logLevel"), ("Dry Run", "dryRun"), ("name", "name")],
)
def test_camelcase(text, expected):
    assert camelcase(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("logLevel", "log-level"), ("dryRunNow", "dry-run-now"), ("name", "name")],
)
def test_dashcase(text, expected):
    assert dashcase(text) == expected


def test_indent():
    assert indent("a\nb", 2) == "  a\n  b"


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0ms"),
        (0.25, "250ms"),
        (1.5, "1s 500ms"),
        (65.12, "1m 5s 120ms"),
        (3661, "1h 1m 1s"),
        (90061.5, "1d 1h 1m"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_duration_depth():
    assert format_duration(3661, depth=1) == "1h"


@pytest.mark.parametrize(
    "first, second, distance",
    [
        ("build", "build", 0),
        ("buidl", "build", 1),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("deploi", "deploys", 2),
    ],
)
def test_edit_distance(first, second, distance):
    assert edit_distance(first, second) == distance


@pytest.mark.asyncio
async def test_resolve():
    async def answer():
        return 42

    assert await resolve(answer()) == 42
    assert await resolve(42) == 42


def test_running_in_ci(monkeypatch):
    for variable in ("CI", "CONTINUOUS_INTEGRATION", "BUILD_NUMBER", "RUN_ID"):
        monkeypatch.delenv(variable, raising=False)
    assert not running_in_ci()
    monkeypatch.setenv("BUILD_NUMBER", "12")
    assert running_in_ci()


def test_setup_logging_json_mode(root_logger):
    setup_logging(mode="json", console_log_level=logging.ERROR)
    assert root_logger.level == logging.DEBUG
    (handler,) = root_logger.handlers
    assert isinstance(handler.formatter, JsonFormatter)
    assert handler.level == logging.ERROR


def test_setup_logging_cli_mode_from_environment(monkeypatch, root_logger):
    monkeypatch.setenv("TASKLANE_LOG_MODE", "cli")
    setup_logging()
    assert isinstance(root_logger.handlers[0], RichHandler)


def test_setup_logging_with_file(tmp_path, root_logger):
    log_file = tmp_path / "tasklane.log"
    setup_logging(mode="json", log_filename=str(log_file), json_log_to_file=True)
    logging.getLogger("tasklane.test").debug("to the file")
    for handler in root_logger.handlers:
        handler.flush()
    assert '"message": "to the file"' in log_file.read_text()


def test_setup_logging_rejects_unknown_mode(root_logger):
    with pytest.raises(ValueError, match="Invalid log mode: xml"):
        setup_logging(mode="xml")


def test_add_file_handler(tmp_path, root_logger):
    log_file = tmp_path / "debug.log"
    handler = add_file_handler(str(log_file))
    assert handler in root_logger.handlers
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger("tasklane.test").debug("hello")
    handler.flush()
    assert "[tasklane.test] [DEBUG] hello" in log_file.read_text()
