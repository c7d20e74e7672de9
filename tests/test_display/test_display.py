import io
import logging

import pytest
from rich.console import Console

from tasklane.display import Display, DisplayOptions, TaskLogHandler
from tasklane.log_level import LogLevel
from tasklane.task import RunContext, TaskRuntime
from tasklane.themes import get_theme


def make_display(**options):
    console = Console(file=io.StringIO(), width=100, theme=get_theme())
    return Display("app", console, DisplayOptions(**options))


def output(display: Display) -> str:
    return display.console.file.getvalue()


def record(level=logging.WARNING, msg="careful", **extra):
    return logging.makeLogRecord(
        {"name": "tasklane.test", "levelno": level, "levelname": "", "msg": msg, **extra}
    )


def test_tagged_record_sets_task_message_in_term_mode():
    display = make_display(term=True)
    display.view.emit_create("build", "build")
    display.handle_record(record(task="build"))
    assert display.view.get("build").message == "⚠ careful"


def test_untagged_record_goes_to_current_task():
    display = make_display(term=True)
    display.view.emit_create("build", "build")
    display.bind(lambda: "build")
    display.handle_record(record(level=logging.ERROR, msg="broken"))
    assert display.view.get("build").message == "✖ broken"


def test_record_without_task_is_printed():
    display = make_display(term=True)
    display.handle_record(record(msg="no [task] here"))
    assert "⚠ [app] no [task] here" in output(display)


def test_plain_mode_prints_task_lines():
    display = make_display(term=False)
    display.view.emit_create("build", "build")
    display.handle_record(record(task="build"))
    assert display.view.get("build").message is None
    assert "⚠ [build] careful" in output(display)


def test_log_format_placeholders():
    display = make_display(log_format="{level}|{name}|{task}|{message}")
    text = display.format_record(record(task="build"))
    assert text == "warn|tasklane.test|build|careful"


def test_custom_level_glyphs():
    display = make_display(term=False, log_levels={LogLevel.WARN: "!"})
    display.handle_record(record())
    assert "! [app] careful" in output(display)


def test_log_handler_filters_output_logger():
    display = make_display()
    handler = TaskLogHandler(display)
    assert not handler.filter(logging.makeLogRecord({"name": "tasklane.output"}))
    assert handler.filter(logging.makeLogRecord({"name": "tasklane.task"}))


@pytest.mark.asyncio
async def test_plain_run_echoes_events_and_logs():
    display = make_display(term=False, log_level=LogLevel.INFO)
    context = RunContext(name="app", sink=display.sink)
    display.bind(lambda: context.current_task)

    def build(task, arguments, options):
        task.log.info("compiling")
        logging.getLogger("tasklane.test").debug("hidden")
        return "done"

    await display.start()
    try:
        assert await TaskRuntime(context).run(build) is True
    finally:
        await display.stop()

    text = output(display)
    assert "app [app] create build" in text
    assert "app start build" in text
    assert "ℹ [build] compiling" in text
    assert "app build: done" in text
    assert "hidden" not in text
    assert display.handler not in logging.getLogger().handlers


@pytest.mark.asyncio
async def test_start_lowers_root_level_and_stop_restores_it():
    root = logging.getLogger()
    previous = root.level
    root.setLevel(logging.WARNING)
    try:
        display = make_display(term=False, log_level=LogLevel.VERBOSE)
        await display.start()
        assert root.level == LogLevel.VERBOSE.levelno
        await display.stop()
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
