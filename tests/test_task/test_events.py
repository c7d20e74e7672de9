import logging

from tasklane.task import LoggingSink, RunContext, SinkGroup, Task, TaskEventSink, TaskStatus


class BrokenSink(TaskEventSink):
    def emit_create(self, key, name, parent=None):
        raise RuntimeError("sink failure")


class Names(TaskEventSink):
    def __init__(self):
        self.names = []

    def emit_create(self, key, name, parent=None):
        self.names.append(name)


def test_sink_group_skips_failing_sinks(caplog):
    names = Names()
    group = SinkGroup([BrokenSink(), names])
    with caplog.at_level(logging.WARNING, logger="tasklane"):
        group.emit_create("build", "build")
    assert names.names == ["build"]
    assert "[Sink:BrokenSink] raised an exception during 'create'" in caplog.text


def test_logging_sink_writes_debug_records(caplog):
    with caplog.at_level(logging.DEBUG, logger="tasklane.output"):
        LoggingSink().emit_start("build")
    record = caplog.records[-1]
    assert record.name == "tasklane.output"
    assert record.task == "build"
    assert record.getMessage() == "start build"


def test_task_lifecycle_transitions_once():
    context = RunContext(name="app")
    task = Task("build", context)
    assert task.status is TaskStatus.PENDING
    task.start()
    assert task.status is TaskStatus.RUNNING
    task.complete()
    task.error("too late")
    assert task.status is TaskStatus.COMPLETE
    assert context.errors == []


def test_task_error_records_key():
    context = RunContext(name="app")
    task = Task("build", context)
    task.start()
    task.error("boom")
    assert task.done
    assert context.errors == ["build"]
    assert not context.success


def test_task_log_carries_key(caplog):
    context = RunContext(name="app")
    task = Task("build", context)
    with caplog.at_level(logging.INFO, logger="tasklane.task"):
        task.log.info("compiling")
    assert caplog.records[-1].task == "build"


def test_status_terminality():
    assert not TaskStatus.RUNNING.is_terminal
    assert TaskStatus.SKIPPED.is_terminal
    assert str(TaskStatus.ERRORED) == "errored"
