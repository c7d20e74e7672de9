import pytest

from tasklane.display import TaskView
from tasklane.task import ProgressData, TaskStatus


def make_view():
    lines = []
    clock = iter(range(100)).__next__
    return TaskView("app", echo=lines.append, clock=lambda: float(clock())), lines


def test_create_builds_tree():
    view, _ = make_view()
    view.emit_create("build", "Build")
    view.emit_create("lint", "Lint", parent="build")
    assert view.roots == ["build"]
    assert view.get("build").children == ["lint"]
    assert view.get("lint").status is TaskStatus.PENDING


def test_duplicate_key_is_rejected():
    view, _ = make_view()
    view.emit_create("build", "Build")
    with pytest.raises(ValueError, match="Duplicate task of key build"):
        view.emit_create("build", "Build")


def test_unknown_key_is_rejected():
    view, _ = make_view()
    with pytest.raises(KeyError):
        view.emit_start("nope")


def test_lifecycle_timestamps():
    view, _ = make_view()
    view.emit_create("build", "Build")
    view.emit_start("build")
    view.emit_complete("build")
    node = view.get("build")
    assert node.status is TaskStatus.COMPLETE
    assert node.end_time > node.start_time
    assert node.elapsed(1000.0) == node.end_time - node.start_time


def test_error_message_from_exception():
    view, _ = make_view()
    view.emit_create("build", "Build")
    view.emit_error("build", RuntimeError("disk full"))
    assert view.get("build").message == "disk full"
    view.emit_create("lint", "Lint")
    view.emit_error("lint", KeyError())
    assert view.get("lint").message == "KeyError"


def test_completed_child_message_moves_to_parent():
    view, _ = make_view()
    view.emit_create("build", "Build")
    view.emit_create("lint", "Lint", parent="build")
    view.emit_output("lint", "3 warnings")
    view.emit_complete("lint")
    assert view.get("build").message == "3 warnings"


def test_messages_append():
    view, _ = make_view()
    view.emit_create("build", "Build")
    view.emit_message("build", "step 1")
    view.emit_message("build", "step 2")
    assert view.get("build").messages == ["step 1", "step 2"]


def test_progress_is_kept_per_task():
    view, _ = make_view()
    view.emit_create("download", "Download")
    view.emit_create("verify", "Verify", parent="download")
    view.emit_progress("sums", ProgressData("sums", "sums", "verify", 1, 4, False))
    view.emit_progress("sums", ProgressData("sums", "sums", "verify", 4, 4, True))
    assert view.get("download").progress == []
    assert [data.value for data in view.get("verify").progress] == [4]
    assert view.get("verify").active_progress == []


def test_unattached_progress():
    view, _ = make_view()
    view.emit_progress("global", ProgressData("global", "global", None, 1, 2, False))
    assert [data.key for data in view.progress] == ["global"]


def test_echo_lines():
    view, lines = make_view()
    view.emit_create("build", "Build")
    view.emit_start("build")
    view.emit_output("build", "compiling")
    view.emit_complete("build")
    assert lines == [
        "[app] create Build",
        "start Build",
        "Build: compiling",
        "Build complete in 1s",
    ]
