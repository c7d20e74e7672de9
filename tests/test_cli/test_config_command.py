import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from tasklane import CLI, CLIBuilder, OptionBuilder
from tasklane.prompt import Prompter
from tasklane.themes import get_theme


@pytest.fixture
def project(monkeypatch, tmp_path):
    """A project directory below a fake home directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    monkeypatch.chdir(project)
    yield project


class FakePrompter(Prompter):
    def __init__(self, answers):
        self.answers = answers
        self.asked = []

    async def prompt(self, descriptors):
        self.asked.extend(descriptor.name for descriptor in descriptors)
        return dict(self.answers)


def make_cli(prompter=None) -> CLI:
    builder = (
        CLIBuilder("app", version="1.0.0")
        .option(OptionBuilder("target").type("string").describe("Where to deploy"))
        .option(OptionBuilder("port").type("number").default(8080))
        .option(OptionBuilder("region").type("string").prompt("Region?"))
        .option(OptionBuilder("secret").type("string").config(False))
    )
    return CLI(
        builder.get_config(),
        builder.parse_spec,
        console=Console(file=io.StringIO(), width=120, theme=get_theme()),
        error_console=Console(file=io.StringIO(), width=120, theme=get_theme()),
        prompter=prompter,
    )


def stdout(cli: CLI) -> list[str]:
    return cli.console.file.getvalue().splitlines()


def stderr(cli: CLI) -> str:
    return cli.error_console.file.getvalue()


@pytest.mark.asyncio
async def test_set_writes_local_file(project):
    cli = make_cli()
    assert await cli.run(["config", "set", "target", "prod"]) is True
    assert json.loads((project / ".apprc.json").read_text()) == {"target": "prod"}


@pytest.mark.asyncio
async def test_set_merges_into_existing_file(project):
    (project / ".apprc.json").write_text('{"port": 9000}')
    cli = make_cli()
    assert await cli.run(["config", "set", "target", "prod"]) is True
    assert json.loads((project / ".apprc.json").read_text()) == {
        "port": 9000,
        "target": "prod",
    }


@pytest.mark.asyncio
async def test_get_reads_back_value(project):
    assert await make_cli().run(["config", "set", "port", "9000"]) is True
    cli = make_cli()
    assert await cli.run(["config", "get", "port"]) is True
    assert stdout(cli) == ["9000"]


@pytest.mark.asyncio
async def test_get_accepts_dashcase_and_aliases(project):
    cli = make_cli()
    assert await cli.run(["config", "get", "log-level"]) is True
    assert stdout(cli) == ["notice"]


@pytest.mark.asyncio
async def test_local_value_beats_global(project, tmp_path):
    assert await make_cli().run(["config", "set", "target", "global", "-g"]) is True
    assert await make_cli().run(["config", "set", "target", "local"]) is True
    assert json.loads((tmp_path / ".apprc.json").read_text()) == {"target": "global"}

    cli = make_cli()
    assert await cli.run(["config", "get", "target"]) is True
    assert stdout(cli) == ["local"]


@pytest.mark.asyncio
async def test_set_rejects_invalid_values(project):
    cli = make_cli()
    assert await cli.run(["config", "set", "port", "many"]) is False
    assert "Failed to parse many as number for option port" in stderr(cli)
    assert not (project / ".apprc.json").exists()


@pytest.mark.asyncio
async def test_set_rejects_values_outside_choices(project):
    cli = make_cli()
    assert await cli.run(["config", "set", "logLevel", "loud"]) is False
    assert "loud is not a valid input for option logLevel" in stderr(cli)


@pytest.mark.asyncio
async def test_set_rejects_options_hidden_from_config(project):
    cli = make_cli()
    assert await cli.run(["config", "set", "secret", "hunter2"]) is False
    assert "Cannot find option secret" in stderr(cli)


@pytest.mark.asyncio
async def test_get_unknown_option(project):
    cli = make_cli()
    assert await cli.run(["config", "get", "nope"]) is False
    assert "Cannot find option nope" in stderr(cli)


@pytest.mark.asyncio
async def test_list_prints_resolved_values(project):
    (project / ".apprc.json").write_text('{"target": "prod"}')
    cli = make_cli()
    assert await cli.run(["config", "ls"]) is True
    lines = stdout(cli)
    assert "target = prod" in lines
    assert "port = 8080" in lines
    assert "logLevel = notice" in lines


@pytest.mark.asyncio
async def test_setup_saves_flags_and_prompted_values(project):
    prompter = FakePrompter({"region": "eu"})
    cli = make_cli(prompter)
    assert await cli.run(["config", "setup", "--target", "prod"]) is True
    assert prompter.asked == ["region"]
    assert json.loads((project / ".apprc.json").read_text()) == {
        "target": "prod",
        "region": "eu",
    }


@pytest.mark.asyncio
async def test_explicit_json_config_is_the_target(project):
    custom = project / "settings.json"
    custom.write_text("{}")
    cli = make_cli()
    assert await cli.run(["config", "set", "target", "prod", "--config", str(custom)]) is True
    assert json.loads(custom.read_text()) == {"target": "prod"}
    assert not (project / ".apprc.json").exists()
