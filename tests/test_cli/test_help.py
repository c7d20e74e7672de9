import io
from pathlib import Path

import pytest
from rich.console import Console

from tasklane import CLI, ArgumentBuilder, CLIBuilder, CommandBuilder, OptionBuilder
from tasklane.themes import get_theme


@pytest.fixture(autouse=True)
def fake_home(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


def make_cli(builder: CLIBuilder) -> CLI:
    return CLI(
        builder.get_config(),
        builder.parse_spec,
        console=Console(file=io.StringIO(), width=120, theme=get_theme()),
        error_console=Console(file=io.StringIO(), width=120, theme=get_theme()),
    )


def stderr(cli: CLI) -> list[str]:
    return cli.error_console.file.getvalue().splitlines()


def app() -> CLIBuilder:
    return (
        CLIBuilder("app", version="1.2.3")
        .option(OptionBuilder("dryRun").alias("n").describe("Print only"))
        .command(
            CommandBuilder("build")
            .describe("Build the project")
            .argument(ArgumentBuilder("target").describe("What to build"))
        )
        .command(CommandBuilder("bundle").describe("Bundle assets"))
        .command(CommandBuilder("deploy").describe("Deploy a release"))
        .command(CommandBuilder("deploys").describe("List deployments"))
    )


@pytest.mark.asyncio
async def test_program_help():
    cli = make_cli(app())
    assert await cli.run(["--help"]) is True
    text = "\n".join(stderr(cli))
    assert text.startswith("app v1.2.3")
    assert "  app [command]" in text
    assert "Commands:" in text
    assert "Options:" in text
    assert "-n, --dry-run, --no-dry-run" in text
    assert "--level, --log-level" in text
    assert "--ci" not in text


@pytest.mark.asyncio
async def test_help_skips_handlers():
    cli = make_cli(app())
    calls = []
    cli.on(lambda *_: calls.append(True))
    assert await cli.run(["-h"]) is True
    assert calls == []


@pytest.mark.asyncio
async def test_help_command_for_a_command():
    cli = make_cli(app())
    assert await cli.run(["help", "build"]) is True
    lines = stderr(cli)
    assert lines[0] == "app build [target]"
    assert "Build the project" in lines
    assert any(line.startswith("  target") for line in lines)


@pytest.mark.asyncio
async def test_help_option_after_nested_command():
    cli = make_cli(app())
    assert await cli.run(["config", "set", "--help"]) is True
    lines = stderr(cli)
    assert lines[0] == "app config set <name> <value>"
    assert any("-g, --global, --no-global" in line for line in lines)


@pytest.mark.asyncio
async def test_help_skips_required_checks():
    cli = make_cli(app().option(OptionBuilder("token").type("string").required()))
    assert await cli.run(["--help"]) is True


@pytest.mark.asyncio
async def test_single_suggestion():
    cli = make_cli(app())
    assert await cli.run(["buidl"]) is False
    assert stderr(cli) == [
        "app: No such command: buidl",
        "Did you mean build?",
        "    app build [target]",
    ]


@pytest.mark.asyncio
async def test_several_suggestions():
    cli = make_cli(app())
    assert await cli.run(["deploi"]) is False
    assert stderr(cli) == [
        "app: No such command: deploi",
        "Did you mean one of these?",
        "   app deploy: Deploy a release",
        "   app deploys: List deployments",
    ]


@pytest.mark.asyncio
async def test_no_suggestion_lists_commands():
    cli = make_cli(app())
    assert await cli.run(["zzzzzz"]) is False
    text = "\n".join(stderr(cli))
    assert "Commands:" in text
    assert "app v1.2.3" not in text
    assert "Options:" not in text


@pytest.mark.asyncio
async def test_missing_required_option():
    cli = make_cli(app().option(OptionBuilder("token").type("string").required()))
    cli.on(lambda *_: None)
    assert await cli.run([]) is False
    assert stderr(cli) == [
        "app: Option required: token",
        "Usage:",
        "    app <--token=value>",
    ]


@pytest.mark.asyncio
async def test_missing_subcommand_lists_possible_commands():
    cli = make_cli(app())
    assert await cli.run(["config"]) is False
    assert stderr(cli) == [
        "app: Command required",
        "    Possible commands:",
        "        get, set, list, setup",
    ]


@pytest.mark.asyncio
async def test_invalid_type_is_printed_bare():
    cli = make_cli(app().option(OptionBuilder("port").type("number")))
    assert await cli.run(["--port", "many"]) is False
    assert stderr(cli) == ["Failed to parse many as number for option port"]


@pytest.mark.asyncio
async def test_invalid_choice_lists_valid_inputs():
    cli = make_cli(app())
    assert await cli.run(["--log-level", "loud"]) is False
    assert stderr(cli)[0].startswith("loud is not a valid input for option logLevel.")


@pytest.mark.asyncio
async def test_structural_error_points_at_token():
    cli = make_cli(app())
    assert await cli.run(["--dry-run", "--=x"]) is False
    lines = stderr(cli)
    assert lines[0] == "app: Invalid input:"
    assert lines[1] == "  --dry-run --=x"
    assert lines[2].strip() == "^"
