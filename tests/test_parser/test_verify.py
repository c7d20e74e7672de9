import pytest

from tasklane.builder import ArgumentBuilder, CommandBuilder, OptionBuilder
from tasklane.config import merge_defaults
from tasklane.exceptions import CountError, DemandError
from tasklane.parser import Parser, ParserConfig, ParseSpec


def output_parser() -> Parser:
    return Parser(
        ParseSpec(
            options=(OptionBuilder("output").alias("o").type("string").required().build(),)
        )
    )


def files_parser() -> Parser:
    return Parser(
        ParseSpec(arguments=(ArgumentBuilder("files").array().min(1).max(3).build(),))
    )


@pytest.mark.asyncio
async def test_missing_required_option_is_demanded():
    parser = output_parser()
    result = await parser.parse([])
    with pytest.raises(DemandError) as error:
        await parser.verify(result)
    assert error.value.kind == "option"
    assert error.value.item == "output"
    assert str(error.value) == "Option required: output"


@pytest.mark.parametrize("argv", [["--output", "a.txt"], ["-o", "a.txt"], ["--output=a.txt"]])
@pytest.mark.asyncio
async def test_required_option_satisfied_by_any_spelling(argv):
    parser = output_parser()
    result = await parser.parse(argv)
    await parser.verify(result)
    assert result.options == {"output": "a.txt"}


@pytest.mark.asyncio
async def test_default_filled_option_passes_verification():
    parser = output_parser()
    result = await parser.parse([])
    result.options["output"] = "from-config.txt"
    await parser.verify(result)


@pytest.mark.asyncio
async def test_array_argument_with_no_values_is_a_count_error():
    parser = files_parser()
    result = await parser.parse([])
    with pytest.raises(CountError) as error:
        await parser.verify(result)
    assert error.value.actual == 0
    assert str(error.value) == (
        "Not enough values provided for argument files. Got 0, wanted between 1 and 3"
    )


@pytest.mark.parametrize("argv", [["a"], ["a", "b"], ["a", "b", "c"]])
@pytest.mark.asyncio
async def test_array_argument_within_arity(argv):
    parser = files_parser()
    result = await parser.parse(argv)
    await parser.verify(result)
    assert result.arguments == {"files": argv}


@pytest.mark.asyncio
async def test_array_argument_excess_identifies_count():
    parser = files_parser()
    with pytest.raises(CountError) as error:
        await parser.parse(["a", "b", "c", "d"])
    assert error.value.actual == 4
    assert error.value.expected == (1, 3)
    assert str(error.value) == (
        "Too many values provided for argument files. Got 4, wanted between 1 and 3"
    )


@pytest.mark.asyncio
async def test_array_option_arity():
    parser = Parser(
        ParseSpec(options=(OptionBuilder("tag").type("string").array().max(2).build(),))
    )
    result = await parser.parse(["--tag", "a", "b", "c"])
    with pytest.raises(CountError, match="Too many values provided for option tag"):
        await parser.verify(result)


@pytest.mark.asyncio
async def test_required_argument():
    parser = Parser(ParseSpec(arguments=(ArgumentBuilder("name").required().build(),)))
    result = await parser.parse([])
    with pytest.raises(DemandError, match="Argument required: name"):
        await parser.verify(result)


@pytest.mark.asyncio
async def test_require_command():
    parser = Parser(
        ParseSpec(
            commands=(CommandBuilder("build").build(),),
            config=ParserConfig(require_command=True),
        )
    )
    with pytest.raises(DemandError) as error:
        await parser.parse([])
    assert error.value.kind == "command"


@pytest.mark.asyncio
async def test_require_subcommand():
    parser = Parser(
        ParseSpec(
            commands=(
                CommandBuilder("config")
                .command(CommandBuilder("get"))
                .require_subcommand()
                .build(),
            )
        )
    )
    result = await parser.parse(["config"])
    with pytest.raises(DemandError, match="Command required"):
        await parser.verify(result)

    result = await parser.parse(["config", "get"])
    await parser.verify(result)


@pytest.mark.asyncio
async def test_verify_checks_the_selected_command():
    parser = Parser(
        ParseSpec(
            commands=(
                CommandBuilder("deploy")
                .argument(ArgumentBuilder("target").required())
                .build(),
            )
        )
    )
    result = await parser.parse(["deploy"])
    with pytest.raises(DemandError) as error:
        await parser.verify(result)
    assert error.value.state.command_path == ["deploy"]
    assert error.value.item == "target"


@pytest.mark.asyncio
async def test_missing_required_array_option_is_demanded_after_defaults():
    tag = OptionBuilder("tag").type("string").array().required().build()
    parser = Parser(ParseSpec(options=(tag,)))
    result = await parser.parse([])
    result.options = merge_defaults([tag], result.options)
    assert result.options["tag"] is None
    with pytest.raises(DemandError, match="Option required: tag"):
        await parser.verify(result)
