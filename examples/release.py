"""
A release pipeline: build, then test and lint together, then publish.

    python examples/release.py release web --dry-run
    python examples/release.py release web --ci --level info
    python examples/release.py config set channel beta
"""
import asyncio
import sys

from tasklane import ArgumentBuilder, CLIBuilder, CommandBuilder, OptionBuilder, named

cli = (
    CLIBuilder("release", version="1.0.0")
    .option(
        OptionBuilder("channel")
        .type("string")
        .choices("stable", "beta")
        .default("stable")
        .describe("Channel to publish to")
        .prompt()
    )
    .command(
        CommandBuilder("release")
        .describe("Build, check, and publish a target")
        .argument(ArgumentBuilder("target").required().describe("Target to release").prompt())
        .option(OptionBuilder("dryRun").alias("n").describe("Skip publishing"))
    )
    .command(CommandBuilder("clean").describe("Remove build output"))
    .build()
)


async def compile_sources(task, arguments, options):
    files = task.progress("files", total=40)
    for _ in range(40):
        await asyncio.sleep(0.02)
        files.update(1)
    return f"compiled {arguments['target']}"


async def run_tests(task, arguments, options):
    return await asyncio.create_subprocess_exec(
        sys.executable,
        "-c",
        "import time\nfor n in range(3):\n    print(f'test {n} passed')\n    time.sleep(0.2)",
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )


async def lint(task, arguments, options):
    for rule in ("imports", "naming", "style"):
        await asyncio.sleep(0.15)
        task.message(f"checked {rule}")


def publish(task, arguments, options):
    if options["dryRun"]:
        task.log.warning("Dry run, nothing published")
        task.skip()
        return None
    return {"name": f"Upload to {options['channel']}", "handler": upload}


async def upload(task, arguments, options):
    await asyncio.sleep(0.3)
    return "uploaded"


@cli.on("release")
def release(arguments, options, rest, cli):
    return [
        named(compile_sources, "Build"),
        [named(run_tests, "Test"), named(lint, "Lint")],
        named(publish, "Publish"),
    ]


@cli.on("clean")
def clean(arguments, options, rest, cli):
    return "nothing to clean"


if __name__ == "__main__":
    cli.main()
