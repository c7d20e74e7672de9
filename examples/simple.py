import asyncio
import random

from tasklane import CLIBuilder, CommandBuilder, OptionBuilder, named


# A flaky async step that fails randomly
async def flaky_step(task, arguments, options) -> str:
    await asyncio.sleep(0.2)
    if random.random() < 0.3:
        raise RuntimeError("Random failure!")
    task.log.info("Flaky step succeeded!")
    return "ok"


cli = (
    CLIBuilder("simple", version="0.1.0")
    .option(OptionBuilder("steps").type("number").default(2).describe("Steps to run"))
    .command(CommandBuilder("run").describe("Run my pipeline"))
    .build()
)


@cli.on
def pipeline(arguments, options, rest, cli):
    return [named(flaky_step, f"step_{index + 1}") for index in range(options["steps"])]


# Entry point
if __name__ == "__main__":
    cli.main()
