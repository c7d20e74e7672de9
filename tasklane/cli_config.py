# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Program-level settings shared by the parser, usage text, and display."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tasklane.display.display import DEFAULT_LOG_LEVELS
from tasklane.display.renderer import DEFAULT_PROGRESS_FORMAT
from tasklane.log_level import LogLevel
from tasklane.parser.schema import ParserConfig


class CLIConfig(BaseModel):
    """
    Settings for one program.

    Attributes:
        name (str): Program name, used in usage text, diagnostics, and config
            file names.
        version (str): Printed by `--version`.
        require_command (bool): Fail unless at least one command is given.
        use_double_dash (bool): Treat `--` as the end of options.
        no_prefix (str): Prefix that negates a boolean option.
        log_format (str): Format of log lines. Placeholders: `{message}`,
            `{level}`, `{name}`, `{task}`.
        progress_format (str): Format of progress bars.
        log_levels (dict[LogLevel, str]): Rich markup glyph per level.
        refresh_interval (float): Seconds between redraws of the task display.
    """

    name: str = ""
    version: str = ""
    require_command: bool = False
    use_double_dash: bool = True
    no_prefix: str = "no-"
    log_format: str = "{message}"
    progress_format: str = DEFAULT_PROGRESS_FORMAT
    log_levels: dict[LogLevel, str] = Field(
        default_factory=lambda: dict(DEFAULT_LOG_LEVELS)
    )
    refresh_interval: float = 0.1

    model_config = ConfigDict(validate_assignment=True)

    @property
    def parser_config(self) -> ParserConfig:
        return ParserConfig(
            require_command=self.require_command,
            use_double_dash=self.use_double_dash,
            no_prefix=self.no_prefix,
        )
