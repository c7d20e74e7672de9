# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instances for Tasklane CLI applications.

`console` writes program output to stdout. `error_console` carries
diagnostics and the live task display on stderr.
"""
from rich.console import Console

from tasklane.themes import get_theme

console = Console(theme=get_theme())
error_console = Console(stderr=True, theme=get_theme())
