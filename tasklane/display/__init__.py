"""
Tasklane CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .display import DEFAULT_LOG_LEVELS, Display, DisplayOptions, TaskLogHandler
from .renderer import DEFAULT_PROGRESS_FORMAT, Renderer, render_bar
from .view import TaskNode, TaskView

__all__ = [
    "DEFAULT_LOG_LEVELS",
    "DEFAULT_PROGRESS_FORMAT",
    "Display",
    "DisplayOptions",
    "Renderer",
    "TaskLogHandler",
    "TaskNode",
    "TaskView",
    "render_bar",
]
