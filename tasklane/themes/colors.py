# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
One Dark palette used across Tasklane output.

Every uppercase attribute declared on a class using `ColorsMeta` gets a
bold companion with a `_b` suffix, so `OneColors.GREEN_b` is
`"bold #98C379"`.
"""
from rich.theme import Theme


class ColorsMeta(type):
    """Adds a bold `_b` variant for every uppercase color attribute."""

    def __new__(mcs, name, bases, namespace):
        bold = {
            f"{key}_b": f"bold {value}"
            for key, value in namespace.items()
            if key.isupper() and isinstance(value, str)
        }
        namespace.update(bold)
        return super().__new__(mcs, name, bases, namespace)


class OneColors(metaclass=ColorsMeta):
    BLACK = "#282C34"
    GUTTER_GREY = "#4B5263"
    COMMENT_GREY = "#5C6370"
    WHITE = "#ABB2BF"
    DARK_RED = "#BE5046"
    LIGHT_RED = "#E06C75"
    DARK_YELLOW = "#D19A66"
    LIGHT_YELLOW = "#E5C07B"
    GREEN = "#98C379"
    CYAN = "#56B6C2"
    BLUE = "#61AFEF"
    MAGENTA = "#C678DD"


def get_theme() -> Theme:
    """Rich theme with the named styles used by the task display and help text."""
    return Theme(
        {
            "task.pending": OneColors.LIGHT_YELLOW,
            "task.running": OneColors.BLUE,
            "task.complete": OneColors.GREEN,
            "task.errored": OneColors.LIGHT_RED,
            "task.skipped": OneColors.LIGHT_YELLOW,
            "task.name": "bold",
            "task.time": OneColors.COMMENT_GREY,
            "task.arrow": OneColors.COMMENT_GREY,
            "usage.header": OneColors.CYAN_b,
            "usage.section": OneColors.LIGHT_YELLOW_b,
            "usage.name": OneColors.GREEN,
            "usage.meta": OneColors.COMMENT_GREY,
            "log.error": OneColors.LIGHT_RED_b,
            "log.warn": OneColors.DARK_YELLOW_b,
            "log.notice": OneColors.CYAN_b,
            "log.info": OneColors.GREEN,
            "log.verbose": OneColors.BLUE,
            "log.silly": OneColors.MAGENTA,
        }
    )
