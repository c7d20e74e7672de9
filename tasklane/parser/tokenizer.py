# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Splits a raw argument vector into a flat list of tokens.

The tokenizer knows nothing about commands or options. Runs of unquoted
whitespace separate tokens, a `'` or `"` opens a span that runs to the
matching quote (or to the end of input), and the quote characters are
dropped. Three or more consecutive unquoted dashes inside one token collapse
to two, so `---force` reads as `--force`.
"""
from __future__ import annotations

from typing import Sequence

QUOTES = ("'", '"')


def normalize_argv(argv: Sequence[str] | str) -> str:
    """Join an argument list into a single command line.

    Elements that contain whitespace, or are empty, are quoted so their
    boundaries survive tokenization.
    """
    if isinstance(argv, str):
        return argv
    parts = []
    for arg in argv:
        if arg == "" or any(char.isspace() for char in arg):
            quote = "'" if '"' in arg else '"'
            parts.append(f"{quote}{arg}{quote}")
        else:
            parts.append(arg)
    return " ".join(parts)


def tokenize_argv(text: str) -> list[str]:
    """Split a command line into tokens, honoring quotes."""
    tokens: list[str] = []
    current: str | None = None
    opening = ""
    for char in text:
        if opening:
            if char == opening:
                opening = ""
            else:
                current = (current or "") + char
            continue
        if char.isspace():
            if current is not None:
                tokens.append(current)
                current = None
            continue
        if char in QUOTES:
            opening = char
            current = current or ""
            continue
        if char == "-" and current is not None and current.endswith("--"):
            continue
        current = (current or "") + char
    if current is not None:
        tokens.append(current)
    return tokens


def tokenize(argv: Sequence[str] | str) -> list[str]:
    return tokenize_argv(normalize_argv(argv).strip())


def token_offset(tokens: Sequence[str], index: int) -> int:
    """Byte offset of `tokens[index]` in the space-joined command line."""
    if index <= 0:
        return 0
    return len(" ".join(tokens[:index])) + 1
