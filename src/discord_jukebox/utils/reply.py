"""Utility functions for formatting and parsing chat messages."""

from __future__ import annotations

from functools import cache


def parse_index(value: str | None) -> int | None:
    """Parse a one-based queue index.

    Accepts an optional leading ``+`` and surrounding whitespace. Returns None
    for anything that is not a positive integer.
    """
    if value is None:
        return None

    value = value.strip()
    if value.startswith("+"):
        value = value[1:]
    if not (value.isascii() and value.isdecimal()):
        return None

    index = int(value)
    return index if index > 0 else None


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
