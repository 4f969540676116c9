"""
Numbering formats for heading text.

A numbering format is a pure function from a numbering path and the heading's
current text to its new text. Formats are a closed enumeration, validated once
at the boundary with `NumberingFormat.parse()`:

- `none`: clear any leading numbering prefix.
- `format_1`: decimal dotted numbering, e.g. path (1, 0, 2) -> "1.0.2 Title".

Existing prefixes are recognized by `NUMBER_PREFIX`: digit groups separated by
dots, followed by a trailing dot (with optional spaces) or by spaces:
- "1 Intro", "1. Intro", "1.2 Details", "1.2. Details", "1.Intro"
- Not "1.5x faster" or "Intro"

Applying a format to text that already carries a prefix replaces the prefix, so
applying twice is the same as applying once, and clearing restores the original.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from enum import Enum

Formatter = Callable[[Sequence[int], str], str]


class NumberingFormat(str, Enum):
    """Supported numbering formats."""

    none = "none"  # Remove numbering
    format_1 = "format_1"  # 1, 1.1, 1.1.1

    @classmethod
    def parse(cls, value: NumberingFormat | str) -> NumberingFormat:
        """Validate a format name, raising `ValueError` for unknown formats."""
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(
                f"Unknown numbering format {value!r} (expected one of: {choices})"
            ) from None


# A dot followed by a digit continues the number, so it can't be the trailing dot.
NUMBER_PREFIX = re.compile(r"^\d+(?:\.\d+)*(?:\.(?!\d)[ \t]*|[ \t]+)")


def clear_numbering(text: str) -> str:
    """Remove a leading numbering prefix, if any."""
    return NUMBER_PREFIX.sub("", text, count=1)


def render_decimal(path: Sequence[int]) -> str:
    """
    Render a path as a decimal dotted prefix with a trailing space.

    Indices are used exactly as given, including 0 for placeholder positions:
    (1,) -> "1 ", (1, 0, 1) -> "1.0.1 ".
    """
    if not path:
        raise ValueError("Cannot render an empty numbering path")
    return ".".join(str(index) for index in path) + " "


def apply_numbering(text: str, numbering: str) -> str:
    """Replace the existing numbering prefix of `text`, or prepend one."""
    match = NUMBER_PREFIX.match(text)
    if match:
        return numbering + text[match.end() :]
    return numbering + text


def _clear(path: Sequence[int], text: str) -> str:
    return clear_numbering(text)


def _decimal(path: Sequence[int], text: str) -> str:
    return apply_numbering(text, render_decimal(path))


_FORMATTERS: dict[NumberingFormat, Formatter] = {
    NumberingFormat.none: _clear,
    NumberingFormat.format_1: _decimal,
}


def get_formatter(fmt: NumberingFormat | str) -> Formatter:
    """Return the formatter for a format, validating its name."""
    return _FORMATTERS[NumberingFormat.parse(fmt)]
