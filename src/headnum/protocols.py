"""Interfaces for the document collaborators that supply and edit headings."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from headnum.heading_tree import HeadingRecord


class HeadingText(Protocol):
    """Read and replace the text of one heading."""

    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...


class HeadingSource(Protocol):
    """
    Return headings with level <= `max_level`, in document order.

    Each record's handle must implement `HeadingText`.
    """

    def __call__(self, max_level: int) -> Sequence[HeadingRecord]: ...
