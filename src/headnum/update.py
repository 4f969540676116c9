"""
Heading numbering updates.

`update_headings()` is the core operation: fetch headings from a source, build the
heading tree, walk it, and write the formatted text back to each heading whose
text changes. The other functions apply it to strings, Markdown text, and files.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from strif import atomic_output_file

from headnum.heading_tree import HeadingRecord, build, walk
from headnum.headings import MarkdownDocument, TextHeading
from headnum.numbering import NumberingFormat, get_formatter
from headnum.protocols import HeadingSource, HeadingText

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_LEVEL = 6
DEFAULT_FORMAT = NumberingFormat.format_1


def update_headings(
    source: HeadingSource,
    max_level: int,
    fmt: NumberingFormat | str,
) -> None:
    """
    Number (or clear the numbering of) every heading the source returns.

    Headings are written in document order. An exception from the source or from a
    heading's `set_text()` aborts the update; headings already written stay
    written, and running the update again converges to the same result.
    """
    fmt = NumberingFormat.parse(fmt)
    formatter = get_formatter(fmt)
    if max_level < 1:
        raise ValueError(f"max_level must be at least 1: {max_level}")

    records = source(max_level)
    LOGGER.debug("Collected %d headings (max level %d)", len(records), max_level)

    root = build(records)
    changed = 0
    for path, record in walk(root):
        handle: HeadingText = record.handle
        old_text = handle.get_text()
        new_text = formatter(path, old_text)
        if new_text != old_text:
            LOGGER.debug("Heading %s: %r -> %r", ".".join(map(str, path)), old_text, new_text)
            handle.set_text(new_text)
            changed += 1

    LOGGER.debug("Updated %d of %d headings (format %s)", changed, len(records), fmt.value)


def number_texts(
    items: Iterable[tuple[str, int]],
    max_level: int = DEFAULT_MAX_LEVEL,
    fmt: NumberingFormat | str = DEFAULT_FORMAT,
) -> list[str]:
    """
    Number a list of `(text, level)` headings, returning the new texts in order.

    Headings deeper than `max_level` are returned unchanged.
    """
    pairs = [(TextHeading(text), level) for text, level in items]

    def source(limit: int) -> list[HeadingRecord]:
        return [HeadingRecord(handle, level) for handle, level in pairs if level <= limit]

    update_headings(source, max_level, fmt)
    return [handle.text for handle, _ in pairs]


def update_markdown(
    text: str,
    max_level: int = DEFAULT_MAX_LEVEL,
    fmt: NumberingFormat | str = DEFAULT_FORMAT,
) -> str:
    """
    Number the headings of a Markdown document and return the edited text.

    Only heading lines change; all other text is returned as is.
    """
    document = MarkdownDocument(text)
    update_headings(document.collect_headings, max_level, fmt)
    return document.text


def update_file(
    path: str | Path,
    output: str | Path = "-",
    inplace: bool = False,
    nobackup: bool = False,
    max_level: int = DEFAULT_MAX_LEVEL,
    fmt: NumberingFormat | str = DEFAULT_FORMAT,
) -> None:
    """
    Number the headings of a Markdown file.

    Use `-` for `path` to read stdin and for `output` to write stdout. With
    `inplace`, the file is rewritten atomically, keeping a `.orig` backup unless
    `nobackup` is set.
    """
    if inplace and str(path) == "-":
        raise ValueError("Cannot edit stdin in place")

    if str(path) == "-":
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")

    result = update_markdown(text, max_level=max_level, fmt=fmt)

    if inplace:
        backup_suffix = None if nobackup else ".orig"
        with atomic_output_file(path, make_parents=True, backup_suffix=backup_suffix) as tmp_path:
            Path(tmp_path).write_text(result, encoding="utf-8")
        LOGGER.info("Updated %s", path)
    elif str(output) == "-":
        sys.stdout.write(result)
    else:
        with atomic_output_file(output, make_parents=True) as tmp_path:
            Path(tmp_path).write_text(result, encoding="utf-8")
        LOGGER.info("Wrote %s", output)


def update_files(
    files: list[str],
    output: str | Path = "-",
    inplace: bool = False,
    nobackup: bool = False,
    max_level: int = DEFAULT_MAX_LEVEL,
    fmt: NumberingFormat | str = DEFAULT_FORMAT,
) -> None:
    """Number the headings of several files. Multiple files require `inplace`."""
    if len(files) > 1 and not inplace:
        raise ValueError("Multiple files require --inplace")
    # Validate before touching any file.
    fmt = NumberingFormat.parse(fmt)
    for path in files:
        update_file(
            path,
            output=output,
            inplace=inplace,
            nobackup=nobackup,
            max_level=max_level,
            fmt=fmt,
        )
