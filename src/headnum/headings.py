"""
Heading sources and text handles.

`MarkdownDocument` is the heading source for Markdown text. Marko decides which
blocks are headings; each one is then located on its source line, and its handle
rewrites that line only, so everything outside the heading text is kept byte for
byte (emphasis style, thematic breaks, setext underlines, code blocks).

Locating works in two steps:
- Scan the lines (outside fenced code) for ATX heading lines and setext
  underlines, and parse each candidate on its own with Marko to get its level and
  plain text.
- Pair the document's headings with candidates in order, by level and plain text.
  Headings that can't be paired (e.g. inside list items) are left unnumbered with
  a warning.

`TextHeading` is the equivalent handle for plain strings.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

from marko import Markdown, block, inline
from marko.element import Element

from headnum.heading_tree import HeadingRecord

LOGGER = logging.getLogger(__name__)

_HEADING_TYPES = (block.Heading, block.SetextHeading)

# Block quote markers before a line's content, e.g. "> > "
_CONTAINER = r"(?P<container>(?:[ ]{0,3}>[ ]?)*)"
_CONTAINER_RE = re.compile(_CONTAINER)
_ATX_LINE = re.compile(_CONTAINER + r"(?P<open>[ ]{0,3}#{1,6})(?P<rest>(?:[ \t].*)?)$")
_ATX_CLOSING = re.compile(r"(?:^|[ \t]+)#+[ \t]*$|[ \t]+$")
_SETEXT_UNDERLINE = re.compile(_CONTAINER + r"[ ]{0,3}(?:=+|-+)[ \t]*$")
_FENCE = re.compile(_CONTAINER + r"[ ]{0,3}(?P<fence>`{3,}|~{3,})")
_INDENT = re.compile(r"[ ]{0,3}")


@dataclass
class TextHeading:
    """An in-memory heading holding plain text."""

    text: str

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = text


@dataclass
class MarkdownHeading:
    """
    Text handle for one heading line of a Markdown document.

    The line is `lead + text + trail`: for `> ## Setup ##` the lead is `> ## `,
    the text is `Setup` and the trail is ` ##` plus the line ending. For a setext
    heading this is the first line of the title.
    """

    lines: list[str]
    index: int
    lead: str
    text: str
    trail: str

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = text
        self.lines[self.index] = self.lead + text + self.trail


def _split_eol(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body) :]


def _strip_container(body: str) -> str:
    match = _CONTAINER_RE.match(body)
    assert match is not None
    return body[match.end() :]


def plain_text(element: Element) -> str:
    """The text of an element with inline markup removed."""
    if isinstance(element, inline.RawText):
        return element.children
    children = getattr(element, "children", None)
    if isinstance(children, str):
        return children
    if isinstance(children, list):
        return "".join(plain_text(child) for child in children)
    return ""


def iter_heading_elements(element: Element) -> Iterator[Element]:
    """Yield the heading elements of a Marko tree in document order."""
    if isinstance(element, _HEADING_TYPES):
        yield element
        return
    children = getattr(element, "children", None)
    if isinstance(children, list):
        for child in children:
            yield from iter_heading_elements(child)


class MarkdownDocument:
    """
    Markdown text whose headings can be numbered in place.

    `collect_headings` is a heading source; after updating, `text` holds the
    edited document.
    """

    def __init__(self, text: str) -> None:
        self._markdown = Markdown()
        self.lines = text.splitlines(keepends=True)
        # Heading lines are parsed without their line endings; parse the document the same way.
        self._doc = self._markdown.parse("".join(_split_eol(line)[0] + "\n" for line in self.lines))

    @property
    def text(self) -> str:
        return "".join(self.lines)

    def collect_headings(self, max_level: int) -> list[HeadingRecord]:
        """Return headings with level <= `max_level`, in document order."""
        candidates = self._find_candidates()
        records: list[HeadingRecord] = []
        pos = 0
        for element in iter_heading_elements(self._doc):
            key = (element.level, plain_text(element))
            for i in range(pos, len(candidates)):
                if candidates[i][0] == key:
                    handle = candidates[i][1]
                    pos = i + 1
                    break
            else:
                LOGGER.warning(
                    "Could not locate heading %r in the source; leaving it as is", key[1]
                )
                continue
            if element.level <= max_level:
                records.append(HeadingRecord(handle, element.level))
        return records

    def _parse_heading(self, snippet: str) -> tuple[int, str] | None:
        """Parse a snippet on its own, returning (level, text) if it is a heading."""
        children = self._markdown.parse(snippet).children
        first = next((c for c in children if not isinstance(c, block.BlankLine)), None)
        if isinstance(first, _HEADING_TYPES):
            return first.level, plain_text(first)
        return None

    def _find_candidates(self) -> list[tuple[tuple[int, str], MarkdownHeading]]:
        candidates: list[tuple[tuple[int, str], MarkdownHeading]] = []
        fence: str | None = None
        for index, line in enumerate(self.lines):
            body, _ = _split_eol(line)
            fence_match = _FENCE.match(body)
            if fence is not None:
                if fence_match:
                    marker = fence_match.group("fence")
                    if marker[0] == fence[0] and len(marker) >= len(fence):
                        fence = None
                continue
            if fence_match:
                fence = fence_match.group("fence")
                continue

            if _ATX_LINE.match(body):
                candidate = self._atx_candidate(index)
            elif _SETEXT_UNDERLINE.match(body):
                candidate = self._setext_candidate(index)
            else:
                candidate = None
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def _atx_candidate(self, index: int) -> tuple[tuple[int, str], MarkdownHeading] | None:
        body, eol = _split_eol(self.lines[index])
        match = _ATX_LINE.match(body)
        assert match is not None
        key = self._parse_heading(_strip_container(body))
        if key is None:
            return None

        rest = match.group("rest")
        content = rest.lstrip(" \t")
        sep = rest[: len(rest) - len(content)] or " "
        closing = _ATX_CLOSING.search(content)
        text = content[: closing.start()] if closing else content
        heading = MarkdownHeading(
            lines=self.lines,
            index=index,
            lead=match.group("container") + match.group("open") + sep,
            text=text,
            trail=content[len(text) :] + eol,
        )
        return key, heading

    def _setext_candidate(self, index: int) -> tuple[tuple[int, str], MarkdownHeading] | None:
        # The title is the run of non-blank paragraph lines above the underline.
        start = index
        while start > 0:
            above, _ = _split_eol(self.lines[start - 1])
            content = _strip_container(above)
            if (
                not content.strip()
                or _ATX_LINE.match(above)
                or _FENCE.match(above)
                or _SETEXT_UNDERLINE.match(above)
            ):
                break
            start -= 1
        if start == index:
            return None

        title_lines = self.lines[start : index + 1]
        snippet = "".join(_strip_container(_split_eol(line)[0]) + "\n" for line in title_lines)
        key = self._parse_heading(snippet)
        if key is None:
            return None

        body, eol = _split_eol(self.lines[start])
        container = _CONTAINER_RE.match(body)
        assert container is not None
        indent = _INDENT.match(body, container.end())
        assert indent is not None
        content = body[indent.end() :]
        text = content.rstrip(" \t")
        heading = MarkdownHeading(
            lines=self.lines,
            index=start,
            lead=body[: indent.end()],
            text=text,
            trail=content[len(text) :] + eol,
        )
        return key, heading
