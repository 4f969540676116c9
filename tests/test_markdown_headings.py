"""Tests for Markdown heading sources and end-to-end numbering of documents."""

from __future__ import annotations

import logging
from pathlib import Path
from textwrap import dedent

import pytest

from headnum.headings import MarkdownDocument, MarkdownHeading
from headnum.update import update_file, update_markdown

SAMPLE = dedent(
    """
    # Introduction

    Some _emphasis_ and __strong__ text about 1.5x speedups.

    ---

    ## Background ##

    Title
    =====

    #### Deep detail

    ```
    # not a heading
    ```

    > ## Quoted heading

    * * *
    """
).lstrip()

NUMBERED = dedent(
    """
    # 1 Introduction

    Some _emphasis_ and __strong__ text about 1.5x speedups.

    ---

    ## 1.1 Background ##

    2 Title
    =====

    #### 2.0.0.1 Deep detail

    ```
    # not a heading
    ```

    > ## 2.1 Quoted heading

    * * *
    """
).lstrip()


def _heading_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith("#")]


class TestCollectHeadings:
    """Tests for MarkdownDocument.collect_headings()."""

    def test_document_order_and_levels(self) -> None:
        records = MarkdownDocument(SAMPLE).collect_headings(6)
        assert [(r.level, r.handle.get_text()) for r in records] == [
            (1, "Introduction"),
            (2, "Background"),
            (1, "Title"),
            (4, "Deep detail"),
            (2, "Quoted heading"),
        ]

    def test_max_level_filters(self) -> None:
        records = MarkdownDocument(SAMPLE).collect_headings(1)
        assert [r.handle.get_text() for r in records] == ["Introduction", "Title"]

    def test_code_blocks_ignored(self) -> None:
        assert MarkdownDocument("```\n# not a heading\n```\n").collect_headings(6) == []
        assert MarkdownDocument("~~~~\n# x\n~~~\n# y\n~~~~\n").collect_headings(6) == []

    def test_thematic_break_is_not_a_heading(self) -> None:
        assert MarkdownDocument("Text\n\n---\n").collect_headings(6) == []

    def test_hashtag_is_not_a_heading(self) -> None:
        assert MarkdownDocument("#hashtag\n").collect_headings(6) == []

    def test_heading_in_list_left_alone(self, caplog: pytest.LogCaptureFixture) -> None:
        """Headings that can't be located on a line are skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            records = MarkdownDocument("- # Listed\n\n# Top\n").collect_headings(6)
        assert [r.handle.get_text() for r in records] == ["Top"]
        assert "Listed" in caplog.text


class TestMarkdownHeading:
    """Tests for the MarkdownHeading text handle."""

    def test_set_text_edits_only_its_line(self) -> None:
        document = MarkdownDocument("# Intro\n\nBody _text_.\n")
        (record,) = document.collect_headings(6)
        record.handle.set_text("1 Intro")
        assert document.text == "# 1 Intro\n\nBody _text_.\n"

    def test_closing_sequence_kept(self) -> None:
        document = MarkdownDocument("## Setup ##   \n")
        (record,) = document.collect_headings(6)
        assert isinstance(record.handle, MarkdownHeading)
        assert record.handle.get_text() == "Setup"
        record.handle.set_text("1.1 Setup")
        assert document.text == "## 1.1 Setup ##   \n"

    def test_inline_markup_kept(self) -> None:
        document = MarkdownDocument("## *Styled* heading\n")
        (record,) = document.collect_headings(6)
        assert record.handle.get_text() == "*Styled* heading"
        record.handle.set_text("0.1 *Styled* heading")
        assert document.text == "## 0.1 *Styled* heading\n"

    def test_setext_title_first_line(self) -> None:
        document = MarkdownDocument("  Long\n  title\n---\n")
        (record,) = document.collect_headings(6)
        assert record.level == 2
        record.handle.set_text("0.1 Long")
        assert document.text == "  0.1 Long\n  title\n---\n"

    def test_crlf_line_endings(self) -> None:
        document = MarkdownDocument("# Intro\r\n\r\nText\r\n")
        (record,) = document.collect_headings(6)
        record.handle.set_text("1 Intro")
        assert document.text == "# 1 Intro\r\n\r\nText\r\n"


class TestUpdateMarkdown:
    """End-to-end tests for update_markdown()."""

    def test_numbers_headings(self) -> None:
        assert update_markdown(SAMPLE) == NUMBERED

    def test_non_heading_lines_unchanged(self) -> None:
        """Emphasis style, thematic breaks, underlines and code are kept byte for byte."""
        result = update_markdown(SAMPLE)
        heading_indexes = {0, 6, 8, 11, 17}
        before = SAMPLE.splitlines(keepends=True)
        after = result.splitlines(keepends=True)
        assert len(after) == len(before)
        for i, (old, new) in enumerate(zip(before, after)):
            if i not in heading_indexes:
                assert new == old

    def test_idempotent(self) -> None:
        assert update_markdown(NUMBERED) == NUMBERED

    def test_clear_restores_original(self) -> None:
        assert update_markdown(NUMBERED, fmt="none") == SAMPLE

    def test_max_level(self) -> None:
        result = update_markdown(SAMPLE, max_level=2)
        assert "#### Deep detail\n" in result
        assert "## 1.1 Background ##\n" in result

    def test_replaces_existing_numbers(self) -> None:
        result = update_markdown("# 3. Intro\n\n# 7 Usage\n")
        assert result == "# 1 Intro\n\n# 2 Usage\n"

    def test_no_trailing_newline(self) -> None:
        assert update_markdown("Text\n\n# Intro") == "Text\n\n# 1 Intro"


class TestUpdateFile:
    """Tests for update_file()."""

    def test_inplace(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.md"
        doc.write_text("# Intro\n\n## Setup\n")
        update_file(doc, inplace=True, nobackup=True)
        assert doc.read_text() == "# 1 Intro\n\n## 1.1 Setup\n"

    def test_output_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "doc.md"
        doc.write_text("# Intro\n")
        out = tmp_path / "out" / "numbered.md"
        update_file(doc, output=out)
        assert out.read_text() == "# 1 Intro\n"
        assert doc.read_text() == "# Intro\n"

    def test_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        doc = tmp_path / "doc.md"
        doc.write_text("# Intro\n")
        update_file(doc)
        assert _heading_lines(capsys.readouterr().out) == ["# 1 Intro"]

    def test_inplace_stdin_rejected(self) -> None:
        with pytest.raises(ValueError):
            update_file("-", inplace=True)
