from headnum.heading_tree import HeadingRecord, TreeNode, build, insert, walk
from headnum.headings import MarkdownDocument, MarkdownHeading, TextHeading
from headnum.numbering import (
    NumberingFormat,
    apply_numbering,
    clear_numbering,
    get_formatter,
    render_decimal,
)
from headnum.update import (
    number_texts,
    update_file,
    update_files,
    update_headings,
    update_markdown,
)

__all__ = [
    "HeadingRecord",
    "MarkdownDocument",
    "MarkdownHeading",
    "NumberingFormat",
    "TextHeading",
    "TreeNode",
    "apply_numbering",
    "build",
    "clear_numbering",
    "get_formatter",
    "insert",
    "number_texts",
    "render_decimal",
    "update_file",
    "update_files",
    "update_headings",
    "update_markdown",
    "walk",
]
