"""
Heading tree construction and traversal.

Converts a flat, document-ordered list of headings into a tree whose depth
matches the heading levels, then walks it to produce positional numbering paths.

Key concepts:
- The root has level 0 and no heading. Every node's children are exactly one
  level deeper than the node itself.
- When a heading skips levels (e.g. H1 followed by H3), placeholder nodes with no
  heading are synthesized to bridge the gap. Placeholders occupy a sibling slot.
- The first time a node gains a child, a placeholder is reserved at index 0, so
  real children are numbered from 1. A heading that arrives before any heading
  at a shallower level therefore gets a "0." segment in its path.
- Deeper headings always attach below the most recently added subtree.

Usage:
    from headnum.heading_tree import HeadingRecord, build, walk

    root = build([HeadingRecord(handle, level) for handle, level in headings])
    for path, heading in walk(root):
        print(".".join(str(i) for i in path), heading.handle)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

NumberPath = tuple[int, ...]


@dataclass(frozen=True)
class HeadingRecord:
    """
    One input heading: an opaque handle and its 1-based level.

    The tree never inspects `handle`; it is passed through to the walk.
    """

    handle: Any
    level: int


@dataclass
class TreeNode:
    """A tree node. `heading` is None for the root and for placeholders."""

    level: int
    heading: HeadingRecord | None = None
    children: list[TreeNode] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return self.heading is None

    def add_placeholder(self) -> TreeNode:
        """Append a heading-less child one level deeper and return it."""
        child = TreeNode(level=self.level + 1)
        self.children.append(child)
        return child


def insert(root: TreeNode, record: HeadingRecord) -> TreeNode:
    """
    Insert a heading into the tree, starting the descent at `root`.

    Returns the newly created node.
    """
    if record.level < 1:
        raise ValueError(f"Heading level must be at least 1: {record.level}")
    if record.level <= root.level:
        raise ValueError(
            f"Cannot insert a level {record.level} heading below a level {root.level} node"
        )

    node = root
    # Descend along the last open branch, bridging any missing levels.
    while node.level + 1 < record.level:
        if not node.children:
            node.add_placeholder()
        node = node.children[-1]

    # Reserve slot 0 on a node's first child.
    if not node.children:
        node.add_placeholder()

    child = TreeNode(level=record.level, heading=record)
    node.children.append(child)
    return child


def build(records: Iterable[HeadingRecord]) -> TreeNode:
    """Build a heading tree from records in document order. Returns the root."""
    root = TreeNode(level=0)
    for record in records:
        insert(root, record)
    return root


def walk(root: TreeNode) -> Iterator[tuple[NumberPath, HeadingRecord]]:
    """
    Yield `(path, heading)` for every heading-bearing node, depth-first pre-order.

    `path` is the tuple of child indices from the root to the node. Placeholders
    are never yielded but their descendants are, and the indices they occupy are
    kept as-is (no renumbering).
    """

    def visit(node: TreeNode, path: NumberPath) -> Iterator[tuple[NumberPath, HeadingRecord]]:
        for index, child in enumerate(node.children):
            child_path = path + (index,)
            if child.heading is not None:
                yield child_path, child.heading
            yield from visit(child, child_path)

    return visit(root, ())
