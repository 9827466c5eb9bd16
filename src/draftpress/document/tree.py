"""Typed document tree produced by parsing.

The set of node kinds is closed and enumerated once in :class:`NodeKind`.
The parser only emits these kinds, and the linter and block mapper key
their dispatch tables on them.

Nodes are frozen: a tree is never modified after parsing.  :func:`walk`
visits it depth-first and reports an enter and an exit event per node.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from draftpress.errors import DraftpressTraversalError


class NodeKind(str, Enum):
    """Every kind of node a :class:`Node` can be."""

    # Block kinds
    DOCUMENT = "document"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "code_block"
    THEMATIC_BREAK = "thematic_break"
    HTML_BLOCK = "html_block"

    # Inline kinds
    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    CODESPAN = "codespan"
    LINK = "link"
    IMAGE = "image"
    SOFTBREAK = "softbreak"
    LINEBREAK = "linebreak"
    HTML_INLINE = "html_inline"


INLINE_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.TEXT,
    NodeKind.EMPHASIS,
    NodeKind.STRONG,
    NodeKind.STRIKETHROUGH,
    NodeKind.CODESPAN,
    NodeKind.LINK,
    NodeKind.IMAGE,
    NodeKind.SOFTBREAK,
    NodeKind.LINEBREAK,
    NodeKind.HTML_INLINE,
})


@dataclass(frozen=True)
class Node:
    """One node of a parsed document.

    Attributes
    ----------
    kind:
        The node kind.
    children:
        Child nodes in document order.
    literal:
        Verbatim content of leaf kinds (text, code span, code block, HTML).
    offset:
        Character offset of the node's first located character in the
        normalized source.
    level:
        Heading level (1-6).  ``0`` for other kinds.
    ordered:
        ``True`` for ordered lists.
    tight:
        ``False`` for loose lists (items separated by blank lines).
    language:
        Info string of a fenced code block.
    url:
        Destination of a link or image.
    """

    kind: NodeKind
    children: tuple[Node, ...] = ()
    literal: str = ""
    offset: int = 0
    level: int = 0
    ordered: bool = False
    tight: bool = True
    language: str = ""
    url: str = ""

    @property
    def is_inline(self) -> bool:
        return self.kind in INLINE_KINDS


@dataclass(frozen=True)
class ParsedDocument:
    """A parsed document together with the normalized source it came from."""

    tree: Node
    source: str


class WalkEvent(NamedTuple):
    """One step of a depth-first walk."""

    node: Node
    entering: bool
    parent: Node | None


def walk(root: Node) -> Iterator[WalkEvent]:
    """Walk *root* depth-first, yielding an enter and an exit event per node.

    Every node is entered exactly once.  Children are visited in order
    between their parent's enter and exit events.

    Raises
    ------
    DraftpressTraversalError
        If a child is not a :class:`Node`, or the same node object is
        reachable twice (a shared subtree or a cycle).
    """
    seen: set[int] = set()
    pending: list[tuple[object, Node | None, bool]] = [(root, None, True)]

    while pending:
        node, parent, entering = pending.pop()

        if not entering:
            yield WalkEvent(node, False, parent)  # type: ignore[arg-type]
            continue

        if not isinstance(node, Node):
            raise DraftpressTraversalError(
                f"expected a document node but found {type(node).__name__}",
                context={"parent_kind": parent.kind.value if parent else None},
            )
        if id(node) in seen:
            raise DraftpressTraversalError(
                f"{node.kind.value} node reached twice; the tree is not a tree",
                context={"node_kind": node.kind.value, "offset": node.offset},
            )
        seen.add(id(node))

        yield WalkEvent(node, True, parent)

        pending.append((node, parent, False))
        for child in reversed(node.children):
            pending.append((child, node, True))
