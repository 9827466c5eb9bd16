"""Tests for draftpress/document/tree.py"""

from __future__ import annotations

import dataclasses

import pytest

from draftpress.document.tree import Node, NodeKind, walk
from draftpress.errors import DraftpressTraversalError, ErrorCode


def text(value: str) -> Node:
    return Node(NodeKind.TEXT, literal=value)


class TestWalk:
    def test_enter_exit_order(self):
        a, b = text("a"), text("b")
        para = Node(NodeKind.PARAGRAPH, children=(a, b))
        root = Node(NodeKind.DOCUMENT, children=(para,))

        events = [(e.node, e.entering) for e in walk(root)]

        assert events == [
            (root, True),
            (para, True),
            (a, True),
            (a, False),
            (b, True),
            (b, False),
            (para, False),
            (root, False),
        ]

    def test_parent_is_reported(self):
        leaf = text("x")
        para = Node(NodeKind.PARAGRAPH, children=(leaf,))
        root = Node(NodeKind.DOCUMENT, children=(para,))
        parents = {id(e.node): e.parent for e in walk(root) if e.entering}
        assert parents[id(root)] is None
        assert parents[id(para)] is root
        assert parents[id(leaf)] is para

    def test_shared_node_raises(self):
        shared = text("x")
        root = Node(NodeKind.DOCUMENT, children=(
            Node(NodeKind.PARAGRAPH, children=(shared, shared)),
        ))
        with pytest.raises(DraftpressTraversalError) as exc_info:
            list(walk(root))
        assert exc_info.value.code == ErrorCode.TRAVERSAL_ERROR

    def test_non_node_child_raises(self):
        root = Node(NodeKind.DOCUMENT, children=("oops",))  # type: ignore[arg-type]
        with pytest.raises(DraftpressTraversalError, match="str"):
            list(walk(root))

    def test_single_node(self):
        root = Node(NodeKind.DOCUMENT)
        assert [e.entering for e in walk(root)] == [True, False]


class TestNode:
    def test_frozen(self):
        node = text("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.literal = "y"  # type: ignore[misc]

    def test_is_inline(self):
        assert text("x").is_inline
        assert not Node(NodeKind.PARAGRAPH).is_inline
