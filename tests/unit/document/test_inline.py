"""Tests for draftpress/document/inline.py"""

from __future__ import annotations

from draftpress.document.inline import extract_text
from draftpress.document.parser import MarkdownParser
from draftpress.document.tree import Node, NodeKind


def text(value: str) -> Node:
    return Node(NodeKind.TEXT, literal=value)


class TestExtractText:
    def test_text_leaf(self):
        assert extract_text(text("hello")) == "hello"

    def test_formatting_is_dropped(self):
        para = Node(NodeKind.PARAGRAPH, children=(
            text("a "),
            Node(NodeKind.STRONG, children=(text("b"),)),
            text(" "),
            Node(NodeKind.EMPHASIS, children=(
                Node(NodeKind.STRIKETHROUGH, children=(text("c"),)),
            )),
        ))
        assert extract_text(para) == "a b c"

    def test_link_keeps_label_only(self):
        link = Node(NodeKind.LINK, url="https://example.com", children=(text("docs"),))
        assert extract_text(link) == "docs"

    def test_codespan_literal(self):
        para = Node(NodeKind.PARAGRAPH, children=(
            text("run "),
            Node(NodeKind.CODESPAN, literal="make test"),
        ))
        assert extract_text(para) == "run make test"

    def test_breaks(self):
        para = Node(NodeKind.PARAGRAPH, children=(
            text("one"),
            Node(NodeKind.SOFTBREAK),
            text("two"),
            Node(NodeKind.LINEBREAK),
            text("three"),
        ))
        assert extract_text(para) == "one two\nthree"

    def test_image_alt_text(self):
        image = Node(NodeKind.IMAGE, url="cat.png", children=(text("a cat"),))
        assert extract_text(image) == "a cat"

    def test_empty_container(self):
        assert extract_text(Node(NodeKind.PARAGRAPH)) == ""

    def test_does_not_mutate_node(self):
        para = Node(NodeKind.PARAGRAPH, children=(text("x"),))
        before = para
        extract_text(para)
        assert para == before

    def test_parsed_paragraph(self, parser: MarkdownParser):
        doc = parser.parse("Some **bold** and [a link](https://x.io) here")
        assert extract_text(doc.tree.children[0]) == "Some bold and a link here"
