"""Tests for draftpress/document/linter.py.

Covers every rule in the default table, line attribution, walk ordering,
idempotence, custom rule tables and traversal failures.
"""

from __future__ import annotations

import pytest

from draftpress.document.linter import (
    MSG_DEEP_HEADING,
    MSG_DOUBLE_SPACE,
    MSG_HEADING_NO_SPACE,
    MSG_HEADING_TRAILING_HASH,
    MSG_LINK_SCHEME,
    MSG_LOOSE_LIST,
    MSG_MALFORMED_LINK,
    MSG_TODO,
    MSG_UNCLOSED_EMPHASIS,
    DocumentLinter,
)
from draftpress.document.parser import MarkdownParser
from draftpress.document.tree import Node, NodeKind
from draftpress.errors import DraftpressTraversalError
from draftpress.models import LintWarning


def lint(parser: MarkdownParser, linter: DocumentLinter, text: str) -> list[LintWarning]:
    doc = parser.parse(text)
    return linter.lint(doc.tree, doc.source)


def messages(warnings: list[LintWarning]) -> list[str]:
    return [w.message for w in warnings]


class TestHeadingRule:
    @pytest.mark.parametrize("level", [4, 5, 6])
    def test_deep_heading_warns(self, parser, linter, level):
        warnings = lint(parser, linter, "#" * level + " Deep")
        assert warnings == [LintWarning(1, MSG_DEEP_HEADING)]

    @pytest.mark.parametrize("level", [1, 2, 3])
    def test_shallow_heading_clean(self, parser, linter, level):
        assert lint(parser, linter, "#" * level + " Fine") == []


class TestListRule:
    def test_loose_list_warns(self, parser, linter):
        warnings = lint(parser, linter, "- a\n\n- b\n")
        assert warnings == [LintWarning(1, MSG_LOOSE_LIST)]

    def test_tight_list_clean(self, parser, linter):
        assert lint(parser, linter, "- a\n- b\n") == []


class TestTextRules:
    def test_todo(self, parser, linter):
        assert messages(lint(parser, linter, "TODO finish this")) == [MSG_TODO]

    def test_double_space(self, parser, linter):
        assert messages(lint(parser, linter, "two  spaces here")) == [MSG_DOUBLE_SPACE]

    def test_unclosed_emphasis(self, parser, linter):
        warnings = lint(parser, linter, "# Title\n\nSome *unterminated emphasis")
        assert warnings == [LintWarning(3, MSG_UNCLOSED_EMPHASIS)]

    def test_closed_emphasis_clean(self, parser, linter):
        assert lint(parser, linter, "Some *closed* and **bold** text") == []

    def test_missing_space_after_hash(self, parser, linter):
        assert MSG_HEADING_NO_SPACE in messages(lint(parser, linter, "#Title"))

    def test_trailing_hash(self, parser, linter):
        assert MSG_HEADING_TRAILING_HASH in messages(lint(parser, linter, "#Title #"))

    def test_malformed_link(self, parser, linter):
        assert messages(lint(parser, linter, "see [docs](page")) == [MSG_MALFORMED_LINK]

    def test_multiple_text_rules_on_one_leaf(self, parser, linter):
        found = messages(lint(parser, linter, "TODO  fix"))
        assert found == [MSG_TODO, MSG_DOUBLE_SPACE]


class TestLinkRule:
    @pytest.mark.parametrize("url", ["/relative/path", "mailto:me@example.com", "ftp://x.io/f"])
    def test_non_web_scheme_warns(self, parser, linter, url):
        assert messages(lint(parser, linter, f"[x]({url})")) == [MSG_LINK_SCHEME]

    @pytest.mark.parametrize("url", ["https://example.com", "http://example.com/a"])
    def test_web_scheme_clean(self, parser, linter, url):
        assert lint(parser, linter, f"[x]({url})") == []


class TestLinterBehaviour:
    DOC = "#### Deep\n\nTODO one\n\n- a\n\n- b\n\n[x](/rel)\n"

    def test_warnings_in_walk_order(self, parser, linter):
        assert messages(lint(parser, linter, self.DOC)) == [
            MSG_DEEP_HEADING,
            MSG_TODO,
            MSG_LOOSE_LIST,
            MSG_LINK_SCHEME,
        ]

    def test_lines_attributed(self, parser, linter):
        assert [w.line for w in lint(parser, linter, self.DOC)] == [1, 3, 5, 9]

    def test_idempotent(self, parser, linter):
        doc = parser.parse(self.DOC)
        first = linter.lint(doc.tree, doc.source)
        second = linter.lint(doc.tree, doc.source)
        assert first == second

    def test_clean_document(self, parser, linter):
        assert lint(parser, linter, "# Title\n\nA clean paragraph.\n") == []

    def test_custom_rule_table(self, parser):
        def every_paragraph(node, lines):
            return [LintWarning(lines.line_for(node.offset), "paragraph")]

        linter = DocumentLinter(rules={NodeKind.PARAGRAPH: every_paragraph})
        doc = parser.parse("one\n\ntwo\n\n#### not checked\n")
        assert linter.lint(doc.tree, doc.source) == [
            LintWarning(1, "paragraph"),
            LintWarning(3, "paragraph"),
        ]

    def test_empty_rule_table(self, parser):
        doc = parser.parse("#### Deep TODO")
        assert DocumentLinter(rules={}).lint(doc.tree, doc.source) == []

    def test_malformed_tree_raises(self, linter):
        shared = Node(NodeKind.TEXT, literal="x")
        tree = Node(NodeKind.DOCUMENT, children=(shared, shared))
        with pytest.raises(DraftpressTraversalError):
            linter.lint(tree, "x")
