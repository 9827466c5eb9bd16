"""Tests for draftpress/blocks/mapper.py and draftpress/blocks/target.py.

Covers:
- Heading level selection and clamping
- Bulleted vs numbered items, lead paragraph consumption
- Nested lists and quotes (parent stack push/pop)
- Code blocks, skipped kinds
- Mapping faults (logged, counted, skipped) vs traversal errors (raised)
"""

from __future__ import annotations

import pytest

from draftpress.blocks.mapper import BlockMapper, MappingContext
from draftpress.blocks.target import BlockKind, TargetBlock
from draftpress.document.parser import MarkdownParser
from draftpress.document.tree import Node, NodeKind
from draftpress.errors import DraftpressMappingError, DraftpressTraversalError


def map_text(parser: MarkdownParser, mapper: BlockMapper, text: str) -> list[TargetBlock]:
    doc = parser.parse(text)
    return mapper.map(doc.tree, doc.source)


def shape(blocks: list[TargetBlock]) -> list[tuple]:
    """Compact (kind, text, children) tuples for readable assertions."""
    return [(b.kind.value, b.text, shape(b.children)) for b in blocks]


class TestHeadings:
    @pytest.mark.parametrize(
        ("level", "kind"),
        [
            (1, BlockKind.HEADING_1),
            (2, BlockKind.HEADING_2),
            (3, BlockKind.HEADING_3),
            (4, BlockKind.HEADING_3),
            (5, BlockKind.HEADING_3),
            (6, BlockKind.HEADING_3),
        ],
    )
    def test_level_selects_kind(self, parser, mapper, level, kind):
        blocks = map_text(parser, mapper, "#" * level + " Heading")
        assert blocks[0].kind is kind
        assert blocks[0].text == "Heading"

    def test_inline_formatting_flattened(self, parser, mapper):
        blocks = map_text(parser, mapper, "# A *b* `c`")
        assert blocks[0].text == "A b c"


class TestParagraphs:
    def test_paragraph_text(self, parser, mapper):
        blocks = map_text(parser, mapper, "Hello **there** world")
        assert shape(blocks) == [("paragraph", "Hello there world", [])]

    def test_order_preserved(self, parser, mapper):
        blocks = map_text(parser, mapper, "# T\n\none\n\ntwo\n")
        assert [b.text for b in blocks] == ["T", "one", "two"]


class TestLists:
    def test_bulleted(self, parser, mapper):
        blocks = map_text(parser, mapper, "- a\n- b\n")
        assert shape(blocks) == [("bulleted_item", "a", []), ("bulleted_item", "b", [])]

    def test_numbered(self, parser, mapper):
        blocks = map_text(parser, mapper, "1. a\n2. b\n")
        assert shape(blocks) == [("numbered_item", "a", []), ("numbered_item", "b", [])]

    def test_three_levels(self, parser, mapper):
        blocks = map_text(parser, mapper, "- a\n  - b\n    - c\n  - d\n- e\n")
        assert shape(blocks) == [
            ("bulleted_item", "a", [
                ("bulleted_item", "b", [("bulleted_item", "c", [])]),
                ("bulleted_item", "d", []),
            ]),
            ("bulleted_item", "e", []),
        ]

    def test_mixed_nested_kinds(self, parser, mapper):
        blocks = map_text(parser, mapper, "1. first\n   - inner\n2. second\n")
        assert shape(blocks) == [
            ("numbered_item", "first", [("bulleted_item", "inner", [])]),
            ("numbered_item", "second", []),
        ]

    def test_paragraph_after_list_is_top_level(self, parser, mapper):
        blocks = map_text(parser, mapper, "- a\n- b\n\nafter\n")
        assert shape(blocks)[-1] == ("paragraph", "after", [])
        assert len(blocks) == 3

    def test_loose_item_second_paragraph_nested(self, parser, mapper):
        blocks = map_text(parser, mapper, "- lead\n\n  more\n")
        assert shape(blocks) == [("bulleted_item", "lead", [("paragraph", "more", [])])]

    def test_code_inside_item(self, parser, mapper):
        blocks = map_text(parser, mapper, "- step\n\n  ```sh\n  make\n  ```\n")
        item = blocks[0]
        assert item.children[0].kind is BlockKind.CODE
        assert item.children[0].text == "make"


class TestQuotes:
    def test_quote_lead_text(self, parser, mapper):
        blocks = map_text(parser, mapper, "> quoted\n")
        assert shape(blocks) == [("quote", "quoted", [])]

    def test_quote_with_more_paragraphs(self, parser, mapper):
        blocks = map_text(parser, mapper, "> first\n>\n> second\n")
        assert shape(blocks) == [("quote", "first", [("paragraph", "second", [])])]

    def test_quote_starting_with_heading(self, parser, mapper):
        blocks = map_text(parser, mapper, "> # Head\n")
        assert shape(blocks) == [("quote", "", [("heading_1", "Head", [])])]

    def test_quote_then_paragraph(self, parser, mapper):
        blocks = map_text(parser, mapper, "> q\n\nafter\n")
        assert shape(blocks) == [("quote", "q", []), ("paragraph", "after", [])]


class TestCodeAndSkipped:
    def test_code_block(self, parser, mapper):
        blocks = map_text(parser, mapper, "```python\nprint(1)\n```\n")
        assert blocks[0].kind is BlockKind.CODE
        assert blocks[0].text == "print(1)"
        assert blocks[0].language == "python"

    def test_thematic_break_skipped(self, parser, mapper):
        blocks = map_text(parser, mapper, "a\n\n***\n\nb\n")
        assert [b.text for b in blocks] == ["a", "b"]


class TestFaults:
    def test_orphan_list_item_is_skipped(self, metrics):
        orphan = Node(NodeKind.LIST_ITEM, children=(
            Node(NodeKind.PARAGRAPH, children=(Node(NodeKind.TEXT, literal="orphan"),)),
        ))
        tree = Node(NodeKind.DOCUMENT, children=(
            orphan,
            Node(NodeKind.PARAGRAPH, children=(Node(NodeKind.TEXT, literal="next"),)),
        ))

        blocks = BlockMapper(metrics=metrics).map(tree, "orphan\n\nnext")

        assert shape(blocks) == [("paragraph", "orphan", []), ("paragraph", "next", [])]
        assert metrics.increments == [{
            "name": "draftpress.mapping_faults_total",
            "value": 1,
            "tags": {"node_kind": "list_item"},
        }]

    def test_traversal_error_propagates(self, mapper):
        shared = Node(NodeKind.PARAGRAPH, children=(Node(NodeKind.TEXT, literal="x"),))
        tree = Node(NodeKind.DOCUMENT, children=(shared, shared))
        with pytest.raises(DraftpressTraversalError):
            mapper.map(tree, "x")

    def test_fresh_state_per_call(self, parser, mapper):
        doc = parser.parse("- a\n")
        first = mapper.map(doc.tree, doc.source)
        second = mapper.map(doc.tree, doc.source)
        assert shape(first) == shape(second)
        assert first[0] is not second[0]


class TestMappingContext:
    def test_add_block_without_parent_goes_to_result(self):
        ctx = MappingContext()
        block = TargetBlock(BlockKind.PARAGRAPH, text="x")
        ctx.add_block(block)
        assert ctx.result == [block]

    def test_pop_only_for_owner(self):
        ctx = MappingContext()
        owner = Node(NodeKind.BLOCKQUOTE)
        other = Node(NodeKind.LIST)
        quote = TargetBlock(BlockKind.QUOTE)
        ctx.push_parent(owner, quote)

        ctx.pop_parent(other)
        assert ctx.current_parent is quote

        ctx.pop_parent(owner)
        assert ctx.current_parent is None
        assert ctx.stack == []

    def test_pop_restores_previous_parent(self):
        ctx = MappingContext()
        outer_node, inner_node = Node(NodeKind.LIST_ITEM), Node(NodeKind.LIST_ITEM)
        outer, inner = TargetBlock(BlockKind.BULLETED_ITEM), TargetBlock(BlockKind.BULLETED_ITEM)
        ctx.push_parent(outer_node, outer)
        ctx.push_parent(inner_node, inner)
        ctx.pop_parent(inner_node)
        assert ctx.current_parent is outer


class TestTargetBlock:
    @pytest.mark.parametrize("kind", [BlockKind.BULLETED_ITEM, BlockKind.NUMBERED_ITEM, BlockKind.QUOTE])
    def test_nestable_kinds_accept_children(self, kind):
        parent = TargetBlock(kind)
        parent.add_child(TargetBlock(BlockKind.PARAGRAPH))
        assert len(parent.children) == 1

    @pytest.mark.parametrize(
        "kind",
        [BlockKind.HEADING_1, BlockKind.HEADING_2, BlockKind.HEADING_3, BlockKind.PARAGRAPH, BlockKind.CODE],
    )
    def test_leaf_kinds_reject_children(self, kind):
        with pytest.raises(DraftpressMappingError) as exc_info:
            TargetBlock(kind).add_child(TargetBlock(BlockKind.PARAGRAPH))
        assert exc_info.value.context["parent_kind"] == kind.value

    def test_count(self):
        root = TargetBlock(BlockKind.BULLETED_ITEM, children=[
            TargetBlock(BlockKind.BULLETED_ITEM, children=[TargetBlock(BlockKind.BULLETED_ITEM)]),
            TargetBlock(BlockKind.PARAGRAPH),
        ])
        assert root.count() == 4
