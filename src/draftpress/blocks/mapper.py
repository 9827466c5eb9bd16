"""Map a document tree to nested target blocks.

The mapper walks the tree depth-first with enter and exit events.  On
entering a node, the handler registered for its kind appends a block to
the current parent (or to the top-level result when there is none).  List
items and block quotes also push themselves as the new parent, and the
exit event of the node that pushed a frame pops it again.  The parent
chain therefore lives on an explicit stack in :class:`MappingContext`
rather than in the call stack.

List items and quotes take their text from their leading paragraph.  That
paragraph is marked as consumed so its own handler does not emit it a
second time.
"""

from __future__ import annotations

from collections.abc import Callable

from draftpress.blocks.target import BlockKind, TargetBlock
from draftpress.document.inline import extract_text
from draftpress.document.line_index import LineIndex
from draftpress.document.tree import Node, NodeKind, walk
from draftpress.errors import DraftpressMappingError
from draftpress.observability import MetricsHook, get_logger, resolve_metrics

_log = get_logger("draftpress.mapper")


class MappingContext:
    """Mutable state of a single mapping run."""

    __slots__ = ("current_parent", "stack", "result", "consumed")

    def __init__(self) -> None:
        self.current_parent: TargetBlock | None = None
        self.stack: list[tuple[Node, TargetBlock]] = []
        self.result: list[TargetBlock] = []
        self.consumed: set[int] = set()

    def add_block(self, block: TargetBlock) -> None:
        if self.current_parent is None:
            self.result.append(block)
        else:
            self.current_parent.add_child(block)

    def push_parent(self, owner: Node, block: TargetBlock) -> None:
        self.stack.append((owner, block))
        self.current_parent = block

    def pop_parent(self, owner: Node) -> None:
        """Pop the top frame if *owner* opened it."""
        if not self.stack or self.stack[-1][0] is not owner:
            return
        self.stack.pop()
        self.current_parent = self.stack[-1][1] if self.stack else None

    def consume_lead_paragraph(self, node: Node) -> str:
        """Return the text of *node*'s leading paragraph and mark it used."""
        if node.children and node.children[0].kind is NodeKind.PARAGRAPH:
            lead = node.children[0]
            self.consumed.add(id(lead))
            return extract_text(lead)
        return ""


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

_HEADING_KINDS: dict[int, BlockKind] = {
    1: BlockKind.HEADING_1,
    2: BlockKind.HEADING_2,
}


def _map_document(node: Node, parent: Node | None, ctx: MappingContext) -> None:
    """The root produces no block; it is registered so its children are walked."""


def _map_heading(node: Node, parent: Node | None, ctx: MappingContext) -> None:
    kind = _HEADING_KINDS.get(node.level, BlockKind.HEADING_3)
    ctx.add_block(TargetBlock(kind, text=extract_text(node)))


def _map_paragraph(node: Node, parent: Node | None, ctx: MappingContext) -> None:
    if id(node) in ctx.consumed:
        return
    ctx.add_block(TargetBlock(BlockKind.PARAGRAPH, text=extract_text(node)))


def _map_list_item(node: Node, parent: Node | None, ctx: MappingContext) -> None:
    if parent is None or parent.kind is not NodeKind.LIST:
        raise DraftpressMappingError(
            "list item outside of a list",
            context={"node_kind": node.kind.value},
        )
    kind = BlockKind.NUMBERED_ITEM if parent.ordered else BlockKind.BULLETED_ITEM
    block = TargetBlock(kind)
    ctx.add_block(block)
    block.text = ctx.consume_lead_paragraph(node)
    ctx.push_parent(node, block)


def _map_blockquote(node: Node, parent: Node | None, ctx: MappingContext) -> None:
    block = TargetBlock(BlockKind.QUOTE)
    ctx.add_block(block)
    block.text = ctx.consume_lead_paragraph(node)
    ctx.push_parent(node, block)


def _map_code_block(node: Node, parent: Node | None, ctx: MappingContext) -> None:
    ctx.add_block(TargetBlock(BlockKind.CODE, text=node.literal, language=node.language))


_NodeHandler = Callable[[Node, "Node | None", MappingContext], None]

_MAPPERS: dict[NodeKind, _NodeHandler] = {
    NodeKind.DOCUMENT: _map_document,
    NodeKind.HEADING: _map_heading,
    NodeKind.PARAGRAPH: _map_paragraph,
    NodeKind.LIST_ITEM: _map_list_item,
    NodeKind.BLOCKQUOTE: _map_blockquote,
    NodeKind.CODE_BLOCK: _map_code_block,
}

# Kinds that may have pushed a frame on entry.
_CONTAINER_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.LIST,
    NodeKind.LIST_ITEM,
    NodeKind.BLOCKQUOTE,
})


class BlockMapper:
    """Map document trees to :class:`TargetBlock` lists.

    Parameters
    ----------
    metrics:
        Optional metrics hook; receives ``draftpress.mapping_faults_total``.
    """

    def __init__(self, metrics: MetricsHook | None = None) -> None:
        self._metrics = resolve_metrics(metrics)

    def map(self, tree: Node, source: str) -> list[TargetBlock]:
        """Return the top-level blocks for *tree*.

        A node that cannot be mapped is logged and skipped; its children are
        still visited.

        Raises
        ------
        DraftpressTraversalError
            If the tree is malformed.
        """
        ctx = MappingContext()
        lines: LineIndex | None = None

        for node, entering, parent in walk(tree):
            if not entering:
                if node.kind in _CONTAINER_KINDS:
                    ctx.pop_parent(node)
                continue

            handler = _MAPPERS.get(node.kind)
            if handler is None:
                continue
            try:
                handler(node, parent, ctx)
            except DraftpressMappingError as exc:
                if lines is None:
                    lines = LineIndex(source)
                self._metrics.increment(
                    "draftpress.mapping_faults_total",
                    tags={"node_kind": node.kind.value},
                )
                _log.warning(
                    "Skipped node that could not be mapped",
                    extra={"extra_fields": {
                        "node_kind": node.kind.value,
                        "line": lines.line_for(node.offset),
                        "error_code": exc.code,
                        "error": exc.message,
                    }},
                )

        return ctx.result
