"""Parse Markdown into a typed document tree.

This module wraps mistune v3's AST renderer and converts its token stream
into :class:`~draftpress.document.tree.Node` trees.  Every node receives
the offset of its first located character in the normalized source so that
diagnostics can report line numbers.

Token types mapped to node kinds:
    heading, paragraph (and mistune's ``block_text``), block_quote, list,
    list_item, block_code, thematic_break, block_html; text, emphasis,
    strong, strikethrough, codespan, link, image, softbreak, linebreak,
    inline_html

Anything else (``blank_line`` and plugin-specific tokens) is dropped.
"""

from __future__ import annotations

from typing import Any

import mistune

from draftpress.document.tree import Node, NodeKind, ParsedDocument
from draftpress.errors import DraftpressInputError

# ---------------------------------------------------------------------------
# Mistune-to-node-kind mapping
# ---------------------------------------------------------------------------

_TOKEN_KINDS: dict[str, NodeKind] = {
    "heading": NodeKind.HEADING,
    "paragraph": NodeKind.PARAGRAPH,
    "block_text": NodeKind.PARAGRAPH,
    "block_quote": NodeKind.BLOCKQUOTE,
    "list": NodeKind.LIST,
    "list_item": NodeKind.LIST_ITEM,
    "block_code": NodeKind.CODE_BLOCK,
    "thematic_break": NodeKind.THEMATIC_BREAK,
    "block_html": NodeKind.HTML_BLOCK,
    "text": NodeKind.TEXT,
    "emphasis": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
    "strikethrough": NodeKind.STRIKETHROUGH,
    "codespan": NodeKind.CODESPAN,
    "link": NodeKind.LINK,
    "image": NodeKind.IMAGE,
    "softbreak": NodeKind.SOFTBREAK,
    "linebreak": NodeKind.LINEBREAK,
    "inline_html": NodeKind.HTML_INLINE,
}

# Kinds whose content is a literal string rather than child nodes.
_LITERAL_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.TEXT,
    NodeKind.CODESPAN,
    NodeKind.CODE_BLOCK,
    NodeKind.HTML_BLOCK,
    NodeKind.HTML_INLINE,
})


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


class MarkdownParser:
    """Parse Markdown text into a :class:`ParsedDocument`.

    One instance can be reused for any number of documents; each call to
    :meth:`parse` works on fresh state.
    """

    def __init__(self) -> None:
        self._markdown = mistune.create_markdown(
            renderer="ast",
            plugins=["strikethrough", "url"],
        )

    def parse(self, markdown: str) -> ParsedDocument:
        """Parse *markdown* and return the tree with its normalized source.

        Raises
        ------
        DraftpressInputError
            If *markdown* is not a string or contains no content blocks.
        """
        if not isinstance(markdown, str):
            raise DraftpressInputError(
                "invalid or empty markdown",
                context={"received_type": type(markdown).__name__},
            )

        source = normalize_line_endings(markdown)
        tokens = self._markdown(source)
        if isinstance(tokens, str):
            tokens = []

        tree = _TreeBuilder(source).build(tokens)
        if not tree.children:
            raise DraftpressInputError(
                "invalid or empty markdown",
                context={"length": len(source)},
            )
        return ParsedDocument(tree=tree, source=source)


class _TreeBuilder:
    """Convert mistune tokens to nodes while tracking source offsets.

    Literals appear in the source in document order, so a single forward
    cursor is enough to locate each one.  A literal that cannot be found
    verbatim (escapes and entities are decoded by mistune) takes the
    cursor position.
    """

    __slots__ = ("_source", "_cursor")

    def __init__(self, source: str) -> None:
        self._source = source
        self._cursor = 0

    def build(self, tokens: list[dict[str, Any]]) -> Node:
        return Node(NodeKind.DOCUMENT, children=self._build_all(tokens), offset=0)

    def _build_all(self, tokens: list[dict[str, Any]]) -> tuple[Node, ...]:
        nodes: list[Node] = []
        for token in _merge_text(tokens):
            node = self._build(token)
            if node is not None:
                nodes.append(node)
        return tuple(nodes)

    def _build(self, token: dict[str, Any]) -> Node | None:
        kind = _TOKEN_KINDS.get(token.get("type", ""))
        if kind is None:
            return None
        attrs = token.get("attrs") or {}

        if kind in _LITERAL_KINDS:
            literal = token.get("raw", "")
            if kind is NodeKind.CODE_BLOCK and literal.endswith("\n"):
                literal = literal[:-1]
            info = attrs.get("info") or ""
            return Node(
                kind,
                literal=literal,
                offset=self._locate(literal),
                language=info.strip().split()[0] if info.strip() else "",
            )

        start = self._cursor
        children = self._build_all(token.get("children") or [])
        url = attrs.get("url") or ""
        if url:
            # Move past the destination so later text is not matched inside it.
            self._skip(url)

        return Node(
            kind,
            children=children,
            offset=children[0].offset if children else start,
            level=int(attrs.get("level", 0)),
            ordered=bool(attrs.get("ordered", False)),
            tight=bool(token.get("tight", True)),
            url=url,
        )

    def _locate(self, literal: str) -> int:
        if not literal:
            return self._cursor
        found = self._source.find(literal, self._cursor)
        if found == -1:
            first_line = literal.split("\n", 1)[0]
            if not first_line:
                return self._cursor
            found = self._source.find(first_line, self._cursor)
            if found == -1:
                return self._cursor
            literal = first_line
        self._cursor = found + len(literal)
        return found

    def _skip(self, text: str) -> None:
        found = self._source.find(text, self._cursor)
        if found != -1:
            self._cursor = found + len(text)


def _merge_text(tokens: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Join runs of adjacent ``text`` tokens into one token.

    mistune splits text at characters that could start inline markup
    (an unmatched ``*`` for example), which would otherwise scatter one
    visual run over several leaves.
    """
    merged: list[dict[str, Any]] = []
    for token in tokens:
        if (
            token.get("type") == "text"
            and merged
            and merged[-1].get("type") == "text"
        ):
            merged[-1] = {"type": "text", "raw": merged[-1].get("raw", "") + token.get("raw", "")}
        else:
            merged.append(token)
    return merged
