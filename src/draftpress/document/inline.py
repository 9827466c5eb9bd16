"""Render inline spans to plain text."""

from __future__ import annotations

from draftpress.document.tree import Node, NodeKind

_LITERAL_KINDS = frozenset({NodeKind.TEXT, NodeKind.CODESPAN, NodeKind.HTML_INLINE})

_BREAKS: dict[NodeKind, str] = {
    NodeKind.SOFTBREAK: " ",
    NodeKind.LINEBREAK: "\n",
}


def extract_text(node: Node) -> str:
    """Concatenate the plain text of *node* and its inline descendants.

    Formatting wrappers (emphasis, strong, strikethrough, links, images)
    contribute only their children's text.  A soft break becomes a space
    and a hard break a newline.
    """
    parts: list[str] = []
    _collect(node, parts)
    return "".join(parts)


def _collect(node: Node, parts: list[str]) -> None:
    if node.kind in _LITERAL_KINDS:
        parts.append(node.literal)
        return
    brk = _BREAKS.get(node.kind)
    if brk is not None:
        parts.append(brk)
        return
    for child in node.children:
        _collect(child, parts)
