"""Structural and style checks over a parsed document.

The linter walks the tree once and runs the rule registered for each
node's kind.  Rules only report; they never change the tree and never
stop the walk, so linting the same tree twice gives the same warnings.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from urllib.parse import urlparse

from draftpress.document.line_index import LineIndex
from draftpress.document.tree import Node, NodeKind, walk
from draftpress.models import LintWarning

_LintRule = Callable[[Node, LineIndex], list[LintWarning]]

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

MSG_DEEP_HEADING = "Avoid using deeply nested headings (h4 or deeper)"
MSG_LOOSE_LIST = "Loose lists may reduce readability"
MSG_TODO = "Contains unfinished content (TODO)"
MSG_DOUBLE_SPACE = "Avoid multiple consecutive spaces"
MSG_UNCLOSED_EMPHASIS = "Unclosed italic/bold formatting"
MSG_HEADING_NO_SPACE = "Missing space after hash in heading"
MSG_HEADING_TRAILING_HASH = "Avoid trailing '#' in heading"
MSG_MALFORMED_LINK = "Malformed link (missing closing parenthesis)"
MSG_LINK_SCHEME = "Link does not have a valid URL scheme"

_HEADING_NO_SPACE_RE = re.compile(r"^#{1,6}[^\s#]")
_HEADING_TRAILING_HASH_RE = re.compile(r"^#{1,6}.*[^#]\s*#+$")
_MALFORMED_LINK_RE = re.compile(r"\[[^\]]+\]\([^)]+$")

_WEB_SCHEMES = frozenset({"http", "https"})


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _check_heading(node: Node, lines: LineIndex) -> list[LintWarning]:
    if node.level > 3:
        return [LintWarning(lines.line_for(node.offset), MSG_DEEP_HEADING)]
    return []


def _check_list(node: Node, lines: LineIndex) -> list[LintWarning]:
    if not node.tight:
        return [LintWarning(lines.line_for(node.offset), MSG_LOOSE_LIST)]
    return []


def _check_text(node: Node, lines: LineIndex) -> list[LintWarning]:
    text = node.literal
    line = lines.line_for(node.offset)
    warnings: list[LintWarning] = []

    if "TODO" in text:
        warnings.append(LintWarning(line, MSG_TODO))
    if "  " in text:
        warnings.append(LintWarning(line, MSG_DOUBLE_SPACE))
    # Matched emphasis markers are consumed by the parser, so any '*'
    # left in a text leaf is unbalanced.
    if "*" in text:
        warnings.append(LintWarning(line, MSG_UNCLOSED_EMPHASIS))
    if _HEADING_NO_SPACE_RE.search(text):
        warnings.append(LintWarning(line, MSG_HEADING_NO_SPACE))
    if _HEADING_TRAILING_HASH_RE.search(text):
        warnings.append(LintWarning(line, MSG_HEADING_TRAILING_HASH))
    if _MALFORMED_LINK_RE.search(text):
        warnings.append(LintWarning(line, MSG_MALFORMED_LINK))
    return warnings


def _check_link(node: Node, lines: LineIndex) -> list[LintWarning]:
    """Warn unless the destination is an http(s) URL.

    Relative paths, anchors and other schemes such as ``mailto:`` or
    ``ftp:`` are all reported.
    """
    if urlparse(node.url).scheme.lower() not in _WEB_SCHEMES:
        return [LintWarning(lines.line_for(node.offset), MSG_LINK_SCHEME)]
    return []


DEFAULT_RULES: Mapping[NodeKind, _LintRule] = {
    NodeKind.HEADING: _check_heading,
    NodeKind.LIST: _check_list,
    NodeKind.TEXT: _check_text,
    NodeKind.LINK: _check_link,
}


class DocumentLinter:
    """Run the lint rule table over a document tree.

    Parameters
    ----------
    rules:
        Rule table keyed by node kind.  Defaults to :data:`DEFAULT_RULES`.
    """

    def __init__(self, rules: Mapping[NodeKind, _LintRule] | None = None) -> None:
        self._rules: dict[NodeKind, _LintRule] = dict(
            DEFAULT_RULES if rules is None else rules
        )

    def lint(self, tree: Node, source: str) -> list[LintWarning]:
        """Return the warnings for *tree* in walk order.

        Raises
        ------
        DraftpressTraversalError
            If the tree is malformed.
        """
        lines = LineIndex(source)
        warnings: list[LintWarning] = []
        for event in walk(tree):
            if not event.entering:
                continue
            rule = self._rules.get(event.node.kind)
            if rule is not None:
                warnings.extend(rule(event.node, lines))
        return warnings
