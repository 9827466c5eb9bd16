"""Markdown parsing, document trees and linting."""

from __future__ import annotations

from .inline import extract_text
from .line_index import LineIndex
from .linter import DocumentLinter
from .parser import MarkdownParser
from .tree import Node, NodeKind, ParsedDocument, WalkEvent, walk

__all__ = [
    "DocumentLinter",
    "LineIndex",
    "MarkdownParser",
    "Node",
    "NodeKind",
    "ParsedDocument",
    "WalkEvent",
    "extract_text",
    "walk",
]
