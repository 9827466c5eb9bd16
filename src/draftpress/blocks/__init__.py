"""Intermediate block model and the document-to-block mapper."""

from __future__ import annotations

from .mapper import BlockMapper, MappingContext
from .target import NESTABLE_KINDS, BlockKind, TargetBlock

__all__ = [
    "NESTABLE_KINDS",
    "BlockKind",
    "BlockMapper",
    "MappingContext",
    "TargetBlock",
]
