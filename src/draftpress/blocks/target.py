"""Platform-agnostic nested blocks.

A :class:`TargetBlock` is the intermediate form between the document tree
and a platform's wire format.  Only list items and quotes may hold
children; every other kind is a leaf.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from draftpress.errors import DraftpressMappingError


class BlockKind(str, Enum):
    """Block kinds understood by every destination platform."""

    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    PARAGRAPH = "paragraph"
    BULLETED_ITEM = "bulleted_item"
    NUMBERED_ITEM = "numbered_item"
    QUOTE = "quote"
    CODE = "code"


NESTABLE_KINDS: frozenset[BlockKind] = frozenset({
    BlockKind.BULLETED_ITEM,
    BlockKind.NUMBERED_ITEM,
    BlockKind.QUOTE,
})


@dataclass
class TargetBlock:
    """One block with its text and nested children."""

    kind: BlockKind
    text: str = ""
    language: str = ""
    children: list[TargetBlock] = field(default_factory=list)

    @property
    def can_nest(self) -> bool:
        return self.kind in NESTABLE_KINDS

    def add_child(self, child: TargetBlock) -> None:
        if not self.can_nest:
            raise DraftpressMappingError(
                f"{self.kind.value} blocks cannot contain nested blocks",
                context={"parent_kind": self.kind.value, "child_kind": child.kind.value},
            )
        self.children.append(child)

    def count(self) -> int:
        """Number of blocks in this subtree, including this one."""
        return 1 + sum(child.count() for child in self.children)
