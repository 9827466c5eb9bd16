"""Notion destination: block flattening, HTTP transport and draft staging."""

from __future__ import annotations

from .drafts import APPEND_UNSUPPORTED, NotionDraftService
from .flatten import (
    build_rich_text,
    chunk_blocks,
    flatten_block,
    flatten_blocks,
    normalize_language,
    split_text,
)
from .pages import BlockAPI, PageAPI
from .publisher import NotionPageCreator, PageCreator
from .transport import NotionTransport

__all__ = [
    "APPEND_UNSUPPORTED",
    "BlockAPI",
    "NotionDraftService",
    "NotionPageCreator",
    "NotionTransport",
    "PageAPI",
    "PageCreator",
    "build_rich_text",
    "chunk_blocks",
    "flatten_block",
    "flatten_blocks",
    "normalize_language",
    "split_text",
]
