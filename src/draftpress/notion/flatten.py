"""Lower target blocks into Notion block objects.

Each :class:`~draftpress.blocks.TargetBlock` becomes one Notion block dict.
Children are flattened recursively and attached under the block's type
key, which is where the Notion API expects nested content::

    {"object": "block", "type": "bulleted_list_item",
     "bulleted_list_item": {"rich_text": [...], "children": [...]}}
"""

from __future__ import annotations

import re
from typing import Any

from draftpress.blocks.target import BlockKind, TargetBlock

# Notion's limit on ``rich_text[].text.content``.
RICH_TEXT_LIMIT = 2000

# Notion's limit on children per create or append call.
CHILDREN_PER_REQUEST = 100

_NOTION_TYPES: dict[BlockKind, str] = {
    BlockKind.HEADING_1: "heading_1",
    BlockKind.HEADING_2: "heading_2",
    BlockKind.HEADING_3: "heading_3",
    BlockKind.PARAGRAPH: "paragraph",
    BlockKind.BULLETED_ITEM: "bulleted_list_item",
    BlockKind.NUMBERED_ITEM: "numbered_list_item",
    BlockKind.QUOTE: "quote",
    BlockKind.CODE: "code",
}

_HEADING_TYPES = frozenset({"heading_1", "heading_2", "heading_3"})

# ---------------------------------------------------------------------------
# Code languages
# ---------------------------------------------------------------------------

NOTION_LANGUAGES: frozenset[str] = frozenset({
    "abap", "arduino", "bash", "basic", "c", "clojure", "coffeescript",
    "c++", "c#", "css", "dart", "diff", "docker", "elixir", "elm",
    "erlang", "flow", "fortran", "f#", "gherkin", "glsl", "go", "graphql",
    "groovy", "haskell", "html", "java", "javascript", "json", "julia",
    "kotlin", "latex", "less", "lisp", "livescript", "lua", "makefile",
    "markdown", "markup", "matlab", "mermaid", "nix", "objective-c",
    "ocaml", "pascal", "perl", "php", "plain text", "powershell",
    "prolog", "protobuf", "python", "r", "reason", "ruby", "rust",
    "sass", "scala", "scheme", "scss", "shell", "sql", "swift",
    "typescript", "vb.net", "verilog", "vhdl", "visual basic",
    "webassembly", "xml", "yaml", "java/c/c++/c#",
})

_LANGUAGE_ALIASES: dict[str, str] = {
    "py": "python",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "sh": "shell",
    "zsh": "shell",
    "console": "shell",
    "rb": "ruby",
    "rs": "rust",
    "yml": "yaml",
    "md": "markdown",
    "cpp": "c++",
    "cs": "c#",
    "csharp": "c#",
    "fsharp": "f#",
    "golang": "go",
    "kt": "kotlin",
    "objc": "objective-c",
    "dockerfile": "docker",
    "make": "makefile",
    "tex": "latex",
    "ps1": "powershell",
    "jsonc": "json",
    "proto": "protobuf",
    "text": "plain text",
    "txt": "plain text",
}


def normalize_language(info: str | None) -> str:
    """Return the Notion language name for a code fence info string.

    Unknown languages fall back to ``"plain text"``, which Notion always
    accepts.
    """
    if not info or not info.strip():
        return "plain text"
    lang = info.strip().lower().split()[0]
    for candidate in (lang, re.sub(r"\d+$", "", lang)):
        if candidate in NOTION_LANGUAGES:
            return candidate
        if candidate in _LANGUAGE_ALIASES:
            return _LANGUAGE_ALIASES[candidate]
    return "plain text"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def split_text(text: str, limit: int = RICH_TEXT_LIMIT) -> list[str]:
    """Split *text* into chunks of at most *limit* characters.

    >>> split_text("hello world", 5)
    ['hello', ' worl', 'd']
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    return [text[i : i + limit] for i in range(0, len(text), limit)]


def chunk_blocks(
    blocks: list[dict[str, Any]],
    size: int = CHILDREN_PER_REQUEST,
) -> list[list[dict[str, Any]]]:
    """Split *blocks* into batches of at most *size*.  Empty input gives ``[]``."""
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    return [blocks[i : i + size] for i in range(0, len(blocks), size)]


def build_rich_text(text: str) -> list[dict[str, Any]]:
    """Plain-text rich_text segments for *text*, each within Notion's limit."""
    return [
        {"type": "text", "text": {"content": chunk}}
        for chunk in split_text(text)
    ]


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------

def _build_block(block: TargetBlock) -> dict[str, Any]:
    block_type = _NOTION_TYPES[block.kind]
    body: dict[str, Any] = {"rich_text": build_rich_text(block.text)}

    if block_type == "code":
        body["language"] = normalize_language(block.language)
        body["caption"] = []
    else:
        body["color"] = "default"
        if block_type in _HEADING_TYPES:
            body["is_toggleable"] = False

    return {"object": "block", "type": block_type, block_type: body}


def flatten_block(block: TargetBlock) -> dict[str, Any]:
    """Return the Notion block for *block* with its children nested inside."""
    payload = _build_block(block)
    if block.children:
        payload[payload["type"]]["children"] = [
            flatten_block(child) for child in block.children
        ]
    return payload


def flatten_blocks(blocks: list[TargetBlock]) -> list[dict[str, Any]]:
    """Flatten a list of top-level target blocks, preserving order."""
    return [flatten_block(block) for block in blocks]
