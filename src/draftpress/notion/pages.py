"""Thin wrappers around the Notion ``/pages`` and ``/blocks`` endpoints.

Both delegate auth, retries and pacing to :class:`NotionTransport`; each
call names the tenant token it acts for.
"""

from __future__ import annotations

from typing import Any

from .transport import NotionTransport


class PageAPI:
    """Notion Pages API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(
        self,
        token: str,
        parent: dict[str, Any],
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a page and return the page object.

        Parameters
        ----------
        token:
            Integration token of the workspace the page is created in.
        parent:
            Parent object, e.g. ``{"page_id": "..."}``.
        properties:
            Page properties.  Under a page parent only ``title`` is allowed.
        children:
            Initial page content; at most 100 blocks.
        """
        body: dict[str, Any] = {"parent": parent, "properties": properties}
        if children is not None:
            body["children"] = children
        return self._transport.request("POST", "/pages", token=token, json=body)


class BlockAPI:
    """Notion Blocks API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def append_children(
        self,
        token: str,
        block_id: str,
        children: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Append up to 100 *children* at the end of *block_id* (a block or page)."""
        return self._transport.request(
            "PATCH",
            f"/blocks/{block_id}/children",
            token=token,
            json={"children": children},
        )
