"""Create a Notion page holding a flattened document."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from draftpress.errors import DraftpressError, DraftpressIncompletePageError
from draftpress.models import CreatedPage
from draftpress.observability import get_logger

from .flatten import build_rich_text, chunk_blocks
from .pages import BlockAPI, PageAPI

log = get_logger("draftpress.publisher")


@runtime_checkable
class PageCreator(Protocol):
    """Anything that can create a titled page of native blocks."""

    def create_page(
        self,
        token: str,
        parent_id: str,
        title: str,
        blocks: list[dict[str, Any]],
    ) -> CreatedPage:
        ...


class NotionPageCreator:
    """Create Notion pages, splitting content over as many calls as needed.

    The first 100 top-level blocks travel with the create call; the rest are
    appended to the new page in batches of 100.  If an append fails the
    page already exists, so the failure is raised as
    :class:`DraftpressIncompletePageError` carrying its id and url.
    """

    def __init__(self, pages: PageAPI, blocks: BlockAPI) -> None:
        self._pages = pages
        self._blocks = blocks

    def create_page(
        self,
        token: str,
        parent_id: str,
        title: str,
        blocks: list[dict[str, Any]],
    ) -> CreatedPage:
        batches = chunk_blocks(blocks)
        first = batches[0] if batches else []

        page = self._pages.create(
            token,
            parent={"type": "page_id", "page_id": parent_id},
            properties={"title": build_rich_text(title)},
            children=first,
        )
        page_id = page.get("id", "")
        url = page.get("url", "")

        sent = len(first)
        for batch in batches[1:]:
            try:
                self._blocks.append_children(token, page_id, batch)
            except DraftpressError as exc:
                raise DraftpressIncompletePageError(
                    f"page created but content incomplete: {exc.message}",
                    context={
                        "page_id": page_id,
                        "url": url,
                        "blocks_sent": sent,
                        "blocks_total": len(blocks),
                    },
                    cause=exc,
                ) from exc
            sent += len(batch)

        log.info(
            "Created page",
            extra={"extra_fields": {
                "op": "create_page",
                "page_id": page_id,
                "parent_id": parent_id,
                "blocks": len(blocks),
                "calls": max(len(batches), 1),
            }},
        )
        return CreatedPage(page_id=page_id, url=url)
