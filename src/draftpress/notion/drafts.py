"""Stage documents as draft pages in Notion workspaces."""

from __future__ import annotations

import uuid

import httpx

from draftpress.blocks.target import TargetBlock
from draftpress.config import DraftpressConfig
from draftpress.errors import (
    DraftpressError,
    DraftpressIncompletePageError,
    DraftpressUnsupportedError,
)
from draftpress.models import (
    DraftAction,
    DraftResultEntry,
    DraftStatus,
    LintWarning,
    ValidatedDestination,
)
from draftpress.observability import get_logger

from .flatten import flatten_blocks
from .pages import BlockAPI, PageAPI
from .publisher import NotionPageCreator, PageCreator
from .transport import NotionTransport

log = get_logger("draftpress.notion")

APPEND_UNSUPPORTED = "append to an existing page is not yet supported"


class NotionDraftService:
    """Create one draft page per validated Notion destination.

    Blocks are flattened once per call and the same native payload is sent
    to every destination.  A destination that fails is reported as a failed
    entry and the remaining destinations are still staged.
    """

    def __init__(self, creator: PageCreator) -> None:
        self._creator = creator

    @classmethod
    def from_config(
        cls,
        config: DraftpressConfig,
        client: httpx.Client | None = None,
    ) -> NotionDraftService:
        transport = NotionTransport(config, client=client)
        return cls(NotionPageCreator(PageAPI(transport), BlockAPI(transport)))

    def stage(
        self,
        destinations: list[ValidatedDestination],
        blocks: list[TargetBlock],
        title: str,
        lint_warnings: list[LintWarning],
    ) -> list[DraftResultEntry]:
        native = flatten_blocks(blocks)
        return [
            self._stage_one(destination, native, title, lint_warnings)
            for destination in destinations
        ]

    def _stage_one(
        self,
        destination: ValidatedDestination,
        native: list[dict],
        title: str,
        lint_warnings: list[LintWarning],
    ) -> DraftResultEntry:
        action = DraftAction.APPENDED if destination.append else DraftAction.CREATED
        try:
            if destination.append:
                raise DraftpressUnsupportedError(
                    APPEND_UNSUPPORTED,
                    context={"operation": "append", "page_id": destination.page_id},
                )
            page = self._creator.create_page(
                destination.credentials.access_token,
                destination.credentials.drafts_container_id,
                title,
                native,
            )
        except DraftpressIncompletePageError as exc:
            self._log_failure(destination, exc.code, exc.message)
            return self._failed(
                destination, action, exc.message, lint_warnings,
                page_id=exc.context.get("page_id", ""),
                url=exc.context.get("url", ""),
            )
        except DraftpressError as exc:
            self._log_failure(destination, exc.code, exc.message)
            return self._failed(destination, action, exc.message, lint_warnings)
        except Exception as exc:
            # Creators outside this package may raise anything; the failure
            # stays with this destination.
            log.exception(
                "Draft staging failed unexpectedly",
                extra={"extra_fields": {
                    "platform": destination.platform,
                    "workspace_id": destination.workspace_id,
                    "error_type": type(exc).__name__,
                }},
            )
            return self._failed(
                destination, action, f"unexpected error: {exc}", lint_warnings,
            )

        return DraftResultEntry(
            platform=destination.platform,
            workspace_id=destination.workspace_id,
            status=DraftStatus.DRAFT,
            action=action,
            draft_id=str(uuid.uuid4()),
            page_id=page.page_id,
            url=page.url,
            lint_warnings=list(lint_warnings),
        )

    @staticmethod
    def _failed(
        destination: ValidatedDestination,
        action: DraftAction,
        error: str,
        lint_warnings: list[LintWarning],
        *,
        page_id: str = "",
        url: str = "",
    ) -> DraftResultEntry:
        return DraftResultEntry(
            platform=destination.platform,
            workspace_id=destination.workspace_id,
            status=DraftStatus.FAIL,
            action=action,
            page_id=page_id or destination.page_id or "",
            url=url,
            error=error,
            lint_warnings=list(lint_warnings),
        )

    @staticmethod
    def _log_failure(destination: ValidatedDestination, code: str, message: str) -> None:
        log.warning(
            "Draft staging failed",
            extra={"extra_fields": {
                "platform": destination.platform,
                "workspace_id": destination.workspace_id,
                "error_code": code,
                "error": message,
            }},
        )
