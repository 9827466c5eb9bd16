"""Staging orchestrator.

:class:`StagingOrchestrator` drives one staging request through its
states::

    received -> validating -> rejected
                           -> parsing -> linting -> mapping -> creating -> aggregated

Input, validation and parse failures reject the whole request before any
remote call.  Once creation starts, each destination succeeds or fails on
its own and the response aggregates the outcomes.  Every transition is
logged with a per-request ``request_id``.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx

from draftpress.blocks import BlockMapper, TargetBlock
from draftpress.config import DraftpressConfig
from draftpress.document import DocumentLinter, MarkdownParser
from draftpress.errors import (
    DraftpressError,
    DraftpressInputError,
    DraftpressValidationError,
)
from draftpress.models import (
    DraftAction,
    DraftResultEntry,
    DraftStatus,
    LintWarning,
    StagingRequest,
    StagingResponse,
    ValidatedDestination,
)
from draftpress.notion import NotionDraftService
from draftpress.observability import get_logger, resolve_metrics
from draftpress.validation import DestinationValidator, WorkspaceValidator

log = get_logger("draftpress.staging")


class StagingState(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"
    PARSING = "parsing"
    LINTING = "linting"
    MAPPING = "mapping"
    CREATING = "creating"
    AGGREGATED = "aggregated"


@runtime_checkable
class DraftService(Protocol):
    """Stages blocks to every validated destination of one platform.

    Returns one entry per destination, in the order given.  Per-destination
    failures are reported as failed entries, not raised.
    """

    def stage(
        self,
        destinations: list[ValidatedDestination],
        blocks: list[TargetBlock],
        title: str,
        lint_warnings: list[LintWarning],
    ) -> list[DraftResultEntry]:
        ...


class StagingOrchestrator:
    """Validate, parse, lint, map and stage a document to its destinations.

    Parameters
    ----------
    validator:
        Checks destinations before any work is done.
    draft_services:
        Draft service for each platform.
    parser, linter, mapper:
        Pipeline stages.  Defaults are built when omitted.
    config:
        Pipeline configuration.  Defaults to :class:`DraftpressConfig()`.
    """

    def __init__(
        self,
        validator: DestinationValidator,
        draft_services: Mapping[str, DraftService],
        *,
        parser: MarkdownParser | None = None,
        linter: DocumentLinter | None = None,
        mapper: BlockMapper | None = None,
        config: DraftpressConfig | None = None,
    ) -> None:
        self._config = config or DraftpressConfig()
        self._metrics = resolve_metrics(self._config.metrics)
        self._validator = validator
        self._draft_services = dict(draft_services)
        self._parser = parser or MarkdownParser()
        self._linter = linter or DocumentLinter()
        self._mapper = mapper or BlockMapper(metrics=self._config.metrics)

    @classmethod
    def with_notion(
        cls,
        workspaces: WorkspaceValidator,
        config: DraftpressConfig | None = None,
        client: httpx.Client | None = None,
    ) -> StagingOrchestrator:
        """Build an orchestrator that stages to Notion only."""
        config = config or DraftpressConfig()
        return cls(
            DestinationValidator({"notion": workspaces}),
            {"notion": NotionDraftService.from_config(config, client=client)},
            config=config,
        )

    # -- public API --------------------------------------------------------

    def stage_draft(self, user_id: str, request: StagingRequest) -> StagingResponse:
        """Stage *request* for *user_id* and return the aggregated outcome.

        Never raises for request-scoped failures: rejected requests come
        back as a ``fail`` response carrying ``error``.
        """
        request_id = uuid.uuid4().hex
        t0 = time.monotonic()
        self._transition(
            request_id, StagingState.RECEIVED,
            user_id=user_id, destinations=len(request.destinations),
        )

        try:
            response = self._run(request_id, user_id, request)
        except DraftpressError as exc:
            self._transition(
                request_id, StagingState.REJECTED,
                error_code=exc.code, error=exc.message,
            )
            response = StagingResponse.rejected(exc.message)

        self._metrics.increment(
            "draftpress.staging_requests_total",
            tags={"status": response.status.value},
        )
        self._metrics.timing(
            "draftpress.stage_duration_ms",
            (time.monotonic() - t0) * 1000,
        )
        return response

    # -- internals ---------------------------------------------------------

    def _run(
        self,
        request_id: str,
        user_id: str,
        request: StagingRequest,
    ) -> StagingResponse:
        _check_request(request)

        self._transition(request_id, StagingState.VALIDATING)
        validated, errors = self._validator.validate(user_id, request.destinations)
        if errors:
            raise DraftpressValidationError(
                "destination validation failed:\n- " + "\n- ".join(errors),
                context={"errors": errors},
            )

        self._transition(request_id, StagingState.PARSING)
        try:
            document = self._parser.parse(request.markdown)
        except DraftpressInputError as exc:
            raise DraftpressInputError(
                f"markdown invalid: {exc.message}",
                context=exc.context,
                cause=exc,
            ) from exc

        self._transition(request_id, StagingState.LINTING)
        warnings = self._linter.lint(document.tree, document.source)
        if warnings:
            self._metrics.increment("draftpress.lint_warnings_total", value=len(warnings))

        self._transition(request_id, StagingState.MAPPING, lint_warnings=len(warnings))
        blocks = self._mapper.map(document.tree, document.source)

        title = request.title.strip() or self._config.default_title
        by_platform: dict[str, list[DraftResultEntry]] = {}
        for platform, destinations in validated.items():
            self._transition(
                request_id, StagingState.CREATING,
                platform=platform, destinations=len(destinations), blocks=len(blocks),
            )
            platform_entries = self._stage_platform(platform, destinations, blocks, title, warnings)
            for entry in platform_entries:
                self._metrics.increment(
                    "draftpress.drafts_total",
                    tags={"platform": platform, "status": entry.status.value},
                )
            by_platform[platform] = platform_entries

        entries = _in_request_order(request, by_platform)
        response = StagingResponse.aggregate(entries)
        self._transition(
            request_id, StagingState.AGGREGATED,
            status=response.status.value, drafts=len(entries),
        )
        return response

    def _stage_platform(
        self,
        platform: str,
        destinations: list[ValidatedDestination],
        blocks: list[TargetBlock],
        title: str,
        warnings: list[LintWarning],
    ) -> list[DraftResultEntry]:
        service = self._draft_services.get(platform)
        if service is None:
            return _failed_entries(
                platform, destinations, warnings,
                f"no draft service registered for platform {platform}",
            )
        try:
            return service.stage(destinations, blocks, title, warnings)
        except Exception as exc:
            log.exception(
                "Draft service failed",
                extra={"extra_fields": {
                    "platform": platform,
                    "destinations": len(destinations),
                    "error_type": type(exc).__name__,
                }},
            )
            message = exc.message if isinstance(exc, DraftpressError) else str(exc)
            return _failed_entries(
                platform, destinations, warnings,
                f"draft service for platform {platform} failed: {message}",
            )

    def _transition(self, request_id: str, state: StagingState, **fields: Any) -> None:
        log.info(
            "staging state",
            extra={"extra_fields": {"request_id": request_id, "state": state.value, **fields}},
        )


def _check_request(request: StagingRequest) -> None:
    if not request.destinations:
        raise DraftpressInputError(
            "at least one destination is required",
            context={"field": "destinations"},
        )
    for index, destination in enumerate(request.destinations):
        if not destination.platform or not destination.platform.strip():
            raise DraftpressInputError(
                f"destination {index + 1} is missing platform",
                context={"index": index, "field": "platform"},
            )


def _in_request_order(
    request: StagingRequest,
    by_platform: dict[str, list[DraftResultEntry]],
) -> list[DraftResultEntry]:
    """Interleave per-platform entries back into destination request order."""
    pending = {platform: iter(entries) for platform, entries in by_platform.items()}
    ordered: list[DraftResultEntry] = []
    for destination in request.destinations:
        entry = next(pending[destination.platform], None)
        if entry is not None:
            ordered.append(entry)
    return ordered


def _failed_entries(
    platform: str,
    destinations: list[ValidatedDestination],
    warnings: list[LintWarning],
    error: str,
) -> list[DraftResultEntry]:
    return [
        DraftResultEntry(
            platform=platform,
            workspace_id=destination.workspace_id,
            status=DraftStatus.FAIL,
            action=DraftAction.APPENDED if destination.append else DraftAction.CREATED,
            page_id=destination.page_id or "",
            error=error,
            lint_warnings=list(warnings),
        )
        for destination in destinations
    ]
