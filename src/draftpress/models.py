"""Data models for draftpress.

Requests and responses of the staging pipeline, lint warnings, and the
destination types that flow between validation and the platform draft
services.  All types are plain dataclasses; the request and response types
additionally convert from and to the JSON shapes used at the HTTP boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from draftpress.errors import DraftpressInputError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class StagingStatus(str, Enum):
    """Overall outcome of a staging request."""

    SUCCESS = "success"
    """Every destination received its draft."""

    PARTIAL_SUCCESS = "partial_success"
    """At least one destination succeeded and at least one failed."""

    FAIL = "fail"
    """No destination received a draft, or the request was rejected."""


class DraftStatus(str, Enum):
    """Outcome of staging to one destination."""

    DRAFT = "draft"
    FAIL = "fail"


class DraftAction(str, Enum):
    """What staging did (or tried to do) at a destination."""

    CREATED = "created"
    APPENDED = "appended"


# ---------------------------------------------------------------------------
# Lint warnings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LintWarning:
    """A style or structure problem found in the source document.

    Attributes
    ----------
    line:
        1-based line number in the normalized source.
    message:
        Human-readable description of the problem.
    """

    line: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "message": self.message}


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@dataclass
class Destination:
    """One requested publish target."""

    platform: str
    workspace_id: str = ""
    append: bool = False
    page_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int = 0) -> Destination:
        if not isinstance(data, dict):
            raise DraftpressInputError(
                f"destination {index + 1} must be an object",
                context={"index": index},
            )
        platform = data.get("platform")
        if not isinstance(platform, str) or not platform.strip():
            raise DraftpressInputError(
                f"destination {index + 1} is missing platform",
                context={"index": index, "field": "platform"},
            )
        return cls(
            platform=platform.strip(),
            workspace_id=str(data.get("workspace_id") or ""),
            append=bool(data.get("append", False)),
            page_id=data.get("page_id") or None,
        )


@dataclass
class DraftMetadata:
    """Optional provenance information attached to a staging request."""

    source: str = ""
    tags: list[str] = field(default_factory=list)


@dataclass
class StagingRequest:
    """A document plus the destinations it should be staged to.

    Attributes
    ----------
    markdown:
        Raw Markdown text of the document.
    title:
        Title of every draft page created from this request.
    destinations:
        Requested targets, in the order results should be reported.
    metadata:
        Optional provenance information.
    """

    markdown: str
    title: str
    destinations: list[Destination] = field(default_factory=list)
    metadata: DraftMetadata | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> StagingRequest:
        """Build a request from the HTTP JSON payload.

        Raises
        ------
        DraftpressInputError
            If ``markdown``, ``title`` or ``destinations`` is missing, or a
            destination lacks its platform.
        """
        if not isinstance(payload, dict):
            raise DraftpressInputError("request body must be an object")

        for key in ("markdown", "title"):
            if not isinstance(payload.get(key), str):
                raise DraftpressInputError(
                    f"request is missing required field '{key}'",
                    context={"field": key},
                )

        raw_destinations = payload.get("destinations")
        if not isinstance(raw_destinations, list):
            raise DraftpressInputError(
                "request is missing required field 'destinations'",
                context={"field": "destinations"},
            )
        destinations = [
            Destination.from_dict(item, index)
            for index, item in enumerate(raw_destinations)
        ]

        metadata = None
        raw_metadata = payload.get("metadata")
        if isinstance(raw_metadata, dict):
            metadata = DraftMetadata(
                source=str(raw_metadata.get("source") or ""),
                tags=[str(tag) for tag in raw_metadata.get("tags") or []],
            )

        return cls(
            markdown=payload["markdown"],
            title=payload["title"],
            destinations=destinations,
            metadata=metadata,
        )


# ---------------------------------------------------------------------------
# Destinations after validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IntegrationCredentials:
    """Platform credentials resolved for one user and workspace.

    Attributes
    ----------
    access_token:
        The tenant's integration token.  Never logged.
    drafts_container_id:
        ID of the page under which new drafts are created.
    """

    access_token: str
    drafts_container_id: str

    def __repr__(self) -> str:
        masked = f"...{self.access_token[-4:]}" if len(self.access_token) >= 4 else "****"
        return (
            f"IntegrationCredentials(access_token='{masked}', "
            f"drafts_container_id={self.drafts_container_id!r})"
        )


@dataclass(frozen=True)
class ValidatedDestination:
    """A destination whose workspace ownership (and, for append mode, target
    page) has been confirmed.  Only the destination validator creates these.
    """

    platform: str
    workspace_id: str
    credentials: IntegrationCredentials
    append: bool = False
    page_id: str | None = None


@dataclass(frozen=True)
class CreatedPage:
    """Identity of a page created on a destination platform."""

    page_id: str
    url: str


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class DraftResultEntry:
    """Outcome of staging to one destination."""

    platform: str
    workspace_id: str
    status: DraftStatus
    action: DraftAction
    draft_id: str = ""
    page_id: str = ""
    url: str = ""
    error: str | None = None
    lint_warnings: list[LintWarning] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == DraftStatus.DRAFT

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "draft_id": self.draft_id,
            "platform": self.platform,
            "workspace_id": self.workspace_id,
            "page_id": self.page_id,
            "url": self.url,
            "status": self.status.value,
            "action": self.action.value,
        }
        if self.error:
            data["error"] = self.error
        if self.lint_warnings:
            data["lint_warnings"] = [w.to_dict() for w in self.lint_warnings]
        return data


@dataclass
class StagingResponse:
    """Aggregate outcome of a staging request.

    Attributes
    ----------
    status:
        ``success`` if every entry succeeded, ``fail`` if none did,
        ``partial_success`` otherwise.
    drafts:
        One entry per staged destination, in request order.
    error:
        Why the request was rejected before staging, if it was.
    """

    status: StagingStatus
    drafts: list[DraftResultEntry] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def rejected(cls, error: str) -> StagingResponse:
        return cls(status=StagingStatus.FAIL, drafts=[], error=error)

    @classmethod
    def aggregate(cls, drafts: list[DraftResultEntry]) -> StagingResponse:
        succeeded = sum(1 for entry in drafts if entry.succeeded)
        if drafts and succeeded == len(drafts):
            status = StagingStatus.SUCCESS
        elif succeeded == 0:
            status = StagingStatus.FAIL
        else:
            status = StagingStatus.PARTIAL_SUCCESS
        return cls(status=status, drafts=list(drafts))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "drafts": [entry.to_dict() for entry in self.drafts],
        }
        if self.error:
            data["error"] = self.error
        return data
