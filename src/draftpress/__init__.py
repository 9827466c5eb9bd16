"""draftpress: stage Markdown documents as draft pages across workspaces.

Public re-exports
-----------------

* **Pipeline:** :class:`StagingOrchestrator`, :class:`DestinationValidator`
* **Stages:** :class:`MarkdownParser`, :class:`DocumentLinter`,
  :class:`BlockMapper`, :func:`flatten_blocks`
* **Configuration:** :class:`DraftpressConfig`
* **Errors:** Every :class:`DraftpressError` subclass and :class:`ErrorCode`
* **Models:** Request, response and destination types

Usage::

    from draftpress import (
        InMemoryIntegrationStore,
        IntegrationCredentials,
        StagingOrchestrator,
        StagingRequest,
    )

    store = InMemoryIntegrationStore()
    store.save_integration(
        "user-1", "W1",
        IntegrationCredentials(access_token="secret_xxx", drafts_container_id="<page_id>"),
    )
    orchestrator = StagingOrchestrator.with_notion(store)
    response = orchestrator.stage_draft("user-1", StagingRequest.from_dict({
        "markdown": "# Hello\\n\\nWorld",
        "title": "Hello",
        "destinations": [{"platform": "notion", "workspace_id": "W1"}],
    }))
"""

from __future__ import annotations

# ── Pipeline ────────────────────────────────────────────────────────────
from draftpress.blocks import BlockKind, BlockMapper, TargetBlock

# ── Configuration ───────────────────────────────────────────────────────
from draftpress.config import DraftpressConfig
from draftpress.document import DocumentLinter, MarkdownParser, Node, NodeKind

# ── Errors ──────────────────────────────────────────────────────────────
from draftpress.errors import (
    DraftpressApiValidationError,
    DraftpressAuthError,
    DraftpressError,
    DraftpressIncompletePageError,
    DraftpressInputError,
    DraftpressLookupError,
    DraftpressMappingError,
    DraftpressNetworkError,
    DraftpressNotFoundError,
    DraftpressPermissionError,
    DraftpressRemoteError,
    DraftpressRetryExhaustedError,
    DraftpressTraversalError,
    DraftpressUnsupportedError,
    DraftpressValidationError,
    ErrorCode,
)
from draftpress.integrations import InMemoryIntegrationStore

# ── Models ──────────────────────────────────────────────────────────────
from draftpress.models import (
    CreatedPage,
    Destination,
    DraftAction,
    DraftMetadata,
    DraftResultEntry,
    DraftStatus,
    IntegrationCredentials,
    LintWarning,
    StagingRequest,
    StagingResponse,
    StagingStatus,
    ValidatedDestination,
)
from draftpress.notion import NotionDraftService, flatten_blocks
from draftpress.staging import DraftService, StagingOrchestrator
from draftpress.validation import DestinationValidator, WorkspaceValidator

__all__ = [
    # Pipeline
    "BlockKind",
    "BlockMapper",
    "DestinationValidator",
    "DocumentLinter",
    "DraftService",
    "InMemoryIntegrationStore",
    "MarkdownParser",
    "Node",
    "NodeKind",
    "NotionDraftService",
    "StagingOrchestrator",
    "TargetBlock",
    "WorkspaceValidator",
    "flatten_blocks",
    # Configuration
    "DraftpressConfig",
    # Errors
    "DraftpressApiValidationError",
    "DraftpressAuthError",
    "DraftpressError",
    "DraftpressIncompletePageError",
    "DraftpressInputError",
    "DraftpressLookupError",
    "DraftpressMappingError",
    "DraftpressNetworkError",
    "DraftpressNotFoundError",
    "DraftpressPermissionError",
    "DraftpressRemoteError",
    "DraftpressRetryExhaustedError",
    "DraftpressTraversalError",
    "DraftpressUnsupportedError",
    "DraftpressValidationError",
    "ErrorCode",
    # Models
    "CreatedPage",
    "Destination",
    "DraftAction",
    "DraftMetadata",
    "DraftResultEntry",
    "DraftStatus",
    "IntegrationCredentials",
    "LintWarning",
    "StagingRequest",
    "StagingResponse",
    "StagingStatus",
    "ValidatedDestination",
]

__version__ = "0.1.0"
