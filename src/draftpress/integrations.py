"""In-memory integration store.

Holds each user's workspace integrations and the draft pages created for
them on one platform.  It satisfies the
:class:`~draftpress.validation.WorkspaceValidator` protocol and backs
tests and single-process deployments.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from draftpress.models import IntegrationCredentials


@dataclass
class InMemoryIntegrationStore:
    _integrations: dict[tuple[str, str], IntegrationCredentials] = field(default_factory=dict)
    _draft_pages: dict[str, set[str]] = field(default_factory=dict)

    def save_integration(
        self,
        user_id: str,
        workspace_id: str,
        credentials: IntegrationCredentials,
    ) -> IntegrationCredentials:
        self._integrations[(user_id, workspace_id)] = credentials
        return credentials

    def remove_integration(self, user_id: str, workspace_id: str) -> None:
        self._integrations.pop((user_id, workspace_id), None)

    def record_draft_page(self, user_id: str, page_id: str) -> None:
        self._draft_pages.setdefault(user_id, set()).add(page_id)

    def user_has_workspace(
        self, user_id: str, workspace_id: str
    ) -> IntegrationCredentials | None:
        return self._integrations.get((user_id, workspace_id))

    def is_valid_staging_page(self, user_id: str, page_id: str) -> bool:
        return page_id in self._draft_pages.get(user_id, set())
