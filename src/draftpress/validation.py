"""Destination validation.

Before anything is parsed or sent, every requested destination is checked
in request order:

1. the platform must be registered;
2. the user must own an integration for the workspace;
3. in append mode, a ``page_id`` must be given and must be one of the
   user's draft pages on that platform.

A failing destination adds one message to the error list and validation
moves on to the next one, so a single response reports every problem.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from draftpress.errors import DraftpressLookupError, DraftpressValidationError
from draftpress.models import Destination, IntegrationCredentials, ValidatedDestination
from draftpress.observability import get_logger

log = get_logger("draftpress.validation")


@runtime_checkable
class WorkspaceValidator(Protocol):
    """Per-platform ownership and page lookups.

    Either method may raise :class:`DraftpressLookupError` when the
    backing store cannot answer.
    """

    def user_has_workspace(
        self, user_id: str, workspace_id: str
    ) -> IntegrationCredentials | None:
        ...

    def is_valid_staging_page(self, user_id: str, page_id: str) -> bool:
        ...


class DestinationValidator:
    """Check destinations against the per-platform workspace validators.

    Parameters
    ----------
    platforms:
        Workspace validator for each supported platform name.
    """

    def __init__(self, platforms: Mapping[str, WorkspaceValidator]) -> None:
        self._platforms = dict(platforms)

    @property
    def platforms(self) -> frozenset[str]:
        return frozenset(self._platforms)

    def validate(
        self,
        user_id: str,
        destinations: list[Destination],
    ) -> tuple[dict[str, list[ValidatedDestination]], list[str]]:
        """Return validated destinations grouped by platform, and the errors.

        The error list is empty exactly when every destination passed.
        """
        validated: dict[str, list[ValidatedDestination]] = {}
        errors: list[str] = []

        for destination in destinations:
            try:
                checked = self._check(user_id, destination)
            except DraftpressValidationError as exc:
                log.info(
                    "Destination rejected",
                    extra={"extra_fields": {
                        "platform": destination.platform,
                        "workspace_id": destination.workspace_id,
                        "reason": exc.message,
                    }},
                )
                errors.append(exc.message)
                continue
            validated.setdefault(checked.platform, []).append(checked)

        return validated, errors

    def _check(self, user_id: str, destination: Destination) -> ValidatedDestination:
        platform = destination.platform
        workspace_id = destination.workspace_id

        validator = self._platforms.get(platform)
        if validator is None:
            raise DraftpressValidationError(f"{platform} platform does not exist")

        try:
            credentials = validator.user_has_workspace(user_id, workspace_id)
        except DraftpressLookupError as exc:
            raise DraftpressValidationError(
                f"could not verify access to {platform} workspace {workspace_id}: {exc.message}",
                cause=exc,
            ) from exc
        if credentials is None:
            raise DraftpressValidationError(
                f"unauthorized access to {platform} workspace {workspace_id}"
            )

        if destination.append:
            page_id = destination.page_id
            if not page_id:
                raise DraftpressValidationError(
                    f"append requested but page_id is missing for platform {platform}"
                )
            try:
                is_valid = validator.is_valid_staging_page(user_id, page_id)
            except DraftpressLookupError as exc:
                raise DraftpressValidationError(
                    f"could not validate page_id {page_id} for {platform}: {exc.message}",
                    cause=exc,
                ) from exc
            if not is_valid:
                raise DraftpressValidationError(
                    f"page_id {page_id} is not a valid draft for platform {platform}"
                )

        return ValidatedDestination(
            platform=platform,
            workspace_id=workspace_id,
            credentials=credentials,
            append=destination.append,
            page_id=destination.page_id,
        )
