"""Error hierarchy for draftpress.

Every error class inherits from :class:`DraftpressError`.  Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

All failures are request-scoped.  Input, validation and parse errors reject
a staging request as a whole; remote errors are captured per destination;
mapping faults are logged and skipped.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error draftpress can raise."""

    INPUT_INVALID = "INPUT_INVALID"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    MAPPING_FAULT = "MAPPING_FAULT"
    TRAVERSAL_ERROR = "TRAVERSAL_ERROR"
    LOOKUP_ERROR = "LOOKUP_ERROR"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    REMOTE_FAILURE = "REMOTE_FAILURE"
    API_VALIDATION_ERROR = "API_VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INCOMPLETE_PAGE = "INCOMPLETE_PAGE"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class DraftpressError(Exception):
    """Base exception for all draftpress errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class _CodedError(DraftpressError):
    """Subclasses bind a fixed code through ``default_code``."""

    default_code: str

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self.default_code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Pipeline errors
# ---------------------------------------------------------------------------

class DraftpressInputError(_CodedError):
    """The document text or the request shape is unusable.

    Raised for empty or non-string Markdown and for destinations missing a
    required field.  Always detected before any remote call.
    """

    default_code = ErrorCode.INPUT_INVALID


class DraftpressValidationError(_CodedError):
    """One or more destinations failed platform, workspace or page checks.

    Context keys: ``errors`` (list of per-destination messages).
    """

    default_code = ErrorCode.VALIDATION_FAILED


class DraftpressMappingError(_CodedError):
    """A single tree node could not be mapped to a block.

    Context keys: ``node_kind``.
    """

    default_code = ErrorCode.MAPPING_FAULT


class DraftpressTraversalError(_CodedError):
    """The document tree itself is malformed (shared subtree, cycle, or a
    child that is not a node).  Aborts linting and mapping.
    """

    default_code = ErrorCode.TRAVERSAL_ERROR


class DraftpressLookupError(_CodedError):
    """A workspace or page lookup could not be completed."""

    default_code = ErrorCode.LOOKUP_ERROR


class DraftpressUnsupportedError(_CodedError):
    """The requested staging mode is declared but not implemented.

    Context keys: ``operation``.
    """

    default_code = ErrorCode.UNSUPPORTED_OPERATION


# ---------------------------------------------------------------------------
# Remote errors
# ---------------------------------------------------------------------------

class DraftpressRemoteError(_CodedError):
    """Base class for failures of a destination platform call."""

    default_code = ErrorCode.REMOTE_FAILURE


class DraftpressApiValidationError(DraftpressRemoteError):
    """The platform rejected the payload (HTTP 400 and other plain 4xx).

    Context keys: ``status_code``, ``notion_code``, ``body``.
    """

    default_code = ErrorCode.API_VALIDATION_ERROR


class DraftpressAuthError(DraftpressRemoteError):
    """The tenant's integration token is invalid or revoked (HTTP 401)."""

    default_code = ErrorCode.AUTH_ERROR


class DraftpressPermissionError(DraftpressRemoteError):
    """The integration lacks access to the parent page (HTTP 403).

    Context keys: ``operation``.
    """

    default_code = ErrorCode.PERMISSION_ERROR


class DraftpressNotFoundError(DraftpressRemoteError):
    """The parent page or block does not exist (HTTP 404).

    Context keys: ``path``.
    """

    default_code = ErrorCode.NOT_FOUND


class DraftpressRetryExhaustedError(DraftpressRemoteError):
    """All attempts for a retryable request were used up.

    Context keys: ``attempts``, ``last_status_code``.
    """

    default_code = ErrorCode.RETRY_EXHAUSTED


class DraftpressNetworkError(DraftpressRemoteError):
    """A transport-level failure (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    default_code = ErrorCode.NETWORK_ERROR


class DraftpressIncompletePageError(DraftpressRemoteError):
    """The page was created but appending the remaining content failed.

    The page exists on the platform and holds only the first batches.

    Context keys: ``page_id``, ``url``, ``blocks_sent``, ``blocks_total``.
    """

    default_code = ErrorCode.INCOMPLETE_PAGE
