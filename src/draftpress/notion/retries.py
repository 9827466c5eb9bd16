"""Retry policy for Notion requests.

A :class:`RetryPolicy` is built from :class:`DraftpressConfig` once per
transport and answers two questions for the retry loop: may this failure
be repeated, and how long to wait before doing so.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import httpx

from draftpress.config import DraftpressConfig

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

# Timeouts and connection failures.  Any other httpx error is permanent.
RETRYABLE_ERRORS: tuple[type[httpx.HTTPError], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 30.0
    jitter: bool = True

    @classmethod
    def from_config(cls, config: DraftpressConfig) -> RetryPolicy:
        return cls(
            attempts=config.retry_max_attempts,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            jitter=config.retry_jitter,
        )

    def has_attempts_left(self, attempt: int) -> bool:
        """Whether another try may follow attempt number *attempt* (0-indexed)."""
        return attempt + 1 < self.attempts

    def retryable_status(self, status_code: int) -> bool:
        return status_code in RETRYABLE_STATUSES

    def retryable_error(self, exc: Exception) -> bool:
        return isinstance(exc, RETRYABLE_ERRORS)

    def delay(self, attempt: int, retry_after: float | None = None) -> float:
        """Seconds to wait after attempt number *attempt* failed.

        A server ``Retry-After`` is honoured as given, except that jitter
        still spreads it.  Otherwise the delay doubles from ``base_delay``
        and is capped at ``max_delay``.
        """
        if retry_after is not None:
            delay = retry_after
        else:
            delay = min(self.base_delay * (2 ** attempt), self.max_delay)
        if self.jitter:
            delay *= random.uniform(0.5, 1.0)
        return delay
