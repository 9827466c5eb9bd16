"""Configuration for draftpress.

:class:`DraftpressConfig` captures every tuneable knob of the staging
pipeline and the Notion transport.  Integration tokens are *not* part of
the configuration: every tenant brings its own token through
:class:`~draftpress.models.IntegrationCredentials`, and the transport sends
it per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class DraftpressConfig:
    """Complete configuration for a draftpress pipeline.

    Parameters
    ----------
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        Notion API root URL.  Override for proxy or testing environments.
    default_title:
        Page title used when a staging request carries an empty title.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Scale each backoff delay randomly to 50-100 % of its value.
    rate_limit_rps:
        Target requests per second for client-side pacing.
    timeout_seconds:
        HTTP timeout applied to every outbound call.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~draftpress.observability.MetricsHook` backend.
    """

    # ── Notion API ──────────────────────────────────────────────────────
    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Drafts ──────────────────────────────────────────────────────────
    default_title: str = "Untitled draft"

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 0.5

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 15.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Tenant tokens must only travel over HTTPS."
            )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if not self.default_title.strip():
            raise ValueError("default_title must not be blank")
