"""HTTP transport for the Notion API.

Every destination workspace has its own integration token, so the token is
supplied per request rather than fixed on the client.  A request goes
through these steps:

1. Wait for the tenant token's pacing budget.
2. Send the request with the tenant's bearer token and the API version.
3. On ``2xx`` return the parsed JSON body.
4. On ``429`` honour ``Retry-After`` and retry.
5. On ``5xx``, a timeout or a connection failure back off and retry.
   Other httpx errors fail at once as :class:`DraftpressNetworkError`.
6. On any other ``4xx`` raise the matching typed error immediately.
7. When attempts run out raise :class:`DraftpressRetryExhaustedError`.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from draftpress.config import DraftpressConfig
from draftpress.errors import (
    DraftpressApiValidationError,
    DraftpressAuthError,
    DraftpressNetworkError,
    DraftpressNotFoundError,
    DraftpressPermissionError,
    DraftpressRemoteError,
    DraftpressRetryExhaustedError,
)
from draftpress.observability import MetricsHook, get_logger, resolve_metrics

from .pacing import TenantPacer
from .retries import RetryPolicy

log = get_logger("draftpress.transport")


def _parse_retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _decode_body(response: httpx.Response, method: str, path: str) -> dict:
    if response.status_code == 204 or not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as exc:
        raise DraftpressRemoteError(
            f"Malformed response on {method} {path}: body is not JSON",
            context={"status_code": response.status_code, "body": response.text[:200]},
            cause=exc,
        ) from exc
    if not isinstance(body, dict):
        raise DraftpressRemoteError(
            f"Malformed response on {method} {path}: expected a JSON object",
            context={"status_code": response.status_code},
        )
    return body


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a non-retryable ``4xx`` response."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message", response.text[:500])
    notion_code = body.get("code", "")

    if status == 401:
        raise DraftpressAuthError(
            f"Authentication failed on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code},
        )
    if status == 403:
        raise DraftpressPermissionError(
            f"Permission denied on {method} {path}: {notion_message}",
            context={
                "status_code": status,
                "notion_code": notion_code,
                "operation": f"{method} {path}",
            },
        )
    if status == 404:
        raise DraftpressNotFoundError(
            f"Resource not found on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code, "path": path},
        )
    if status == 400:
        raise DraftpressApiValidationError(
            f"Validation error on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code, "body": body},
        )
    raise DraftpressApiValidationError(
        f"Client error {status} on {method} {path}: {notion_message}",
        context={"status_code": status, "notion_code": notion_code, "body": body},
    )


class NotionTransport:
    """Synchronous Notion HTTP transport with pacing and retries.

    Parameters
    ----------
    config:
        Controls the base URL, API version, timeouts, retries and pacing.
    client:
        Optional pre-built :class:`httpx.Client`.  Tests pass one backed by
        :class:`httpx.MockTransport`.
    """

    def __init__(
        self,
        config: DraftpressConfig,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._policy = RetryPolicy.from_config(config)
        self._pacer = TenantPacer(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics: MetricsHook = resolve_metrics(config.metrics)
        self._client = client or httpx.Client(
            base_url=config.base_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    def request(self, method: str, path: str, *, token: str, **kwargs: Any) -> dict:
        """Send a request on behalf of the integration owning *token*.

        *kwargs* are forwarded to :meth:`httpx.Client.request` (``json=``,
        ``params=``).  Every failure surfaces as a :class:`DraftpressRemoteError`
        subclass; no httpx exception escapes.

        Raises
        ------
        DraftpressAuthError
            On 401 responses.
        DraftpressPermissionError
            On 403 responses.
        DraftpressNotFoundError
            On 404 responses.
        DraftpressApiValidationError
            On 400 and other non-retryable 4xx responses.
        DraftpressRetryExhaustedError
            When every attempt hit a retryable status.
        DraftpressNetworkError
            When the last attempt failed at the network level, or httpx
            raised a non-retryable error such as a protocol violation.
        DraftpressRemoteError
            When a successful response carries a body that is not JSON.
        """
        policy = self._policy
        last_status: int | None = None
        tags = {"method": method, "path": path}

        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {token}"
        headers["Notion-Version"] = self._config.notion_version

        for attempt in range(policy.attempts):
            wait = self._pacer.acquire(token)
            if wait > 0:
                self._metrics.timing("draftpress.rate_limit_wait_ms", wait * 1000, tags=tags)

            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, headers=headers, **kwargs)
            except httpx.HTTPError as exc:
                time.sleep(self._network_backoff(method, path, exc, attempt))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_status = response.status_code
            status_tags = {**tags, "status": str(response.status_code)}
            self._metrics.increment("draftpress.requests_total", tags=status_tags)
            self._metrics.timing("draftpress.request_duration_ms", elapsed_ms, tags=status_tags)

            if 200 <= response.status_code < 300:
                return _decode_body(response, method, path)

            if not policy.retryable_status(response.status_code):
                _raise_for_status(response, method, path)

            if not policy.has_attempts_left(attempt):
                break

            retry_after: float | None = None
            reason = "server_error"
            if response.status_code == 429:
                retry_after = _parse_retry_after(response)
                reason = "rate_limited"
                log.warning(
                    "Rate limited by Notion API",
                    extra={"extra_fields": {
                        "op": "request",
                        "method": method,
                        "path": path,
                        "retry_after": retry_after,
                        "attempt": attempt + 1,
                    }},
                )

            self._metrics.increment("draftpress.retries_total", tags={**tags, "reason": reason})
            time.sleep(policy.delay(attempt, retry_after=retry_after))

        raise DraftpressRetryExhaustedError(
            f"All {policy.attempts} attempts exhausted for {method} {path} "
            f"(last status: {last_status})",
            context={"attempts": policy.attempts, "last_status_code": last_status},
        )

    def _network_backoff(
        self,
        method: str,
        path: str,
        exc: httpx.HTTPError,
        attempt: int,
    ) -> float:
        """Return the delay before retrying after *exc*, or raise if it may not be retried."""
        self._metrics.increment(
            "draftpress.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={"extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "attempt": attempt + 1,
                "error_type": type(exc).__name__,
                "error": str(exc),
            }},
        )
        if not (self._policy.retryable_error(exc) and self._policy.has_attempts_left(attempt)):
            raise DraftpressNetworkError(
                f"Network error on {method} {path}: {exc}",
                context={"url": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment(
            "draftpress.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return self._policy.delay(attempt)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
