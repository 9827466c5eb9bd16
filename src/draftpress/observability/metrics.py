"""Metrics hook protocol and no-op default.

draftpress reports counters and timings at the points where a staging
request changes state and where the Notion transport talks to the network.
Without a configured backend a :class:`NoopMetricsHook` is used.

Emitted metric names:

* ``draftpress.staging_requests_total``  -- counter, tag ``status``
* ``draftpress.stage_duration_ms``       -- timing
* ``draftpress.lint_warnings_total``     -- counter
* ``draftpress.mapping_faults_total``    -- counter, tag ``node_kind``
* ``draftpress.drafts_total``            -- counter, tags ``platform``, ``status``
* ``draftpress.requests_total``          -- counter (transport)
* ``draftpress.retries_total``           -- counter (transport)
* ``draftpress.request_duration_ms``     -- timing (transport)
* ``draftpress.rate_limit_wait_ms``      -- timing (transport)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* are string key/value pairs that implementations translate into
    their own labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Metrics backend that discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(hook: object | None) -> MetricsHook:
    """Return *hook* if given, otherwise a shared no-op backend."""
    if hook is None:
        return _NOOP
    return hook  # type: ignore[return-value]


_NOOP = NoopMetricsHook()
