"""Per-tenant request pacing.

Notion rate-limits each integration separately, and every destination
workspace brings its own integration token.  :class:`TenantPacer` keeps one
refilling budget per token, so a tenant staging to many pages only ever
waits on its own budget.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass


@dataclass
class _Budget:
    tokens: float
    refilled_at: float


class TenantPacer:
    """Thread-safe pacer keyed by integration token.

    Parameters
    ----------
    rate_rps:
        Sustained requests per second allowed for each token.
    burst:
        Requests a token may send back to back before pacing starts.
    """

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self.rate = rate_rps
        self.burst = burst
        self._budgets: dict[str, _Budget] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._budgets)

    def acquire(self, key: str) -> float:
        """Reserve one request for *key*, sleeping until it may be sent.

        Budgets are created on first use.  Returns the seconds slept.
        """
        with self._lock:
            now = time.monotonic()
            budget = self._budgets.get(key)
            if budget is None:
                budget = self._budgets[key] = _Budget(float(self.burst), now)

            budget.tokens = min(
                float(self.burst),
                budget.tokens + (now - budget.refilled_at) * self.rate,
            )
            budget.refilled_at = now
            budget.tokens -= 1.0
            # A negative balance is a reservation: later callers queue behind it.
            wait = 0.0 if budget.tokens >= 0 else -budget.tokens / self.rate

        if wait > 0:
            time.sleep(wait)
        return wait
