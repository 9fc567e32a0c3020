"""
Issuance Rate Limiter
=====================
Minimum-interval limiter keyed by recipient.

Protects the delivery channel: the caller records an issuance only once the
message was actually delivered.
"""

import math
import threading
from typing import Dict, Set
import structlog

from .models import RateLimitInfo

logger = structlog.get_logger(__name__)


class IssuanceRateLimiter:
    """
    Enforces a minimum interval between successful issuances per recipient.

    ``reserve`` checks and claims a recipient in one step, so concurrent
    issuances for the same recipient cannot both reach the delivery channel.
    A reservation ends with ``record`` (delivered) or ``release`` (failed).

    Records older than ``retention_factor`` intervals are pruned. They could
    never deny a request again, so pruning does not change any decision.
    """

    def __init__(self, min_interval: float = 60.0, retention_factor: float = 2.0):
        """
        Args:
            min_interval: Seconds required between issuances to one recipient
            retention_factor: Records older than this many intervals are pruned
        """
        if retention_factor < 1:
            raise ValueError("retention_factor must be at least 1")
        self.min_interval = min_interval
        self.retention_factor = retention_factor
        self._last_issued: Dict[str, float] = {}
        self._in_flight: Set[str] = set()
        self._last_prune = 0.0
        self._lock = threading.Lock()

    def check(self, recipient: str, now: float) -> RateLimitInfo:
        """
        Check whether a new issuance is allowed. Never mutates state.

        Args:
            recipient: Phone number
            now: Current Unix timestamp

        Returns:
            RateLimitInfo with the decision and, when denied, whole seconds to wait
        """
        with self._lock:
            return self._decide(recipient, now)

    def reserve(self, recipient: str, now: float) -> RateLimitInfo:
        """
        Check and, when allowed, claim the recipient until record/release.

        A recipient with an issuance already in flight is denied.
        """
        with self._lock:
            info = self._decide(recipient, now)
            if info.allowed:
                self._in_flight.add(recipient)
        return info

    def release(self, recipient: str) -> None:
        """Drop a reservation without recording an issuance."""
        with self._lock:
            self._in_flight.discard(recipient)

    def record(self, recipient: str, now: float) -> None:
        """Record a successful issuance, ending any reservation."""
        with self._lock:
            self._last_issued[recipient] = now
            self._in_flight.discard(recipient)
            due = now - self._last_prune >= self.min_interval

        if due:
            self.prune(now)

    def prune(self, now: float) -> int:
        """Drop stale records. Returns the number removed."""
        cutoff = now - self.min_interval * self.retention_factor
        with self._lock:
            stale = [key for key, ts in self._last_issued.items() if ts < cutoff]
            for key in stale:
                del self._last_issued[key]
            self._last_prune = now

        if stale:
            logger.debug("Pruned rate limit records", count=len(stale))
        return len(stale)

    def reset(self, recipient: str) -> None:
        """Forget the issuance history for a recipient."""
        with self._lock:
            self._last_issued.pop(recipient, None)
            self._in_flight.discard(recipient)

    def __len__(self) -> int:
        return len(self._last_issued)

    def _decide(self, recipient: str, now: float) -> RateLimitInfo:
        # Caller holds self._lock
        if recipient in self._in_flight:
            return RateLimitInfo(allowed=False, retry_after=max(1, math.ceil(self.min_interval)))

        last = self._last_issued.get(recipient)
        if last is None:
            return RateLimitInfo(allowed=True)

        elapsed = now - last
        if elapsed >= self.min_interval:
            return RateLimitInfo(allowed=True)

        retry_after = max(1, math.ceil(self.min_interval - elapsed))
        return RateLimitInfo(allowed=False, retry_after=retry_after)
