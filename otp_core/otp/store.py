"""
Challenge Store
===============
In-memory recipient -> challenge map with lazy and eager expiry.

Each recipient hashes to one of a fixed set of re-entrant locks, so a
read-modify-write on one recipient never interleaves with another operation on
the same recipient while different recipients rarely contend.
"""

import itertools
import threading
from functools import partial
from typing import Dict, Optional
import structlog

from ..utils import mask_phone
from .hashing import generate_salt, hash_otp
from .models import Challenge
from .scheduler import EvictionHandle, EvictionScheduler, TimerQueueScheduler

logger = structlog.get_logger(__name__)


class ChallengeStore:
    """
    Process-local challenge storage.

    State lives only as long as the process; nothing is persisted.
    """

    def __init__(self, scheduler: Optional[EvictionScheduler] = None, shards: int = 64):
        if shards < 1:
            raise ValueError("shards must be positive")
        self._scheduler = scheduler or TimerQueueScheduler()
        self._challenges: Dict[str, Challenge] = {}
        self._timers: Dict[str, EvictionHandle] = {}
        self._locks = [threading.RLock() for _ in range(shards)]
        self._versions = itertools.count(1)

    def locked(self, recipient: str):
        """Lock guarding ``recipient``; hold it across read-modify-write sequences."""
        return self._locks[hash(recipient) % len(self._locks)]

    def put(self, recipient: str, code: str, ttl: float, now: float) -> float:
        """
        Create or overwrite the challenge for a recipient.

        Any eviction scheduled for a previous challenge is cancelled and a new
        one is scheduled ``ttl`` seconds out. Only a salted hash of ``code`` is
        kept.

        Returns:
            The expiry timestamp
        """
        expires_at = now + ttl
        with self.locked(recipient):
            self._cancel_timer(recipient)
            salt = generate_salt()
            challenge = Challenge(
                recipient=recipient,
                code_hash=hash_otp(code, salt),
                salt=salt,
                issued_at=now,
                expires_at=expires_at,
                version=next(self._versions),
            )
            self._challenges[recipient] = challenge
            self._timers[recipient] = self._scheduler.schedule(
                ttl, partial(self.remove_if_version, recipient, challenge.version)
            )
        return expires_at

    def get(self, recipient: str) -> Optional[Challenge]:
        return self._challenges.get(recipient)

    def remove(self, recipient: str) -> None:
        with self.locked(recipient):
            self._challenges.pop(recipient, None)
            self._cancel_timer(recipient)

    def remove_if_version(self, recipient: str, version: int) -> bool:
        """
        Remove the challenge only if it is still the one stamped ``version``.

        Eviction timers call this so a late timer never deletes a newer
        challenge issued for the same recipient.
        """
        with self.locked(recipient):
            challenge = self._challenges.get(recipient)
            if challenge is None or challenge.version != version:
                return False
            del self._challenges[recipient]
            self._cancel_timer(recipient)

        logger.info("OTP expired and removed", recipient=mask_phone(recipient))
        return True

    def sweep(self, now: float) -> int:
        """Remove every expired challenge. Returns the number removed."""
        removed = 0
        for recipient, challenge in list(self._challenges.items()):
            if challenge.is_expired(now) and self.remove_if_version(recipient, challenge.version):
                removed += 1
        return removed

    def clear(self) -> None:
        """Drop all challenges and cancel their timers."""
        for recipient in list(self._challenges):
            self.remove(recipient)

    def __len__(self) -> int:
        return len(self._challenges)

    def __contains__(self, recipient: str) -> bool:
        return recipient in self._challenges

    def _cancel_timer(self, recipient: str) -> None:
        handle = self._timers.pop(recipient, None)
        if handle is not None:
            handle.cancel()
