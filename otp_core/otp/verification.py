"""
Verification Engine
===================
Checks submitted codes against stored challenges.
"""

import structlog

from ..utils import mask_phone
from .models import VerificationResult, VerificationStatus
from .store import ChallengeStore

logger = structlog.get_logger(__name__)


class VerificationEngine:
    """
    Attempt-limited verification over a ChallengeStore.

    Checks run in a fixed order: existence, expiry, attempt limit, code.
    When several conditions hold at once the first one in that order decides
    the outcome. Every terminal outcome removes the challenge.
    """

    def __init__(self, store: ChallengeStore, max_attempts: int = 3):
        self.store = store
        self.max_attempts = max_attempts

    def verify(self, recipient: str, submitted_code: str, now: float) -> VerificationResult:
        """
        Verify a submitted code for a recipient.

        Args:
            recipient: Phone number the challenge was issued to
            submitted_code: User-provided code
            now: Current Unix timestamp

        Returns:
            VerificationResult
        """
        masked = mask_phone(recipient)

        with self.store.locked(recipient):
            challenge = self.store.get(recipient)

            if challenge is None:
                return VerificationResult(VerificationStatus.NOT_FOUND)

            if challenge.is_expired(now):
                self.store.remove(recipient)
                logger.warning("OTP expired", recipient=masked)
                return VerificationResult(VerificationStatus.EXPIRED)

            if challenge.attempts >= self.max_attempts:
                self.store.remove(recipient)
                logger.warning("OTP attempts exhausted", recipient=masked)
                return VerificationResult(VerificationStatus.ATTEMPTS_EXCEEDED)

            if challenge.matches(submitted_code):
                self.store.remove(recipient)
                logger.info("OTP verified successfully", recipient=masked)
                return VerificationResult(VerificationStatus.VERIFIED)

            challenge.attempts += 1
            remaining = self.max_attempts - challenge.attempts

            if remaining <= 0:
                self.store.remove(recipient)
                logger.warning("OTP attempts exhausted", recipient=masked)
                return VerificationResult(VerificationStatus.ATTEMPTS_EXCEEDED)

        logger.warning("Invalid OTP attempt", recipient=masked, remaining=remaining)
        return VerificationResult(VerificationStatus.MISMATCH, remaining_attempts=remaining)
