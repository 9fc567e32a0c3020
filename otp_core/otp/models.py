"""
OTP Models
==========
Data models and enums for OTP issuance and verification.
"""

from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass
from enum import Enum

from .hashing import verify_otp_hash


@dataclass
class Challenge:
    """The pending OTP for one recipient."""
    recipient: str
    code_hash: str
    salt: str
    issued_at: float  # Unix timestamp
    expires_at: float  # Unix timestamp
    attempts: int = 0
    version: int = 0

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at

    def matches(self, submitted: str) -> bool:
        return verify_otp_hash(submitted, self.salt, self.code_hash)


class VerificationStatus(str, Enum):
    """Outcome of a verification attempt."""
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ATTEMPTS_EXCEEDED = "attempts_exceeded"
    MISMATCH = "mismatch"


@dataclass
class VerificationResult:
    """Verification outcome, with the remaining budget on a mismatch."""
    status: VerificationStatus
    remaining_attempts: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status is VerificationStatus.VERIFIED


class IssuanceStatus(str, Enum):
    """Outcome of an issuance request."""
    ISSUED = "issued"
    RATE_LIMITED = "rate_limited"
    DELIVERY_FAILED = "delivery_failed"


@dataclass
class IssuanceResult:
    """Issuance outcome with the fields relevant to its status."""
    status: IssuanceStatus
    code: Optional[str] = None
    expires_at: Optional[float] = None
    retry_after: Optional[int] = None  # Seconds until retry allowed
    reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is IssuanceStatus.ISSUED

    @property
    def expires_at_datetime(self) -> Optional[datetime]:
        if self.expires_at is None:
            return None
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)
