"""
OTP Issuance and Verification
=============================
Secure OTP generation with expiry, attempt limits and rate limiting.
"""

from .models import (
    Challenge,
    VerificationStatus,
    VerificationResult,
    IssuanceStatus,
    IssuanceResult,
)
from .generator import generate_otp
from .hashing import generate_salt, hash_otp, verify_otp_hash
from .scheduler import EvictionScheduler, TimerQueueScheduler, AsyncioScheduler
from .store import ChallengeStore
from .verification import VerificationEngine
from .engine import OTPEngine

__all__ = [
    # Models
    "Challenge",
    "VerificationStatus",
    "VerificationResult",
    "IssuanceStatus",
    "IssuanceResult",
    # Generator
    "generate_otp",
    "generate_salt",
    "hash_otp",
    "verify_otp_hash",
    # Storage
    "EvictionScheduler",
    "TimerQueueScheduler",
    "AsyncioScheduler",
    "ChallengeStore",
    # Engine
    "VerificationEngine",
    "OTPEngine",
]
