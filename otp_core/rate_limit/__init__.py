"""
Rate Limiting Module for OTP Core
=================================
Per-recipient minimum-interval limiting for OTP issuance.
"""

from .models import RateLimitResult, RateLimitInfo
from .interval import IssuanceRateLimiter

__all__ = [
    "RateLimitResult",
    "RateLimitInfo",
    "IssuanceRateLimiter",
]
