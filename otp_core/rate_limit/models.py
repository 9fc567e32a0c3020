"""
Rate Limit Models
=================
Data models for rate limiting results.
"""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class RateLimitResult(str, Enum):
    """Rate limit decision result."""
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass
class RateLimitInfo:
    """Rate limit check result."""
    allowed: bool
    retry_after: Optional[int] = None  # Seconds until retry allowed

    @property
    def result(self) -> RateLimitResult:
        return RateLimitResult.ALLOWED if self.allowed else RateLimitResult.DENIED
