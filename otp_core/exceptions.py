"""
OTP Core Exceptions
===================
Exception classes for faults that are not ordinary OTP outcomes.

Rate limiting, delivery failures and verification results are returned as
result objects, never raised.
"""

from typing import Optional, Any


class OTPError(Exception):
    """Base exception for all otp_core errors."""

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(OTPError):
    """Raised when a recipient or submitted field is malformed or missing."""

    def __init__(self, message: str, field: Optional[str] = None, details: Any = None):
        self.field = field
        super().__init__(message, details=details)


class ConfigurationError(OTPError):
    """Raised when configuration values are invalid."""
    pass


class RandomSourceUnavailable(OTPError):
    """Raised when the operating system's secure random source is missing."""
    pass


class GatewayNotInitialized(OTPError):
    """Raised when a delivery gateway is used before initialize()."""
    pass
