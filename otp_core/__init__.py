"""
OTP Core Library
================
One-time passcodes over SMS: generation, bounded-lifetime storage,
attempt-limited verification and per-recipient rate limiting.
"""

__version__ = "0.1.0"

# Configuration
from otp_core.config import OTPConfig, PlasGateConfig

# Exceptions
from otp_core.exceptions import (
    OTPError,
    ValidationError,
    ConfigurationError,
    RandomSourceUnavailable,
    GatewayNotInitialized,
)

# OTP
from otp_core.otp import (
    generate_otp,
    Challenge,
    ChallengeStore,
    TimerQueueScheduler,
    AsyncioScheduler,
    VerificationEngine,
    VerificationStatus,
    VerificationResult,
    IssuanceStatus,
    IssuanceResult,
    OTPEngine,
)

# Rate Limiting
from otp_core.rate_limit import (
    IssuanceRateLimiter,
    RateLimitInfo,
    RateLimitResult,
)

# Gateways
from otp_core.gateway import (
    DeliveryGateway,
    DeliveryResult,
    ConsoleGateway,
    PlasGateGateway,
)

# Service
from otp_core.service import OTPService, ServiceResponse

# Utilities
from otp_core.utils import mask_phone, validate_recipient

__all__ = [
    # Configuration
    "OTPConfig",
    "PlasGateConfig",
    # Exceptions
    "OTPError",
    "ValidationError",
    "ConfigurationError",
    "RandomSourceUnavailable",
    "GatewayNotInitialized",
    # OTP
    "generate_otp",
    "Challenge",
    "ChallengeStore",
    "TimerQueueScheduler",
    "AsyncioScheduler",
    "VerificationEngine",
    "VerificationStatus",
    "VerificationResult",
    "IssuanceStatus",
    "IssuanceResult",
    "OTPEngine",
    # Rate Limiting
    "IssuanceRateLimiter",
    "RateLimitInfo",
    "RateLimitResult",
    # Gateways
    "DeliveryGateway",
    "DeliveryResult",
    "ConsoleGateway",
    "PlasGateGateway",
    # Service
    "OTPService",
    "ServiceResponse",
    # Utilities
    "mask_phone",
    "validate_recipient",
]
