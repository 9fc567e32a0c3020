"""
OTP Service Facade
==================
The contract an HTTP layer consumes: validates input, calls the engine and
maps every outcome to a status code and a user-facing message.

Gateway error details are logged, never returned to the user.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel
import structlog

from .exceptions import ValidationError
from .otp.engine import OTPEngine
from .otp.models import IssuanceStatus, VerificationResult, VerificationStatus
from .utils import DEFAULT_RECIPIENT_PATTERN, mask_phone, validate_recipient

logger = structlog.get_logger(__name__)


class ServiceResponse(BaseModel):
    """Transport-neutral response for send/verify calls."""
    status_code: int
    success: bool
    message: str
    expires_at: Optional[datetime] = None
    retry_after: Optional[int] = None


def _remaining_message(remaining: int) -> str:
    suffix = "" if remaining == 1 else "s"
    return f"Invalid OTP. {remaining} attempt{suffix} remaining."


VERIFICATION_MESSAGES = {
    VerificationStatus.VERIFIED: "OTP verified successfully!",
    VerificationStatus.NOT_FOUND: "OTP not found or expired",
    VerificationStatus.EXPIRED: "OTP has expired",
    VerificationStatus.ATTEMPTS_EXCEEDED: "Too many failed attempts. Please request a new OTP.",
}


class OTPService:
    """Send/verify entry points over an OTPEngine."""

    def __init__(self, engine: OTPEngine, recipient_pattern: str = DEFAULT_RECIPIENT_PATTERN):
        self.engine = engine
        self.recipient_pattern = recipient_pattern

    async def send_otp(self, phone_number: Optional[str]) -> ServiceResponse:
        try:
            recipient = validate_recipient(phone_number, self.recipient_pattern)
        except ValidationError as e:
            return ServiceResponse(status_code=400, success=False, message=e.message)

        result = await self.engine.issue(recipient)

        if result.status is IssuanceStatus.ISSUED:
            return ServiceResponse(
                status_code=200,
                success=True,
                message="OTP sent successfully! Check your phone.",
                expires_at=result.expires_at_datetime,
            )

        if result.status is IssuanceStatus.RATE_LIMITED:
            return ServiceResponse(
                status_code=429,
                success=False,
                message=f"Please wait {result.retry_after} seconds before requesting another OTP",
                retry_after=result.retry_after,
            )

        logger.error("Send OTP failed", recipient=mask_phone(recipient), reason=result.reason)
        return ServiceResponse(
            status_code=500,
            success=False,
            message="Failed to send OTP. Please try again.",
        )

    def verify_otp(self, phone_number: Optional[str], otp: Optional[str]) -> ServiceResponse:
        phone_number = phone_number.strip() if isinstance(phone_number, str) else phone_number
        otp = otp.strip() if isinstance(otp, str) else otp
        if not phone_number or not otp:
            return ServiceResponse(
                status_code=400,
                success=False,
                message="Phone number and OTP are required",
            )

        result = self.engine.verify(phone_number, otp)
        return ServiceResponse(
            status_code=200 if result.success else 400,
            success=result.success,
            message=self._verification_message(result),
        )

    @staticmethod
    def _verification_message(result: VerificationResult) -> str:
        if result.status is VerificationStatus.MISMATCH:
            return _remaining_message(result.remaining_attempts)
        return VERIFICATION_MESSAGES[result.status]
