"""
OTP Engine
==========
Issuance orchestration: rate check, code generation, delivery, storage.
"""

import asyncio
import time
from typing import Callable, Optional
import structlog

from ..config import OTPConfig
from ..gateway.base import DeliveryGateway, DeliveryResult
from ..rate_limit import IssuanceRateLimiter
from ..utils import mask_phone
from .generator import generate_otp
from .models import IssuanceResult, IssuanceStatus, VerificationResult
from .store import ChallengeStore
from .verification import VerificationEngine

logger = structlog.get_logger(__name__)


class OTPEngine:
    """
    Issues and verifies OTPs for phone-number recipients.

    All mutable state lives in the injected store and rate limiter, so
    independent engines can coexist in one process.
    """

    def __init__(
        self,
        gateway: DeliveryGateway,
        config: Optional[OTPConfig] = None,
        store: Optional[ChallengeStore] = None,
        rate_limiter: Optional[IssuanceRateLimiter] = None,
        clock: Callable[[], float] = time.time,
        code_generator: Callable[[int], str] = generate_otp,
    ):
        self.config = config or OTPConfig()
        self.config.validate()
        self.gateway = gateway
        self.store = store if store is not None else ChallengeStore()
        self.rate_limiter = (
            rate_limiter
            if rate_limiter is not None
            else IssuanceRateLimiter(min_interval=self.config.rate_limit_seconds)
        )
        self.verifier = VerificationEngine(self.store, max_attempts=self.config.max_attempts)
        self._clock = clock
        self._generate = code_generator

    async def issue(self, recipient: str, now: Optional[float] = None) -> IssuanceResult:
        """
        Issue an OTP to a recipient.

        The challenge is stored and the rate limit consumed only after the
        gateway confirms delivery; a failed send leaves no trace so the user
        can retry immediately.

        Args:
            recipient: Pre-validated phone number
            now: Current Unix timestamp (defaults to the engine clock)

        Returns:
            IssuanceResult
        """
        now = self._clock() if now is None else now
        masked = mask_phone(recipient)

        rate = self.rate_limiter.reserve(recipient, now)
        if not rate.allowed:
            logger.info("OTP issuance rate limited", recipient=masked, retry_after=rate.retry_after)
            return IssuanceResult(IssuanceStatus.RATE_LIMITED, retry_after=rate.retry_after)

        try:
            code = self._generate(self.config.length)
            delivery = await self._deliver(recipient, self.config.render_message(code))
        except BaseException:
            self.rate_limiter.release(recipient)
            raise

        if not delivery.success:
            self.rate_limiter.release(recipient)
            logger.error("OTP delivery failed", recipient=masked, error=delivery.error_message)
            return IssuanceResult(IssuanceStatus.DELIVERY_FAILED, reason=delivery.error_message)

        expires_at = self.store.put(recipient, code, self.config.ttl_seconds, now)
        self.rate_limiter.record(recipient, now)

        logger.info("OTP issued", recipient=masked, expires_in=self.config.ttl_seconds)
        return IssuanceResult(IssuanceStatus.ISSUED, code=code, expires_at=expires_at)

    def verify(self, recipient: str, code: str, now: Optional[float] = None) -> VerificationResult:
        """Verify a submitted code. See VerificationEngine.verify."""
        now = self._clock() if now is None else now
        return self.verifier.verify(recipient, code, now)

    def close(self) -> None:
        """Drop all pending challenges and cancel their eviction timers."""
        self.store.clear()

    async def _deliver(self, recipient: str, message: str) -> DeliveryResult:
        """Single delivery attempt bounded by the configured timeout."""
        try:
            return await asyncio.wait_for(
                self.gateway.send(recipient, message),
                timeout=self.config.delivery_timeout,
            )
        except asyncio.TimeoutError:
            return DeliveryResult(success=False, error_message="Delivery timed out")
        except Exception as e:
            logger.exception("Delivery gateway raised", gateway=self.gateway.name)
            return DeliveryResult(success=False, error_message=str(e) or type(e).__name__)
