"""
Delivery Gateway Base
=====================
Base classes for SMS delivery providers used by the OTP engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any
import structlog

logger = structlog.get_logger(__name__)


@dataclass
class DeliveryResult:
    """Result of a delivery attempt."""
    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


class DeliveryGateway(ABC):
    """
    Abstract base class for SMS delivery providers.

    Implementations report every failure (non-success status, transport
    error, timeout) as a failed DeliveryResult rather than raising.
    """

    name: str = "base"

    def __init__(self):
        self._is_initialized = False

    async def initialize(self) -> None:
        """Initialize the gateway (e.g., create HTTP clients)."""
        self._is_initialized = True
        logger.info("Delivery gateway initialized", gateway=self.name)

    async def close(self) -> None:
        """Clean up resources (e.g., close HTTP clients)."""
        self._is_initialized = False
        logger.info("Delivery gateway closed", gateway=self.name)

    async def __aenter__(self) -> "DeliveryGateway":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def send(self, recipient: str, message: str) -> DeliveryResult:
        """
        Send a text message.

        Args:
            recipient: Recipient phone number
            message: Message content

        Returns:
            DeliveryResult
        """
        pass
