"""
Console Delivery Gateway
========================
Logs messages instead of sending them. For local development.
"""

import structlog

from .base import DeliveryGateway, DeliveryResult

logger = structlog.get_logger(__name__)


class ConsoleGateway(DeliveryGateway):
    """Writes every message to the log and reports success."""

    name = "console"

    async def send(self, recipient: str, message: str) -> DeliveryResult:
        logger.info("SMS (console)", to=recipient, message=message)
        return DeliveryResult(success=True, status_code=200)
