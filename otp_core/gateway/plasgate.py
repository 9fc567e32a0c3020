"""
PlasGate SMS Gateway
====================
Adapter for the PlasGate REST SMS API.
"""

import httpx
from typing import Optional
import structlog

from ..config import PlasGateConfig
from ..exceptions import GatewayNotInitialized
from ..utils import mask_phone
from .base import DeliveryGateway, DeliveryResult

logger = structlog.get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to send SMS"
MAX_ERROR_LENGTH = 100


class PlasGateGateway(DeliveryGateway):
    """
    PlasGate SMS adapter.

    Sends ``{"sender", "to", "content"}`` as JSON to ``/rest/send`` with the
    private key as a query parameter and the secret in ``X-Secret``.
    Any 2xx response counts as delivered.
    """

    name = "plasgate"

    def __init__(
        self,
        config: Optional[PlasGateConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: PlasGate credentials and endpoint
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        super().__init__()
        self.config = config or PlasGateConfig.from_env()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        """Create HTTP client with auth header."""
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/"),
            headers={
                "X-Secret": self.config.secret,
                "Content-Type": "application/json",
            },
            timeout=self.config.timeout,
            transport=self._transport,
        )
        await super().initialize()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        await super().close()

    async def send(self, recipient: str, message: str) -> DeliveryResult:
        """Send SMS via PlasGate."""
        if not self._client:
            raise GatewayNotInitialized("PlasGate gateway not initialized")

        payload = {
            "sender": self.config.sender,
            "to": recipient,
            "content": message,
        }
        masked = mask_phone(recipient)
        logger.info("Sending SMS via PlasGate", to=masked)

        try:
            response = await self._client.post(
                "/rest/send",
                params={"private_key": self.config.private_key},
                json=payload,
            )
        except httpx.TimeoutException:
            logger.error("PlasGate request timed out", to=masked)
            return DeliveryResult(success=False, error_message="Request timed out")
        except httpx.HTTPError as e:
            logger.error("PlasGate send failed", to=masked, error=str(e))
            return DeliveryResult(success=False, error_message=str(e))

        logger.info(
            "PlasGate response",
            to=masked,
            status_code=response.status_code,
            body_length=len(response.text),
        )

        if 200 <= response.status_code < 300:
            return DeliveryResult(
                success=True,
                status_code=response.status_code,
                raw_response=self._parse_json(response),
            )

        error_data = self._parse_json(response)
        return DeliveryResult(
            success=False,
            status_code=response.status_code,
            error_message=self._error_message(response, error_data),
            raw_response=error_data,
        )

    @staticmethod
    def _parse_json(response: httpx.Response) -> Optional[dict]:
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _error_message(response: httpx.Response, error_data: Optional[dict]) -> str:
        """Pick the most useful error detail from a failed response."""
        if error_data is not None:
            return error_data.get("message") or error_data.get("error") or DEFAULT_ERROR_MESSAGE

        text = response.text.strip()
        if text:
            return text[:MAX_ERROR_LENGTH]
        return DEFAULT_ERROR_MESSAGE
