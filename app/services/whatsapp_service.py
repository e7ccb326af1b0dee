"""
app/services/whatsapp_service.py

Purpose: WhatsApp Cloud API message sending

- Sends text messages through the Graph API
- One authenticated POST per message
- Failures propagate to the caller as MessagingError
"""

import httpx
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import MessagingError
from app.core.logging import get_logger
from utils.constants import ECHO_PREFIX

logger = get_logger(__name__)


class WhatsAppService:
    """Service for sending WhatsApp messages via the Cloud API"""

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.access_token = access_token if access_token is not None else settings.ACCESS_TOKEN
        self.base_url = (base_url or settings.GRAPH_API_BASE_URL).rstrip("/")
        self.api_version = api_version or settings.GRAPH_API_VERSION
        self.timeout = timeout if timeout is not None else settings.GRAPH_API_TIMEOUT
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    def messages_url(self, phone_number_id: str) -> str:
        return f"{self.base_url}/{self.api_version}/{phone_number_id}/messages"

    async def send_message(
        self,
        phone_number_id: str,
        to: str,
        message: str
    ) -> Dict[str, Any]:
        """
        Sends a WhatsApp text message via the Cloud API

        Args:
            phone_number_id: Business phone-number id to send from
            to: Recipient id as delivered in the webhook
            message: Message text

        Returns:
            Graph API response body

        Raises:
            MessagingError: on timeout, transport error or non-2xx status
        """
        url = self.messages_url(phone_number_id)
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "text": {"body": message},
        }
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error("Graph API timeout", extra={"phone": to})
            raise MessagingError("Graph API timeout") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Graph API error: {e.response.status_code} - {e.response.text}",
                extra={"phone": to}
            )
            raise MessagingError(
                f"Graph API error: {e.response.status_code}",
                details=e.response.text
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Error sending WhatsApp message: {e}", extra={"phone": to})
            raise MessagingError(str(e)) from e

        logger.info(f"Message sent to {to}: {message[:50]}")

        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def format_echo_message(message: str) -> str:
        """Formats a message as an echo response."""
        return f"{ECHO_PREFIX}{message}"

    def is_configured(self) -> bool:
        """Check if the Cloud API token is set"""
        return bool(self.access_token)

    async def close(self):
        await self._client.aclose()
