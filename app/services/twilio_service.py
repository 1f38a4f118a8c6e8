"""
Twilio WhatsApp Service
Sends booking notifications through the Twilio Messages API
"""

import logging
from typing import Optional

import httpx

from ..config import TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_WHATSAPP_FROM

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
REQUEST_TIMEOUT_SECONDS = 12.0

NOT_CONFIGURED_MESSAGE = (
    "WhatsApp not configured. Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_WHATSAPP_FROM."
)


def whatsapp_address(number: str) -> str:
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


class WhatsAppSender:
    """Twilio WhatsApp client; owns one httpx.AsyncClient for the life of the process"""

    def __init__(
        self,
        account_sid: str = "",
        auth_token: str = "",
        from_number: str = "",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self._client = client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS)

    @classmethod
    def from_config(cls) -> "WhatsAppSender":
        return cls(
            account_sid=TWILIO_ACCOUNT_SID,
            auth_token=TWILIO_AUTH_TOKEN,
            from_number=TWILIO_WHATSAPP_FROM,
        )

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send(self, to_phone: str, message_body: str) -> tuple[bool, Optional[str]]:
        """
        Send a WhatsApp message via Twilio

        Args:
            to_phone: Recipient phone number in E.164 format
            message_body: Message content

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        if not self.configured:
            return False, NOT_CONFIGURED_MESSAGE

        if not to_phone:
            return False, "No phone number provided"

        data = {
            "From": whatsapp_address(self.from_number),
            "To": whatsapp_address(to_phone),
            "Body": message_body,
        }

        try:
            logger.info(f"Sending WhatsApp message to {to_phone}")
            response = await self._client.post(
                f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json",
                auth=(self.account_sid, self.auth_token),
                data=data,
            )
        except httpx.HTTPError as e:
            logger.error(f"Twilio API error: {str(e)}")
            return False, str(e) or e.__class__.__name__

        if response.status_code in (200, 201):
            message_sid = response.json().get("sid")
            logger.info(f"WhatsApp message sent to {to_phone} (SID: {message_sid})")
            return True, None

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error_message = error_data.get("message") or f"HTTP {response.status_code}"
        error_code = error_data.get("code")
        logger.error(f"Twilio API error [{error_code}]: {error_message}")
        return False, f"[{error_code}] {error_message}" if error_code else error_message

    async def aclose(self) -> None:
        await self._client.aclose()
