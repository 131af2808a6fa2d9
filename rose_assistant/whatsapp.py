from typing import Any, Dict, Optional, Tuple

import requests

from . import settings
from .errors import OutboundMessageError
from .log import get_logger


logger = get_logger(__name__)

GRAPH_URL = "https://graph.facebook.com"


class WhatsAppClient:
    """WhatsApp Business Cloud API client for plain text replies."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        phone_number_id: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token or settings.WHATSAPP_ACCESS_TOKEN
        self.phone_number_id = phone_number_id or settings.WHATSAPP_PHONE_NUMBER_ID
        self.api_version = api_version or settings.WHATSAPP_API_VERSION
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def messages_url(self) -> str:
        return f"{GRAPH_URL}/{self.api_version}/{self.phone_number_id}/messages"

    def send_message(self, to: str, text: str) -> Dict[str, Any]:
        """
        Send a text message to a WhatsApp user.

        Args:
            to: Phone number in international format (e.g., "919876543210")
            text: Message body

        Returns:
            dict: API response
        """
        if not self.access_token or not self.phone_number_id:
            raise OutboundMessageError("WhatsApp credentials are not configured", status_code=500)
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "text": {"body": text},
        }
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        try:
            resp = self.session.post(self.messages_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("error sending message to %s: %s", to, e)
            raise OutboundMessageError(f"Failed to send message to {to}", details={"error": str(e)}) from e

        if resp.status_code >= 400:
            try:
                details = resp.json()
            except ValueError:
                details = {"response": resp.text}
            logger.error("WhatsApp API rejected message to %s: %s", to, details)
            raise OutboundMessageError(
                f"Failed to send message to {to}", status_code=resp.status_code, details=details
            )
        logger.info("message sent to %s", to)
        try:
            return resp.json()
        except ValueError:
            return {}


def verify_subscription(mode: Optional[str], token: Optional[str], challenge: Optional[str]) -> Optional[str]:
    """Return the challenge to echo when the webhook subscription handshake is valid."""
    if mode == "subscribe" and token and token == settings.WHATSAPP_VERIFY_TOKEN:
        return challenge
    return None


def parse_inbound_message(payload: Dict[str, Any]) -> Optional[Tuple[str, str]]:
    """Extract ``(from, text)`` from a webhook payload; None for statuses, media or malformed bodies."""
    if not isinstance(payload, dict) or not payload.get("object"):
        return None
    try:
        value = payload["entry"][0]["changes"][0]["value"]
        message = value["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(message, dict) or not isinstance(message.get("text"), dict):
        return None
    sender = message.get("from")
    text = message["text"].get("body")
    if not sender or not text:
        return None
    return sender, text
