"""
Outbound WhatsApp messages via the Twilio REST API.

Sending is best-effort: failures are logged and reported in the returned
SendResult, never raised.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from twilio.rest import Client

from invoice_relay.config import Settings

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


def to_whatsapp_address(number: str) -> str:
    """Prefix a phone number with 'whatsapp:' unless already present."""
    if number.startswith(WHATSAPP_PREFIX):
        return number
    return WHATSAPP_PREFIX + number


def build_twilio_client(settings: Settings) -> Client:
    return Client(settings.twilio_account_sid, settings.twilio_auth_token)


@dataclass
class SendResult:
    """Outcome of a ReplySender.send() call."""
    sid: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReplySender:
    """Sends WhatsApp messages from the configured Twilio sender number."""

    def __init__(self, settings: Settings, client: Client):
        self._settings = settings
        self._client = client

    def send(self, recipient: str, text: str) -> SendResult:
        to = to_whatsapp_address(recipient)
        from_ = to_whatsapp_address(self._settings.twilio_whatsapp_number)

        try:
            message = self._client.messages.create(body=text, from_=from_, to=to)
        except Exception as e:
            logger.error(f"Failed to send WhatsApp message to {to}: {e}")
            return SendResult(error=str(e))

        logger.info(f"Sent WhatsApp message sid={message.sid} status={message.status}")
        return SendResult(sid=message.sid, status=message.status)
