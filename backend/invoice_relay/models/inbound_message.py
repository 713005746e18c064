"""
Inbound WhatsApp message model.

Twilio delivers inbound messages as a form-encoded webhook with PascalCase
field names. Only the first attachment slot (MediaUrl0 / MediaContentType0)
is read; further attachments are ignored.
"""

from typing import Mapping

from pydantic import BaseModel, ConfigDict

SINGLE_ATTACHMENT = "1"


class InboundMessage(BaseModel):
    """A parsed inbound message. Missing webhook fields default to ''."""

    model_config = ConfigDict(frozen=True)

    sender: str = ""
    recipient: str = ""
    body: str = ""
    message_sid: str = ""
    num_media: str = ""
    media_url: str = ""
    media_content_type: str = ""

    @classmethod
    def from_form(cls, form: Mapping) -> "InboundMessage":
        """
        Map Twilio webhook form fields onto the model.

        Twilio field -> model field:
          From -> sender, To -> recipient, Body -> body,
          MessageSid -> message_sid, NumMedia -> num_media,
          MediaUrl0 -> media_url, MediaContentType0 -> media_content_type
        """
        def _field(name: str) -> str:
            value = form.get(name)
            return value if isinstance(value, str) else ""

        return cls(
            sender=_field("From"),
            recipient=_field("To"),
            body=_field("Body"),
            message_sid=_field("MessageSid"),
            num_media=_field("NumMedia"),
            media_url=_field("MediaUrl0"),
            media_content_type=_field("MediaContentType0"),
        )

    @property
    def has_single_attachment(self) -> bool:
        return self.num_media == SINGLE_ATTACHMENT
