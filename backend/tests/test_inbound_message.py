"""
InboundMessage parsing tests.
"""

import pytest
from pydantic import ValidationError

from invoice_relay.models.inbound_message import InboundMessage


class TestFromForm:

    def test_maps_twilio_fields(self):
        message = InboundMessage.from_form({
            "From": "whatsapp:+15550001111",
            "To": "whatsapp:+14155238886",
            "Body": "hello",
            "MessageSid": "SM1",
            "NumMedia": "1",
            "MediaUrl0": "https://api.twilio.com/Media/ME1",
            "MediaContentType0": "image/jpeg",
            "MediaUrl1": "https://api.twilio.com/Media/ME2",
        })

        assert message.sender == "whatsapp:+15550001111"
        assert message.recipient == "whatsapp:+14155238886"
        assert message.body == "hello"
        assert message.message_sid == "SM1"
        assert message.num_media == "1"
        assert message.media_url == "https://api.twilio.com/Media/ME1"
        assert message.media_content_type == "image/jpeg"

    def test_missing_fields_default_to_empty(self):
        assert InboundMessage.from_form({}) == InboundMessage()

    def test_non_string_values_are_treated_as_missing(self):
        """An uploaded file under a field name is not a valid value."""
        message = InboundMessage.from_form({"Body": object()})
        assert message.body == ""

    def test_message_is_immutable(self):
        message = InboundMessage.from_form({"Body": "hi"})
        with pytest.raises(ValidationError):
            message.body = "changed"


class TestHasSingleAttachment:

    @pytest.mark.parametrize("num_media, expected", [("1", True), ("0", False), ("2", False), ("", False)])
    def test_only_one_counts(self, num_media, expected):
        assert InboundMessage(num_media=num_media).has_single_attachment is expected
