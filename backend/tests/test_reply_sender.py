"""
Unit tests for outbound WhatsApp messages with a MOCKED Twilio client.
"""

from unittest.mock import MagicMock, Mock

from twilio.base.exceptions import TwilioRestException

from invoice_relay.config import Settings
from invoice_relay.services.reply_sender import ReplySender, to_whatsapp_address

SETTINGS = Settings(twilio_whatsapp_number="+14155238886")


def _sender():
    client = MagicMock()
    client.messages.create.return_value = Mock(sid="SM123", status="queued")
    return ReplySender(SETTINGS, client), client


class TestToWhatsappAddress:

    def test_adds_prefix(self):
        assert to_whatsapp_address("+15550001111") == "whatsapp:+15550001111"

    def test_keeps_existing_prefix(self):
        assert to_whatsapp_address("whatsapp:+15550001111") == "whatsapp:+15550001111"


class TestSend:

    def test_sends_with_whatsapp_addresses(self):
        sender, client = _sender()

        result = sender.send("+15550001111", "hello")

        client.messages.create.assert_called_once_with(
            body="hello",
            from_="whatsapp:+14155238886",
            to="whatsapp:+15550001111",
        )
        assert result.ok
        assert result.sid == "SM123"
        assert result.status == "queued"

    def test_recipient_already_prefixed_is_not_doubled(self):
        sender, client = _sender()

        sender.send("whatsapp:+15550001111", "hello")

        assert client.messages.create.call_args[1]["to"] == "whatsapp:+15550001111"

    def test_twilio_error_is_returned_not_raised(self):
        sender, client = _sender()
        client.messages.create.side_effect = TwilioRestException(
            401, "https://api.twilio.com/Messages.json", msg="Authenticate"
        )

        result = sender.send("+15550001111", "hello")

        assert not result.ok
        assert result.sid is None
        assert "Authenticate" in result.error

    def test_unexpected_error_is_returned_not_raised(self):
        sender, client = _sender()
        client.messages.create.side_effect = ConnectionError("network down")

        result = sender.send("+15550001111", "hello")

        assert result.error == "network down"
