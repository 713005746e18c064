"""
Inbound message dispatcher.

Turns one parsed inbound message into the reply text for the webhook
acknowledgment. Image attachments run through the extraction pipeline:

    MediaFetcher -> encode_image -> build_analysis_request -> AnalysisClient

A failure in any step is logged and answered with a fixed apology; nothing
raised by the pipeline escapes handle(), so the webhook can always be
acknowledged.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from invoice_relay.config import Settings
from invoice_relay.errors import RelayError
from invoice_relay.models.inbound_message import InboundMessage
from invoice_relay.services.analysis_client import AnalysisClient, extract_reply_text
from invoice_relay.services.analysis_request import build_analysis_request
from invoice_relay.services.image_encoder import encode_image
from invoice_relay.services.media_fetcher import MediaFetcher
from invoice_relay.services.reply_sender import ReplySender

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Reply texts
# ---------------------------------------------------------------------------

WELCOME_MESSAGE = "Welcome. Please Send me a receipt image to exract the data. Thank you!"
EMPTY_MESSAGE = "Please send either a text message or an image."
UNSUPPORTED_MEDIA_MESSAGE = "Sorry, we only support image files (JPEG, PNG, WebP)."
PROCESSING_ERROR_MESSAGE = "Sorry, there was an error processing your image."

SUPPORTED_MEDIA_TYPES = ("image/jpeg", "image/png", "image/webp")


@dataclass
class AnalysisOutcome:
    """Result of running an attachment through the extraction pipeline."""
    ok: bool
    text: str
    error: Optional[Exception] = None

    @classmethod
    def success(cls, text: str) -> "AnalysisOutcome":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: Exception) -> "AnalysisOutcome":
        return cls(ok=False, text=PROCESSING_ERROR_MESSAGE, error=error)


class InboundDispatcher:
    """Routes an inbound message to the matching reply."""

    def __init__(
        self,
        settings: Settings,
        media_fetcher: MediaFetcher,
        analysis_client: AnalysisClient,
        reply_sender: ReplySender,
    ):
        self._settings = settings
        self._media_fetcher = media_fetcher
        self._analysis_client = analysis_client
        self._reply_sender = reply_sender

    def handle(self, message: InboundMessage) -> str:
        """
        Produce the reply text for ``message``.

        Branches:
        1. One attachment of a supported image type -> extraction pipeline;
           the extracted text, or the apology on failure.
        2. One attachment of any other type -> unsupported-type message.
        3. Non-empty body -> welcome message.
        4. Anything else -> prompt to send text or an image.
        """
        if message.has_single_attachment:
            if message.media_content_type in SUPPORTED_MEDIA_TYPES:
                outcome = self._process_image(message)
                if outcome.ok:
                    self._forward(message, outcome.text)
                reply = outcome.text
            else:
                logger.info(f"Unsupported media type: {message.media_content_type!r}")
                reply = UNSUPPORTED_MEDIA_MESSAGE
        elif message.body:
            logger.info(f"Received text message: {message.body!r}")
            reply = WELCOME_MESSAGE
        else:
            logger.info("Received empty or invalid message")
            reply = EMPTY_MESSAGE

        logger.info(f"Complete message details: {message.model_dump_json(indent=2)}")
        return reply

    def _process_image(self, message: InboundMessage) -> AnalysisOutcome:
        """Run the attachment through the pipeline, never raising."""
        path = None
        try:
            path = self._media_fetcher.fetch(
                message.media_url, message.message_sid, message.media_content_type
            )
            base64_image = encode_image(path)
            request = build_analysis_request(
                base64_image,
                message.media_content_type,
                model=self._settings.anthropic_model,
                max_tokens=self._settings.max_tokens,
            )
            response = self._analysis_client.send(request)
            return AnalysisOutcome.success(extract_reply_text(response))
        except RelayError as e:
            logger.error(f"Error processing image for message {message.message_sid!r}: {e.message}")
            return AnalysisOutcome.failure(e)
        except Exception as e:
            logger.exception(f"Unexpected error processing image for message {message.message_sid!r}")
            return AnalysisOutcome.failure(e)
        finally:
            if path is not None and not self._settings.keep_media:
                self._media_fetcher.discard(path)

    def _forward(self, message: InboundMessage, text: str) -> None:
        """Push the extracted text to the notification number (or the sender)."""
        recipient = self._settings.notify_number or message.sender
        if not recipient:
            logger.warning("No recipient for extracted invoice data; skipping send")
            return
        result = self._reply_sender.send(recipient, text)
        if not result.ok:
            logger.warning(f"Extracted data was not delivered to {recipient}: {result.error}")
