"""
Twilio WhatsApp webhook router.

Endpoints:
  POST /webhook   inbound message webhook (form-encoded), answers with TwiML

The webhook always answers 200 with a TwiML <Message> so Twilio delivers a
reply even when processing failed. The only exception is the optional
signature check (TWILIO_VALIDATE_SIGNATURE=true), which rejects forged
requests with 403.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool
from twilio.request_validator import RequestValidator
from twilio.twiml.messaging_response import MessagingResponse

from invoice_relay.config import Settings
from invoice_relay.dependencies import get_dispatcher, get_settings
from invoice_relay.models.inbound_message import InboundMessage
from invoice_relay.services.dispatcher import PROCESSING_ERROR_MESSAGE, InboundDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


def render_twiml(text: str) -> str:
    """Wrap reply text in a TwiML <Response><Message>. Text is XML-escaped."""
    response = MessagingResponse()
    response.message(text)
    return str(response)


# ---------------------------------------------------------------------------
# Webhook authentication dependency
# ---------------------------------------------------------------------------

async def _verify_twilio_signature(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the X-Twilio-Signature header when signature validation is enabled.

    The signature covers the full request URL, so behind a proxy the public
    URL must match what Twilio was configured with.

    Raises 403 if the signature is missing or does not match.
    """
    if not settings.validate_signature:
        return

    if not settings.twilio_auth_token:
        logger.warning(
            "TWILIO_VALIDATE_SIGNATURE is set but TWILIO_AUTH_TOKEN is empty; "
            "all webhook requests will be rejected"
        )
        raise HTTPException(status_code=403, detail="Webhook signature not configured")

    signature = request.headers.get("X-Twilio-Signature", "")
    form = await request.form()
    validator = RequestValidator(settings.twilio_auth_token)
    if not signature or not validator.validate(str(request.url), dict(form), signature):
        logger.warning(f"Rejected webhook with invalid Twilio signature from {request.client}")
        raise HTTPException(status_code=403, detail="Invalid webhook signature")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/webhook")
async def receive_message(
    request: Request,
    dispatcher: InboundDispatcher = Depends(get_dispatcher),
    _: None = Depends(_verify_twilio_signature),
) -> Response:
    """
    Inbound WhatsApp message webhook.

    Parses the Twilio form fields, runs the dispatcher in the threadpool (it
    blocks on the media download and the analysis call) and answers with the
    reply as TwiML.
    """
    form = await request.form()
    message = InboundMessage.from_form(form)

    try:
        reply = await run_in_threadpool(dispatcher.handle, message)
    except Exception:
        logger.exception(f"Dispatcher failed for message {message.message_sid!r}")
        reply = PROCESSING_ERROR_MESSAGE

    return Response(content=render_twiml(reply), media_type="text/xml")
