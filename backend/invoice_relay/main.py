"""
Invoice Relay API
FastAPI application relaying WhatsApp invoice images to Claude for extraction.
"""

import logging

import uvicorn
from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool

from invoice_relay.dependencies import get_reply_sender, get_settings
from invoice_relay.routers import webhook
from invoice_relay.services.dispatcher import WELCOME_MESSAGE

__version__ = "0.1.0"

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Invoice Relay",
    description="WhatsApp webhook that extracts invoice details from images with Claude",
    version=__version__,
)

app.include_router(webhook.router, tags=["webhook"])


@app.on_event("startup")
async def log_startup() -> None:
    """Log the configured port and media directory."""
    settings = get_settings()
    logger.info(
        "Invoice Relay starting on port %s (media dir: %s, keep media: %s)",
        settings.port,
        settings.media_dir,
        settings.keep_media,
    )
    if not settings.anthropic_api_key:
        logger.warning("CLAUDE_API_KEY is not set; image analysis requests will fail")


@app.on_event("startup")
async def send_startup_welcome() -> None:
    """
    Greet the notification number so it knows the relay is up.

    Skipped when WHATSAPP_NUMBER is unset or SEND_WELCOME_ON_STARTUP=false.
    A failed send is logged by ReplySender and does not block startup. The
    Twilio REST call blocks, so it runs in the threadpool.
    """
    settings = get_settings()
    if not settings.send_welcome_on_startup or not settings.notify_number:
        return
    await run_in_threadpool(get_reply_sender().send, settings.notify_number, WELCOME_MESSAGE)


@app.get("/")
async def root():
    return {"message": "Invoice Relay", "version": __version__}


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app on the configured PORT."""
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    run()
