"""
Process-wide component wiring.

Components are built once from Settings and handed to the routers through
FastAPI dependencies; tests swap them out with app.dependency_overrides.
"""

from functools import lru_cache

import httpx

from invoice_relay.config import Settings
from invoice_relay.services.analysis_client import AnalysisClient
from invoice_relay.services.dispatcher import InboundDispatcher
from invoice_relay.services.media_fetcher import MediaFetcher
from invoice_relay.services.reply_sender import ReplySender, build_twilio_client


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def get_http_client() -> httpx.Client:
    # httpx.Client is thread-safe and shared by all request threads
    return httpx.Client(timeout=get_settings().http_timeout)


@lru_cache
def get_reply_sender() -> ReplySender:
    settings = get_settings()
    return ReplySender(settings, build_twilio_client(settings))


@lru_cache
def get_dispatcher() -> InboundDispatcher:
    settings = get_settings()
    http_client = get_http_client()
    return InboundDispatcher(
        settings=settings,
        media_fetcher=MediaFetcher(http_client, settings.media_dir),
        analysis_client=AnalysisClient(settings, http_client),
        reply_sender=get_reply_sender(),
    )
