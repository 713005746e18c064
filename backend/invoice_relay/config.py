"""
Runtime configuration.

Settings are read once from the environment (and an optional .env file) at
startup and then passed explicitly into every component, so nothing in the
pipeline reaches for os.environ on its own.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-opus-20240229"
DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_API_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_MEDIA_DIR = "media"
DEFAULT_HTTP_TIMEOUT = 60.0
DEFAULT_PORT = 8080

_TRUTHY = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, falling back to {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {name}={raw!r}, falling back to {default}")
        return default


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""
    # Anthropic Messages API
    anthropic_api_key: str = ""
    anthropic_model: str = DEFAULT_MODEL
    anthropic_api_url: str = DEFAULT_API_URL
    anthropic_version: str = DEFAULT_API_VERSION
    max_tokens: int = DEFAULT_MAX_TOKENS
    # Twilio WhatsApp
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_number: str = ""
    validate_signature: bool = False
    # Outbound notification recipient (also greeted on startup)
    notify_number: str = ""
    send_welcome_on_startup: bool = True
    # Local media storage
    media_dir: str = DEFAULT_MEDIA_DIR
    keep_media: bool = False
    # HTTP
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build Settings from environment variables.

        When ``dotenv`` is true a .env file in the working directory is loaded
        first. Variables already present in the environment win, matching
        python-dotenv's load_dotenv(override=False).
        """
        if dotenv:
            load_dotenv()

        return cls(
            anthropic_api_key=(
                os.getenv("CLAUDE_API_KEY")
                or os.getenv("ANTHROPIC_API_KEY")
                or ""
            ),
            anthropic_model=os.getenv("CLAUDE_MODEL", "").strip() or DEFAULT_MODEL,
            anthropic_api_url=os.getenv("CLAUDE_API_URL", "").strip() or DEFAULT_API_URL,
            anthropic_version=os.getenv("CLAUDE_API_VERSION", "").strip() or DEFAULT_API_VERSION,
            max_tokens=_env_int("CLAUDE_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            twilio_account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
            twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
            twilio_whatsapp_number=os.getenv("TWILIO_WHATSAPP_NUMBER", ""),
            validate_signature=_env_bool("TWILIO_VALIDATE_SIGNATURE", False),
            notify_number=os.getenv("WHATSAPP_NUMBER", ""),
            send_welcome_on_startup=_env_bool("SEND_WELCOME_ON_STARTUP", True),
            media_dir=os.getenv("MEDIA_DIR", "").strip() or DEFAULT_MEDIA_DIR,
            keep_media=_env_bool("KEEP_MEDIA", False),
            http_timeout=_env_float("HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            port=_env_int("PORT", DEFAULT_PORT),
        )
