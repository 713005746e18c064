"""
Settings loading tests.
"""

import os
from unittest.mock import patch

import pytest

from invoice_relay.config import DEFAULT_API_URL, DEFAULT_MODEL, Settings

_ENV_KEYS = [
    "CLAUDE_API_KEY", "ANTHROPIC_API_KEY", "CLAUDE_MODEL", "CLAUDE_API_URL",
    "CLAUDE_API_VERSION", "CLAUDE_MAX_TOKENS", "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN", "TWILIO_WHATSAPP_NUMBER", "TWILIO_VALIDATE_SIGNATURE",
    "WHATSAPP_NUMBER", "SEND_WELCOME_ON_STARTUP", "MEDIA_DIR", "KEEP_MEDIA",
    "HTTP_TIMEOUT", "PORT",
]


@pytest.fixture(autouse=True)
def clean_env():
    """Run each test without any relay variables from the outer environment."""
    saved = {k: os.environ.pop(k) for k in _ENV_KEYS if k in os.environ}
    yield
    for k in _ENV_KEYS:
        os.environ.pop(k, None)
    os.environ.update(saved)


class TestFromEnv:

    def test_defaults(self):
        settings = Settings.from_env(dotenv=False)

        assert settings.anthropic_model == DEFAULT_MODEL
        assert settings.anthropic_api_url == DEFAULT_API_URL
        assert settings.anthropic_version == "2023-06-01"
        assert settings.max_tokens == 1024
        assert settings.media_dir == "media"
        assert settings.keep_media is False
        assert settings.validate_signature is False
        assert settings.send_welcome_on_startup is True
        assert settings.port == 8080

    def test_reads_environment(self):
        env = {
            "CLAUDE_API_KEY": "sk-test",
            "CLAUDE_MODEL": "claude-sonnet-test",
            "TWILIO_ACCOUNT_SID": "AC123",
            "TWILIO_AUTH_TOKEN": "token",
            "TWILIO_WHATSAPP_NUMBER": "+14155238886",
            "WHATSAPP_NUMBER": "+15550001111",
            "TWILIO_VALIDATE_SIGNATURE": "true",
            "KEEP_MEDIA": "yes",
            "MEDIA_DIR": "/var/lib/relay/media",
            "HTTP_TIMEOUT": "12.5",
            "PORT": "9000",
        }
        with patch.dict(os.environ, env):
            settings = Settings.from_env(dotenv=False)

        assert settings.anthropic_api_key == "sk-test"
        assert settings.anthropic_model == "claude-sonnet-test"
        assert settings.twilio_account_sid == "AC123"
        assert settings.twilio_whatsapp_number == "+14155238886"
        assert settings.notify_number == "+15550001111"
        assert settings.validate_signature is True
        assert settings.keep_media is True
        assert settings.media_dir == "/var/lib/relay/media"
        assert settings.http_timeout == 12.5
        assert settings.port == 9000

    def test_anthropic_api_key_fallback(self):
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-fallback"}):
            assert Settings.from_env(dotenv=False).anthropic_api_key == "sk-fallback"

    def test_invalid_numbers_fall_back_to_defaults(self, caplog):
        with patch.dict(os.environ, {"PORT": "eighty", "HTTP_TIMEOUT": "soon"}):
            settings = Settings.from_env(dotenv=False)

        assert settings.port == 8080
        assert settings.http_timeout == 60.0
        assert "PORT" in caplog.text

    def test_settings_are_immutable(self):
        settings = Settings()
        with pytest.raises(Exception):
            settings.port = 1
