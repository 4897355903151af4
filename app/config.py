"""Configuration classes for the Flask application."""

from __future__ import annotations

import os
import secrets


def _load_secret() -> str:
    secret = os.environ.get("AUTOML_WIZARD_SECRET")
    if secret:
        return secret
    return secrets.token_urlsafe(64)


class BaseConfig:
    SECRET_KEY = _load_secret()
    # Uploads are parsed in memory; the per-plugin cap in config.yml is tighter.
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    RESPONSE_HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
        "Referrer-Policy": "no-referrer",
        "Cache-Control": "no-store",
    }

    # Wizard sessions idle longer than this are purged from memory.
    SESSION_TTL_MINUTES = 30

    # Gemini advisor; the API key itself is read from the named environment variable.
    ADVISOR = {
        "model": "gemini-2.5-flash",
        "timeout": 30,
        "api_key_env": "GEMINI_API_KEY",
    }


class TestingConfig(BaseConfig):
    TESTING = True
    SESSION_TTL_MINUTES = 5
    ADVISOR = {
        **BaseConfig.ADVISOR,
        "timeout": 5,
        "api_key_env": "AUTOML_WIZARD_TEST_GEMINI_KEY",
    }


__all__ = ["BaseConfig", "TestingConfig"]
