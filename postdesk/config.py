"""
Postdesk configuration — all environment variables in one place.

Read from environment at import time. Never hardcode tokens.
"""

from __future__ import annotations

import os

DEFAULT_API_URL = "http://localhost:8000"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {value!r}") from None


class Settings:
    """Application settings from environment variables."""

    def __init__(self) -> None:
        # Remote store
        self.API_URL: str = os.environ.get("POSTDESK_API_URL", DEFAULT_API_URL).rstrip("/")
        self.API_TOKEN: str = os.environ.get("POSTDESK_API_TOKEN", "")
        self.TIMEOUT_SECONDS: float = float(os.environ.get("POSTDESK_TIMEOUT_SECONDS", "30.0"))

        # Session (terminal surface only; the kernel gets it injected)
        self.USER_ID: int | None = _env_int("POSTDESK_USER_ID")

        # Cache behaviour
        self.REFETCH_AFTER_MUTATION: bool = _env_bool("POSTDESK_REFETCH_AFTER_MUTATION")

        # Logging
        self.LOG_LEVEL: str = os.environ.get("POSTDESK_LOG_LEVEL", "WARNING").upper()


# Singleton instance
settings = Settings()
