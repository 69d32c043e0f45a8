"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from postdesk.config import DEFAULT_API_URL, Settings

ENV_VARS = [
    "POSTDESK_API_URL",
    "POSTDESK_API_TOKEN",
    "POSTDESK_TIMEOUT_SECONDS",
    "POSTDESK_USER_ID",
    "POSTDESK_REFETCH_AFTER_MUTATION",
    "POSTDESK_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings()
    assert s.API_URL == DEFAULT_API_URL
    assert s.API_TOKEN == ""
    assert s.TIMEOUT_SECONDS == 30.0
    assert s.USER_ID is None
    assert s.REFETCH_AFTER_MUTATION is False
    assert s.LOG_LEVEL == "WARNING"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("POSTDESK_API_URL", "https://posts.example.com/")
    monkeypatch.setenv("POSTDESK_API_TOKEN", "tok")
    monkeypatch.setenv("POSTDESK_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("POSTDESK_USER_ID", "12")
    monkeypatch.setenv("POSTDESK_REFETCH_AFTER_MUTATION", "yes")
    monkeypatch.setenv("POSTDESK_LOG_LEVEL", "debug")

    s = Settings()

    assert s.API_URL == "https://posts.example.com"
    assert s.API_TOKEN == "tok"
    assert s.TIMEOUT_SECONDS == 5.0
    assert s.USER_ID == 12
    assert s.REFETCH_AFTER_MUTATION is True
    assert s.LOG_LEVEL == "DEBUG"


def test_bad_user_id_raises(monkeypatch):
    monkeypatch.setenv("POSTDESK_USER_ID", "alice")
    with pytest.raises(RuntimeError, match="POSTDESK_USER_ID"):
        Settings()
