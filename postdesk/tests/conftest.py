"""
Pytest configuration and fixtures for the Postdesk service tests.
"""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
import pytest_asyncio

from postdesk.models.post import PostResponse
from postdesk.services.http_store import HttpPostStore
from postdesk.services.mock_api import create_app

BASE_URL = "http://test"


def make_wire_post(post_id: int, **overrides) -> PostResponse:
    fields = {
        "title": f"Seeded {post_id}",
        "description": "Seeded description text.",
        "content": "Seeded content. " * 10,
        "author_id": 7,
        "date": datetime(2024, 1, post_id, tzinfo=UTC),
    }
    fields.update(overrides)
    return PostResponse(id=post_id, **fields)


@pytest.fixture
def seed() -> list[PostResponse]:
    return [make_wire_post(1), make_wire_post(2)]


@pytest.fixture
def app(seed):
    return create_app(seed)


@pytest_asyncio.fixture
async def async_client(app):
    """Async HTTP client against the mock posts API."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url=BASE_URL,
    ) as client:
        yield client


@pytest_asyncio.fixture
async def http_store(app):
    """HttpPostStore wired to the mock posts API in-process."""
    async with HttpPostStore(BASE_URL, transport=httpx.ASGITransport(app=app)) as store:
        yield store


@pytest.fixture
def draft_data() -> dict:
    return {
        "title": "From the wire",
        "description": "Posted through the HTTP store.",
        "content": "HTTP content body. " * 8,
    }
