"""
Kernel test fixtures.

Everything runs against the in-memory capabilities: no network, no UI.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from postdesk.kernel.cache import PostCache
from postdesk.kernel.capabilities import MemoryPostStore, RecordingNavigator, RecordingNotifier, StaticSession
from postdesk.kernel.orchestrator import MutationOrchestrator
from postdesk.kernel.types import Post, PostDraft

AUTHOR_ID = 42


@pytest.fixture
def make_post():
    """Factory for valid posts with overridable fields."""

    def _make(post_id: str = "1", **overrides) -> Post:
        fields = {
            "title": f"Post {post_id}",
            "description": "A description that is long enough.",
            "content": "Lorem ipsum dolor sit amet. " * 5,
            "author_id": AUTHOR_ID,
            "date": datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
        }
        fields.update(overrides)
        return Post(id=post_id, **fields)

    return _make


@pytest.fixture
def valid_draft() -> PostDraft:
    return PostDraft(
        title="Shipping small",
        description="Why small releases beat big ones.",
        content="Small releases keep feedback loops short. " * 4,
    )


@pytest.fixture
def existing_post(make_post) -> Post:
    return make_post("1")


@pytest.fixture
def store(existing_post) -> MemoryPostStore:
    return MemoryPostStore([existing_post])


@pytest.fixture
def cache(existing_post) -> PostCache:
    cache = PostCache()
    cache.upsert(existing_post)
    return cache


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def session() -> StaticSession:
    return StaticSession(AUTHOR_ID)


@pytest.fixture
def orchestrator(store, cache, notifier, navigator, session) -> MutationOrchestrator:
    return MutationOrchestrator(store, cache, notifier, navigator, session)
