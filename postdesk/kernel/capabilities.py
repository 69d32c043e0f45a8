"""
Postdesk Kernel — Capabilities

Interfaces to the outside world the kernel consumes: remote store,
navigation, notifications, and the user session. Implement them with HTTP
and a real UI in production, or use the in-memory versions below for tests.
"""

from __future__ import annotations

import itertools
from typing import Any

from postdesk.kernel.errors import RemoteFailure
from postdesk.kernel.types import Notification, Post, now_utc

# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class PostStore:
    """
    Remote post store. Every method raises RemoteFailure when the store
    rejects the call or cannot be reached.
    """

    async def list_posts(self) -> list[Post]:
        raise NotImplementedError

    async def create_post(self, data: dict[str, Any]) -> Post:
        """data: {author_id, title, description, content}"""
        raise NotImplementedError

    async def update_post(self, post_id: str, data: dict[str, Any]) -> Post:
        """data: {title, description, content}"""
        raise NotImplementedError

    async def delete_post(self, post_id: str) -> None:
        raise NotImplementedError


class Navigator:
    def navigate_to(self, path: str) -> None:
        raise NotImplementedError

    def navigate_back(self) -> None:
        raise NotImplementedError


class Notifier:
    def notify(self, title: str, description: str | None = None) -> None:
        raise NotImplementedError


class SessionContext:
    def current_user_id(self) -> int | None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------


class MemoryPostStore(PostStore):
    """
    In-memory store for testing.

    Set `fail_on` to a set of method names ("list_posts", "create_post", ...)
    to make those calls raise RemoteFailure. `calls` records every call made.
    """

    def __init__(self, posts: list[Post] | None = None) -> None:
        self.posts: dict[str, Post] = {p.id: p for p in posts or []}
        self.fail_on: set[str] = set()
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._ids = itertools.count(len(self.posts) + 1)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.fail_on:
            raise RemoteFailure(f"{method} failed", status_code=500)

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def list_posts(self) -> list[Post]:
        self._record("list_posts")
        return list(self.posts.values())

    async def create_post(self, data: dict[str, Any]) -> Post:
        self._record("create_post", data)
        post_id = str(next(self._ids))
        while post_id in self.posts:
            post_id = str(next(self._ids))
        post = Post(
            id=post_id,
            title=data["title"],
            description=data["description"],
            content=data["content"],
            author_id=data["author_id"],
            date=now_utc(),
        )
        self.posts[post.id] = post
        return post

    async def update_post(self, post_id: str, data: dict[str, Any]) -> Post:
        self._record("update_post", post_id, data)
        existing = self.posts.get(post_id)
        if existing is None:
            raise RemoteFailure(f"Post {post_id} not found", status_code=404)
        post = Post(
            id=existing.id,
            title=data["title"],
            description=data["description"],
            content=data["content"],
            author_id=existing.author_id,
            date=existing.date,
        )
        self.posts[post_id] = post
        return post

    async def delete_post(self, post_id: str) -> None:
        self._record("delete_post", post_id)
        if self.posts.pop(post_id, None) is None:
            raise RemoteFailure(f"Post {post_id} not found", status_code=404)


class RecordingNavigator(Navigator):
    """Keeps a history stack instead of driving a real router."""

    def __init__(self, start: str = "/") -> None:
        self.history: list[str] = [start]
        self.calls: list[tuple[str, str | None]] = []

    @property
    def current(self) -> str:
        return self.history[-1]

    def navigate_to(self, path: str) -> None:
        self.calls.append(("to", path))
        self.history.append(path)

    def navigate_back(self) -> None:
        self.calls.append(("back", None))
        if len(self.history) > 1:
            self.history.pop()


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]

    def notify(self, title: str, description: str | None = None) -> None:
        self.notifications.append(Notification(title=title, description=description))


class StaticSession(SessionContext):
    """Session with a fixed user id (None for signed out)."""

    def __init__(self, user_id: int | None = None) -> None:
        self.user_id = user_id

    def current_user_id(self) -> int | None:
        return self.user_id
