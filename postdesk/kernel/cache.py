"""
Postdesk Kernel — Post Cache

Single source of truth for the list and detail views. Filled by one
fetch-all query and patched by the orchestrator after each mutation.
Nothing else writes to it.

Writes that land while a fetch is in flight are logged and replayed over
the fetch result, so a mutation that settles mid-fetch is not undone.

Status:
  idle     nothing fetched yet
  loading  fetch in flight
  ready    last fetch succeeded (possibly with zero posts)
  error    last fetch failed; list() is empty and `error` holds the failure
"""

from __future__ import annotations

import asyncio
import logging
from typing import Literal

from postdesk.kernel.capabilities import PostStore
from postdesk.kernel.errors import PostNotFound, RemoteFailure
from postdesk.kernel.types import Post

logger = logging.getLogger(__name__)

CacheStatus = Literal["idle", "loading", "ready", "error"]


class PostCache:
    """Ordered post table keyed by id."""

    def __init__(self) -> None:
        self._posts: dict[str, Post] = {}
        self.status: CacheStatus = "idle"
        self.error: RemoteFailure | None = None
        self._fetch: asyncio.Task | None = None
        self._fetch_seq = 0
        # (post_id, post or None for removal) written during the current fetch
        self._pending_writes: list[tuple[str, Post | None]] = []

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    # -- reads --

    def list(self) -> tuple[Post, ...]:
        """Snapshot of known posts in fetch/insertion order."""
        return tuple(self._posts.values())

    def get(self, post_id: str) -> Post | None:
        """Look up a post. None means not found (stale or removed id)."""
        return self._posts.get(post_id)

    def require(self, post_id: str) -> Post:
        post = self._posts.get(post_id)
        if post is None:
            raise PostNotFound(post_id)
        return post

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._posts

    def __len__(self) -> int:
        return len(self._posts)

    # -- writes --

    def upsert(self, post: Post) -> None:
        """Replace the entry in place if known, append otherwise."""
        self._posts[post.id] = post
        self._log_write(post.id, post)

    def remove(self, post_id: str) -> None:
        self._posts.pop(post_id, None)
        self._log_write(post_id, None)

    def _log_write(self, post_id: str, post: Post | None) -> None:
        if self._fetch is not None and not self._fetch.done():
            self._pending_writes.append((post_id, post))

    # -- fetch --

    async def refresh(self, store: PostStore, *, force: bool = False) -> None:
        """
        Re-fetch the whole list from the store.

        Concurrent callers share the same in-flight fetch. With `force`, a new
        fetch starts even if one is in flight; the older one's result is then
        discarded and its waiters follow the newer fetch.
        """
        if force or self._fetch is None or self._fetch.done():
            self._fetch_seq += 1
            self._fetch = asyncio.create_task(self._load(store, self._fetch_seq))
        while True:
            task = self._fetch
            await asyncio.shield(task)
            if task is self._fetch:
                return

    async def _load(self, store: PostStore, seq: int) -> None:
        self.status = "loading"
        self.error = None
        try:
            posts = await store.list_posts()
        except RemoteFailure as e:
            if seq != self._fetch_seq:
                logger.info("post cache: superseded fetch failed, ignoring: %s", e)
                return
            logger.warning("post cache: fetch failed: %s", e)
            self._posts = {}
            self._pending_writes.clear()
            self.status = "error"
            self.error = e
            return

        if seq != self._fetch_seq:
            logger.info("post cache: discarding superseded fetch")
            return

        fresh: dict[str, Post] = {}
        for post in posts:
            if post.id in fresh:
                logger.warning("post cache: duplicate id %s in fetch result, keeping last", post.id)
            fresh[post.id] = post

        if self._pending_writes:
            logger.info("post cache: replaying %d writes made during fetch", len(self._pending_writes))
        for post_id, post in self._pending_writes:
            if post is None:
                fresh.pop(post_id, None)
            else:
                fresh[post_id] = post
        self._pending_writes.clear()

        self._posts = fresh
        self.status = "ready"
        logger.info("post cache: loaded %d posts", len(fresh))
