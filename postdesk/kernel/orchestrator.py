"""
Postdesk Kernel — Mutation Orchestrator

Drives create/update/delete against the remote store, tracks each attempt
as an Operation, patches the cache, and fires notifications and navigation.

Per (kind, target) at most one remote call is in flight. A duplicate submit
while one is pending awaits the same task and gets the same Operation back.

Remote failures stop here: they become a failed Operation plus a
notification, never an exception for the caller.

Callers await operations through asyncio.shield, so a torn-down view that
cancels its own await does not cancel the remote call. Cache updates and
notifications still apply on settlement. Every caller that submitted or
joined an operation registers its view; navigation happens if any of them
is still alive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import TYPE_CHECKING

from postdesk.kernel.cache import PostCache
from postdesk.kernel.capabilities import Navigator, Notifier, PostStore, SessionContext
from postdesk.kernel.errors import PostNotFound, RemoteFailure, UnauthenticatedError, ValidationError
from postdesk.kernel.types import LIST_PATH, Operation, OperationKind, PostDraft
from postdesk.kernel.validation import validate

if TYPE_CHECKING:
    from postdesk.kernel.interaction import View

logger = logging.getLogger(__name__)

CREATE_SUCCEEDED = "Create post successfully"
CREATE_FAILED = "Create post failed"
UPDATE_SUCCEEDED = "Edit post successfully"
UPDATE_FAILED = "Edit post failed"
DELETE_SUCCEEDED = "Delete post successfully"
DELETE_FAILED = "Delete post failed"

SIGNED_OUT_DESCRIPTION = "You must be signed in to create a post."


class MutationOrchestrator:
    """Coordinates remote mutations with the cache and the UI capabilities."""

    def __init__(
        self,
        store: PostStore,
        cache: PostCache,
        notifier: Notifier,
        navigator: Navigator,
        session: SessionContext,
        *,
        refetch_after_mutation: bool = False,
    ) -> None:
        self._store = store
        self._cache = cache
        self._notifier = notifier
        self._navigator = navigator
        self._session = session
        self._refetch_after_mutation = refetch_after_mutation
        self._in_flight: dict[tuple[OperationKind, Hashable], asyncio.Task[Operation]] = {}
        self._views: dict[tuple[OperationKind, Hashable], list[View | None]] = {}

    # -- public API --

    def is_pending(self, kind: OperationKind, target: Hashable) -> bool:
        """True while an operation for (kind, target) is in flight."""
        task = self._in_flight.get((kind, target))
        return task is not None and not task.done()

    async def submit_create(self, draft: PostDraft, view: View | None = None) -> Operation:
        """
        Create a post from a valid draft.

        Raises:
            ValidationError: if the draft does not validate (caller skipped the gate)
        """
        _require_valid(draft)
        return await self._dispatch(
            OperationKind.CREATE,
            draft,
            Operation(kind=OperationKind.CREATE, target=None),
            lambda op, views: self._run_create(op, draft, views),
            view,
        )

    async def submit_update(self, post_id: str, draft: PostDraft) -> Operation:
        """
        Replace a post's editable fields.

        Raises:
            ValidationError: if the draft does not validate (caller skipped the gate)
        """
        _require_valid(draft)
        return await self._dispatch(
            OperationKind.UPDATE,
            post_id,
            Operation(kind=OperationKind.UPDATE, target=post_id),
            lambda op, views: self._run_update(op, post_id, draft),
        )

    async def submit_delete(self, post_id: str, view: View | None = None) -> Operation:
        """Delete a post. Navigates to the list if any submitting `view` is that post's live detail view."""
        return await self._dispatch(
            OperationKind.DELETE,
            post_id,
            Operation(kind=OperationKind.DELETE, target=post_id),
            lambda op, views: self._run_delete(op, post_id, views),
            view,
        )

    # -- de-duplication --

    async def _dispatch(
        self,
        kind: OperationKind,
        target: Hashable,
        operation: Operation,
        runner: Callable[[Operation, list[View | None]], Awaitable[Operation]],
        view: View | None = None,
    ) -> Operation:
        key = (kind, target)
        task = self._in_flight.get(key)
        if task is not None and not task.done():
            logger.info("orchestrator: %s already pending for %r, joining it", kind.value, target)
            self._views[key].append(view)
            return await asyncio.shield(task)

        views: list[View | None] = [view]
        task = asyncio.create_task(runner(operation, views))
        self._in_flight[key] = task
        self._views[key] = views

        def _forget(done: asyncio.Task[Operation]) -> None:
            if self._in_flight.get(key) is done:
                del self._in_flight[key]
                del self._views[key]

        task.add_done_callback(_forget)
        return await asyncio.shield(task)

    # -- runners --

    async def _run_create(self, op: Operation, draft: PostDraft, views: list[View | None]) -> Operation:
        # 1. Resolve the author before touching the network
        author_id = self._session.current_user_id()
        if author_id is None:
            op.fail(UnauthenticatedError("No signed-in user to author the post"))
            logger.warning("orchestrator: create rejected, no current user")
            self._notifier.notify(CREATE_FAILED, SIGNED_OUT_DESCRIPTION)
            return op

        # 2. Remote call
        op.start()
        try:
            post = await self._store.create_post({"author_id": author_id, **draft.to_dict()})
        except RemoteFailure as e:
            op.fail(e)
            logger.warning("orchestrator: create failed: %s", e)
            self._notifier.notify(CREATE_FAILED)
            return op

        # 3. Reconcile and react
        self._cache.upsert(post)
        op.succeed(post)
        logger.info("orchestrator: created post %s", post.id)
        self._notifier.notify(CREATE_SUCCEEDED)
        if any(_is_live(view) for view in views):
            self._navigator.navigate_to(LIST_PATH)
        await self._after_mutation()
        return op

    async def _run_update(self, op: Operation, post_id: str, draft: PostDraft) -> Operation:
        if post_id not in self._cache:
            op.fail(PostNotFound(post_id))
            logger.warning("orchestrator: update skipped, post %s not in cache", post_id)
            return op

        op.start()
        try:
            post = await self._store.update_post(post_id, draft.to_dict())
        except RemoteFailure as e:
            op.fail(e)
            logger.warning("orchestrator: update of post %s failed: %s", post_id, e)
            self._notifier.notify(UPDATE_FAILED)
            return op

        self._cache.upsert(post)
        op.succeed(post)
        logger.info("orchestrator: updated post %s", post_id)
        self._notifier.notify(UPDATE_SUCCEEDED)
        await self._after_mutation()
        return op

    async def _run_delete(self, op: Operation, post_id: str, views: list[View | None]) -> Operation:
        if post_id not in self._cache:
            op.fail(PostNotFound(post_id))
            logger.warning("orchestrator: delete skipped, post %s not in cache", post_id)
            return op

        op.start()
        try:
            await self._store.delete_post(post_id)
        except RemoteFailure as e:
            op.fail(e)
            logger.warning("orchestrator: delete of post %s failed: %s", post_id, e)
            self._notifier.notify(DELETE_FAILED)
            return op

        self._cache.remove(post_id)
        op.succeed()
        logger.info("orchestrator: deleted post %s", post_id)
        self._notifier.notify(DELETE_SUCCEEDED)
        if any(_is_detail_of(view, post_id) for view in views):
            self._navigator.navigate_to(LIST_PATH)
        await self._after_mutation()
        return op

    async def _after_mutation(self) -> None:
        if self._refetch_after_mutation:
            await self._cache.refresh(self._store, force=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_valid(draft: PostDraft) -> None:
    result = validate(draft)
    if not result.valid:
        raise ValidationError(result.errors)


def _is_live(view: View | None) -> bool:
    """No view means the caller does not track liveness."""
    return view is None or view.alive


def _is_detail_of(view: View | None, post_id: str) -> bool:
    return view is not None and view.alive and getattr(view, "post_id", None) == post_id
