"""
Postdesk Kernel — Views

Interaction state for the three pages: the post list, the create form, and
the post detail with its edit and delete-confirm dialogs.

Views own their form drafts and dialog flags. They reference posts by id
only and never write to the cache; every mutation goes through the
orchestrator. A view stops reacting to settled operations once unmounted.
"""

from __future__ import annotations

import logging

from postdesk.kernel.cache import PostCache
from postdesk.kernel.capabilities import Navigator, PostStore
from postdesk.kernel.orchestrator import MutationOrchestrator
from postdesk.kernel.types import CREATE_PATH, LIST_PATH, Operation, OperationKind, Post, PostDraft, post_path
from postdesk.kernel.validation import validate, validate_field

logger = logging.getLogger(__name__)


class View:
    """Base for anything that can be torn down while an operation is pending."""

    def __init__(self) -> None:
        self.alive = True

    def unmount(self) -> None:
        self.alive = False


# ---------------------------------------------------------------------------
# List page
# ---------------------------------------------------------------------------


class HomeView(View):
    """Post list. Fetches on mount; loading and error are distinct from empty."""

    def __init__(self, cache: PostCache, store: PostStore, navigator: Navigator) -> None:
        super().__init__()
        self._cache = cache
        self._store = store
        self._navigator = navigator

    async def mount(self) -> None:
        await self._cache.refresh(self._store)

    @property
    def posts(self) -> tuple[Post, ...]:
        return self._cache.list()

    @property
    def is_loading(self) -> bool:
        return self._cache.is_loading

    @property
    def is_error(self) -> bool:
        return self._cache.is_error

    def open_post(self, post_id: str) -> None:
        self._navigator.navigate_to(post_path(post_id))

    def open_create(self) -> None:
        self._navigator.navigate_to(CREATE_PATH)


# ---------------------------------------------------------------------------
# Create page
# ---------------------------------------------------------------------------


class CreatePostView(View):
    """Create form: an empty draft, re-validated on every change."""

    def __init__(self, orchestrator: MutationOrchestrator, navigator: Navigator) -> None:
        super().__init__()
        self._orchestrator = orchestrator
        self._navigator = navigator
        self.draft = PostDraft()
        self.errors: dict[str, str] = {}

    @property
    def submitting(self) -> bool:
        return self._orchestrator.is_pending(OperationKind.CREATE, self.draft)

    def set_field(self, name: str, value: str) -> None:
        self.draft = self.draft.with_field(name, value)
        _track_error(self.errors, name, value)

    async def submit(self) -> Operation | None:
        """
        Submit the draft. Returns None when validation blocks the submit;
        otherwise the settled Operation. The draft survives a failure.
        """
        result = validate(self.draft)
        self.errors = dict(result.errors)
        if not result.valid:
            return None

        op = await self._orchestrator.submit_create(self.draft, view=self)
        if op.succeeded:
            self.draft = PostDraft()
            self.errors = {}
        return op

    def back_to_home(self) -> None:
        self._navigator.navigate_to(LIST_PATH)


# ---------------------------------------------------------------------------
# Detail page
# ---------------------------------------------------------------------------


class PostDetailView(View):
    """
    One post with two independent dialogs.

    Edit dialog:    open_edit → set_edit_field* → submit_edit | cancel_edit
    Delete dialog:  open_delete → confirm_delete | dismiss_delete

    The edit dialog closes only when the update succeeds. The delete dialog
    closes when the delete succeeds or the user says no; it stays open on
    failure so the user can retry.
    """

    def __init__(
        self,
        post_id: str,
        cache: PostCache,
        orchestrator: MutationOrchestrator,
        navigator: Navigator,
    ) -> None:
        super().__init__()
        self.post_id = post_id
        self._cache = cache
        self._orchestrator = orchestrator
        self._navigator = navigator

        self.edit_open = False
        self.delete_open = False
        self.edit_draft = self._last_known_draft()
        self.edit_errors: dict[str, str] = {}

    @property
    def post(self) -> Post | None:
        return self._cache.get(self.post_id)

    @property
    def updating(self) -> bool:
        return self._orchestrator.is_pending(OperationKind.UPDATE, self.post_id)

    @property
    def deleting(self) -> bool:
        return self._orchestrator.is_pending(OperationKind.DELETE, self.post_id)

    def go_back(self) -> None:
        self._navigator.navigate_back()

    # -- edit dialog --

    def open_edit(self) -> bool:
        """Open the edit dialog pre-filled from the post. False if the post is gone."""
        if self.post is None:
            logger.info("detail view: edit ignored, post %s not found", self.post_id)
            return False
        self.edit_draft = self._last_known_draft()
        self.edit_errors = {}
        self.edit_open = True
        return True

    def set_edit_field(self, name: str, value: str) -> None:
        self.edit_draft = self.edit_draft.with_field(name, value)
        _track_error(self.edit_errors, name, value)

    def cancel_edit(self) -> None:
        self.edit_open = False
        self.edit_draft = self._last_known_draft()
        self.edit_errors = {}

    async def submit_edit(self) -> Operation | None:
        """
        Submit the edit draft. Returns None when validation blocks the submit;
        otherwise the settled Operation.
        """
        result = validate(self.edit_draft)
        self.edit_errors = dict(result.errors)
        if not result.valid:
            return None

        op = await self._orchestrator.submit_update(self.post_id, self.edit_draft)
        if op.succeeded and self.alive:
            self.edit_open = False
            self.edit_draft = self._last_known_draft()
        return op

    # -- delete dialog --

    def open_delete(self) -> None:
        self.delete_open = True

    def dismiss_delete(self) -> None:
        self.delete_open = False

    async def confirm_delete(self) -> Operation:
        op = await self._orchestrator.submit_delete(self.post_id, view=self)
        if op.succeeded and self.alive:
            self.delete_open = False
        return op

    def _last_known_draft(self) -> PostDraft:
        post = self.post
        return PostDraft.from_post(post) if post is not None else PostDraft()


def _track_error(errors: dict[str, str], name: str, value: str) -> None:
    message = validate_field(name, value)
    if message is None:
        errors.pop(name, None)
    else:
        errors[name] = message
