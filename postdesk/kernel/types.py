"""
Postdesk Kernel — Shared Types

Data classes used across validation, cache, orchestrator, and views.
These are the contracts that bind the kernel together.

- Post: a persisted item as returned by the remote store
- PostDraft: immutable value of the editable fields while a form is open
- Operation: one create/update/delete attempt and its lifecycle
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum

from postdesk.kernel.errors import InvalidTransition

# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

# Declaration order matters: validation reports fields in this order.
EDITABLE_FIELDS: tuple[str, ...] = ("title", "description", "content")

# (min_length, max_length), inclusive, measured in characters
FIELD_RULES: dict[str, tuple[int, int]] = {
    "title": (2, 400),
    "description": (10, 3000),
    "content": (100, 10000),
}


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

LIST_PATH = "/"
CREATE_PATH = "/posts/new"


def post_path(post_id: str) -> str:
    """Detail page path for a post."""
    return f"/posts/{post_id}"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Post:
    """A post as known to the client. `id` and `date` are server-assigned."""

    id: str
    title: str
    description: str
    content: str
    author_id: int
    date: datetime


@dataclass(frozen=True)
class PostDraft:
    """
    Unsaved values of a post's editable fields.

    Drafts are values: editing a field returns a new draft. That keeps them
    hashable, which the orchestrator relies on to de-duplicate create submits.
    """

    title: str = ""
    description: str = ""
    content: str = ""

    @classmethod
    def from_post(cls, post: Post) -> PostDraft:
        return cls(title=post.title, description=post.description, content=post.content)

    def with_field(self, name: str, value: str) -> PostDraft:
        if name not in EDITABLE_FIELDS:
            raise KeyError(f"Unknown post field: {name}")
        return replace(self, **{name: value})

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}


class OperationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class OperationState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Allowed forward transitions. Succeeded and failed are terminal.
_TRANSITIONS: dict[OperationState, set[OperationState]] = {
    OperationState.IDLE: {OperationState.PENDING, OperationState.FAILED},
    OperationState.PENDING: {OperationState.SUCCEEDED, OperationState.FAILED},
    OperationState.SUCCEEDED: set(),
    OperationState.FAILED: set(),
}


@dataclass
class Operation:
    """
    One mutation attempt.

    A fresh Operation is created for every user-initiated submit; duplicate
    submits while one is pending receive the same instance back.
    An idle operation may fail directly when a precondition rejects it
    before any remote call (e.g. no author on create).
    """

    kind: OperationKind
    target: str | None
    state: OperationState = OperationState.IDLE
    result: Post | None = None
    error: Exception | None = None
    started_at: datetime | None = None
    settled_at: datetime | None = None

    @property
    def settled(self) -> bool:
        return self.state in (OperationState.SUCCEEDED, OperationState.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.state is OperationState.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.state is OperationState.FAILED

    def start(self) -> None:
        self._move(OperationState.PENDING)
        self.started_at = datetime.now(UTC)

    def succeed(self, result: Post | None = None) -> None:
        self._move(OperationState.SUCCEEDED)
        self.result = result
        self.settled_at = datetime.now(UTC)

    def fail(self, error: Exception) -> None:
        self._move(OperationState.FAILED)
        self.error = error
        self.settled_at = datetime.now(UTC)

    def _move(self, new_state: OperationState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransition(
                f"{self.kind.value} operation cannot go from {self.state.value} to {new_state.value}"
            )
        self.state = new_state


@dataclass
class Notification:
    """A toast shown to the user. Fire-and-forget."""

    title: str
    description: str | None = None


@dataclass
class ValidationResult:
    """
    Result of validating a draft.
    `errors` maps field name to its single message; empty means valid.
    """

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def now_utc() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(UTC)
