"""
Postdesk Kernel — Errors

Validation errors stay in the views, remote failures stop at the
orchestrator. Nothing here is retried automatically.
"""

from __future__ import annotations


class PostdeskError(Exception):
    """Base class for all kernel errors."""
    pass


class ValidationError(PostdeskError):
    """A draft violates one or more field constraints."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{name}: {message}" for name, message in self.errors.items()))


class UnauthenticatedError(PostdeskError):
    """No author identity could be resolved for a create."""
    pass


class RemoteFailure(PostdeskError):
    """The remote store rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, detail: object = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class PostNotFound(PostdeskError):
    """No post with this id is known to the cache."""
    pass


class InvalidTransition(PostdeskError):
    """An operation was moved backwards or out of a terminal state."""
    pass
