"""
Pydantic models for Postdesk.

Wire shapes only. No imports from services or the CLI.
"""

from postdesk.models.post import CreatePostRequest, PostResponse, UpdatePostRequest

__all__ = [
    "CreatePostRequest",
    "UpdatePostRequest",
    "PostResponse",
]
