"""
In-memory posts API for local runs and HTTP adapter tests.

Serves the same routes as the real posts API with a process-local table:
validation errors come back as 422, unknown ids as 404. Used by the CLI's
--mock mode and by tests through httpx.ASGITransport.
"""

from __future__ import annotations

import itertools
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response, status

from postdesk.models.post import CreatePostRequest, PostResponse, UpdatePostRequest

router = APIRouter(prefix="/posts", tags=["posts"])


class PostTable:
    """Process-local post rows keyed by integer id, in insertion order."""

    def __init__(self, seed: list[PostResponse] | None = None) -> None:
        self.rows: dict[int, PostResponse] = {}
        for post in seed or []:
            self.rows[int(post.id)] = post
        self._ids = itertools.count(max(self.rows, default=0) + 1)

    def insert(self, req: CreatePostRequest) -> PostResponse:
        post_id = next(self._ids)
        post = PostResponse(id=post_id, date=datetime.now(UTC), **req.model_dump())
        self.rows[post_id] = post
        return post

    def update(self, post_id: int, req: UpdatePostRequest) -> PostResponse | None:
        existing = self.rows.get(post_id)
        if existing is None:
            return None
        post = existing.model_copy(update=req.model_dump())
        self.rows[post_id] = post
        return post

    def delete(self, post_id: int) -> bool:
        return self.rows.pop(post_id, None) is not None


def _table(request: Request) -> PostTable:
    return request.app.state.posts


@router.get("", status_code=200)
async def list_posts(request: Request) -> list[PostResponse]:
    """List every post in insertion order."""
    return list(_table(request).rows.values())


@router.post("", status_code=201)
async def create_post(req: CreatePostRequest, request: Request) -> PostResponse:
    """Create a post; the server assigns id and date."""
    return _table(request).insert(req)


@router.patch("/{post_id}", status_code=200)
async def update_post(post_id: int, req: UpdatePostRequest, request: Request) -> PostResponse:
    """Replace a post's editable fields."""
    post = _table(request).update(post_id, req)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
    return post


@router.delete("/{post_id}", status_code=204)
async def delete_post(post_id: int, request: Request) -> Response:
    """Delete a post."""
    if not _table(request).delete(post_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(seed: list[PostResponse] | None = None) -> FastAPI:
    """Build a fresh app with its own post table."""
    app = FastAPI(title="Postdesk mock posts API")
    app.state.posts = PostTable(seed)
    app.include_router(router)
    return app
