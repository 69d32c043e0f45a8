"""HTTP client for the posts API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pydantic

from postdesk.kernel.capabilities import PostStore
from postdesk.kernel.errors import RemoteFailure
from postdesk.kernel.types import Post
from postdesk.models.post import CreatePostRequest, PostResponse, UpdatePostRequest

logger = logging.getLogger(__name__)


class HttpPostStore(PostStore):
    """
    PostStore backed by the posts REST API.

    Routes:
        GET    /posts
        POST   /posts
        PATCH  /posts/{id}
        DELETE /posts/{id}

    Every transport error, non-2xx status, and malformed body is raised as
    RemoteFailure so the orchestrator sees one failure type.
    """

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HttpPostStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _headers(self) -> dict:
        """Build request headers."""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, path: str, data: dict | None = None) -> Any:
        """Send a request and return the decoded JSON body (None for empty bodies)."""
        try:
            res = await self._get_client().request(method, path, json=data, headers=self._headers())
            res.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("http store: %s %s returned %d", method, path, status)
            raise RemoteFailure(
                f"{method} {path} returned {status}",
                status_code=status,
                detail=_error_detail(e.response),
            ) from e
        except httpx.HTTPError as e:
            logger.warning("http store: %s %s failed: %s", method, path, e)
            raise RemoteFailure(f"{method} {path} failed: {e}") from e

        if res.status_code == 204 or not res.content:
            return None
        try:
            return res.json()
        except ValueError as e:
            raise RemoteFailure(f"{method} {path} returned a non-JSON body", status_code=res.status_code) from e

    async def list_posts(self) -> list[Post]:
        body = await self._request("GET", "/posts")
        if not isinstance(body, list):
            raise RemoteFailure("GET /posts did not return a list")
        return [_parse_post(item) for item in body]

    async def create_post(self, data: dict[str, Any]) -> Post:
        req = CreatePostRequest(**data)
        return _parse_post(await self._request("POST", "/posts", req.model_dump()))

    async def update_post(self, post_id: str, data: dict[str, Any]) -> Post:
        req = UpdatePostRequest(**data)
        return _parse_post(await self._request("PATCH", f"/posts/{post_id}", req.model_dump()))

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", f"/posts/{post_id}")

    async def aclose(self) -> None:
        """Close client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _parse_post(item: Any) -> Post:
    try:
        return PostResponse.model_validate(item).to_post()
    except pydantic.ValidationError as e:
        raise RemoteFailure(f"Malformed post in response: {e.error_count()} errors") from e


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body
