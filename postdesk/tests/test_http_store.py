"""Tests for HttpPostStore against the mock API and against canned transports."""

from __future__ import annotations

import httpx
import pytest

from postdesk.kernel.cache import PostCache
from postdesk.kernel.capabilities import RecordingNavigator, RecordingNotifier, StaticSession
from postdesk.kernel.errors import RemoteFailure
from postdesk.kernel.orchestrator import CREATE_SUCCEEDED, UPDATE_FAILED, MutationOrchestrator
from postdesk.kernel.types import PostDraft
from postdesk.services.http_store import HttpPostStore

pytestmark = pytest.mark.asyncio


def canned_store(handler, token: str | None = None) -> HttpPostStore:
    return HttpPostStore("http://canned", token=token, transport=httpx.MockTransport(handler))


# ============================================================================
# Against the mock posts API
# ============================================================================


class TestAgainstMockApi:
    async def test_list_posts(self, http_store):
        posts = await http_store.list_posts()
        assert [p.id for p in posts] == ["1", "2"]
        assert posts[0].date.tzinfo is not None

    async def test_create_post(self, http_store, draft_data):
        post = await http_store.create_post({"author_id": 5, **draft_data})

        assert post.id == "3"
        assert post.author_id == 5
        assert post.title == draft_data["title"]

    async def test_update_post(self, http_store, draft_data):
        post = await http_store.update_post("2", draft_data)
        assert post.id == "2"
        assert post.description == draft_data["description"]

    async def test_update_unknown_raises_remote_failure(self, http_store, draft_data):
        with pytest.raises(RemoteFailure) as exc_info:
            await http_store.update_post("99", draft_data)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Post not found."

    async def test_delete_post(self, http_store):
        await http_store.delete_post("1")
        assert [p.id for p in await http_store.list_posts()] == ["2"]

    async def test_orchestrated_round_trip(self, http_store):
        """Kernel + HTTP store + mock API end to end."""
        cache = PostCache()
        notifier = RecordingNotifier()
        navigator = RecordingNavigator()
        orchestrator = MutationOrchestrator(http_store, cache, notifier, navigator, StaticSession(9))
        await cache.refresh(http_store)

        draft = PostDraft(
            title="End to end",
            description="Goes through every layer.",
            content="Every layer gets exercised here. " * 4,
        )
        op = await orchestrator.submit_create(draft)

        assert op.succeeded
        assert [p.id for p in cache.list()] == ["1", "2", op.result.id]
        assert notifier.titles == [CREATE_SUCCEEDED]
        assert navigator.current == "/"

        await orchestrator.submit_delete(op.result.id)
        assert cache.get(op.result.id) is None

        gone = await orchestrator.submit_update("404", draft)
        assert gone.failed


# ============================================================================
# Canned transports
# ============================================================================


class TestFailures:
    async def test_server_error_maps_to_remote_failure(self):
        store = canned_store(lambda request: httpx.Response(500, json={"detail": "boom"}))

        with pytest.raises(RemoteFailure) as exc_info:
            await store.list_posts()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "boom"
        await store.aclose()

    async def test_transport_error_maps_to_remote_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = canned_store(handler)
        with pytest.raises(RemoteFailure) as exc_info:
            await store.list_posts()

        assert exc_info.value.status_code is None
        await store.aclose()

    async def test_non_json_body(self):
        store = canned_store(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(RemoteFailure):
            await store.list_posts()
        await store.aclose()

    async def test_malformed_post(self):
        store = canned_store(lambda request: httpx.Response(200, json=[{"id": 1, "title": "no body"}]))
        with pytest.raises(RemoteFailure):
            await store.list_posts()
        await store.aclose()

    async def test_list_must_be_a_list(self):
        store = canned_store(lambda request: httpx.Response(200, json={"posts": []}))
        with pytest.raises(RemoteFailure):
            await store.list_posts()
        await store.aclose()

    async def test_failed_update_surfaces_as_notification(self, make_kernel_post):
        store = canned_store(lambda request: httpx.Response(422, json={"detail": []}))
        cache = PostCache()
        cache.upsert(make_kernel_post)
        notifier = RecordingNotifier()
        orchestrator = MutationOrchestrator(store, cache, notifier, RecordingNavigator(), StaticSession(1))

        op = await orchestrator.submit_update(
            make_kernel_post.id,
            PostDraft(title="ok", description="long enough", content="x" * 100),
        )

        assert op.failed
        assert op.error.status_code == 422
        assert cache.get(make_kernel_post.id) == make_kernel_post
        assert notifier.titles == [UPDATE_FAILED]
        await store.aclose()


class TestRequests:
    async def test_bearer_token_and_routes(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            if request.method == "DELETE":
                return httpx.Response(204)
            return httpx.Response(200, json=[])

        async with canned_store(handler, token="secret") as store:
            await store.list_posts()
            await store.delete_post("12")

        assert [(r.method, r.url.path) for r in seen] == [("GET", "/posts"), ("DELETE", "/posts/12")]
        assert all(r.headers["Authorization"] == "Bearer secret" for r in seen)

    async def test_no_token_no_header(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        async with canned_store(handler) as store:
            await store.list_posts()

        assert "Authorization" not in seen[0].headers

    async def test_string_ids_pass_through(self):
        body = {
            "id": "abc",
            "title": "Strings",
            "description": "String identifiers.",
            "content": "c" * 100,
            "author_id": 1,
            "date": "2024-05-01T10:00:00",
        }
        async with canned_store(lambda request: httpx.Response(201, json=body)) as store:
            post = await store.create_post(
                {"author_id": 1, "title": "Strings", "description": "String identifiers.", "content": "c" * 100}
            )

        assert post.id == "abc"
        assert post.date.tzinfo is not None


@pytest.fixture
def make_kernel_post(seed):
    return seed[0].to_post()
