"""Unit tests for the Supabase storage and identity admin connectors."""

import json
from contextlib import asynccontextmanager

import httpx
import pytest

from lmsadmin_core.infrastructure.supabase import SupabaseAuthAdminClient, SupabaseStorageClient
from lmsadmin_core.runtime import BackendError, ServiceHttpClient


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.pop(0)


@asynccontextmanager
async def _http(recorder):
    http = ServiceHttpClient(
        base_url="https://nsg.example.co",
        api_key="service-key",
        transport=httpx.MockTransport(recorder),
    )
    try:
        yield http
    finally:
        await http.close()


class TestStorageClient:
    """Tests for SupabaseStorageClient."""

    @pytest.mark.asyncio
    async def test_list_objects_request(self):
        recorder = Recorder(httpx.Response(200, json=[{"name": "a.txt", "metadata": {"size": 1}}]))

        async with _http(recorder) as http:
            page = await SupabaseStorageClient(http).list_objects("NSG-LMS", "reports", limit=1001, offset=1000)

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/storage/v1/object/list/NSG-LMS"
        assert json.loads(request.content) == {
            "prefix": "reports",
            "limit": 1001,
            "offset": 1000,
            "sortBy": {"column": "name", "order": "asc"},
        }
        assert page[0]["name"] == "a.txt"

    @pytest.mark.asyncio
    async def test_list_objects_rejects_non_list(self):
        recorder = Recorder(httpx.Response(200, json={"unexpected": True}))

        async with _http(recorder) as http:
            with pytest.raises(BackendError):
                await SupabaseStorageClient(http).list_objects("NSG-LMS", "", limit=10)

    @pytest.mark.asyncio
    async def test_remove_objects_request(self):
        recorder = Recorder(httpx.Response(200, json=[{"name": "a.txt"}]))

        async with _http(recorder) as http:
            removed = await SupabaseStorageClient(http).remove_objects("NSG-LMS", ["a.txt", "b/c.txt"])

        request = recorder.requests[0]
        assert request.method == "DELETE"
        assert request.url.path == "/storage/v1/object/NSG-LMS"
        assert json.loads(request.content) == {"prefixes": ["a.txt", "b/c.txt"]}
        assert removed == [{"name": "a.txt"}]

    @pytest.mark.asyncio
    async def test_upload_object_request(self):
        recorder = Recorder(httpx.Response(200, json={"Key": "NSG-LMS/docs/a b.txt"}))

        async with _http(recorder) as http:
            await SupabaseStorageClient(http).upload_object(
                "NSG-LMS", "docs/a b.txt", b"hello", content_type="text/plain"
            )

        request = recorder.requests[0]
        assert request.url.raw_path == b"/storage/v1/object/NSG-LMS/docs/a%20b.txt"
        assert request.headers["x-upsert"] == "false"
        assert request.headers["cache-control"] == "max-age=3600"
        assert request.headers["content-type"] == "text/plain"
        assert request.content == b"hello"

    @pytest.mark.asyncio
    async def test_upload_conflict(self):
        recorder = Recorder(httpx.Response(409, json={"message": "The resource already exists"}))

        async with _http(recorder) as http:
            with pytest.raises(BackendError) as exc_info:
                await SupabaseStorageClient(http).upload_object("NSG-LMS", "a.txt", b"x")

        assert exc_info.value.status_code == 409


class TestAuthAdminClient:
    """Tests for SupabaseAuthAdminClient."""

    @pytest.mark.asyncio
    async def test_create_user_request(self):
        recorder = Recorder(httpx.Response(200, json={"id": "u1", "email": "a@x.io"}))

        async with _http(recorder) as http:
            user = await SupabaseAuthAdminClient(http).create_user(
                "a@x.io", "pw", user_metadata={"role": "user", "display_name": "A"}
            )

        body = json.loads(recorder.requests[0].content)
        assert recorder.requests[0].url.path == "/auth/v1/admin/users"
        assert body["email_confirm"] is True
        assert body["user_metadata"] == {"role": "user", "display_name": "A"}
        assert user["id"] == "u1"

    @pytest.mark.asyncio
    async def test_list_users_unwraps_page(self):
        recorder = Recorder(httpx.Response(200, json={"users": [{"id": "u1"}], "aud": "authenticated"}))

        async with _http(recorder) as http:
            users = await SupabaseAuthAdminClient(http).list_users(page=2, per_page=100)

        assert users == [{"id": "u1"}]
        assert recorder.requests[0].url.params["page"] == "2"
        assert recorder.requests[0].url.params["per_page"] == "100"

    @pytest.mark.asyncio
    async def test_update_user_request(self):
        recorder = Recorder(httpx.Response(200, json={"id": "u1"}))

        async with _http(recorder) as http:
            await SupabaseAuthAdminClient(http).update_user("u1", {"password": "pw"})

        assert recorder.requests[0].method == "PUT"
        assert recorder.requests[0].url.path == "/auth/v1/admin/users/u1"
