"""
Tests for the PostgREST/Auth/Storage gateway against a mocked transport.
"""

import json

import httpx
import pytest

from api.baas.client import BaaSClient, BaaSError, build_filter_params


def make_client(handler, **kwargs):
    transport = httpx.MockTransport(handler)
    options = {
        "url": "http://baas.test/",
        "anon_key": "anon-key",
        "service_role_key": "service-key",
        "retry_attempts": 3,
    }
    options.update(kwargs)
    return BaaSClient(http_client=httpx.AsyncClient(transport=transport), **options)


# ==============================================================================
# FILTERS
# ==============================================================================


@pytest.mark.parametrize(
    "filters, expected",
    [
        ({"id": "chat-1"}, {"id": "eq.chat-1"}),
        ({"is_read": False}, {"is_read": "eq.false"}),
        ({"assigned_psicologo_id": None}, {"assigned_psicologo_id": "is.null"}),
        ({"status": ("in", ["novo_chat", "a_decorrer"])}, {"status": "in.(novo_chat,a_decorrer)"}),
        ({"title": ("ilike", "%sono%")}, {"title": "ilike.%sono%"}),
        ({"is_online": ("is", True)}, {"is_online": "is.true"}),
        (None, {}),
    ],
    ids=["FLT_001_eq", "FLT_002_bool", "FLT_003_null", "FLT_004_in", "FLT_005_ilike", "FLT_006_is", "FLT_007_none"],
)
def test_build_filter_params(filters, expected):
    assert build_filter_params(filters) == expected


# ==============================================================================
# REQUESTS
# ==============================================================================


@pytest.mark.asyncio
async def test_select_sends_user_token_and_query():
    seen = {}

    def handler(request):
        seen["url"] = request.url
        seen["headers"] = request.headers
        return httpx.Response(200, json=[{"id": "chat-1"}])

    client = make_client(handler)
    rows = await client.select(
        "chats", filters={"status": "novo_chat"}, order="last_message_at.desc", limit=5, token="user-jwt"
    )
    assert rows == [{"id": "chat-1"}]
    assert seen["url"].path == "/rest/v1/chats"
    assert seen["url"].params["status"] == "eq.novo_chat"
    assert seen["url"].params["order"] == "last_message_at.desc"
    assert seen["url"].params["limit"] == "5"
    assert seen["url"].params["select"] == "*"
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["authorization"] == "Bearer user-jwt"
    await client.aclose()


@pytest.mark.asyncio
async def test_admin_calls_use_service_role():
    seen = {}

    def handler(request):
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    client = make_client(handler)
    result = await client.rpc("update_psicologo_status", {"psicologo_id": "p1"}, admin=True)
    assert result == {"success": True}
    assert seen["headers"]["apikey"] == "service-key"
    assert seen["headers"]["authorization"] == "Bearer service-key"
    assert seen["body"] == {"psicologo_id": "p1"}
    await client.aclose()


@pytest.mark.asyncio
async def test_admin_without_service_role_is_500():
    client = make_client(lambda r: httpx.Response(200, json={}), service_role_key="")
    with pytest.raises(BaaSError) as exc_info:
        await client.rpc("anything", admin=True)
    assert exc_info.value.status_code == 500
    await client.aclose()


@pytest.mark.asyncio
async def test_unconfigured_client_is_503():
    client = make_client(lambda r: httpx.Response(200, json=[]), url="", anon_key="")
    assert client.configured is False
    with pytest.raises(BaaSError) as exc_info:
        await client.select("chats")
    assert exc_info.value.status_code == 503
    assert await client.ping() is False
    await client.aclose()


@pytest.mark.asyncio
async def test_single_without_rows_is_404():
    client = make_client(lambda r: httpx.Response(200, json=[]))
    with pytest.raises(BaaSError) as exc_info:
        await client.select("chats", filters={"id": "missing"}, single=True)
    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "PGRST116"
    await client.aclose()


@pytest.mark.asyncio
async def test_insert_asks_for_representation():
    seen = {}

    def handler(request):
        seen["prefer"] = request.headers.get("prefer")
        seen["method"] = request.method
        return httpx.Response(201, json=[{"id": "m1", **json.loads(request.content)}])

    client = make_client(handler)
    row = await client.insert("messages", {"content": "enc:v1:..."}, token="t")
    assert row == {"id": "m1", "content": "enc:v1:..."}
    assert seen == {"prefer": "return=representation", "method": "POST"}
    await client.aclose()


@pytest.mark.asyncio
async def test_update_and_delete_require_filters():
    client = make_client(lambda r: httpx.Response(200, json=[]))
    with pytest.raises(ValueError):
        await client.update("chats", {}, {"status": "encerrado"})
    with pytest.raises(ValueError):
        await client.delete("chats", {})
    await client.aclose()


@pytest.mark.asyncio
async def test_error_body_is_surfaced():
    def handler(request):
        return httpx.Response(
            409, json={"message": "duplicate key value", "code": "23505", "details": "Key (id)"}
        )

    client = make_client(handler)
    with pytest.raises(BaaSError) as exc_info:
        await client.insert("contacts", {"title": "x"})
    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "duplicate key value"
    assert exc_info.value.code == "23505"
    await client.aclose()


# ==============================================================================
# RETRIES
# ==============================================================================


@pytest.mark.asyncio
async def test_get_is_retried_on_5xx():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503, json={"message": "unavailable"})
        return httpx.Response(200, json=[{"id": "ok"}])

    client = make_client(handler)
    assert await client.select("chats") == [{"id": "ok"}]
    assert len(attempts) == 3
    await client.aclose()


@pytest.mark.asyncio
async def test_get_gives_up_with_last_status():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(503, json={"message": "still down"})

    client = make_client(handler, retry_attempts=2)
    with pytest.raises(BaaSError) as exc_info:
        await client.select("chats")
    assert exc_info.value.status_code == 503
    assert len(attempts) == 2
    await client.aclose()


@pytest.mark.asyncio
async def test_post_is_not_retried_on_5xx():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(500, json={"message": "boom"})

    client = make_client(handler)
    with pytest.raises(BaaSError) as exc_info:
        await client.insert("messages", {"content": "x"})
    assert exc_info.value.status_code == 500
    assert len(attempts) == 1
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_failure_becomes_502():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler, retry_attempts=2)
    with pytest.raises(BaaSError) as exc_info:
        await client.select("chats")
    assert exc_info.value.status_code == 502
    await client.aclose()


# ==============================================================================
# AUTH AND STORAGE
# ==============================================================================


@pytest.mark.asyncio
async def test_get_user_maps_rejection_to_401():
    client = make_client(lambda r: httpx.Response(403, json={"msg": "bad jwt"}))
    with pytest.raises(BaaSError) as exc_info:
        await client.get_user("expired")
    assert exc_info.value.status_code == 401
    await client.aclose()


@pytest.mark.asyncio
async def test_get_user_returns_auth_user():
    def handler(request):
        assert request.url.path == "/auth/v1/user"
        assert request.headers["authorization"] == "Bearer good"
        return httpx.Response(200, json={"id": "u1", "email": "u1@comfy.test"})

    client = make_client(handler)
    assert (await client.get_user("good"))["id"] == "u1"
    await client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, expected",
    [
        ({"signedURL": "/object/sign/posts/a.mp3?token=abc"}, "http://baas.test/storage/v1/object/sign/posts/a.mp3?token=abc"),
        ({"signedUrl": "https://cdn.test/posts/a.mp3?token=abc"}, "https://cdn.test/posts/a.mp3?token=abc"),
    ],
    ids=["SIGN_001_relative", "SIGN_002_absolute"],
)
async def test_create_signed_url(body, expected):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json=body)

    client = make_client(handler)
    assert await client.create_signed_url("posts", "/a.mp3", 600) == expected
    assert seen == {
        "path": "/storage/v1/object/sign/posts/a.mp3",
        "body": {"expiresIn": 600},
        "auth": "Bearer service-key",
    }
    await client.aclose()


@pytest.mark.asyncio
async def test_signed_url_missing_in_response_is_502():
    client = make_client(lambda r: httpx.Response(200, json={}))
    with pytest.raises(BaaSError) as exc_info:
        await client.create_signed_url("posts", "a.mp3", 60)
    assert exc_info.value.status_code == 502
    await client.aclose()
