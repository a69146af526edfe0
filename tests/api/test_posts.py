"""
Tests for post and reading-tag endpoints (database function proxies).
"""

import pytest

from tests.helpers import CMS_USER_ID, auth_headers

HEADERS = auth_headers(CMS_USER_ID)

VALID_POST = {
    "title": "Respiração guiada",
    "description": "Cinco minutos para acalmar",
    "category": "Áudio",
    "file_path": "cms-diana/respirar.mp3",
    "file_name": "respirar.mp3",
    "file_type": "audio/mpeg",
    "tags": ["calma"],
    "emotion_tags": ["ansiedade"],
}


def rpc_params(fake_baas, function):
    calls = fake_baas.calls_for("rpc", function)
    assert calls, f"{function} was not called"
    return calls[-1]["params"]


# ==============================================================================
# POSTS
# ==============================================================================


@pytest.mark.asyncio
async def test_list_own_posts_newest_first(client, fake_baas):
    response = await client.get("/posts", headers=HEADERS)
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]] == ["post-2", "post-1"]


@pytest.mark.asyncio
async def test_get_post_is_author_scoped(client):
    assert (await client.get("/posts/post-1", headers=HEADERS)).status_code == 200
    other = await client.get("/posts/post-other", headers=HEADERS)
    assert other.status_code == 404
    assert other.json()["detail"] == "Post not found"


@pytest.mark.asyncio
async def test_create_post_calls_rpc(client, fake_baas):
    fake_baas.rpc_results["create_post"] = {"success": True, "post_id": "post-new"}
    response = await client.post("/posts", json=VALID_POST, headers=HEADERS)
    assert response.status_code == 201
    assert response.json()["data"]["id"] == "post-new"

    params = rpc_params(fake_baas, "create_post")
    assert params["author_id_param"] == CMS_USER_ID
    assert params["category_param"] == "Áudio"
    assert params["content_url_param"] is None
    assert params["file_path_param"] == "cms-diana/respirar.mp3"
    assert params["tags_param"] == ["calma"]


@pytest.mark.asyncio
async def test_create_post_surfaces_rpc_failure(client, fake_baas):
    fake_baas.rpc_results["create_post"] = {"success": False, "error": "Título duplicado"}
    response = await client.post("/posts", json=VALID_POST, headers=HEADERS)
    assert response.status_code == 400
    assert response.json()["detail"] == "Título duplicado"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"category": "Filme"},
        {"title": ""},
        {"file_path": None, "content_url": None},
        {"file_path": "  ", "content_url": ""},
    ],
    ids=["POST_001_bad_category", "POST_002_no_title", "POST_003_no_media", "POST_004_blank_media"],
)
async def test_create_post_validation(client, fake_baas, overrides):
    response = await client.post("/posts", json={**VALID_POST, **overrides}, headers=HEADERS)
    assert response.status_code == 422
    assert fake_baas.calls_for("rpc", "create_post") == []


@pytest.mark.asyncio
async def test_update_with_new_url_clears_file_fields(client, fake_baas):
    fake_baas.rpc_results["update_post"] = {"success": True}
    response = await client.put(
        "/posts/post-2", json={"content_url": "https://video.example/2"}, headers=HEADERS
    )
    assert response.status_code == 200
    params = rpc_params(fake_baas, "update_post")
    assert params["content_url_param"] == "https://video.example/2"
    assert params["file_path_param"] is None
    assert params["file_name_param"] is None
    assert params["file_type_param"] is None
    # untouched fields come from the stored post
    assert params["title_param"] == "Dormir bem"
    assert params["category_param"] == "Podcast"


@pytest.mark.asyncio
async def test_update_with_new_file_clears_url(client, fake_baas):
    fake_baas.rpc_results["update_post"] = {"success": True}
    await client.put(
        "/posts/post-1",
        json={"file_path": "cms-diana/novo.mp4", "file_name": "novo.mp4", "file_type": "video/mp4"},
        headers=HEADERS,
    )
    params = rpc_params(fake_baas, "update_post")
    assert params["content_url_param"] is None
    assert params["file_path_param"] == "cms-diana/novo.mp4"


@pytest.mark.asyncio
async def test_update_without_media_keeps_existing(client, fake_baas):
    fake_baas.rpc_results["update_post"] = {"success": True}
    await client.put("/posts/post-2", json={"title": "Sono profundo"}, headers=HEADERS)
    params = rpc_params(fake_baas, "update_post")
    assert params["title_param"] == "Sono profundo"
    assert params["file_path_param"] == "cms-diana/sono.mp3"
    assert params["content_url_param"] is None
    assert params["category_param"] == "Podcast"


@pytest.mark.asyncio
async def test_update_foreign_post_is_404(client, fake_baas):
    response = await client.put("/posts/post-other", json={"title": "x"}, headers=HEADERS)
    assert response.status_code == 404
    assert fake_baas.calls_for("rpc", "update_post") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("publish", [True, False], ids=["PUB_001_publish", "PUB_002_unpublish"])
async def test_toggle_publication(client, fake_baas, publish):
    fake_baas.rpc_results["toggle_post_publication"] = {"success": True}
    response = await client.post(
        "/posts/post-1/publication", json={"publish": publish}, headers=HEADERS
    )
    assert response.status_code == 200
    assert response.json()["data"]["is_published"] is publish
    assert rpc_params(fake_baas, "toggle_post_publication") == {
        "post_id_param": "post-1",
        "author_id_param": CMS_USER_ID,
        "publish_param": publish,
    }


@pytest.mark.asyncio
async def test_delete_post(client, fake_baas):
    fake_baas.rpc_results["delete_post"] = {"success": True}
    assert (await client.delete("/posts/post-1", headers=HEADERS)).status_code == 200
    assert rpc_params(fake_baas, "delete_post") == {
        "post_id_param": "post-1",
        "author_id_param": CMS_USER_ID,
    }


# ==============================================================================
# READING TAGS
# ==============================================================================


@pytest.mark.asyncio
async def test_list_reading_tags(client, fake_baas):
    fake_baas.rpc_results["get_all_reading_tags"] = {
        "success": True,
        "tags": [{"id": "t1", "name": "Calma", "color": "#3B82F6"}],
    }
    response = await client.get("/reading-tags", headers=HEADERS)
    assert response.json()["data"] == [{"id": "t1", "name": "Calma", "color": "#3B82F6"}]


@pytest.mark.asyncio
async def test_create_reading_tag_defaults_color(client, fake_baas):
    fake_baas.rpc_results["create_reading_tag"] = {"success": True, "tag_id": "t9"}
    response = await client.post("/reading-tags", json={"name": "Foco"}, headers=HEADERS)
    assert response.status_code == 201
    assert rpc_params(fake_baas, "create_reading_tag") == {
        "tag_name": "Foco",
        "tag_description": None,
        "tag_color": "#3B82F6",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"name": ""}, {"name": "Foco", "color": "blue"}, {}],
    ids=["TAG_001_blank", "TAG_002_bad_color", "TAG_003_missing"],
)
async def test_create_reading_tag_validation(client, payload):
    assert (await client.post("/reading-tags", json=payload, headers=HEADERS)).status_code == 422


@pytest.mark.asyncio
async def test_update_and_delete_reading_tag(client, fake_baas):
    fake_baas.rpc_results["update_reading_tag"] = {"success": True}
    fake_baas.rpc_results["delete_reading_tag"] = {"success": True}

    assert (await client.put("/reading-tags/t1", json={"description": "x"}, headers=HEADERS)).status_code == 400

    updated = await client.put("/reading-tags/t1", json={"name": "Serenidade"}, headers=HEADERS)
    assert updated.status_code == 200
    assert rpc_params(fake_baas, "update_reading_tag")["tag_color"] == "#3B82F6"

    assert (await client.delete("/reading-tags/t1", headers=HEADERS)).status_code == 200
    assert rpc_params(fake_baas, "delete_reading_tag") == {"tag_id_param": "t1"}


@pytest.mark.asyncio
async def test_post_tag_associations(client, fake_baas):
    fake_baas.rpc_results["get_tags_for_post"] = {"success": True, "tags": [{"id": "t1"}]}
    fake_baas.rpc_results["associate_tag_with_post"] = {"success": True}
    fake_baas.rpc_results["remove_tag_from_post"] = {"success": False, "error": "Tag not linked"}

    assert (await client.get("/posts/post-1/tags", headers=HEADERS)).json()["data"] == [{"id": "t1"}]

    linked = await client.post("/posts/post-1/tags", json={"tag_id": "t2"}, headers=HEADERS)
    assert linked.status_code == 201
    assert rpc_params(fake_baas, "associate_tag_with_post") == {"post_id_param": "post-1", "tag_id_param": "t2"}

    removed = await client.delete("/posts/post-1/tags/t3", headers=HEADERS)
    assert removed.status_code == 400
    assert removed.json()["detail"] == "Tag not linked"
