"""
MODULE_DESCRIPTION: Post Routes - Content Posts and Reading Tags

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Content posts (videos, podcasts, articles, books...) authored in the CMS and
published to the app. Writes go through database functions that enforce
ownership and the `posts_content_check` constraint (a post points either to
an external content_url or to an uploaded file_path, never both).

Posts (authorized CMS users, author-scoped):
    GET    /posts                          caller's posts, newest first
    GET    /posts/{post_id}
    POST   /posts                          rpc create_post
    PUT    /posts/{post_id}                rpc update_post
    POST   /posts/{post_id}/publication    rpc toggle_post_publication
    DELETE /posts/{post_id}                rpc delete_post

Reading tags:
    GET    /reading-tags                   rpc get_all_reading_tags
    POST   /reading-tags                   rpc create_reading_tag
    PUT    /reading-tags/{tag_id}          rpc update_reading_tag
    DELETE /reading-tags/{tag_id}          rpc delete_reading_tag
    GET    /posts/{post_id}/tags           rpc get_tags_for_post
    POST   /posts/{post_id}/tags           rpc associate_tag_with_post
    DELETE /posts/{post_id}/tags/{tag_id}  rpc remove_tag_from_post

Database functions report business failures in-band as
{"success": false, "error": "..."}; those become 400 responses.

===================================================================================
"""

from fastapi import APIRouter, Depends, HTTPException

from api.baas.client import BaaSClient, BaaSError
from api.baas.factory import get_baas_client
from api.config.settings import DEFAULT_POST_CATEGORY, DEFAULT_TAG_COLOR
from api.dependencies.auth import require_cms_user
from api.helpers import unwrap_rpc_result
from api.models.requests import (
    PostCreateRequest,
    PostPublicationRequest,
    PostTagRequest,
    PostUpdateRequest,
    ReadingTagCreateRequest,
    ReadingTagUpdateRequest,
)
from api.models.responses import ApiResponse
from api.utils.debug import print__posts_debug

router = APIRouter()


# ==============================================================================
# HELPERS
# ==============================================================================


async def _load_own_post(baas: BaaSClient, post_id: str, user: dict) -> dict:
    try:
        return await baas.select(
            "posts",
            filters={"id": post_id, "author_id": user["id"]},
            single=True,
            token=user["access_token"],
        )
    except BaaSError as exc:
        if exc.status_code == 404:
            raise HTTPException(status_code=404, detail="Post not found")
        raise


def resolve_media_fields(update: PostUpdateRequest, current: dict) -> dict:
    """Pick exactly one media source for an update.

    A new content_url wins and clears the file fields; otherwise a new
    file_path clears the URL; otherwise the current values are kept.
    """
    if update.content_url and update.content_url.strip():
        return {
            "content_url": update.content_url,
            "file_path": None,
            "file_name": None,
            "file_type": None,
        }
    if update.file_path and update.file_path.strip():
        return {
            "content_url": None,
            "file_path": update.file_path,
            "file_name": update.file_name,
            "file_type": update.file_type,
        }
    return {
        "content_url": current.get("content_url"),
        "file_path": current.get("file_path"),
        "file_name": current.get("file_name"),
        "file_type": current.get("file_type"),
    }


def _pick(new, old, default=None):
    if new is not None:
        return new
    if old is not None:
        return old
    return default


# ==============================================================================
# POSTS
# ==============================================================================


@router.get("/posts", response_model=ApiResponse)
async def list_posts(
    user=Depends(require_cms_user), baas: BaaSClient = Depends(get_baas_client)
):
    posts = await baas.select(
        "posts",
        filters={"author_id": user["id"]},
        order="created_at.desc",
        token=user["access_token"],
    )
    return ApiResponse(success=True, data=posts)


@router.get("/posts/{post_id}", response_model=ApiResponse)
async def get_post(
    post_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    return ApiResponse(success=True, data=await _load_own_post(baas, post_id, user))


@router.post("/posts", response_model=ApiResponse, status_code=201)
async def create_post(
    body: PostCreateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "create_post",
        {
            "author_id_param": user["id"],
            "title_param": body.title,
            "description_param": body.description,
            "category_param": body.category,
            "content_param": body.content or None,
            "content_url_param": body.content_url or None,
            "tags_param": body.tags,
            "emotion_tags_param": body.emotion_tags,
            "file_path_param": body.file_path or None,
            "file_name_param": body.file_name or None,
            "file_type_param": body.file_type or None,
        },
        token=user["access_token"],
    )
    result = unwrap_rpc_result(result, "Unknown error creating post")
    post_id = result.get("post_id") if isinstance(result, dict) else None

    print__posts_debug(f"✅ Post created: {post_id} ({body.category})")
    return ApiResponse(
        success=True,
        data={"id": post_id, **body.model_dump()},
        message="Post created",
    )


@router.put("/posts/{post_id}", response_model=ApiResponse)
async def update_post(
    post_id: str,
    body: PostUpdateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    current = await _load_own_post(baas, post_id, user)
    media = resolve_media_fields(body, current)

    result = await baas.rpc(
        "update_post",
        {
            "post_id_param": post_id,
            "author_id_param": user["id"],
            "title_param": _pick(body.title, current.get("title"), ""),
            "description_param": _pick(body.description, current.get("description"), ""),
            "category_param": _pick(body.category, current.get("category"), DEFAULT_POST_CATEGORY),
            "content_param": _pick(body.content, current.get("content")),
            "content_url_param": media["content_url"],
            "tags_param": _pick(body.tags, current.get("tags"), []),
            "emotion_tags_param": _pick(body.emotion_tags, current.get("emotion_tags"), []),
            "file_path_param": media["file_path"],
            "file_name_param": media["file_name"],
            "file_type_param": media["file_type"],
        },
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error updating post")

    print__posts_debug(f"✅ Post {post_id} updated")
    return ApiResponse(success=True, data={"id": post_id, **media}, message="Post updated")


@router.post("/posts/{post_id}/publication", response_model=ApiResponse)
async def toggle_post_publication(
    post_id: str,
    body: PostPublicationRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "toggle_post_publication",
        {"post_id_param": post_id, "author_id_param": user["id"], "publish_param": body.publish},
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error changing publication status")
    print__posts_debug(f"📰 Post {post_id} published={body.publish}")
    return ApiResponse(
        success=True,
        data={"id": post_id, "is_published": body.publish},
        message="Post published" if body.publish else "Post unpublished",
    )


@router.delete("/posts/{post_id}", response_model=ApiResponse)
async def delete_post(
    post_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "delete_post",
        {"post_id_param": post_id, "author_id_param": user["id"]},
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error deleting post")
    print__posts_debug(f"🗑 Post {post_id} deleted")
    return ApiResponse(success=True, message="Post deleted")


# ==============================================================================
# READING TAGS
# ==============================================================================


def _tags_from(result):
    if isinstance(result, dict):
        return result.get("tags") or []
    return result or []


@router.get("/reading-tags", response_model=ApiResponse)
async def list_reading_tags(
    user=Depends(require_cms_user), baas: BaaSClient = Depends(get_baas_client)
):
    result = await baas.rpc("get_all_reading_tags", token=user["access_token"])
    return ApiResponse(success=True, data=_tags_from(result))


@router.post("/reading-tags", response_model=ApiResponse, status_code=201)
async def create_reading_tag(
    body: ReadingTagCreateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "create_reading_tag",
        {"tag_name": body.name, "tag_description": body.description, "tag_color": body.color},
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error creating tag")
    return ApiResponse(success=True, data=result, message="Tag created")


@router.put("/reading-tags/{tag_id}", response_model=ApiResponse)
async def update_reading_tag(
    tag_id: str,
    body: ReadingTagUpdateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    if body.name is None:
        raise HTTPException(status_code=400, detail="Tag name is required")
    result = await baas.rpc(
        "update_reading_tag",
        {
            "tag_id_param": tag_id,
            "tag_name": body.name,
            "tag_description": body.description,
            "tag_color": body.color or DEFAULT_TAG_COLOR,
        },
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error updating tag")
    return ApiResponse(success=True, data=result, message="Tag updated")


@router.delete("/reading-tags/{tag_id}", response_model=ApiResponse)
async def delete_reading_tag(
    tag_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "delete_reading_tag", {"tag_id_param": tag_id}, token=user["access_token"]
    )
    unwrap_rpc_result(result, "Unknown error deleting tag")
    return ApiResponse(success=True, message="Tag deleted")


@router.get("/posts/{post_id}/tags", response_model=ApiResponse)
async def get_tags_for_post(
    post_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "get_tags_for_post", {"post_id_param": post_id}, token=user["access_token"]
    )
    return ApiResponse(success=True, data=_tags_from(result))


@router.post("/posts/{post_id}/tags", response_model=ApiResponse, status_code=201)
async def associate_tag_with_post(
    post_id: str,
    body: PostTagRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "associate_tag_with_post",
        {"post_id_param": post_id, "tag_id_param": body.tag_id},
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error associating tag")
    return ApiResponse(success=True, message="Tag associated")


@router.delete("/posts/{post_id}/tags/{tag_id}", response_model=ApiResponse)
async def remove_tag_from_post(
    post_id: str,
    tag_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    result = await baas.rpc(
        "remove_tag_from_post",
        {"post_id_param": post_id, "tag_id_param": tag_id},
        token=user["access_token"],
    )
    unwrap_rpc_result(result, "Unknown error removing tag")
    return ApiResponse(success=True, message="Tag removed")
