"""
MODULE_DESCRIPTION: Storage Routes - Signed URLs for Post Files

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    POST /storage/signed-url  {"path": "...", "expires": 3600}

Post files live in a private storage bucket (POSTS_BUCKET_NAME). Any
authenticated user can obtain a time-limited signed URL for a file path.

===================================================================================
"""

from fastapi import APIRouter, Depends, HTTPException

from api.baas.client import BaaSClient
from api.baas.factory import get_baas_client
from api.config import settings
from api.dependencies.auth import get_current_user
from api.models.requests import SignedUrlRequest
from api.models.responses import SignedUrlResponse
from api.utils.debug import print__storage_debug

router = APIRouter()


@router.post("/storage/signed-url", response_model=SignedUrlResponse)
async def create_signed_url(
    body: SignedUrlRequest,
    user=Depends(get_current_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    if not body.path or not body.path.strip():
        raise HTTPException(status_code=400, detail="Missing path")

    url = await baas.create_signed_url(
        settings.POSTS_BUCKET_NAME, body.path.strip(), body.expires
    )
    print__storage_debug(
        f"🔗 Signed URL for {settings.POSTS_BUCKET_NAME}/{body.path} ({body.expires}s) by {user['id']}"
    )
    return SignedUrlResponse(url=url)
