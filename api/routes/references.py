"""
MODULE_DESCRIPTION: Reference Routes - Curated Reading References

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

CRUD for the `cms_references` table (subject, title, description, url).
Restricted to authorized CMS users.

    GET    /references                 list, newest first
                                       ?subject=  case-insensitive search
                                       ?title=    case-insensitive search
    GET    /references/{reference_id}
    POST   /references
    PATCH  /references/{reference_id}
    DELETE /references/{reference_id}

===================================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.baas.client import BaaSClient, BaaSError
from api.baas.factory import get_baas_client
from api.dependencies.auth import require_cms_user
from api.models.requests import ReferenceCreateRequest, ReferenceUpdateRequest
from api.models.responses import ApiResponse
from api.routes.chat import utc_now_iso
from api.utils.debug import print__references_debug

router = APIRouter()

TABLE = "cms_references"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@router.get("/references", response_model=ApiResponse)
async def list_references(
    subject: Optional[str] = Query(None, min_length=1),
    title: Optional[str] = Query(None, min_length=1),
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    filters = {}
    if subject:
        filters["subject"] = ("ilike", f"%{_escape_like(subject.strip())}%")
    if title:
        filters["title"] = ("ilike", f"%{_escape_like(title.strip())}%")

    references = await baas.select(
        TABLE, filters=filters, order="created_at.desc", token=user["access_token"]
    )
    print__references_debug(
        f"📥 Loaded {len(references)} references (subject={subject!r}, title={title!r})"
    )
    return ApiResponse(success=True, data=references)


@router.get("/references/{reference_id}", response_model=ApiResponse)
async def get_reference(
    reference_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    try:
        reference = await baas.select(
            TABLE, filters={"id": reference_id}, single=True, token=user["access_token"]
        )
    except BaaSError as exc:
        if exc.status_code == 404:
            raise HTTPException(status_code=404, detail="Reference not found")
        raise
    return ApiResponse(success=True, data=reference)


@router.post("/references", response_model=ApiResponse, status_code=201)
async def create_reference(
    body: ReferenceCreateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    payload = {**body.model_dump(), "created_by": user["id"]}
    reference = await baas.insert(TABLE, payload, token=user["access_token"])
    print__references_debug(f"✅ Reference created: {body.title}")
    return ApiResponse(success=True, data=reference, message="Reference created")


@router.patch("/references/{reference_id}", response_model=ApiResponse)
async def update_reference(
    reference_id: str,
    body: ReferenceUpdateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    payload = body.model_dump(exclude_unset=True)
    if not payload:
        raise HTTPException(status_code=400, detail="No fields to update")
    if any(value is None for value in payload.values()):
        raise HTTPException(status_code=400, detail="Reference fields cannot be removed")
    payload["updated_at"] = utc_now_iso()

    rows = await baas.update(
        TABLE, filters={"id": reference_id}, payload=payload, token=user["access_token"]
    )
    if not rows:
        raise HTTPException(status_code=404, detail="Reference not found")
    return ApiResponse(success=True, data=rows[0], message="Reference updated")


@router.delete("/references/{reference_id}", response_model=ApiResponse)
async def delete_reference(
    reference_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    rows = await baas.delete(TABLE, filters={"id": reference_id}, token=user["access_token"])
    if not rows:
        raise HTTPException(status_code=404, detail="Reference not found")
    print__references_debug(f"🗑 Reference {reference_id} deleted")
    return ApiResponse(success=True, message="Reference deleted")
