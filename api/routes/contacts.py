"""
MODULE_DESCRIPTION: Contact Routes - Support Line Directory Management

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

CRUD for the `contacts` table: help lines and services the end-user app
shows (phone numbers, opening hours, target ages, related emotions).
Restricted to authorized CMS users.

    GET    /contacts               list, newest first
    GET    /contacts/{contact_id}  one contact
    POST   /contacts               create (created_by = caller)
    PATCH  /contacts/{contact_id}  partial update, only sent fields
    DELETE /contacts/{contact_id}  delete

Responses use the {success, data, error, message} envelope.

===================================================================================
"""

from fastapi import APIRouter, Depends, HTTPException

from api.baas.client import BaaSClient, BaaSError
from api.baas.factory import get_baas_client
from api.dependencies.auth import require_cms_user
from api.models.requests import ContactCreateRequest, ContactUpdateRequest
from api.models.responses import ApiResponse
from api.routes.chat import utc_now_iso
from api.utils.debug import print__contacts_debug

router = APIRouter()


@router.get("/contacts", response_model=ApiResponse)
async def list_contacts(
    user=Depends(require_cms_user), baas: BaaSClient = Depends(get_baas_client)
):
    contacts = await baas.select(
        "contacts", order="created_at.desc", token=user["access_token"]
    )
    print__contacts_debug(f"📥 Loaded {len(contacts)} contacts")
    return ApiResponse(success=True, data=contacts)


@router.get("/contacts/{contact_id}", response_model=ApiResponse)
async def get_contact(
    contact_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    try:
        contact = await baas.select(
            "contacts", filters={"id": contact_id}, single=True, token=user["access_token"]
        )
    except BaaSError as exc:
        if exc.status_code == 404:
            raise HTTPException(status_code=404, detail="Contact not found")
        raise
    return ApiResponse(success=True, data=contact)


@router.post("/contacts", response_model=ApiResponse, status_code=201)
async def create_contact(
    body: ContactCreateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    payload = body.model_dump(by_alias=True, exclude_none=True)
    payload["created_by"] = user["id"]
    contact = await baas.insert("contacts", payload, token=user["access_token"])
    print__contacts_debug(f"✅ Contact created: {body.title}")
    return ApiResponse(success=True, data=contact, message="Contact created")


@router.patch("/contacts/{contact_id}", response_model=ApiResponse)
async def update_contact(
    contact_id: str,
    body: ContactUpdateRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    payload = body.model_dump(by_alias=True, exclude_unset=True)
    if not payload:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "title" in payload and payload["title"] is None:
        raise HTTPException(status_code=400, detail="Title cannot be removed")
    payload["updated_at"] = utc_now_iso()

    rows = await baas.update(
        "contacts", filters={"id": contact_id}, payload=payload, token=user["access_token"]
    )
    if not rows:
        raise HTTPException(status_code=404, detail="Contact not found")
    print__contacts_debug(f"✅ Contact {contact_id} updated ({', '.join(payload)})")
    return ApiResponse(success=True, data=rows[0], message="Contact updated")


@router.delete("/contacts/{contact_id}", response_model=ApiResponse)
async def delete_contact(
    contact_id: str,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    rows = await baas.delete(
        "contacts", filters={"id": contact_id}, token=user["access_token"]
    )
    if not rows:
        raise HTTPException(status_code=404, detail="Contact not found")
    print__contacts_debug(f"🗑 Contact {contact_id} deleted")
    return ApiResponse(success=True, message="Contact deleted")
