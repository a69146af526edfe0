"""
MODULE_DESCRIPTION: Psychologist Routes - Directory and Online Presence

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    GET  /psicologos                      authorized psychologists, online first
    GET  /psicologos/online               only online ones, by name
    GET  /psicologos/offline              only offline ones, by name
    POST /psicologos/set-status-keepalive presence update (service role)
    POST /psicologo-logout                mark offline on tab close (form post)

The two presence endpoints are called by the browser with navigator.sendBeacon
while a page unloads, so they take no Authorization header:
    - set-status-keepalive reads a JSON body that may arrive as a text/plain
      blob, and falls back to parsing the raw text
    - psicologo-logout reads a form field

===================================================================================
"""

import json

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from pydantic import ValidationError

from api.baas.client import BaaSClient
from api.baas.factory import get_baas_client
from api.config.settings import ROLE_PSICOLOGO
from api.dependencies.auth import require_psicologo_user
from api.models.requests import StatusKeepaliveRequest
from api.utils.debug import print__psicologos_debug

router = APIRouter()


# ==============================================================================
# DIRECTORY
# ==============================================================================


async def _list_psicologos(baas: BaaSClient, token: str, online=None):
    filters = {"user_role": ROLE_PSICOLOGO, "authorized": True}
    order = "is_online.desc,name.asc"
    if online is not None:
        filters["is_online"] = online
        order = "name.asc"
    return await baas.select(
        "profiles",
        filters=filters,
        columns="*,last_seen:updated_at",
        order=order,
        token=token,
    )


@router.get("/psicologos")
async def list_psicologos(
    user=Depends(require_psicologo_user), baas: BaaSClient = Depends(get_baas_client)
):
    psicologos = await _list_psicologos(baas, user["access_token"])
    print__psicologos_debug(
        f"📥 {len(psicologos)} psychologists "
        f"({sum(1 for p in psicologos if p.get('is_online'))} online)"
    )
    return {"success": True, "data": psicologos}


@router.get("/psicologos/online")
async def list_online_psicologos(
    user=Depends(require_psicologo_user), baas: BaaSClient = Depends(get_baas_client)
):
    return {"success": True, "data": await _list_psicologos(baas, user["access_token"], True)}


@router.get("/psicologos/offline")
async def list_offline_psicologos(
    user=Depends(require_psicologo_user), baas: BaaSClient = Depends(get_baas_client)
):
    return {"success": True, "data": await _list_psicologos(baas, user["access_token"], False)}


# ==============================================================================
# PRESENCE
# ==============================================================================


async def _read_keepalive_body(request: Request) -> StatusKeepaliveRequest:
    raw = await request.body()
    try:
        parsed = json.loads(raw.decode("utf-8")) if raw else {}
    except (UnicodeDecodeError, ValueError):
        print__psicologos_debug("⚠️ Keepalive body is not JSON - treating as empty")
        parsed = {}
    if not isinstance(parsed, dict):
        parsed = {}
    new_status = parsed.get("new_status")
    try:
        return StatusKeepaliveRequest(
            psicologo_id=str(parsed["psicologo_id"]) if parsed.get("psicologo_id") else None,
            new_status=False if new_status is None else new_status,
        )
    except ValidationError as exc:
        print__psicologos_debug(f"⚠️ Keepalive body rejected: {exc.error_count()} error(s)")
        raise HTTPException(status_code=400, detail="new_status must be a boolean") from exc


@router.post("/psicologos/set-status-keepalive")
async def set_status_keepalive(
    request: Request, baas: BaaSClient = Depends(get_baas_client)
):
    body = await _read_keepalive_body(request)
    if not body.psicologo_id:
        raise HTTPException(status_code=400, detail="psicologo_id is required")

    data = await baas.rpc(
        "update_psicologo_status",
        {"psicologo_id": body.psicologo_id, "new_status": body.new_status},
        admin=True,
    )
    print__psicologos_debug(
        f"💓 Keepalive: {body.psicologo_id} -> {'online' if body.new_status else 'offline'}"
    )
    return {"success": True, "data": data}


@router.post("/psicologo-logout")
async def psicologo_logout(
    psicologo_id: str = Form(None), baas: BaaSClient = Depends(get_baas_client)
):
    if not psicologo_id:
        raise HTTPException(status_code=400, detail="Psicologo ID is required")

    await baas.rpc("handle_psicologo_logout", {"psicologo_id": psicologo_id})
    print__psicologos_debug(f"✅ Psychologist {psicologo_id} set offline via beacon")
    return {"success": True}
