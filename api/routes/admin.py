"""
MODULE_DESCRIPTION: Admin Routes - Psychologist Password Management

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    POST /admin/update-password
        An authorized CMS user sets a new password for a psychologist. The
        change runs in the database function `update_psicologo_password` with
        the service role, which also records who made the change.

    GET /admin/update-password
        Configuration probe: which keys are present and whether the database
        function set is installed (`test_password_update_config`).

===================================================================================
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from api.baas.client import BaaSClient, BaaSError
from api.baas.factory import get_baas_client
from api.dependencies.auth import require_cms_user
from api.helpers import unwrap_rpc_result
from api.models.requests import UpdatePasswordRequest
from api.models.responses import UpdatePasswordResponse
from api.utils.debug import print__admin_debug

router = APIRouter()


@router.post("/admin/update-password", response_model=UpdatePasswordResponse)
async def update_password(
    body: UpdatePasswordRequest,
    user=Depends(require_cms_user),
    baas: BaaSClient = Depends(get_baas_client),
):
    print__admin_debug(f"🔑 Password change for {body.user_id} requested by {user['id']}")

    result = await baas.rpc(
        "update_psicologo_password",
        {
            "psicologo_id_param": body.user_id,
            "new_password_param": body.new_password,
            "changed_by_id": user["id"],
        },
        admin=True,
    )
    if not isinstance(result, dict):
        result = {"success": False, "error": "Unknown error in password function"}
    unwrap_rpc_result(result, "Unknown error in password function")

    print__admin_debug(f"✅ Password changed for {body.user_id}")
    return UpdatePasswordResponse(
        success=True,
        message=result.get("message") or "Password updated",
        user_id=result.get("user_id") or body.user_id,
        user_name=result.get("user_name"),
        created=bool(result.get("created", False)),
    )


@router.get("/admin/update-password")
async def update_password_config(baas: BaaSClient = Depends(get_baas_client)):
    function_exists = False
    if baas.configured and baas.has_service_role:
        try:
            data = await baas.rpc("test_password_update_config", admin=True)
            function_exists = bool(data)
        except BaaSError as exc:
            print__admin_debug(f"⚠️ Config probe RPC failed: {exc.message}")

    return {
        "success": True,
        "message": "Password update API is running",
        "config": {
            "hasServiceRole": baas.has_service_role,
            "hasAnonKey": bool(baas.anon_key),
            "hasUrl": bool(baas.url),
            "functionExists": function_exists,
        },
        "timestamp": datetime.now().isoformat(),
    }
