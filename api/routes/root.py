"""
MODULE_DESCRIPTION: API Root Endpoint - Self-Documentation and Entry Point

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

GET / returns a small JSON catalog of the Comfy CMS API: name, version,
documentation links and the endpoint groups. Publicly accessible, no BaaS
access, so it doubles as a liveness probe for load balancers.

===================================================================================
"""

from datetime import datetime

from fastapi import APIRouter

from api.config.settings import API_VERSION

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

router = APIRouter()


# ==============================================================================
# API ENDPOINT: ROOT / API DOCUMENTATION
# ==============================================================================


@router.get("/")
async def api_root():
    """API root endpoint - endpoint catalog for developers.

    Update `endpoints` when routers are added in api.main.
    """
    return {
        "name": "Comfy CMS API",
        "version": API_VERSION,
        "description": "Backend for the Comfy CMS: encrypted psychologist chats and content management",
        "status": "operational",
        "timestamp": datetime.now().isoformat(),
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_spec": "/openapi.json",
        },
        "endpoints": {
            "health": ["GET /health", "GET /health/baas"],
            "chats": [
                "GET /chats",
                "GET /chats/{chat_id}",
                "PATCH /chats/{chat_id}/status",
                "POST /chats/{chat_id}/assign",
                "DELETE /chats/{chat_id}/assign",
                "POST /chats/{chat_id}/read",
                "GET /chats/{chat_id}/messages",
                "POST /chats/{chat_id}/messages",
            ],
            "encryption": [
                "GET /encryption/self-test",
                "GET /chats/{chat_id}/encryption/self-test",
            ],
            "psicologos": [
                "GET /psicologos",
                "GET /psicologos/online",
                "GET /psicologos/offline",
                "POST /psicologos/set-status-keepalive",
                "POST /psicologo-logout",
            ],
            "cms": [
                "/contacts",
                "/references",
                "/posts",
                "/reading-tags",
                "POST /storage/signed-url",
                "/admin/update-password",
            ],
        },
        "authentication": "Bearer <Supabase access token> on all endpoints except /, /health and the presence beacons",
    }
