"""
MODULE_DESCRIPTION: Health Check Endpoints - Service Monitoring

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    GET /health        process status, uptime and configuration flags
                       (never touches the network, always 200)
    GET /health/baas   round trip to the BaaS REST endpoint
                       (503 when unconfigured or unreachable)

The encryption pipeline is checked in-process on /health by running a
round trip through the shared MessageEncryptionService, so a broken
CHAT_ENCRYPTION_KEY setup shows up as "degraded" immediately.

===================================================================================
"""

import time
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.baas.client import BaaSClient
from api.baas.factory import get_baas_client
from api.config.settings import API_VERSION, start_time
from api.encryption import MessageEncryptionError, get_encryption_service
from api.helpers import traceback_json_response

router = APIRouter()

HEALTH_CHECK_CHAT_ID = "health-check"


def _encryption_healthy() -> bool:
    service = get_encryption_service()
    try:
        stored = service.process_message_for_storage("ping", HEALTH_CHECK_CHAT_ID)
        return service.decrypt_message(stored, HEALTH_CHECK_CHAT_ID) == "ping"
    except MessageEncryptionError:
        return False


@router.get("/health")
async def health_check(baas: BaaSClient = Depends(get_baas_client)):
    """Basic health check with configuration and encryption status."""
    try:
        encryption_ok = _encryption_healthy()
        return {
            "status": "healthy" if encryption_ok else "degraded",
            "timestamp": datetime.now().isoformat(),
            "uptime_seconds": time.time() - start_time,
            "baas": {
                "configured": baas.configured,
                "service_role": baas.has_service_role,
            },
            "encryption": {"healthy": encryption_ok},
            "version": API_VERSION,
        }
    except Exception as e:
        resp = traceback_json_response(e)
        if resp:
            return resp
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "error": str(e),
                "timestamp": datetime.now().isoformat(),
            },
        )


@router.get("/health/baas")
async def baas_health_check(baas: BaaSClient = Depends(get_baas_client)):
    """BaaS connectivity check."""
    started = time.time()
    reachable = await baas.ping()
    content = {
        "status": "healthy" if reachable else "unhealthy",
        "configured": baas.configured,
        "latency_ms": round((time.time() - started) * 1000, 2),
        "timestamp": datetime.now().isoformat(),
    }
    if not reachable:
        return JSONResponse(status_code=503, content=content)
    return content
