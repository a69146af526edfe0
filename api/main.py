"""Comfy CMS FastAPI Backend Application

This module is the main entry point for the backend that serves the Comfy CMS:
the psychologist chat console (with message encryption at rest applied at
the storage and display boundaries) and the content management screens
(contacts, references, posts and reading tags).
"""

MODULE_DESCRIPTION = r"""Comfy CMS FastAPI Backend Application

This module creates the FastAPI application, wires middleware, exception
handlers and routers, and manages the lifecycle of the shared BaaS client.

Key Features:
-------------
1. Encrypted Chat Pipeline:
   - Every message stored passes through MessageSendAdapter (encrypt)
   - Every message served passes through MessageDisplayAdapter (decrypt)
   - Per-chat AES-GCM keys derived from the chat id and CHAT_ENCRYPTION_KEY
   - Self-test endpoints to verify the pipeline in a deployment

2. BaaS Gateway:
   - One httpx.AsyncClient shared by the process (api.baas.factory)
   - Row-level security honoured by forwarding the caller's access token
   - Service-role calls only for admin RPCs and presence beacons
   - Retries with exponential backoff (tenacity) for idempotent requests

3. Authentication & Roles:
   - Supabase access tokens verified locally (PyJWT, HS256) or remotely
   - Profile lookups cached with a TTL and per-user locks
   - Psychologist-only chat routes, CMS-only content routes

4. Error Handling:
   - Validation errors -> 422 with the error list
   - ValueError (including InvalidInputError) -> 400
   - BaaSError -> the BaaS status (502 for transport failures)
   - Anything else -> 500, with traceback when DEBUG_TRACEBACK=1

Configuration & Environment:
---------------------------
- SUPABASE_URL, SUPABASE_ANON_KEY, SUPABASE_SERVICE_ROLE_KEY
- SUPABASE_JWT_SECRET (enables local token verification)
- CHAT_ENCRYPTION_KEY
- CORS_ALLOWED_ORIGINS, DEBUG_TRACEBACK, print__* debug switches

Usage Example:
-------------
uvicorn api.main:app --host 0.0.0.0 --port 8000 --reload
"""

import os
import sys

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# ==============================================================================
# PROJECT ROOT DIRECTORY CONFIGURATION
# ==============================================================================
try:
    from pathlib import Path

    BASE_DIR = Path(__file__).resolve().parents[1]
except NameError:
    BASE_DIR = Path(os.getcwd())

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# ==============================================================================
# STANDARD LIBRARY AND THIRD-PARTY IMPORTS
# ==============================================================================
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.baas.client import BaaSError
from api.baas.factory import cleanup_baas_client, initialize_baas_client
from api.config.settings import API_VERSION, start_time
from api.encryption import get_encryption_service
from api.exceptions.handlers import (
    baas_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.middleware.cors import setup_brotli_middleware, setup_cors_middleware
from api.routes import (
    admin_router,
    chat_router,
    contacts_router,
    debug_router,
    health_router,
    messages_router,
    posts_router,
    psicologos_router,
    references_router,
    root_router,
    storage_router,
)
from api.utils.debug import print__startup_debug

# ==============================================================================
# APPLICATION LIFESPAN
# ==============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Startup: create the shared BaaS client and warm the encryption service.
    Shutdown: close the BaaS connection pool.
    """
    startup_time = datetime.now()
    print__startup_debug(f"🚀 Comfy CMS API starting up at {startup_time.isoformat()}")

    await initialize_baas_client()
    get_encryption_service()
    print__startup_debug("✅ Encryption service ready")

    yield

    print__startup_debug("🛑 Comfy CMS API shutting down...")
    await cleanup_baas_client()
    print__startup_debug(f"⏱️ Uptime: {time.time() - start_time:.1f}s")


# ==============================================================================
# FASTAPI APPLICATION INITIALIZATION
# ==============================================================================
app = FastAPI(
    title="Comfy CMS API",
    description="""Backend for the Comfy CMS used by psychologists and content editors.

## Features
- 🔐 Encrypted chat messages (per-chat keys, AES-GCM)
- 💬 Chat management: status, assignment, read receipts
- 🧑‍⚕️ Psychologist directory and online presence
- 📚 Contacts, references, posts and reading tags

## Authentication
All endpoints except `/`, `/health`, `/docs` and the presence beacons require
a Supabase access token as `Authorization: Bearer <token>`.
    """,
    version=API_VERSION,
    lifespan=lifespan,
    responses={
        401: {
            "description": "Unauthorized - Invalid or missing authentication token",
            "content": {
                "application/json": {"example": {"detail": "Missing Authorization header"}}
            },
        },
        403: {
            "description": "Forbidden - Caller lacks the required role",
            "content": {
                "application/json": {
                    "example": {"detail": "Access restricted to psicologo users"}
                }
            },
        },
        422: {
            "description": "Validation Error - Invalid request parameters",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Validation error",
                        "errors": [
                            {
                                "loc": ["body", "content"],
                                "msg": "Field required",
                                "type": "missing",
                            }
                        ],
                    }
                }
            },
        },
        500: {
            "description": "Internal Server Error",
            "content": {
                "application/json": {"example": {"detail": "Internal server error"}}
            },
        },
    },
)

# ==============================================================================
# MIDDLEWARE REGISTRATION
# ==============================================================================
setup_cors_middleware(app)
setup_brotli_middleware(app)

# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(BaaSError, baas_error_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ==============================================================================
# ROUTE REGISTRATION
# ==============================================================================
print__startup_debug("[ROUTES] Registering route routers...")

app.include_router(root_router, tags=["Root"])
app.include_router(health_router, tags=["Health"])
app.include_router(chat_router, tags=["Chats"])
app.include_router(messages_router, tags=["Messages"])
app.include_router(debug_router, tags=["Encryption"])
app.include_router(psicologos_router, tags=["Psicologos"])
app.include_router(contacts_router, tags=["Contacts"])
app.include_router(references_router, tags=["References"])
app.include_router(posts_router, tags=["Posts"])
app.include_router(storage_router, tags=["Storage"])
app.include_router(admin_router, tags=["Admin"])

print__startup_debug("[SUCCESS] All route routers registered successfully")
