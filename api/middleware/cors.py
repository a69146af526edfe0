"""
MODULE_DESCRIPTION: CORS and Compression Middleware Setup

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Wrapper functions that register the HTTP middleware of the Comfy CMS API:

    setup_cors_middleware(app)    cross-origin access for the CMS front end
    setup_brotli_middleware(app)  Brotli compression of larger JSON responses

CORS origins come from CORS_ALLOWED_ORIGINS (comma-separated). PATCH is
allowed because the CMS uses it for partial updates.

===================================================================================
"""

import os

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from brotli_asgi import BrotliMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.utils.debug import print__startup_debug

# ==============================================================================
# MIDDLEWARE SETUP - CORS AND BROTLI
# ==============================================================================


def get_allowed_origins():
    allowed_origins_str = os.getenv(
        "CORS_ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:8000",  # Default for development
    )
    return [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]


def setup_cors_middleware(app: FastAPI):
    """Setup CORS middleware for the FastAPI application.

    Args:
        app: The FastAPI application instance

    Configuration:
        - allow_origins: From CORS_ALLOWED_ORIGINS env var
        - allow_credentials: True - Enables cookies and auth headers
        - allow_methods: GET, POST, PUT, PATCH, DELETE, OPTIONS
        - allow_headers: ["*"]
    """
    allowed_origins = get_allowed_origins()
    print__startup_debug(f"📋 CORS allowed origins: {allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


def setup_brotli_middleware(app: FastAPI):
    """Setup Brotli compression middleware for the FastAPI application.

    Only responses of at least 1000 bytes are compressed. Clients without
    Brotli support receive uncompressed responses.
    """
    print__startup_debug("📋 Registering Brotli compression middleware...")
    app.add_middleware(BrotliMiddleware, minimum_size=1000)
