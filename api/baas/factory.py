"""
MODULE_DESCRIPTION: BaaS Client Factory - Global Client Lifecycle Management

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Owns the single BaaSClient (and therefore the single httpx connection pool)
shared by every request in the process.

Lifecycle:
    1. initialize_baas_client()   called from the FastAPI lifespan on startup
    2. get_global_baas_client()   lazy access point with double-checked locking
    3. get_baas_client()          FastAPI dependency used by the routes
                                  (tests replace it via app.dependency_overrides)
    4. cleanup_baas_client()      called from the lifespan on shutdown

===================================================================================
"""

import asyncio
from typing import Optional

from api.baas.client import BaaSClient
from api.utils.debug import print__baas_debug, print__startup_debug

# ==============================================================================
# GLOBAL STATE
# ==============================================================================

_GLOBAL_BAAS_CLIENT: Optional[BaaSClient] = None
_BAAS_INIT_LOCK: Optional[asyncio.Lock] = None


# ==============================================================================
# FACTORY FUNCTIONS
# ==============================================================================


async def initialize_baas_client() -> BaaSClient:
    """Create the global client on application startup."""
    global _GLOBAL_BAAS_CLIENT
    if _GLOBAL_BAAS_CLIENT is not None:
        print__startup_debug("ℹ️ BaaS client already initialized - reusing")
        return _GLOBAL_BAAS_CLIENT

    _GLOBAL_BAAS_CLIENT = BaaSClient()
    if _GLOBAL_BAAS_CLIENT.configured:
        print__startup_debug(f"✅ BaaS client initialized for {_GLOBAL_BAAS_CLIENT.url}")
    else:
        print__startup_debug(
            "⚠️ BaaS client initialized WITHOUT configuration - data routes will return 503"
        )
    return _GLOBAL_BAAS_CLIENT


async def get_global_baas_client() -> BaaSClient:
    """Unified access point for the global client.

    Creates the client lazily when the lifespan did not run (scripts, tests
    without overrides). Double-checked locking keeps it a single instance.
    """
    global _GLOBAL_BAAS_CLIENT, _BAAS_INIT_LOCK

    if _BAAS_INIT_LOCK is None:
        _BAAS_INIT_LOCK = asyncio.Lock()

    if _GLOBAL_BAAS_CLIENT is None:
        async with _BAAS_INIT_LOCK:
            if _GLOBAL_BAAS_CLIENT is None:
                print__baas_debug("🔍 Creating global BaaS client on first use")
                await initialize_baas_client()
    return _GLOBAL_BAAS_CLIENT


async def cleanup_baas_client() -> None:
    """Close the global client's connection pool on shutdown."""
    global _GLOBAL_BAAS_CLIENT
    if _GLOBAL_BAAS_CLIENT is None:
        return
    try:
        await _GLOBAL_BAAS_CLIENT.aclose()
        print__startup_debug("✅ BaaS client closed")
    finally:
        _GLOBAL_BAAS_CLIENT = None


async def get_baas_client() -> BaaSClient:
    """FastAPI dependency returning the shared client."""
    return await get_global_baas_client()
