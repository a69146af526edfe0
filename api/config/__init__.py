"""
Configuration package for the API server.

This package contains settings, constants, and shared state for the
Comfy CMS API.
"""

# Import key configuration items for easier access
from .settings import (  # Environment; BaaS; JWT; Encryption; Domain values; Profile cache
    API_VERSION,
    BASE_DIR,
    CHAT_ENCRYPTION_KEY,
    CHAT_STATUSES,
    POST_CATEGORIES,
    POSTS_BUCKET_NAME,
    PROFILE_CACHE_TIMEOUT,
    SUPABASE_JWT_AUDIENCE,
    SUPABASE_URL,
    _profile_cache,
    _profile_locks,
    start_time,
)

__all__ = [
    "API_VERSION",
    "BASE_DIR",
    "start_time",
    "SUPABASE_URL",
    "SUPABASE_JWT_AUDIENCE",
    "CHAT_ENCRYPTION_KEY",
    "CHAT_STATUSES",
    "POST_CATEGORIES",
    "POSTS_BUCKET_NAME",
    "PROFILE_CACHE_TIMEOUT",
    "_profile_cache",
    "_profile_locks",
]
