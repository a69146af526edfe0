"""
Authentication package for the API server.

This package contains Supabase JWT verification and cached profile lookups
used for role checks in the Comfy CMS API.
"""

# Import JWT authentication functions
from .jwt_auth import verify_supabase_jwt
from .profiles import get_user_profile, invalidate_profile_cache

# Export all authentication functions for easier access
__all__ = ["verify_supabase_jwt", "get_user_profile", "invalidate_profile_cache"]
