"""
MODULE_DESCRIPTION: Authentication Dependencies - Token Verification and Role Checks

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

FastAPI dependencies that authenticate incoming requests and authorize them by
role for the Comfy CMS API.

    get_current_user        Bearer token -> user dict (401 on failure)
    require_cms_user        user with an authorized `cms` profile (403 otherwise)
    require_psicologo_user  user with an authorized `psicologo` profile

Authentication Flow:
    1. Authorization header must be present
    2. Header must have the "Bearer <token>" format
    3. Token is verified:
         - locally with PyJWT when SUPABASE_JWT_SECRET is configured
         - remotely through the BaaS /auth/v1/user endpoint otherwise
    4. The user dict returned to the route:
         {"id", "email", "role", "access_token", ...original claims}

The access token travels with the user dict so routes can forward it to the
BaaS and keep row-level security in force.

===================================================================================
ERROR HANDLING
===================================================================================

    - Missing or malformed header        -> 401
    - Invalid / expired token            -> 401 (specific detail)
    - BaaS unreachable during remote     -> 502 (propagated BaaSError)
      verification
    - Missing profile / wrong role /     -> 403
      not authorized
    - Unexpected exception               -> 401 "Authentication failed"

===================================================================================
"""

import traceback

from fastapi import Depends, Header, HTTPException

from api.auth.jwt_auth import local_jwt_verification_enabled, verify_supabase_jwt
from api.auth.profiles import get_user_profile
from api.baas.client import BaaSClient, BaaSError
from api.baas.factory import get_baas_client
from api.config.settings import ROLE_CMS, ROLE_PSICOLOGO
from api.utils.debug import print__token_debug


# ==============================================================================
# TOKEN EXTRACTION
# ==============================================================================


def extract_bearer_token(authorization) -> str:
    """Return the token from a "Bearer <token>" header or raise 401."""
    if not authorization:
        print__token_debug("❌ AUTH ERROR: No authorization header provided")
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    if not authorization.startswith("Bearer "):
        print__token_debug("❌ AUTH ERROR: Invalid authorization header format")
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format. Expected 'Bearer <token>'",
        )

    auth_parts = authorization.split(" ", 1)
    if len(auth_parts) != 2 or not auth_parts[1].strip():
        print__token_debug(
            f"❌ AUTH ERROR: Malformed authorization header - parts: {len(auth_parts)}"
        )
        raise HTTPException(
            status_code=401, detail="Invalid Authorization header format"
        )

    return auth_parts[1].strip()


# ==============================================================================
# AUTHENTICATION DEPENDENCY
# ==============================================================================


async def get_current_user(
    authorization: str = Header(None),
    baas: BaaSClient = Depends(get_baas_client),
) -> dict:
    """Authenticate the request and return the user dict.

    Raises:
        HTTPException(401): missing header, bad format, invalid token.
        BaaSError: the BaaS could not be reached during remote verification.
    """
    try:
        print__token_debug("🔑 AUTHENTICATION START: Beginning user authentication process")
        token = extract_bearer_token(authorization)
        print__token_debug(f"🔍 AUTH TOKEN: Token extracted successfully (length: {len(token)})")

        if local_jwt_verification_enabled():
            claims = verify_supabase_jwt(token)
            user = {
                **claims,
                "id": claims.get("sub"),
                "email": claims.get("email"),
                "role": claims.get("role"),
            }
        else:
            print__token_debug("🔍 AUTH TRACE: No JWT secret - verifying through BaaS auth")
            try:
                remote = await baas.get_user(token)
            except BaaSError as exc:
                if exc.status_code == 401:
                    raise HTTPException(status_code=401, detail=exc.message)
                raise
            user = {
                **remote,
                "id": remote.get("id"),
                "email": remote.get("email"),
                "role": remote.get("role"),
            }

        if not user.get("id"):
            raise HTTPException(status_code=401, detail="User id not found in token")

        user["access_token"] = token
        print__token_debug(
            f"✅ AUTH SUCCESS: User authenticated successfully - {user.get('email', 'Unknown')}"
        )
        return user

    except HTTPException as he:
        print__token_debug(f"❌ AUTH HTTP EXCEPTION: {he.status_code} - {he.detail}")
        raise
    except BaaSError:
        raise
    except Exception as e:
        print__token_debug(
            f"❌ AUTH EXCEPTION: Unexpected authentication error - {type(e).__name__}: {str(e)}"
        )
        print__token_debug(f"❌ AUTH TRACE: Full traceback:\n{traceback.format_exc()}")
        raise HTTPException(status_code=401, detail="Authentication failed")


# ==============================================================================
# ROLE AUTHORIZATION
# ==============================================================================


async def _require_role(user: dict, baas: BaaSClient, role: str) -> dict:
    profile = await get_user_profile(baas, user["id"], token=user.get("access_token"))
    if profile is None:
        print__token_debug(f"🚫 ROLE CHECK: no profile for {user['id']}")
        raise HTTPException(status_code=403, detail="User profile not found")

    if profile.get("user_role") != role:
        print__token_debug(
            f"🚫 ROLE CHECK: {user['id']} has role {profile.get('user_role')}, needs {role}"
        )
        raise HTTPException(status_code=403, detail=f"Access restricted to {role} users")

    if profile.get("authorized") is not True:
        print__token_debug(f"🚫 ROLE CHECK: {user['id']} is not authorized")
        raise HTTPException(status_code=403, detail="User is not authorized")

    return {**user, "profile": profile}


async def require_cms_user(
    user: dict = Depends(get_current_user),
    baas: BaaSClient = Depends(get_baas_client),
) -> dict:
    return await _require_role(user, baas, ROLE_CMS)


async def require_psicologo_user(
    user: dict = Depends(get_current_user),
    baas: BaaSClient = Depends(get_baas_client),
) -> dict:
    return await _require_role(user, baas, ROLE_PSICOLOGO)
