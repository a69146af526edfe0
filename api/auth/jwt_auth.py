# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
import jwt
from fastapi import HTTPException

# Settings are read at call time so the secret can be rotated in tests
from api.config import settings

# Import debug utilities
from api.utils.debug import print__token_debug


# ============================================================
# AUTHENTICATION - JWT VERIFICATION
# ============================================================
def verify_supabase_jwt(token: str):
    """Verify a Supabase access token locally (HS256) and return its claims.

    Raises:
        HTTPException(401) with a detail describing the failure.
        HTTPException(500) when no JWT secret is configured.
    """
    try:
        # EARLY VALIDATION: JWT tokens must have exactly 3 parts (header.payload.signature)
        token_parts = token.split(".")
        if len(token_parts) != 3:
            raise HTTPException(status_code=401, detail="Invalid JWT token format")

        for part in token_parts:
            if not part or len(part) < 4:
                raise HTTPException(status_code=401, detail="Invalid JWT token format")

        secret = settings.SUPABASE_JWT_SECRET
        if not secret:
            print__token_debug("❌ SUPABASE_JWT_SECRET is not configured")
            raise HTTPException(
                status_code=500, detail="JWT verification is not configured"
            )

        try:
            unverified_payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.DecodeError as e:
            print__token_debug(f"JWT decode error after pre-validation: {e}")
            raise HTTPException(status_code=401, detail="Invalid JWT token format")

        print__token_debug(f"Token aud: {unverified_payload.get('aud')}")
        print__token_debug(f"Expected aud: {settings.SUPABASE_JWT_AUDIENCE}")
        print__token_debug(f"Token role: {unverified_payload.get('role')}")

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=settings.JWT_ALGORITHMS,
                audience=settings.SUPABASE_JWT_AUDIENCE,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            print__token_debug("JWT token has expired")
            raise HTTPException(status_code=401, detail="Token has expired")
        except jwt.InvalidAudienceError:
            print__token_debug("JWT token has invalid audience")
            raise HTTPException(status_code=401, detail="Invalid token audience")
        except jwt.InvalidSignatureError:
            print__token_debug("JWT token has invalid signature")
            raise HTTPException(status_code=401, detail="Invalid token signature")
        except jwt.MissingRequiredClaimError as e:
            print__token_debug(f"JWT token is missing a claim: {e}")
            raise HTTPException(status_code=401, detail="Invalid token claims")
        except jwt.DecodeError as e:
            print__token_debug(f"JWT decode error: {e}")
            raise HTTPException(status_code=401, detail="Invalid token format")
        except jwt.InvalidTokenError as e:
            print__token_debug(f"JWT token is invalid: {e}")
            raise HTTPException(status_code=401, detail="Invalid token")

        print__token_debug("✅ Supabase JWT verification successful")
        return payload

    except HTTPException:
        raise  # Re-raise HTTPException as-is
    except Exception as e:
        print__token_debug(f"JWT verification failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed")


def local_jwt_verification_enabled() -> bool:
    return bool(settings.SUPABASE_JWT_SECRET)
