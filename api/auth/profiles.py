"""
MODULE_DESCRIPTION: Profile Lookup Cache - Role Data for Authorization Checks

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Role checks (cms / psicologo, authorized flag) need the caller's row from the
`profiles` table on almost every request. This module caches those rows for
PROFILE_CACHE_TIMEOUT seconds.

Cache design:
    - _profile_cache: user_id -> (profile, cached_at)
    - _profile_locks: per-user asyncio.Lock (defaultdict)
    - Double-checked lookup: check cache, take the user's lock, check again,
      then query the BaaS. Concurrent requests for the same user hit the
      BaaS once.
    - Only found profiles are cached, so a freshly created profile is picked up
      on the next request.

===================================================================================
"""

import time
from typing import Optional

from api.baas.client import BaaSClient, BaaSError
from api.config import settings
from api.config.settings import _profile_cache, _profile_locks
from api.utils.debug import print__token_debug

PROFILE_COLUMNS = "id,name,username,avatar_path,user_role,authorized,is_online"


def _cached(user_id: str) -> Optional[dict]:
    entry = _profile_cache.get(user_id)
    if entry is None:
        return None
    profile, cached_at = entry
    if time.time() - cached_at > settings.PROFILE_CACHE_TIMEOUT:
        _profile_cache.pop(user_id, None)
        return None
    return profile


async def get_user_profile(
    baas: BaaSClient, user_id: str, token: Optional[str] = None
) -> Optional[dict]:
    """Return the caller's profile row, or None when it does not exist."""
    profile = _cached(user_id)
    if profile is not None:
        print__token_debug(f"🎯 Profile cache hit for {user_id}")
        return profile

    async with _profile_locks[user_id]:
        profile = _cached(user_id)
        if profile is not None:
            return profile

        try:
            profile = await baas.select(
                "profiles",
                filters={"id": user_id},
                columns=PROFILE_COLUMNS,
                single=True,
                token=token,
            )
        except BaaSError as exc:
            if exc.status_code == 404:
                print__token_debug(f"⚠️ No profile found for {user_id}")
                return None
            raise

        _profile_cache[user_id] = (profile, time.time())
        print__token_debug(
            f"✅ Profile cached for {user_id} (role: {profile.get('user_role')})"
        )
        return profile


def invalidate_profile_cache(user_id: Optional[str] = None) -> int:
    """Drop one user's cached profile, or all of them. Returns the number removed."""
    if user_id is None:
        removed = len(_profile_cache)
        _profile_cache.clear()
        return removed
    return 1 if _profile_cache.pop(user_id, None) is not None else 0
