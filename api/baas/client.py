"""
MODULE_DESCRIPTION: BaaS Client - Async Gateway to Supabase REST, RPC, Auth and Storage

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

All persistence in the Comfy CMS lives in a hosted backend-as-a-service
(Supabase). This module wraps its HTTP surfaces in one async client built on
httpx:

    PostgREST tables   /rest/v1/<table>          select / insert / update / delete
    PostgREST RPC      /rest/v1/rpc/<function>   rpc
    GoTrue auth        /auth/v1/user             get_user
    Storage            /storage/v1/object/sign   create_signed_url

===================================================================================
AUTHORIZATION MODES
===================================================================================

1. End-user requests (token=<access token>)
   - apikey: anon key, Authorization: Bearer <user token>
   - Row-level security in the database applies to the caller

2. Admin requests (admin=True)
   - apikey and Authorization both carry the service-role key
   - Used only for privileged RPCs (password changes, status keepalive,
     logout) and storage signing

3. Anonymous requests (neither)
   - apikey and Authorization carry the anon key

===================================================================================
FILTERS
===================================================================================

Filters are dictionaries translated into PostgREST query parameters:

    {"id": "abc"}                    -> id=eq.abc
    {"is_deleted": False}            -> is_deleted=eq.false
    {"psicologo_id": None}           -> psicologo_id=is.null
    {"title": ("ilike", "%ajuda%")}  -> title=ilike.%ajuda%
    {"status": ("in", ["a", "b"])}   -> status=in.(a,b)

===================================================================================
RETRY STRATEGY
===================================================================================

Retries use tenacity with exponential backoff (BAAS_RETRY_ATTEMPTS attempts):
    - Connection failures are retried for every method (nothing was sent)
    - Read timeouts and 5xx answers are retried for GET only, so writes are
      never duplicated

After the last attempt, transport failures surface as BaaSError(502) and
HTTP failures as BaaSError(<status>).

===================================================================================
"""

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from api.config.settings import (
    BAAS_RETRY_ATTEMPTS,
    BAAS_TIMEOUT,
    SUPABASE_ANON_KEY,
    SUPABASE_SERVICE_ROLE_KEY,
    SUPABASE_URL,
)
from api.utils.debug import print__baas_debug


# ==============================================================================
# ERRORS
# ==============================================================================


class BaaSError(Exception):
    """A failed BaaS call, carrying the HTTP status to surface to the client."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details

    def __repr__(self):
        return f"BaaSError(status_code={self.status_code}, message={self.message!r}, code={self.code!r})"


class _RetryableStatus(Exception):
    def __init__(self, response: httpx.Response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


# ==============================================================================
# HELPERS
# ==============================================================================


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Translate a filter dict into PostgREST query parameters."""
    params = {}
    for column, condition in (filters or {}).items():
        if condition is None:
            params[column] = "is.null"
        elif isinstance(condition, tuple):
            op, value = condition
            if op == "in":
                joined = ",".join(_format_value(v) for v in value)
                params[column] = f"in.({joined})"
            elif op == "is":
                params[column] = f"is.{'null' if value is None else _format_value(value)}"
            else:
                params[column] = f"{op}.{_format_value(value)}"
        else:
            params[column] = f"eq.{_format_value(condition)}"
    return params


def _error_from_response(response: httpx.Response) -> BaaSError:
    message = f"BaaS request failed with status {response.status_code}"
    code = None
    details = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = (
            body.get("message")
            or body.get("error_description")
            or body.get("msg")
            or body.get("error")
            or message
        )
        code = body.get("code")
        details = body.get("details") or body.get("hint")
    elif response.text:
        message = response.text[:500]
    return BaaSError(response.status_code, str(message), code=code, details=details)


# ==============================================================================
# CLIENT
# ==============================================================================


class BaaSClient:
    """Async client for the Supabase HTTP APIs used by the CMS."""

    def __init__(
        self,
        url: Optional[str] = None,
        anon_key: Optional[str] = None,
        service_role_key: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = (SUPABASE_URL if url is None else url).rstrip("/")
        self.anon_key = SUPABASE_ANON_KEY if anon_key is None else anon_key
        self.service_role_key = (
            SUPABASE_SERVICE_ROLE_KEY if service_role_key is None else service_role_key
        )
        self.retry_attempts = max(
            1, BAAS_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts
        )
        self._http = http_client or httpx.AsyncClient(
            timeout=BAAS_TIMEOUT if timeout is None else timeout
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def has_service_role(self) -> bool:
        return bool(self.service_role_key)

    def _headers(self, token: Optional[str] = None, admin: bool = False) -> Dict[str, str]:
        if admin:
            if not self.service_role_key:
                raise BaaSError(500, "Service role key is not configured")
            return {
                "apikey": self.service_role_key,
                "Authorization": f"Bearer {self.service_role_key}",
            }
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.anon_key}",
        }

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params=None,
        json=None,
        headers=None,
    ) -> httpx.Response:
        if not self.configured:
            raise BaaSError(503, "BaaS is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")

        idempotent = method.upper() == "GET"

        def should_retry(exc: BaseException) -> bool:
            if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
                return True
            if not idempotent:
                return False
            return isinstance(exc, (httpx.TransportError, _RetryableStatus))

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
                retry=retry_if_exception(should_retry),
                reraise=True,
            ):
                with attempt:
                    print__baas_debug(
                        f"🔍 {method} {path} (attempt {attempt.retry_state.attempt_number})"
                    )
                    response = await self._http.request(
                        method,
                        f"{self.url}{path}",
                        params=params,
                        json=json,
                        headers=headers,
                    )
                    if response.status_code >= 500 and idempotent:
                        raise _RetryableStatus(response)
        except _RetryableStatus as exc:
            response = exc.response
        except httpx.TransportError as exc:
            print__baas_debug(f"❌ {method} {path} transport error: {type(exc).__name__}: {exc}")
            raise BaaSError(502, f"BaaS unreachable: {type(exc).__name__}") from exc

        if response.status_code >= 400:
            error = _error_from_response(response)
            print__baas_debug(
                f"❌ {method} {path} -> {response.status_code}: {error.message}"
            )
            raise error

        print__baas_debug(f"✅ {method} {path} -> {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response):
        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        columns: str = "*",
        order: Optional[str] = None,
        limit: Optional[int] = None,
        single: bool = False,
        token: Optional[str] = None,
        admin: bool = False,
    ):
        """Select rows. `order` uses PostgREST syntax, e.g. "is_online.desc,name.asc".

        With single=True returns one row dict and raises BaaSError(404) when
        nothing matches.
        """
        params = build_filter_params(filters)
        params["select"] = columns
        if order:
            params["order"] = order
        if single:
            params["limit"] = "1"
        elif limit is not None:
            params["limit"] = str(limit)

        response = await self._request(
            "GET", f"/rest/v1/{table}", params=params, headers=self._headers(token, admin)
        )
        rows = self._json(response) or []
        if single:
            if not rows:
                raise BaaSError(404, f"No row found in {table}", code="PGRST116")
            return rows[0]
        return rows

    async def insert(self, table: str, payload, token: Optional[str] = None, admin: bool = False):
        """Insert one row (dict) or many (list). Returns the stored row(s)."""
        headers = self._headers(token, admin)
        headers["Prefer"] = "return=representation"
        response = await self._request(
            "POST", f"/rest/v1/{table}", json=payload, headers=headers
        )
        rows = self._json(response) or []
        if isinstance(payload, dict):
            return rows[0] if rows else None
        return rows

    async def update(
        self,
        table: str,
        filters: Dict[str, Any],
        payload: Dict[str, Any],
        token: Optional[str] = None,
        admin: bool = False,
    ) -> list:
        if not filters:
            raise ValueError("update requires at least one filter")
        headers = self._headers(token, admin)
        headers["Prefer"] = "return=representation"
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=build_filter_params(filters),
            json=payload,
            headers=headers,
        )
        return self._json(response) or []

    async def delete(
        self,
        table: str,
        filters: Dict[str, Any],
        token: Optional[str] = None,
        admin: bool = False,
    ) -> list:
        if not filters:
            raise ValueError("delete requires at least one filter")
        headers = self._headers(token, admin)
        headers["Prefer"] = "return=representation"
        response = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=build_filter_params(filters),
            headers=headers,
        )
        return self._json(response) or []

    # ------------------------------------------------------------------
    # RPC
    # ------------------------------------------------------------------

    async def rpc(
        self,
        function: str,
        params: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        admin: bool = False,
    ):
        response = await self._request(
            "POST",
            f"/rest/v1/rpc/{function}",
            json=params or {},
            headers=self._headers(token, admin),
        )
        return self._json(response)

    # ------------------------------------------------------------------
    # Auth and storage
    # ------------------------------------------------------------------

    async def get_user(self, token: str) -> dict:
        """Resolve an access token to its auth user. Raises BaaSError(401) when invalid."""
        try:
            response = await self._request(
                "GET", "/auth/v1/user", headers=self._headers(token)
            )
        except BaaSError as exc:
            if exc.status_code in (400, 401, 403, 404):
                raise BaaSError(401, "Invalid or expired token", code=exc.code) from exc
            raise
        return self._json(response) or {}

    async def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        response = await self._request(
            "POST",
            f"/storage/v1/object/sign/{bucket}/{path.lstrip('/')}",
            json={"expiresIn": expires_in},
            headers=self._headers(admin=True),
        )
        body = self._json(response) or {}
        signed = body.get("signedURL") or body.get("signedUrl")
        if not signed:
            raise BaaSError(502, "Storage did not return a signed URL")
        if signed.startswith("http"):
            return signed
        return f"{self.url}/storage/v1/{signed.lstrip('/')}"

    async def ping(self) -> bool:
        """True when the REST endpoint answers. Never raises."""
        if not self.configured:
            return False
        try:
            response = await self._http.get(
                f"{self.url}/rest/v1/", headers=self._headers()
            )
        except httpx.HTTPError as exc:
            print__baas_debug(f"⚠️ BaaS ping failed: {exc}")
            return False
        return response.status_code < 500

    async def aclose(self) -> None:
        await self._http.aclose()
