"""Test helpers and utilities for the test suite."""

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt

from api.baas.client import BaaSError

TEST_JWT_SECRET = "test-supabase-jwt-secret-0123456789abcdef"
TEST_CHAT_SECRET = "test-chat-encryption-secret"
TEST_BAAS_URL = "http://baas.test"

PSICOLOGO_ID = "psi-ana"
PSICOLOGO_2_ID = "psi-bruno"
UNAUTHORIZED_PSICOLOGO_ID = "psi-carla"
CMS_USER_ID = "cms-diana"
APP_USER_ID = "app-eva"
NO_PROFILE_USER_ID = "ghost-user"


def print_test_status(message: str):
    """Print test status messages with timestamp."""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    print(f"[{timestamp}] {message}")


def create_test_jwt_token(user_id: str, expires_in: int = 3600, **overrides) -> str:
    """Mint a Supabase-shaped access token signed with the test secret."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": f"{user_id}@comfy.test",
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    secret = payload.pop("_secret", TEST_JWT_SECRET)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: str, **overrides) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_test_jwt_token(user_id, **overrides)}"}


# ==============================================================================
# IN-MEMORY BAAS
# ==============================================================================


def _unescape_like(pattern: str) -> str:
    inner = pattern[1:] if pattern.startswith("%") else pattern
    inner = inner[:-1] if inner.endswith("%") and not inner.endswith("\\%") else inner
    return re.sub(r"\\(.)", r"\1", inner)


def _matches(row: dict, filters: Optional[Dict[str, Any]]) -> bool:
    for column, condition in (filters or {}).items():
        value = row.get(column)
        if condition is None:
            if value is not None:
                return False
        elif isinstance(condition, tuple):
            op, expected = condition
            if op == "ilike":
                if value is None or _unescape_like(expected).lower() not in str(value).lower():
                    return False
            elif op == "in":
                if value not in expected:
                    return False
            elif op == "is":
                if value is not expected:
                    return False
            else:
                raise NotImplementedError(f"FakeBaaSClient does not support {op}")
        elif value != condition:
            return False
    return True


def _apply_order(rows: List[dict], order: Optional[str]) -> List[dict]:
    if not order:
        return rows
    for part in reversed(order.split(",")):
        bits = part.split(".")
        column, flags = bits[0], bits[1:]
        desc = "desc" in flags
        nulls_first = "nullsfirst" in flags or (desc and "nullslast" not in flags)
        nulls = [r for r in rows if r.get(column) is None]
        values = sorted(
            (r for r in rows if r.get(column) is not None),
            key=lambda r: r[column],
            reverse=desc,
        )
        rows = nulls + values if nulls_first else values + nulls
    return rows


class FakeBaaSClient:
    """In-memory stand-in with the same call surface as api.baas.client.BaaSClient."""

    def __init__(self, tables=None, rpc_results=None, users=None, service_role_key="service-key"):
        self.url = TEST_BAAS_URL
        self.anon_key = "anon-key"
        self.service_role_key = service_role_key
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.rpc_results = dict(rpc_results or {})
        self.users = dict(users or {})
        self.reachable = True
        self.calls: List[tuple] = []
        self._clock = 0

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def has_service_role(self) -> bool:
        return bool(self.service_role_key)

    def calls_for(self, method: str, name: Optional[str] = None) -> List[dict]:
        return [
            kwargs
            for m, n, kwargs in self.calls
            if m == method and (name is None or n == name)
        ]

    def _next_timestamp(self) -> str:
        self._clock += 1
        return (datetime(2026, 7, 1, tzinfo=timezone.utc) + timedelta(minutes=self._clock)).isoformat()

    async def select(self, table, filters=None, columns="*", order=None, limit=None,
                     single=False, token=None, admin=False):
        self.calls.append(("select", table, {"filters": filters, "columns": columns,
                                             "order": order, "token": token, "admin": admin}))
        rows = [dict(r) for r in self.tables.get(table, []) if _matches(r, filters)]
        rows = _apply_order(rows, order)
        if limit is not None:
            rows = rows[:limit]
        if single:
            if not rows:
                raise BaaSError(404, f"No row found in {table}", code="PGRST116")
            return rows[0]
        return rows

    async def insert(self, table, payload, token=None, admin=False):
        self.calls.append(("insert", table, {"payload": payload, "token": token, "admin": admin}))
        stored = []
        for item in payload if isinstance(payload, list) else [payload]:
            row = {"id": str(uuid.uuid4()), "created_at": self._next_timestamp(), **item}
            self.tables.setdefault(table, []).append(row)
            stored.append(dict(row))
        return stored if isinstance(payload, list) else stored[0]

    async def update(self, table, filters, payload, token=None, admin=False):
        self.calls.append(("update", table, {"filters": filters, "payload": payload,
                                             "token": token, "admin": admin}))
        updated = []
        for row in self.tables.get(table, []):
            if _matches(row, filters):
                row.update(payload)
                updated.append(dict(row))
        return updated

    async def delete(self, table, filters, token=None, admin=False):
        self.calls.append(("delete", table, {"filters": filters, "token": token, "admin": admin}))
        kept, removed = [], []
        for row in self.tables.get(table, []):
            (removed if _matches(row, filters) else kept).append(row)
        self.tables[table] = kept
        return [dict(r) for r in removed]

    async def rpc(self, function, params=None, token=None, admin=False):
        self.calls.append(("rpc", function, {"params": params or {}, "token": token, "admin": admin}))
        result = self.rpc_results.get(function)
        if isinstance(result, BaseException):
            raise result
        if callable(result):
            return result(params or {})
        return result

    async def get_user(self, token):
        self.calls.append(("get_user", None, {"token": token}))
        if token not in self.users:
            raise BaaSError(401, "Invalid or expired token")
        return self.users[token]

    async def create_signed_url(self, bucket, path, expires_in):
        self.calls.append(("create_signed_url", bucket, {"path": path, "expires_in": expires_in}))
        return f"{self.url}/storage/v1/object/sign/{bucket}/{path}?token=signed-{expires_in}"

    async def ping(self):
        return self.reachable

    async def aclose(self):
        return None
