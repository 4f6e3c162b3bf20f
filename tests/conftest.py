"""
Shared fixtures: an in-memory PostgREST stand-in, configuration, tokens and
API Gateway events.
"""

import json
import time
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from services import supabase_db
from services.exceptions import DatabaseError
from services.parameter_store import clear_cache
from services.supabase_auth import supabase_auth

JWT_SECRET = "test-jwt-secret-that-is-long-enough-for-hs256"
USER_ID = "user-123"
OTHER_USER_ID = "user-456"


class FakeSupabaseClient:
    """
    Stores rows per table in memory and mirrors the PostgREST behaviour the
    services depend on, including ``PGRST116`` for single-row requests.
    """

    def __init__(self):
        self.tables = {}
        self.calls = []
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _rows(self, table):
        return self.tables.setdefault(table, [])

    @staticmethod
    def _matches(row, filters):
        return all(row.get(col) == value for col, value in (filters or {}).items())

    @staticmethod
    def _no_rows(count):
        return DatabaseError(
            "JSON object requested, multiple (or no) rows returned",
            code=supabase_db.NO_ROWS_CODE,
            status_code=406,
            details=f"The result contains {count} rows",
        )

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def select(self, table, filters=None, columns="*", order=None, single=False):
        self.calls.append(("select", table))
        rows = [dict(r) for r in self._rows(table) if self._matches(r, filters)]
        if order:
            column, ascending = order
            rows.sort(key=lambda r: r.get(column) or "", reverse=not ascending)
        if columns != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        if single:
            if len(rows) != 1:
                raise self._no_rows(len(rows))
            return rows[0]
        return rows

    def insert(self, table, row, single=True):
        self.calls.append(("insert", table))
        stored = {"id": str(uuid.uuid4()), "created_at": self._tick(), **row}
        self._rows(table).append(stored)
        return dict(stored)

    def update(self, table, values, filters, single=True):
        self.calls.append(("update", table))
        matched = [r for r in self._rows(table) if self._matches(r, filters)]
        if single and len(matched) != 1:
            raise self._no_rows(len(matched))
        for row in matched:
            row.update(values)
        updated = [dict(r) for r in matched]
        return updated[0] if single else updated

    def delete(self, table, filters):
        self.calls.append(("delete", table))
        self.tables[table] = [
            r for r in self._rows(table) if not self._matches(r, filters)
        ]

    def count(self, table, filters=None):
        self.calls.append(("count", table))
        return len([r for r in self._rows(table) if self._matches(r, filters)])

    def mutations(self):
        return [c for c in self.calls if c[0] in ("insert", "update", "delete")]


@pytest.fixture(autouse=True)
def app_env(monkeypatch):
    """Local configuration only; Parameter Store and Secrets Manager stay off."""
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("PARAMETER_STORE_ENABLED", "false")
    monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)
    monkeypatch.delenv("JWT_SECRET_NAME", raising=False)
    monkeypatch.delenv("REVENUECAT_API_KEY", raising=False)
    monkeypatch.delenv("APP_ENVIRONMENT", raising=False)

    clear_cache()
    supabase_auth.reset()
    yield
    clear_cache()
    supabase_auth.reset()


@pytest.fixture(autouse=True)
def fake_db(monkeypatch):
    fake = FakeSupabaseClient()
    monkeypatch.setattr(supabase_db, "_client", fake)
    return fake


def make_token(user_id=USER_ID, secret=JWT_SECRET, expires_in=3600, **claims):
    now = int(time.time())
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "session_id": "session-1",
        "email": f"{user_id}@example.com",
        "iat": now,
        "exp": now + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def token():
    return make_token()


@pytest.fixture
def lambda_context():
    return SimpleNamespace(aws_request_id="req-1", function_name="habit-tracker-api")


def make_event(method, path, body=None, token=None, query=None, path_params=None):
    """HTTP API (payload 2.0) event."""
    headers = {"content-type": "application/json"}
    if token:
        headers["authorization"] = f"Bearer {token}"

    if body is not None and not isinstance(body, str):
        body = json.dumps(body)

    return {
        "version": "2.0",
        "rawPath": path,
        "headers": headers,
        "queryStringParameters": query,
        "pathParameters": path_params,
        "requestContext": {
            "requestId": "req-1",
            "http": {"method": method, "path": path, "sourceIp": "127.0.0.1"},
        },
        "body": body,
        "isBase64Encoded": False,
    }


@pytest.fixture
def call_api(lambda_context):
    """Send a request through the router and decode the JSON body."""
    from router import dispatch

    def _call(method, path, body=None, token=None, query=None):
        response = dispatch(
            make_event(method, path, body=body, token=token, query=query),
            lambda_context,
        )
        return response["statusCode"], json.loads(response["body"])

    return _call
