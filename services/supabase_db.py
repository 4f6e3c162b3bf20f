"""
Supabase database service for the habit tracker.

This module wraps the Supabase PostgREST interface (``/rest/v1/<table>``)
with a pooled ``requests`` session that is shared across warm Lambda
invocations.
"""

from typing import Any, Dict, Optional, Tuple

import requests

from services.exceptions import ConfigurationError, DatabaseError
from services.parameter_store import config
from utils.logging import setup_logger

logger = setup_logger(__name__)

# PostgREST returns this code when a single-object request matched zero (or
# more than one) rows.
NO_ROWS_CODE = "PGRST116"

SINGLE_OBJECT = "application/vnd.pgrst.object+json"

Filters = Dict[str, Any]
Order = Tuple[str, bool]


def _encode_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class SupabaseClient:
    """
    Minimal PostgREST client covering the calls the services make.

    Every failed request raises :class:`DatabaseError`; callers decide which
    codes are expected (e.g. ``PGRST116`` for "no settings yet").
    """

    def __init__(self, url: str, api_key: str, timeout: int = 10, session=None):
        """
        :param url: Project URL, e.g. https://xyz.supabase.co
        :param api_key: Service-role key (bypasses RLS) or anon key.
        :param timeout: Per-request timeout in seconds.
        """
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "X-Client-Info": "habittracker-api",
            }
        )

    def _params(
        self,
        filters: Optional[Filters] = None,
        columns: Optional[str] = None,
        order: Optional[Order] = None,
    ) -> Dict[str, str]:
        params = {}
        if columns:
            params["select"] = columns
        for column, value in (filters or {}).items():
            params[column] = _encode_value(value)
        if order:
            column, ascending = order
            params["order"] = f"{column}.{'asc' if ascending else 'desc'}"
        return params

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        url = f"{self.base_url}/{table}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DatabaseError(
                f"Request to {table} failed: {e}", code="NETWORK_ERROR"
            ) from e

        if not response.ok:
            raise self._error_from_response(table, response)

        return response

    @staticmethod
    def _error_from_response(table: str, response: requests.Response) -> DatabaseError:
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not isinstance(payload, dict):
            payload = {}

        return DatabaseError(
            payload.get("message") or f"{table} request failed: {response.text[:200]}",
            code=payload.get("code"),
            status_code=response.status_code,
            details=payload.get("details"),
        )

    @staticmethod
    def _body(response: requests.Response) -> Any:
        if not response.content:
            return None
        return response.json()

    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        columns: str = "*",
        order: Optional[Order] = None,
        single: bool = False,
    ) -> Any:
        """
        Read rows matching all equality ``filters``.

        :return: A list of rows, or one row when ``single`` is set.
        """
        headers = {"Accept": SINGLE_OBJECT} if single else None
        response = self._request(
            "GET", table, params=self._params(filters, columns, order), headers=headers
        )
        body = self._body(response)
        if single:
            return body
        return body or []

    def insert(self, table: str, row: Dict[str, Any], single: bool = True) -> Any:
        """Insert one row and return it as stored."""
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = SINGLE_OBJECT
        response = self._request(
            "POST",
            table,
            params={"select": "*"},
            json_body=[row],
            headers=headers,
        )
        return self._body(response)

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Filters,
        single: bool = True,
    ) -> Any:
        """
        Update rows matching ``filters``.

        With ``single`` set, matching no row raises ``DatabaseError`` with
        code ``PGRST116``.
        """
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = SINGLE_OBJECT
        response = self._request(
            "PATCH",
            table,
            params=self._params(filters, columns="*"),
            json_body=values,
            headers=headers,
        )
        return self._body(response)

    def delete(self, table: str, filters: Filters) -> None:
        """Delete rows matching ``filters``. Matching nothing is not an error."""
        self._request(
            "DELETE",
            table,
            params=self._params(filters),
            headers={"Prefer": "return=minimal"},
        )

    def count(self, table: str, filters: Optional[Filters] = None) -> int:
        """Exact row count, read from the ``Content-Range`` header."""
        response = self._request(
            "HEAD",
            table,
            params=self._params(filters, columns="*"),
            headers={"Prefer": "count=exact"},
        )
        content_range = response.headers.get("Content-Range", "")
        total = content_range.rsplit("/", 1)[-1]
        return int(total) if total.isdigit() else 0


_client: Optional[SupabaseClient] = None


def get_supabase_client() -> SupabaseClient:
    """Get or create the shared client from configuration."""
    global _client
    if _client is None:
        supabase_config = config.load_supabase_config()
        api_key = supabase_config["service_role_key"] or supabase_config["anon_key"]
        if not api_key:
            raise ConfigurationError(
                "Either SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY must be set"
            )
        if not supabase_config["service_role_key"]:
            logger.warning(
                "Service role key not configured; database calls are subject to RLS"
            )
        _client = SupabaseClient(supabase_config["url"], api_key)
    return _client


def reset_client() -> None:
    global _client
    _client = None


def check_connection(client: Optional[SupabaseClient] = None) -> Dict[str, Any]:
    """
    Check that the database answers a trivial query.

    Never raises: the result is reported by the diagnostics endpoint.
    """
    try:
        client = client or get_supabase_client()
        client.count("habits")
    except Exception as e:
        logger.error(
            "Supabase connection test failed",
            extra={"error_type": type(e).__name__, "error_message": str(e)},
        )
        return {"success": False, "error": str(e)}

    return {"success": True, "message": "Connection successful"}
