"""PostgREST DataGateway for a Supabase-style hosted backend.

Tables are served under ``{url}/rest/v1/{table}`` and remote procedures
under ``{url}/rest/v1/rpc/{name}``. Row-level security applies to the
API key the gateway authenticates with.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from benchmarker.errors import ConfigurationError, GatewayError
from benchmarker.gateway.base import DataGateway, Row

if TYPE_CHECKING:
    from benchmarker.models.config import GatewayConfig


def _eq(value: Any) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class PostgrestGateway(DataGateway):
    """Gateway speaking the PostgREST HTTP dialect via httpx.

    Args:
        url: Backend project URL (without the /rest/v1 suffix).
        api_key: API key sent as ``apikey`` and as the bearer token.
        timeout: Per-request timeout in seconds.
        client: Optional preconfigured AsyncClient (tests inject one with
            a MockTransport). When given, the gateway does not close it.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._base_url = f"{url.rstrip('/')}/rest/v1"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig,
        project_root: Path,
        timeout: float,
    ) -> PostgrestGateway:
        if not config.url or not config.api_key:
            raise ConfigurationError(
                "The postgrest gateway requires gateway.url and gateway.api_key"
            )
        return cls(config.url, config.api_key, timeout=timeout)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer
        try:
            response = await self._client.request(
                method,
                f"{self._base_url}/{path}",
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise GatewayError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise GatewayError(
                f"{method} {path} failed ({response.status_code}): "
                f"{self._error_message(response)}"
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text

    async def query(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
    ) -> list[Row]:
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = _eq(value)
        response = await self._request("GET", table, params=params)
        return response.json()

    async def insert(self, table: str, row: Row) -> Row:
        response = await self._request(
            "POST", table, json=[row], prefer="return=representation",
        )
        created = response.json()
        if not created:
            raise GatewayError(f"No data returned from {table} insert")
        return created[0]

    async def update(self, table: str, row_id: str, patch: Row) -> None:
        await self._request("PATCH", table, params={"id": _eq(row_id)}, json=patch)

    async def delete(self, table: str, row_id: str) -> None:
        await self._request("DELETE", table, params={"id": _eq(row_id)})

    async def call_procedure(self, name: str, params: dict[str, Any]) -> Any:
        response = await self._request("POST", f"rpc/{name}", json=params)
        if not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
