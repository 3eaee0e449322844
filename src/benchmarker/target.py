"""Client for the target system's project endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from benchmarker.errors import UpstreamError


@dataclass
class ProjectDetails:
    """Project created on the target system by an impersonated user."""

    project_id: str
    link: str | None
    raw: dict[str, Any] = field(default_factory=dict)


class TargetSystemClient:
    """Reads project details from a target system version.

    Args:
        timeout: Per-request timeout in seconds.
        client: Optional AsyncClient to use instead of creating one.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch_project(
        self,
        system_version: str,
        project_id: str,
        token: str,
    ) -> ProjectDetails:
        """GET {system_version}/projects/{project_id} with a bearer token.

        Raises:
            UpstreamError: On network failure or a non-2xx response; the
                message carries the HTTP status text.
        """
        url = f"{system_version.rstrip('/')}/projects/{project_id}"
        try:
            response = await self._client.get(
                url, headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to fetch project details: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(
                f"Failed to fetch project details: {response.reason_phrase}",
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Project details response is not JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Project details response is not an object")
        return ProjectDetails(project_id=project_id, link=data.get("link"), raw=data)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
