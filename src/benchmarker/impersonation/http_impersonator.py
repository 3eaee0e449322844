"""HTTP impersonation client.

POSTs the prompt to ``{system_version}/{path}`` on the target system and
normalizes whichever response shape comes back.
"""

from __future__ import annotations

from typing import Any

import httpx

from benchmarker.errors import UpstreamError
from benchmarker.impersonation.base import BaseImpersonator, ImpersonationOutcome
from benchmarker.impersonation.normalize import normalize_outcome


class HttpImpersonator(BaseImpersonator):
    """Impersonator that talks to the target system over HTTP.

    Args:
        path: Endpoint path relative to the system version URL.
        timeout: Per-request timeout in seconds.
        client: Optional AsyncClient to use instead of creating one.
    """

    def __init__(
        self,
        path: str = "impersonate",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._path = path.strip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def impersonate(
        self,
        prompt: str,
        system_version: str,
        temperature: float | None = None,
    ) -> ImpersonationOutcome:
        body: dict[str, Any] = {"prompt": prompt}
        if temperature is not None:
            body["temperature"] = temperature

        url = f"{system_version.rstrip('/')}/{self._path}"
        try:
            response = await self._client.post(url, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Impersonation request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(
                f"Impersonation failed: {response.reason_phrase}",
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Impersonation response is not JSON") from exc
        return normalize_outcome(payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
