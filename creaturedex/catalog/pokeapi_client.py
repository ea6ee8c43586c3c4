"""
Thin asynchronous HTTP layer over PokeAPI.

All catalogue requests go through a single ``httpx.AsyncClient`` so
connections are pooled for the lifetime of the application.  Unlike a
best-effort helper that returns ``None`` on failure, ``get_json``
raises: callers on the required path (listing, primary record) let
``UpstreamError`` propagate, while enrichment callers catch it and
substitute placeholder values.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from .errors import DataShapeError, UpstreamError


logger = logging.getLogger(__name__)


class PokeApiClient:
    """JSON-over-HTTP access to the catalogue API."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self.base_url = settings.api_base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.request_timeout,
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "application/json",
            },
        )

    def url(self, path: str) -> str:
        """Join ``path`` onto the configured base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """GET ``url`` and return the decoded JSON object.

        When ``timeout`` is given the whole call is bounded by that many
        seconds and cancelled on expiry; the builtin ``TimeoutError`` is
        then raised to the caller.
        """
        if timeout is not None:
            return await asyncio.wait_for(self._get_json(url, params), timeout)
        return await self._get_json(url, params)

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.debug("Error fetching %s: %s", url, exc)
            raise UpstreamError(url, reason=str(exc) or type(exc).__name__) from exc
        if not response.is_success:
            logger.debug("PokeAPI request to %s returned status %s", url, response.status_code)
            raise UpstreamError(url, status=response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            raise DataShapeError(f"{url} did not return JSON") from exc
        if not isinstance(data, dict):
            raise DataShapeError(f"{url} returned {type(data).__name__}, expected an object")
        return data

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
