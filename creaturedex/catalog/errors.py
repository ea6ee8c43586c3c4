"""Exceptions raised by the catalogue data layer."""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for catalogue failures."""


class UpstreamError(CatalogError):
    """A required request to PokeAPI failed.

    ``status`` holds the HTTP status code for non-2xx responses and is
    ``None`` for transport failures (DNS, connection reset, read
    timeout of the shared client).
    """

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"{url} returned HTTP {status}"
        else:
            message = f"request to {url} failed: {reason or 'transport error'}"
        super().__init__(message)


class DataShapeError(CatalogError, ValueError):
    """An upstream payload or reference does not have the expected shape."""
