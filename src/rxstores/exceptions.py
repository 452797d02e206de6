"""Custom exception hierarchy for rxstores."""

from __future__ import annotations


class StoresError(Exception):
    """Base exception for all rxstores errors."""


class StoresConfigError(StoresError):
    """Invalid or missing configuration."""


class FetchError(StoresError):
    """HTTP-level failure (network, non-200, invalid JSON, unexpected shape)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class StoreDisposedError(StoresError):
    """A command was issued to a store after ``dispose()``."""
