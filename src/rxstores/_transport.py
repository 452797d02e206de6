"""HTTP fetch collaborator used by the fetching stores."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from rxstores._constants import USER_AGENT
from rxstores.exceptions import FetchError

_logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Structural fetch interface used by the stores.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`HttpFetcher`) concrete.
    """

    async def fetch(self, url: str) -> list[dict[str, Any]]: ...


class HttpFetcher:
    """GET a JSON array of records over HTTP.

    Usage::

        async with HttpFetcher() as fetcher:
            poller = DashboardPoller(fetcher)
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._external_session = session is not None
        self._http = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def __aenter__(self) -> HttpFetcher:
        if self._http is None:
            self._http = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
        self._http = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http is None:
            raise FetchError("Fetcher not initialized. Use 'async with HttpFetcher() as fetcher:'")
        return self._http

    async def fetch(self, url: str) -> list[dict[str, Any]]:
        """Fetch *url* and return its JSON array body.

        Raises
        ------
        FetchError
            On network errors, non-200 responses, invalid JSON, or a body
            that is not an array of objects.
        """
        http = self._require_session()
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FetchError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except FetchError:
            raise
        except TimeoutError as exc:
            raise FetchError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FetchError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc

        if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
            raise FetchError(f"Expected a JSON array of objects from {url}", url=url)

        _logger.debug("GET %s returned %d record(s)", url, len(body))
        return body
