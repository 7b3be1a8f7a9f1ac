from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

"""Async HTTP fetch used by every loader.

One GET per call, no retry: the pipeline never retries a failed load on
its own. Non-2xx responses are returned (loaders decide what a status
means, e.g. 403 drives the Sheets authorization flow); only transport
failures raise FetchError.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "FetchError",
    "FetchResponse",
    "HttpFetcher",
]


class FetchError(Exception):
    """Transport-level failure (DNS, connection, timeout)."""

    def __init__(self, message: str, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


@dataclass(frozen=True)
class FetchResponse:
    url: str
    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.text)


class HttpFetcher:
    """aiohttp-backed fetcher. The session is created lazily and closed by close()."""

    def __init__(self, timeout_seconds: float = 30.0, session: aiohttp.ClientSession | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def fetch(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> FetchResponse:
        session = await self._ensure_session()
        try:
            async with session.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                allow_redirects=True,
            ) as response:
                text = await response.text()
                logger.debug(f"GET {url} -> {response.status}")
                return FetchResponse(url=url, status=response.status, text=text)
        except TimeoutError as e:
            raise FetchError(f"Request timeout after {self.timeout_seconds}s", url) from e
        except aiohttp.ClientError as e:
            raise FetchError(f"Connection error: {e}", url) from e

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HttpFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
