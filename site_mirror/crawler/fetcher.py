# site_mirror/crawler/fetcher.py
"""
Fetcher module: one HTTP GET per call, with a per-request timeout.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mirror.config import MirrorConfig
from site_mirror.crawler.models import FetchResult
from site_mirror.errors import FetchError

__all__ = ("PageFetcher", "Fetcher", "open_session")


class PageFetcher(Protocol):
    """What the crawl engine needs from a fetcher."""

    async def fetch(self, url: str) -> FetchResult: ...


def open_session(config: MirrorConfig) -> ClientSession:
    """Create the shared aiohttp session for one mirroring run."""
    return ClientSession(
        timeout=ClientTimeout(total=config.fetch_timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Performs GET requests; any non-2xx status is an error."""

    def __init__(self, session: ClientSession, timeout: Optional[float] = None) -> None:
        self.session = session
        self._timeout = ClientTimeout(total=timeout) if timeout else None

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url* and return its status and raw body.

        Raises FetchError on transport failure, timeout or non-2xx status.
        """
        kwargs = {"timeout": self._timeout} if self._timeout else {}
        try:
            async with self.session.get(url, **kwargs) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"received status code {resp.status}")
                body = await resp.read()
                return FetchResult(url, resp.status, body)
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "request timed out") from exc
        except (ClientError, ValueError) as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc
