# File: tests/conftest.py
import asyncio
from collections import Counter
from pathlib import Path
from typing import Dict, List

import pytest

from site_mirror.config import MirrorConfig
from site_mirror.crawler.models import FetchResult
from site_mirror.errors import FetchError
from site_mirror.storage import DiskStorage

SEED = "http://example.test/"


class FakeFetcher:
    """
    In-memory fetcher: serves *pages* (url -> body), 404 for anything else.
    Records call counts and the peak number of concurrent fetches.
    """

    def __init__(self, pages: Dict[str, bytes], delay: float = 0.0) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: Counter = Counter()
        self.active = 0
        self.peak = 0

    async def fetch(self, url: str) -> FetchResult:
        self.calls[url] += 1
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.delay)
            if url not in self.pages:
                raise FetchError(url, "received status code 404")
            return FetchResult(url, 200, self.pages[url])
        finally:
            self.active -= 1


class CountingStorage(DiskStorage):
    """DiskStorage that remembers every write."""

    def __init__(self, root) -> None:
        super().__init__(root)
        self.writes: List[Path] = []

    def store(self, path, data: bytes) -> None:
        self.writes.append(Path(path))
        super().store(path, data)


@pytest.fixture()
def mirror_dir(tmp_path) -> Path:
    return tmp_path / "mirror"


@pytest.fixture()
def make_config(mirror_dir):
    """Factory for MirrorConfig rooted at *mirror_dir*."""

    def _make(start_url: str = SEED, num_workers: int = 4, **kwargs) -> MirrorConfig:
        return MirrorConfig(
            start_url=start_url,
            directory_path=mirror_dir,
            num_workers=num_workers,
            **kwargs,
        )

    return _make


@pytest.fixture()
def site_pages() -> Dict[str, bytes]:
    """Small same-site graph with a cycle back to the seed."""
    return {
        SEED: b'<a href="/about.html">About</a><a href="/blog">Blog</a><a href="http://other.test/x">X</a>',
        "http://example.test/about.html": b'<a href="/">Home</a><a href="/blog">Blog</a>',
        "http://example.test/blog": b'<a href="/blog/post-1">Post</a>',
        "http://example.test/blog/post-1": b'<a href="http://example.test/about.html">About</a>',
    }
