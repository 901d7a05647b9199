from __future__ import annotations

import asyncio
import posixpath
import time
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from aiohttp import ClientSession

from site_mirror.config import MirrorConfig
from site_mirror.crawler.cancel import CancellationToken
from site_mirror.crawler.fetcher import Fetcher, PageFetcher, open_session
from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.link_extractor import LinkExtractor
from site_mirror.crawler.models import CrawlOutcome, CrawlReport, StoreResult, VisitState
from site_mirror.errors import AlreadyVisited, CrawlError, StorageError
from site_mirror.logger import logger
from site_mirror.storage import DiskStorage

__all__ = ("MirrorCrawler", "INDEX_FILE", "mirror_path")

INDEX_FILE = "index.html"
HTML_EXT = ".html"


def mirror_path(url: str, start_url: str) -> str:
    """
    Mirror-relative POSIX path for *url*.

    The seed maps to ``index.html``; a directory-like path gets ``index.html``
    inside it; any other path without an extension gets ``.html`` appended.
    A path that normalizes to the site root is the index as well. The query
    string and fragment are ignored, so ``/?page=2`` and ``/`` share one file.
    """
    if url == start_url:
        return INDEX_FILE
    path = urlparse(url).path
    if not path or path.endswith("/"):
        path += INDEX_FILE
    path = posixpath.normpath(path).lstrip("/")
    if path in ("", "."):
        return INDEX_FILE
    if not posixpath.splitext(path)[1]:
        path += HTML_EXT
    return path


class MirrorCrawler:
    """
    Round-based concurrent mirroring engine.

    Each round snapshots the pending URLs, runs one fetch-compare-store task
    per URL with at most ``num_workers`` in flight, and waits for all of them
    before the next snapshot. The run ends in ``DONE`` when nothing is pending
    and in ``CANCELLED`` when the token is set.
    """

    def __init__(
        self,
        config: MirrorConfig,
        *,
        fetcher: Optional[PageFetcher] = None,
        storage: Optional[DiskStorage] = None,
        frontier: Optional[Frontier] = None,
    ) -> None:
        self.config = config
        self.start_url = config.start_url
        self.num_workers = config.num_workers
        self.fetcher = fetcher
        self.storage = storage or DiskStorage(config.directory_path)
        self.frontier = frontier or Frontier()
        self.extractor = LinkExtractor(config.start_url)
        self.session: Optional[ClientSession] = None
        self._report = CrawlReport(outcome=CrawlOutcome.DONE)

    async def __aenter__(self) -> MirrorCrawler:
        if self.fetcher is None:
            self.session = open_session(self.config)
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, token: Optional[CancellationToken] = None) -> CrawlReport:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with MirrorCrawler(...)'")
        if token is None:
            token = CancellationToken()
        self._report = report = CrawlReport(outcome=CrawlOutcome.DONE)
        self.frontier.register(self.start_url, VisitState.PENDING)
        logger.info("Start mirroring %s into %s with %d workers", self.start_url, self.storage.root, self.num_workers)
        start = time.monotonic()

        while True:
            if token.cancelled:
                report.outcome = CrawlOutcome.CANCELLED
                break
            pending = self.frontier.pending_snapshot()
            if not pending:
                logger.info("Finished: no URL left to crawl")
                break
            report.rounds += 1
            logger.debug("Round %d: %d pending URL(s)", report.rounds, len(pending))
            await self._run_round(sorted(pending), token)

        report.visited = self.frontier.visited_count()
        report.elapsed = time.monotonic() - start
        if report.outcome is CrawlOutcome.CANCELLED:
            logger.warning("Stopped crawler flow (%s) after %d round(s)", token.reason, report.rounds)
        logger.info(
            "Mirrored %d page(s) in %.2f s: %d written, %d unchanged, %d failed",
            report.visited, report.elapsed, report.stored, report.unchanged, report.failed,
        )
        return report

    async def _run_round(self, urls: List[str], token: CancellationToken) -> None:
        slots = asyncio.Semaphore(self.num_workers)
        tasks: List[asyncio.Task] = []
        for url in urls:
            if token.cancelled:
                logger.info("Cancellation requested, not dispatching %d URL(s)", len(urls) - len(tasks))
                break
            await slots.acquire()
            if token.cancelled:
                slots.release()
                logger.info("Cancellation requested, not dispatching %d URL(s)", len(urls) - len(tasks))
                break
            tasks.append(asyncio.create_task(self._guarded(url, slots)))
        # round barrier
        await asyncio.gather(*tasks)

    async def _guarded(self, url: str, slots: asyncio.Semaphore) -> None:
        try:
            await self.process_url(url)
        except AlreadyVisited as exc:
            logger.warning("%s", exc)
        except (CrawlError, StorageError) as exc:
            self._report.failed += 1
            logger.error("Failed to crawl %s: %s", url, exc)
        except Exception:
            self._report.failed += 1
            logger.exception("Unexpected error while crawling %s", url)
        finally:
            slots.release()

    async def process_url(self, url: str) -> Optional[StoreResult]:
        """
        Fetch-compare-store pipeline for one URL.

        The URL is marked visited whatever happens after the guard, so a
        failed page is never retried in this run.
        """
        logger.info("Crawling %s", url)
        if self.frontier.is_visited(url):
            raise AlreadyVisited(url)

        body: Optional[bytes] = None
        try:
            target = self.storage.resolve(mirror_path(url, self.start_url))
            result = await self.fetcher.fetch(url)  # type: ignore[union-attr]
            body = result.body
            outcome = await self._store_if_changed(url, target, body)
        finally:
            self.frontier.mark_visited(url)
            if body is not None:
                self._fold_links(body)
        return outcome

    async def _store_if_changed(self, url: str, target: Path, body: bytes) -> StoreResult:
        current = await asyncio.to_thread(self.storage.retrieve, target)
        if current == body and target.exists():
            self._report.unchanged += 1
            logger.warning("Already current, skipping write: %s -> %s", url, target)
            return StoreResult.UNCHANGED
        await asyncio.to_thread(self.storage.store, target, body)
        self._report.stored += 1
        logger.debug("Wrote %s -> %s", url, target)
        return StoreResult.WRITTEN

    def _fold_links(self, body: bytes) -> None:
        for link in self.extractor.extract(body, self.frontier.is_known):
            if self.frontier.register(link, VisitState.PENDING):
                logger.info("New URL to be added: %s", link)
