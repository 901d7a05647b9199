# File: site_mirror/engine.py
"""site_mirror.engine: orchestration layer, runs one mirroring pass with signal handling."""

from __future__ import annotations

from typing import Optional

from site_mirror.config import MirrorConfig
from site_mirror.crawler.cancel import (
    CancellationToken,
    install_signal_handlers,
    remove_signal_handlers,
)
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.crawler.models import CrawlReport
from site_mirror.logger import logger

__all__ = ["start_mirror"]


async def start_mirror(
    cfg: MirrorConfig,
    token: Optional[CancellationToken] = None,
    handle_signals: bool = True,
) -> CrawlReport:
    """
    Run the crawler inside its session context and return the CrawlReport.

    Parameters
    ----------
    cfg : MirrorConfig
        Mirroring configuration.
    token : CancellationToken, optional
        Externally owned stop flag; a fresh one is created when omitted.
    handle_signals : bool
        Route SIGINT/SIGTERM to *token* for the duration of the run.
    """
    if token is None:
        token = CancellationToken()
    hooked = install_signal_handlers(token) if handle_signals else []
    try:
        async with MirrorCrawler(cfg) as crawler:
            return await crawler.crawl(token)
    except Exception as exc:
        logger.error("Mirroring failed: %s", exc)
        raise
    finally:
        if hooked:
            remove_signal_handlers(hooked)
