"""
Exception hierarchy for SiteMirror.

Only :class:`ConfigError` is fatal; every :class:`CrawlError` belongs to a
single URL and is logged by the pipeline without stopping the crawl.
"""
from __future__ import annotations

__all__ = (
    "MirrorError",
    "ConfigError",
    "CrawlError",
    "FetchError",
    "StorageError",
    "AlreadyVisited",
)


class MirrorError(Exception):
    """Base class for all SiteMirror errors."""


class ConfigError(MirrorError):
    """Missing or invalid setting, raised before the crawl starts."""


class CrawlError(MirrorError):
    """An error tied to one URL of the crawl."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message} ({self.url})"


class FetchError(CrawlError):
    """Non-2xx status or transport failure."""


class StorageError(MirrorError):
    """Directory creation, read or write failure for one mirrored file."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    def __str__(self) -> str:
        return f"StorageError: {self.message} ({self.path})"


class AlreadyVisited(CrawlError):
    """The URL was already processed in this run."""

    def __init__(self, url: str, message: str = "URL was already crawled") -> None:
        super().__init__(url, message)
