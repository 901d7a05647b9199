# File: tests/test_errors.py
import pytest

from site_mirror.errors import (
    AlreadyVisited,
    ConfigError,
    CrawlError,
    FetchError,
    MirrorError,
    StorageError,
)


@pytest.mark.parametrize("exc_type", [ConfigError, CrawlError, FetchError, AlreadyVisited, StorageError])
def test_everything_is_a_mirror_error(exc_type):
    assert issubclass(exc_type, MirrorError)


def test_url_errors():
    exc = FetchError("http://example.test/x", "received status code 500")
    assert isinstance(exc, CrawlError)
    assert exc.url == "http://example.test/x"
    assert str(exc) == "FetchError: received status code 500 (http://example.test/x)"
    assert str(AlreadyVisited("http://example.test/")) == "AlreadyVisited: URL was already crawled (http://example.test/)"


def test_storage_error_carries_path():
    exc = StorageError("/tmp/mirror/index.html", "error writing file: disk full")
    assert not isinstance(exc, CrawlError)
    assert exc.path == "/tmp/mirror/index.html"
    assert str(exc) == "StorageError: error writing file: disk full (/tmp/mirror/index.html)"
