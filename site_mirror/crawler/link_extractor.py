# site_mirror/crawler/link_extractor.py
"""
Link extraction for SiteMirror.

The extractor is a text-pattern heuristic, not an HTML parser: it scans the raw
body for ``a href="..."`` and keeps same-site targets only. Anything written
differently (single quotes, extra attributes between ``a`` and ``href``) is
not seen.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Sequence

__all__ = ("HREF_RE", "BLOCKLIST", "LinkExtractor", "site_prefix")

HREF_RE = re.compile(rb'a href="(.*?)"')

#: values containing any of these are not navigational links
BLOCKLIST: Sequence[str] = ("#popup:", "font-family:", "'")


def site_prefix(start_url: str) -> str:
    """Seed URL without trailing slash; the same-site prefix for every link."""
    return start_url.rstrip("/")


def _is_blocked(value: str) -> bool:
    return any(term in value for term in BLOCKLIST)


def _is_same_site(value: str, prefix: str) -> bool:
    if not value.startswith(prefix):
        return False
    rest = value[len(prefix):]
    return rest == "" or rest[0] in "/?#"


def _normalize(value: str, prefix: str) -> Optional[str]:
    """Return the canonical absolute form of *value*, or None to drop it."""
    if value.startswith("http"):
        if not _is_same_site(value, prefix):
            return None
        value = value[len(prefix):] or "/"
    if value.startswith("/") and not value.startswith("//"):
        return prefix + value
    return None


class LinkExtractor:
    """Extracts same-site links relative to one seed URL."""

    def __init__(self, start_url: str) -> None:
        self.start_url = start_url
        self.prefix = site_prefix(start_url)

    def extract(self, body: bytes, is_known: Optional[Callable[[str], bool]] = None) -> List[str]:
        """
        Scan *body* and return new same-site URLs in order of first appearance.

        *is_known* lets the caller drop URLs the frontier already holds.
        """
        seen: set[str] = set()
        links: List[str] = []
        for raw in self._candidates(body):
            if _is_blocked(raw):
                continue
            url = _normalize(raw, self.prefix)
            if url is None or url in seen:
                continue
            # "/" on a slash-less seed is the seed itself
            if url == self.prefix + "/" and self.start_url == self.prefix:
                url = self.start_url
            seen.add(url)
            if is_known is not None and is_known(url):
                continue
            links.append(url)
        return links

    @staticmethod
    def _candidates(body: bytes) -> Iterable[str]:
        for match in HREF_RE.finditer(body):
            yield match.group(1).decode("utf-8", errors="replace").strip()

