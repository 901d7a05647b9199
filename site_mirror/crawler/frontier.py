# site_mirror/crawler/frontier.py
"""
Frontier: every URL known to the crawl together with its visitation state.

This is the crawl's only deduplication point. All access goes through one
private lock, so the class is safe to share between asyncio tasks and threads.
Entries are never removed and ``VISITED`` never reverts to ``PENDING``.
"""
from __future__ import annotations

import threading
from typing import Dict, Set

from site_mirror.crawler.models import VisitState

__all__ = ("Frontier",)


class Frontier:
    """Mapping URL -> :class:`VisitState` guarded by a lock."""

    def __init__(self) -> None:
        self._states: Dict[str, VisitState] = {}
        self._lock = threading.Lock()

    def register(self, url: str, state: VisitState = VisitState.PENDING) -> bool:
        """Insert *url* with *state* if absent. Return True only for the inserting caller."""
        with self._lock:
            if url in self._states:
                return False
            self._states[url] = state
            return True

    def mark_visited(self, url: str) -> None:
        """Transition *url* to VISITED; no-op if it already is."""
        with self._lock:
            self._states[url] = VisitState.VISITED

    def pending_snapshot(self) -> Set[str]:
        """Point-in-time copy of the URLs still PENDING."""
        with self._lock:
            return {url for url, state in self._states.items() if state is VisitState.PENDING}

    def is_known(self, url: str) -> bool:
        with self._lock:
            return url in self._states

    def is_visited(self, url: str) -> bool:
        with self._lock:
            return self._states.get(url) is VisitState.VISITED

    def visited_count(self) -> int:
        with self._lock:
            return sum(1 for state in self._states.values() if state is VisitState.VISITED)

