# site_mirror/crawler/models.py
"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any, Dict


class VisitState(enum.Enum):
    """Visitation state of a URL in the frontier."""

    PENDING = "pending"
    VISITED = "visited"


class CrawlOutcome(enum.Enum):
    """Terminal state of one engine run."""

    DONE = "done"
    CANCELLED = "cancelled"


class StoreResult(enum.Enum):
    WRITTEN = "written"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class FetchResult:
    """Status code and raw body of a successful GET."""

    url: str
    status: int
    body: bytes


@dataclass(slots=True)
class CrawlReport:
    """Summary of one engine run."""

    outcome: CrawlOutcome
    rounds: int = 0
    visited: int = 0
    stored: int = 0
    unchanged: int = 0
    failed: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data
