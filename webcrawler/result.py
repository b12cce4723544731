"""Concurrency-safe accumulation of crawl results, and the crawl result object."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import CrawlConfig
from .constants import JSON_INDENT
from .types import Address, JSONDict, PageStatus
from .url import address_str


class ResultStore:
    """Map of visited page -> links found on it, shared by response workers.

    Failed pages are stored with an empty link list; their status and error
    are kept alongside so callers can tell them apart from linkless pages.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._crawled_urls: dict[str, list[str]] = {}
        self._closed = False
        self._status: dict[str, PageStatus] = {}
        self._errors: dict[str, str] = {}

    def store(self, page: Address, urls: list[str], *, error: str | None = None) -> bool:
        """Record the links found on `page` (or its failure).

        Returns False, storing nothing, once the store has been closed.
        """

        key = address_str(page)
        with self._lock:
            if self._closed:
                return False
            if key in self._crawled_urls:
                raise RuntimeError(f"Result for {key} stored twice")
            self._crawled_urls[key] = list(urls)
            if error is None:
                self._status[key] = PageStatus.OK
            else:
                self._status[key] = PageStatus.FAILED
                self._errors[key] = error
        return True

    def close(self) -> None:
        """Reject further writes; the stored results are final."""

        with self._lock:
            self._closed = True

    def urls(self) -> dict[str, list[str]]:
        with self._lock:
            return {page: list(links) for page, links in self._crawled_urls.items()}

    def statuses(self) -> dict[str, PageStatus]:
        with self._lock:
            return dict(self._status)

    def errors(self) -> dict[str, str]:
        with self._lock:
            return dict(self._errors)

    def __contains__(self, page: object) -> bool:
        key = address_str(page) if isinstance(page, Address) else page
        with self._lock:
            return key in self._crawled_urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._crawled_urls)


@dataclass(slots=True)
class CrawlResult:
    """Output of one crawl: the options it ran with plus everything it found."""

    config: CrawlConfig
    store: ResultStore
    stats: dict[str, Any] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def target(self) -> str:
        """The URL the crawl started on."""

        return self.config.target

    @property
    def same_domain(self) -> bool:
        return self.config.same_domain

    @property
    def max_depth(self) -> int:
        return self.config.max_depth

    def urls(self) -> dict[str, list[str]]:
        """Map of visited page to the links found on that page."""

        return self.store.urls()

    def failures(self) -> dict[str, str]:
        """Map of visited page to the reason its fetch or extraction failed."""

        return self.store.errors()

    def status(self, page: str) -> PageStatus | None:
        """Return the visit status of `page`, or None if it was never visited."""

        return self.store.statuses().get(page)

    def to_dict(self) -> JSONDict:
        statuses = self.store.statuses()
        return {
            "target": self.target,
            "same_domain": self.same_domain,
            "max_depth": self.max_depth,
            "cancelled": self.cancelled,
            "metadata": dict(self.config.metadata),
            "pages": {
                page: {
                    "status": statuses[page].value,
                    "links": links,
                }
                for page, links in sorted(self.urls().items())
            },
            "failures": self.failures(),
            "stats": self.stats,
        }


def save_result(result: CrawlResult, path: str | Path) -> Path:
    """Write `result` as JSON to `path`, creating parent directories."""

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(result.to_dict(), indent=JSON_INDENT, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return out_path


__all__ = [
    "CrawlResult",
    "ResultStore",
    "save_result",
]
