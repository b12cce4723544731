"""Thread-safe crawl statistics aggregation utilities."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
import threading
from typing import Any

from .errors import LoadError
from .types import CrawlResponse, utc_now_iso


@dataclass(slots=True)
class CrawlStats:
    """Simple mutable counters used for crawl summary reporting."""

    dispatched: int = 0
    skipped_depth: int = 0
    skipped_seen: int = 0

    fetched_ok: int = 0
    fetched_error: int = 0
    links_discovered: int = 0

    started_at: str = field(default_factory=utc_now_iso)
    finished_at: str | None = None

    def finish(self) -> None:
        self.finished_at = utc_now_iso()

    def to_json(self) -> dict[str, Any]:
        return {
            "dispatched": self.dispatched,
            "skipped_depth": self.skipped_depth,
            "skipped_seen": self.skipped_seen,
            "fetched_ok": self.fetched_ok,
            "fetched_error": self.fetched_error,
            "links_discovered": self.links_discovered,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }


class StatsCollector:
    """Collect and summarize crawler runtime statistics.

    The collector is thread-safe and shared by both worker pools of one crawl.
    """

    def __init__(self, base: CrawlStats | None = None) -> None:
        self._lock = threading.Lock()
        self._core = base or CrawlStats()
        self._status_code_counts: dict[str, int] = defaultdict(int)
        self._error_type_counts: dict[str, int] = defaultdict(int)
        self._max_depth_reached = 0

    def record_dispatch(self, depth: int) -> None:
        with self._lock:
            self._core.dispatched += 1
            self._max_depth_reached = max(self._max_depth_reached, depth)

    def record_skipped_depth(self) -> None:
        with self._lock:
            self._core.skipped_depth += 1

    def record_skipped_seen(self) -> None:
        with self._lock:
            self._core.skipped_seen += 1

    def record_response(self, response: CrawlResponse) -> None:
        """Record one processed page."""

        with self._lock:
            if response.ok:
                self._core.fetched_ok += 1
                self._core.links_discovered += len(response.urls)
                return
            self._core.fetched_error += 1
            err_type = (response.error or "").split(":", maxsplit=1)[0].strip() or "Unknown"
            self._error_type_counts[err_type] += 1

    def record_load_error(self, exc: LoadError) -> None:
        if exc.status_code is None:
            return
        with self._lock:
            self._status_code_counts[str(exc.status_code)] += 1

    def finish(self) -> None:
        """Mark crawl as finished."""

        with self._lock:
            self._core.finish()

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable summary payload."""

        with self._lock:
            core = self._core.to_json()

            start = _parse_iso_utc(self._core.started_at)
            end = _parse_iso_utc(self._core.finished_at) if self._core.finished_at else datetime.now(
                timezone.utc
            )
            duration_seconds = max(0.0, (end - start).total_seconds())
            fetched_total = self._core.fetched_ok + self._core.fetched_error

            return {
                **core,
                "duration_seconds": duration_seconds,
                "max_depth_reached": self._max_depth_reached,
                "fetched_per_second": (
                    fetched_total / duration_seconds if duration_seconds > 0 else 0.0
                ),
                "status_code_counts": dict(self._status_code_counts),
                "error_type_counts": dict(self._error_type_counts),
            }


def _parse_iso_utc(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = ["CrawlStats", "StatsCollector"]
