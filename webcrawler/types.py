"""Core type definitions for the crawl engine.

This module is intentionally dependency-light so other crawler modules can import
shared records without introducing cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import BinaryIO, Callable
from urllib.parse import SplitResult

# An absolute, parsed URL. SplitResult is an immutable namedtuple, so any
# rewrite produces a new value via `_replace`.
Address = SplitResult

LoaderFunc = Callable[[str], BinaryIO]
ExtractorFunc = Callable[[BinaryIO], list[str]]
BackoffFunc = Callable[[int], float]

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONDict = dict[str, JSONValue]


def utc_now_iso() -> str:
    """Return an RFC3339-like UTC timestamp string for result exports."""

    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class PageStatus(str, Enum):
    """Outcome of visiting one page."""

    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CrawlRequest:
    """A single page the crawler should fetch."""

    target: Address
    depth: int
    origin: Address | None = None

    def next(self, target: Address) -> "CrawlRequest":
        """Build the request for a link discovered on this page."""

        return CrawlRequest(target=target, depth=self.depth + 1, origin=self.target)


@dataclass(frozen=True, slots=True)
class CrawlResponse:
    """Outcome of one CrawlRequest: discovered links or a failure reason."""

    request: CrawlRequest
    urls: list[Address] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "Address",
    "BackoffFunc",
    "CrawlRequest",
    "CrawlResponse",
    "ExtractorFunc",
    "JSONDict",
    "JSONPrimitive",
    "JSONValue",
    "LoaderFunc",
    "PageStatus",
    "utc_now_iso",
]
