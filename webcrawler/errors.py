"""Exception types raised by loaders, extractors, and the crawl engine."""

from __future__ import annotations


class CrawlError(Exception):
    """Base class for crawler failures."""


class LoadError(CrawlError):
    """A page could not be loaded (network error or non-2xx status)."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractError(CrawlError):
    """Links could not be extracted from a loaded page."""


class InvalidTargetError(CrawlError, ValueError):
    """The seed target cannot be used to start a crawl."""


__all__ = [
    "CrawlError",
    "ExtractError",
    "InvalidTargetError",
    "LoadError",
]
