"""Public crawler facade wiring the HTTP loader and HTML extractor to the engine."""

from __future__ import annotations

import threading

from .backoff import linear_backoff
from .config import CrawlConfig
from .constants import DEFAULT_MAX_DEPTH, DEFAULT_SAME_DOMAIN, DEFAULT_WORKERS
from .loader import HTTPGetLoader, loader_with_retry
from .parsers import html_link_extractor
from .pipeline import crawl
from .result import CrawlResult
from .stats import StatsCollector
from .types import ExtractorFunc, LoaderFunc


class Crawler:
    """A basic web crawler.

    With no explicit `loader`, each run builds an `HTTPGetLoader` from the
    crawl config, wrapped with retry/backoff, and closes it when the run ends.
    """

    def __init__(
        self,
        loader: LoaderFunc | None = None,
        extractor: ExtractorFunc = html_link_extractor,
    ) -> None:
        self.loader = loader
        self.extractor = extractor

    def crawl(
        self,
        target: str,
        same_domain: bool = DEFAULT_SAME_DOMAIN,
        max_depth: int = DEFAULT_MAX_DEPTH,
        workers: int = DEFAULT_WORKERS,
        *,
        cancel_event: threading.Event | None = None,
    ) -> CrawlResult:
        """Crawl according to the specified options."""

        config = CrawlConfig(
            target=target,
            same_domain=same_domain,
            max_depth=max_depth,
            workers=workers,
        )
        return self.run(config, cancel_event=cancel_event)

    def run(
        self,
        config: CrawlConfig,
        *,
        cancel_event: threading.Event | None = None,
        stats: StatsCollector | None = None,
    ) -> CrawlResult:
        """Crawl with a fully specified config."""

        if self.loader is not None:
            return crawl(self.loader, self.extractor, config, stats=stats, cancel_event=cancel_event)

        with HTTPGetLoader(
            timeout_seconds=config.timeout_seconds,
            user_agent=config.user_agent,
            headers=config.headers(),
        ) as http_loader:
            loader = loader_with_retry(
                http_loader.load,
                linear_backoff(config.backoff_seconds),
                config.max_attempts,
            )
            return crawl(loader, self.extractor, config, stats=stats, cancel_event=cancel_event)


DEFAULT_CRAWLER = Crawler()


def crawl_site(
    target: str,
    *,
    same_domain: bool = DEFAULT_SAME_DOMAIN,
    max_depth: int = DEFAULT_MAX_DEPTH,
    workers: int = DEFAULT_WORKERS,
    cancel_event: threading.Event | None = None,
) -> CrawlResult:
    """Crawl `target` over HTTP with the default crawler."""

    return DEFAULT_CRAWLER.crawl(
        target,
        same_domain=same_domain,
        max_depth=max_depth,
        workers=workers,
        cancel_event=cancel_event,
    )


__all__ = [
    "Crawler",
    "DEFAULT_CRAWLER",
    "crawl_site",
]
