"""Concurrent, depth-limited web crawler: config, shared types, and engine components."""

from .backoff import constant_backoff, linear_backoff, simple_backoff
from .config import CrawlConfig, load_config, save_config
from .crawler import DEFAULT_CRAWLER, Crawler, crawl_site
from .errors import CrawlError, ExtractError, InvalidTargetError, LoadError
from .frontier import OutstandingWork, RequestLog
from .loader import HTTPGetLoader, loader_with_retry
from .parsers import html_link_extractor
from .pipeline import CrawlEngine, crawl
from .result import CrawlResult, ResultStore, save_result
from .stats import CrawlStats, StatsCollector
from .types import (
    Address,
    CrawlRequest,
    CrawlResponse,
    PageStatus,
    utc_now_iso,
)
from .url import URLPipeline, build_filters, build_modifiers, parse_address, resolve_address

__all__ = [
    "Address",
    "CrawlConfig",
    "CrawlEngine",
    "CrawlError",
    "CrawlRequest",
    "CrawlResponse",
    "CrawlResult",
    "CrawlStats",
    "Crawler",
    "DEFAULT_CRAWLER",
    "ExtractError",
    "HTTPGetLoader",
    "InvalidTargetError",
    "LoadError",
    "OutstandingWork",
    "PageStatus",
    "RequestLog",
    "ResultStore",
    "StatsCollector",
    "URLPipeline",
    "build_filters",
    "build_modifiers",
    "constant_backoff",
    "crawl",
    "crawl_site",
    "html_link_extractor",
    "linear_backoff",
    "load_config",
    "loader_with_retry",
    "parse_address",
    "resolve_address",
    "save_config",
    "save_result",
    "simple_backoff",
    "utc_now_iso",
]
