"""Default values shared by config, loader, and CLI."""

from __future__ import annotations

DEFAULT_WORKERS = 10
DEFAULT_MAX_DEPTH = 0
DEFAULT_CLI_MAX_DEPTH = 2
DEFAULT_SAME_DOMAIN = True

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BACKOFF_SECONDS = 0.5
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CRAWL_TIMEOUT_SECONDS: float | None = None

DEFAULT_USER_AGENT = "webcrawler/0.1 (+https://github.com/webcrawler/webcrawler)"
DEFAULT_HTTP_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.8",
}

ALLOWED_SCHEMES = ("http", "https")

WORKER_JOIN_TIMEOUT_SECONDS = 5.0
CANCEL_POLL_SECONDS = 0.1

JSON_INDENT = 2
SUPPORTED_CONFIG_SUFFIXES = (".json", ".yaml", ".yml")
