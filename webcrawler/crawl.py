"""CLI entrypoint for crawling a site from one seed URL."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any

from .config import CrawlConfig, load_config_payload
from .constants import DEFAULT_CLI_MAX_DEPTH, DEFAULT_WORKERS
from .crawler import Crawler
from .errors import InvalidTargetError
from .result import CrawlResult, save_result


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="webcrawler",
        description="Crawl a website from a seed URL and list the links found on each page.",
    )

    parser.add_argument("target", nargs="?", default=None, help="Seed URL to start crawling from.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to JSON/YAML crawl config. CLI flags override its values.",
    )

    parser.add_argument(
        "--same_domain",
        dest="same_domain",
        action="store_true",
        default=None,
        help="Only crawl the target's scheme and host (default).",
    )
    parser.add_argument(
        "--no_same_domain",
        dest="same_domain",
        action="store_false",
        help="Follow links to any domain.",
    )
    parser.add_argument(
        "--max_depth",
        type=int,
        default=None,
        help=f"Crawl up to this depth, 0 for unbounded (default: {DEFAULT_CLI_MAX_DEPTH}).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Number of workers per pool (default: {DEFAULT_WORKERS}).",
    )

    parser.add_argument("--max_attempts", type=int, default=None)
    parser.add_argument("--backoff_seconds", type=float, default=None)
    parser.add_argument("--timeout_seconds", type=float, default=None)
    parser.add_argument(
        "--crawl_timeout_seconds",
        type=float,
        default=None,
        help="Stop the whole crawl after this many seconds.",
    )
    parser.add_argument("--user_agent", type=str, default=None)

    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the full result as JSON to this path.",
    )
    parser.add_argument(
        "--print_stats_json",
        action="store_true",
        help="Print full stats JSON in stdout after run.",
    )
    parser.add_argument(
        "--log_file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CrawlConfig:
    payload: dict[str, Any] = {}
    if args.config is not None:
        payload = load_config_payload(args.config)

    if args.target is not None:
        payload["target"] = args.target
    if not payload.get("target"):
        raise ValueError("No target provided. Pass a URL or use --config.")

    payload.setdefault("max_depth", DEFAULT_CLI_MAX_DEPTH)

    overrides = {
        "same_domain": args.same_domain,
        "max_depth": args.max_depth,
        "workers": args.workers,
        "max_attempts": args.max_attempts,
        "backoff_seconds": args.backoff_seconds,
        "timeout_seconds": args.timeout_seconds,
        "crawl_timeout_seconds": args.crawl_timeout_seconds,
        "user_agent": args.user_agent,
    }
    for key, value in overrides.items():
        if value is not None:
            payload[key] = value

    return CrawlConfig.from_dict(payload)


def setup_logging(verbose: bool, log_file: Path | None = None) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)

    # Logs go to stderr so stdout only carries the crawl listing.
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # urllib3 logs every connection at DEBUG; keep crawler logs readable.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_summary(result: CrawlResult, *, print_stats_json: bool) -> None:
    urls = result.urls()
    for page in sorted(urls):
        print(f"{page} links to:")
        for link in urls[page]:
            print(f"- {link}")

    failures = result.failures()
    if failures:
        print("\n--- Failed Pages ---")
        for page in sorted(failures):
            print(f"{page}: {failures[page]}")

    if result.cancelled:
        print("\ncrawl stopped before completion")
    print(f"crawled {len(urls)} pages")

    if print_stats_json:
        print("\n--- Full Stats JSON ---")
        print(json.dumps(result.stats, indent=2, sort_keys=True))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = build_config(args)
    except Exception as exc:
        logging.error("Failed to build config: %s", exc)
        return 2

    print(f"crawling '{config.target}'")

    try:
        result = Crawler().run(config)
    except InvalidTargetError as exc:
        logging.error("%s", exc)
        return 2
    except KeyboardInterrupt:
        logging.error("Interrupted by user")
        return 130
    except Exception:
        logging.exception("Crawl failed")
        return 1

    print_summary(result, print_stats_json=args.print_stats_json)

    if args.output is not None:
        path = save_result(result, args.output)
        logging.info("Wrote result to %s", path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
