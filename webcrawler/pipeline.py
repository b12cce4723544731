"""Crawl engine: request/response worker pools and the crawl orchestrator.

Request workers fetch a page, extract and filter its links, and emit a
response. Response workers record the page, then turn newly discovered links
into requests for the next depth. Both pools talk only through two unbounded
queues, so a response worker never blocks while feeding the request pool.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any

from .config import CrawlConfig
from .constants import CANCEL_POLL_SECONDS, WORKER_JOIN_TIMEOUT_SECONDS
from .errors import CrawlError, InvalidTargetError, LoadError
from .frontier import OutstandingWork, RequestLog
from .result import CrawlResult, ResultStore
from .stats import StatsCollector
from .types import Address, CrawlRequest, CrawlResponse, ExtractorFunc, LoaderFunc
from .url import URLPipeline, address_str, addresses_to_str, is_valid_target, parse_address, resolve_address

LOGGER = logging.getLogger(__name__)

# Queue sentinel telling a worker to exit.
_STOP: Any = object()


def parse_target(target: str) -> Address:
    """Parse the seed URL, raising InvalidTargetError if it cannot start a crawl."""

    try:
        address = parse_address(target)
    except ValueError as exc:
        raise InvalidTargetError(f"Invalid target URL {target!r}: {exc}") from exc
    if not is_valid_target(address):
        raise InvalidTargetError(
            f"Invalid target URL {target!r}: expected an absolute http(s) URL with a host"
        )
    return address


class CrawlEngine:
    """Runs one crawl. Instances are single-use; all state lives for one `run`."""

    def __init__(
        self,
        loader: LoaderFunc,
        extractor: ExtractorFunc,
        config: CrawlConfig,
        *,
        stats: StatsCollector | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.loader = loader
        self.extractor = extractor
        self.config = config

        self.stats = stats or StatsCollector()
        self.store = ResultStore()
        self.request_log = RequestLog()

        self._cancel_event = cancel_event
        self._target = parse_target(config.target)
        self._pipeline = URLPipeline.for_target(self._target, same_domain=config.same_domain)

        self._requests: queue.Queue[CrawlRequest] = queue.Queue()
        self._responses: queue.Queue[CrawlResponse] = queue.Queue()
        self._outstanding = OutstandingWork()
        self._stop = threading.Event()
        self._started = False

    def run(self) -> CrawlResult:
        """Crawl from the configured target until no work remains."""

        if self._started:
            raise RuntimeError("CrawlEngine.run() may only be called once")
        self._started = True

        LOGGER.info(
            "Starting crawl: target=%s, same_domain=%s, max_depth=%d, workers=%d",
            self.config.target,
            self.config.same_domain,
            self.config.max_depth,
            self.config.workers,
        )

        request_workers = self._start_workers(self._request_worker, "crawler-request")
        response_workers = self._start_workers(self._response_worker, "crawler-response")

        # The seed is fetched as given so relative links resolve against it.
        # Its normalized form is marked too, so back-links to it are not refetched.
        seed = CrawlRequest(target=self._target, depth=1)
        self.request_log.mark_as_seen(seed.target)
        self.request_log.mark_as_seen(self._pipeline.normalize(seed.target))
        self._dispatch(seed)

        finished = self._wait_for_completion()
        if not finished:
            self._stop.set()
            LOGGER.warning(
                "Crawl of %s stopped before completion (%d requests outstanding)",
                self.config.target,
                self._outstanding.count,
            )

        self.store.close()
        self._shutdown(request_workers, response_workers, wait=finished)

        self.stats.finish()
        result = CrawlResult(
            config=self.config,
            store=self.store,
            stats=self.stats.to_json(),
            cancelled=not finished,
        )
        LOGGER.info("Crawl finished: %d pages visited", len(self.store))
        return result

    def _start_workers(self, target, name: str) -> list[threading.Thread]:
        workers = [
            threading.Thread(target=target, name=f"{name}-{idx}", daemon=True)
            for idx in range(self.config.workers)
        ]
        for worker in workers:
            worker.start()
        return workers

    def _shutdown(
        self,
        request_workers: list[threading.Thread],
        response_workers: list[threading.Thread],
        *,
        wait: bool,
    ) -> None:
        for _ in request_workers:
            self._requests.put(_STOP)
        for _ in response_workers:
            self._responses.put(_STOP)

        # A stopped crawl leaves in-flight fetches to finish on their own;
        # their results are discarded by the closed store.
        if not wait:
            return

        deadline = time.monotonic() + WORKER_JOIN_TIMEOUT_SECONDS
        for worker in [*request_workers, *response_workers]:
            worker.join(timeout=max(0.0, deadline - time.monotonic()))

    def _wait_for_completion(self) -> bool:
        timeout = self.config.crawl_timeout_seconds
        if self._cancel_event is None and timeout is None:
            return self._outstanding.wait()

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._cancel_event is not None and self._cancel_event.is_set():
                LOGGER.info("Crawl cancelled by caller")
                return False

            poll = CANCEL_POLL_SECONDS
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    LOGGER.info("Crawl timed out after %.1fs", timeout)
                    return False
                poll = min(poll, remaining)

            if self._outstanding.wait(timeout=poll):
                return True

    def _dispatch(self, request: CrawlRequest) -> None:
        # Count before queueing so the counter can't touch zero while this
        # request is in flight.
        self._outstanding.add()
        self.stats.record_dispatch(request.depth)
        self._requests.put(request)

    def _request_worker(self) -> None:
        while True:
            request = self._requests.get()
            if request is _STOP:
                return
            if self._stop.is_set():
                continue
            self._responses.put(self._scrape(request))

    def _scrape(self, request: CrawlRequest) -> CrawlResponse:
        url = address_str(request.target)
        try:
            raw_links = self._load_and_extract(url)
        except LoadError as exc:
            self.stats.record_load_error(exc)
            LOGGER.debug("Failed to load %s: %s", url, exc)
            return CrawlResponse(request=request, error=str(exc))
        except CrawlError as exc:
            LOGGER.debug("Failed to extract links from %s: %s", url, exc)
            return CrawlResponse(request=request, error=str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected error scraping %s", url)
            return CrawlResponse(request=request, error=f"{exc.__class__.__name__}: {exc}")

        resolved = [
            address
            for address in (resolve_address(request.target, raw) for raw in raw_links)
            if address is not None
        ]
        return CrawlResponse(request=request, urls=self._pipeline.process(resolved))

    def _load_and_extract(self, url: str) -> list[str]:
        stream = self.loader(url)
        try:
            return self.extractor(stream)
        finally:
            stream.close()

    def _response_worker(self) -> None:
        while True:
            response = self._responses.get()
            if response is _STOP:
                return
            try:
                self._handle_response(response)
            except Exception:
                LOGGER.exception(
                    "Failed to process response for %s",
                    address_str(response.request.target),
                )
            finally:
                # Last step: every candidate of this response is already counted.
                self._outstanding.done()

    def _handle_response(self, response: CrawlResponse) -> None:
        request = response.request
        if not self.store.store(request.target, addresses_to_str(response.urls), error=response.error):
            return
        self.stats.record_response(response)

        if self._stop.is_set():
            return

        max_depth = self.config.max_depth
        for link in response.urls:
            candidate = request.next(link)
            if max_depth > 0 and candidate.depth > max_depth:
                self.stats.record_skipped_depth()
                continue
            if not self.request_log.mark_if_unseen(candidate.target):
                self.stats.record_skipped_seen()
                continue
            self._dispatch(candidate)


def crawl(
    loader: LoaderFunc,
    extractor: ExtractorFunc,
    config: CrawlConfig,
    *,
    stats: StatsCollector | None = None,
    cancel_event: threading.Event | None = None,
) -> CrawlResult:
    """Crawl `config.target` using the given loader and extractor."""

    engine = CrawlEngine(loader, extractor, config, stats=stats, cancel_event=cancel_event)
    return engine.run()


__all__ = [
    "CrawlEngine",
    "crawl",
    "parse_target",
]
