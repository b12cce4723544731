"""Page loading over HTTP with a pluggable retry/backoff wrapper."""

from __future__ import annotations

import io
import logging
import threading
import time
from typing import BinaryIO, Callable, Mapping

import requests

from .backoff import simple_backoff
from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from .errors import LoadError
from .types import BackoffFunc, LoaderFunc

LOGGER = logging.getLogger(__name__)


class HTTPGetLoader:
    """Load pages with an HTTP GET request.

    Each worker thread gets its own `requests.Session`, so one loader can be
    shared across the whole request pool. Only 2xx responses count as success.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Mapping[str, str] | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.headers: dict[str, str] = dict(headers or {})
        self.headers.setdefault("User-Agent", user_agent)

        self._session_factory = session_factory
        self._thread_local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def load(self, url: str) -> BinaryIO:
        """Fetch `url` and return its body as a byte stream.

        Raises LoadError on transport failures and non-2xx statuses.
        """

        session = self._thread_local_session()
        try:
            response = session.get(
                url,
                headers=self.headers,
                timeout=self.timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            raise LoadError(f"{exc.__class__.__name__}: {exc}", url=url) from exc

        try:
            if not 200 <= response.status_code <= 299:
                raise LoadError(
                    f"failed to load page: HTTP status {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                )
            body = response.content if response.content is not None else b""
        finally:
            response.close()

        return io.BytesIO(body)

    __call__ = load

    def close(self) -> None:
        """Close every session opened by worker threads."""

        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()

    def __enter__(self) -> "HTTPGetLoader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _thread_local_session(self) -> requests.Session:
        session = getattr(self._thread_local, "session", None)
        if session is None:
            session = self._session_factory()
            self._thread_local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session


def loader_with_retry(
    load: LoaderFunc,
    backoff: BackoffFunc = simple_backoff,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> LoaderFunc:
    """Wrap `load` so that failed attempts are retried.

    The backoff wait is applied before every attempt, including the first.
    When all attempts fail, the error from the last attempt is raised.
    """

    attempts = max(1, max_attempts)

    def load_with_retry(url: str) -> BinaryIO:
        attempt = 0
        while True:
            attempt += 1
            sleep(backoff(attempt))
            try:
                return load(url)
            except LoadError as exc:
                if attempt >= attempts:
                    LOGGER.warning("Giving up on %s after %d attempts: %s", url, attempt, exc)
                    raise
                LOGGER.debug("Attempt %d/%d for %s failed: %s", attempt, attempts, url, exc)

    return load_with_retry


__all__ = [
    "HTTPGetLoader",
    "loader_with_retry",
]
