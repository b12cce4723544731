"""Thread-safe crawl bookkeeping: the seen-URL log and the outstanding-work counter."""

from __future__ import annotations

import threading

from .types import Address
from .url import address_str


class RequestLog:
    """Addresses that have been dispatched (or are about to be) in one crawl.

    Addresses are marked seen at dispatch time, so two in-flight requests can
    never exist for the same address.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seen_urls: set[str] = set()

    def mark_if_unseen(self, address: Address) -> bool:
        """Atomically mark `address` as seen.

        Returns True if this call claimed it, False if it was already seen.
        """

        key = address_str(address)
        with self._lock:
            if key in self._seen_urls:
                return False
            self._seen_urls.add(key)
            return True

    def seen(self, address: Address) -> bool:
        with self._lock:
            return address_str(address) in self._seen_urls

    def mark_as_seen(self, address: Address) -> None:
        with self._lock:
            self._seen_urls.add(address_str(address))

    def snapshot(self) -> set[str]:
        """Return a copy of all seen canonical URLs."""

        with self._lock:
            return set(self._seen_urls)

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen_urls)


class OutstandingWork:
    """Counts dispatched requests whose responses are not fully processed yet.

    `add` must be called before a request is queued and `done` only after every
    candidate derived from its response has been counted or discarded. Zero is
    then reached only when no discovery work remains anywhere in the crawl.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._count = 0

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._count += n

    def done(self) -> None:
        with self._cond:
            if self._count <= 0:
                raise RuntimeError("OutstandingWork.done() called more times than add()")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the count reaches zero.

        Returns False if `timeout` elapsed first.
        """

        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)

    @property
    def count(self) -> int:
        with self._cond:
            return self._count


__all__ = [
    "OutstandingWork",
    "RequestLog",
]
