"""Shared fixtures: an in-memory site served through a counting loader."""

from __future__ import annotations

import io
import threading
from collections import Counter
from pathlib import Path
from typing import Mapping

import pytest

from webcrawler.errors import LoadError

HTML_DIR = Path(__file__).parent / "testdata" / "html"

PROJECT_PAGE = """
<html><body>
<a href="/example/project/commits">Commits</a>
<a href="/example/project/releases">Releases</a>
<a href="/example/project/pulls">Pulls</a>
</body></html>
"""


class FakeSite:
    """Serves fixed pages by URL and counts how often each URL is loaded."""

    def __init__(self, pages: Mapping[str, str | bytes]) -> None:
        self.pages = dict(pages)
        self.calls: Counter[str] = Counter()
        self._lock = threading.Lock()

    def load(self, url: str) -> io.BytesIO:
        with self._lock:
            self.calls[url] += 1
        body = self.pages.get(url)
        if body is None:
            raise LoadError("failed to load page: HTTP status 404", url=url, status_code=404)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return io.BytesIO(body)


def local_pages() -> dict[str, bytes]:
    return {
        f"https://localhost/{name}": (HTML_DIR / name).read_bytes()
        for name in ("index.html", "about.html", "contact.html")
    }


@pytest.fixture
def html_dir() -> Path:
    return HTML_DIR


@pytest.fixture
def site() -> FakeSite:
    pages: dict[str, str | bytes] = dict(local_pages())
    pages["https://github.com/example/project"] = PROJECT_PAGE
    return FakeSite(pages)


@pytest.fixture
def make_site():
    return FakeSite
