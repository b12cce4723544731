"""Anchor-tag link extraction from raw HTML streams."""

from __future__ import annotations

import logging
from typing import BinaryIO

from bs4 import BeautifulSoup, SoupStrainer

from ..errors import ExtractError
from ..url import parse_address

LOGGER = logging.getLogger(__name__)

ANCHOR_STRAINER = SoupStrainer("a")


def _is_parseable(link: str) -> bool:
    try:
        parse_address(link)
    except ValueError:
        return False
    return True


def html_link_extractor(stream: BinaryIO) -> list[str]:
    """Return the raw `href` values of `<a>` tags in document order.

    Duplicate href strings are reported once. Links that cannot be parsed are
    skipped rather than failing the whole page.
    """

    try:
        html = stream.read()
    except OSError as exc:
        raise ExtractError(f"failed to read page body: {exc}") from exc

    soup = BeautifulSoup(html, "lxml", parse_only=ANCHOR_STRAINER)

    links: list[str] = []
    seen: set[str] = set()

    for element in soup.find_all("a"):
        href = element.get("href")
        if not href:
            continue
        if href in seen:
            continue
        if not _is_parseable(href):
            LOGGER.debug("Skipping unparseable link %r", href)
            continue
        seen.add(href)
        links.append(href)

    return links


__all__ = [
    "ANCHOR_STRAINER",
    "html_link_extractor",
]
