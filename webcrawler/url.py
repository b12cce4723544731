"""Address parsing, resolution, and the modifier/filter pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from .constants import ALLOWED_SCHEMES
from .types import Address

URLFilterFunc = Callable[[list[Address]], list[Address]]
URLModifyFunc = Callable[[Address], Address]


def parse_address(raw: str) -> Address:
    """Parse a URL string into an Address, raising ValueError if malformed."""

    address = urlsplit(raw)
    # Port access validates the netloc (e.g. non-numeric ports).
    address.port
    return address


def address_str(address: Address) -> str:
    """Canonical string form used as identity for dedup and results."""

    return urlunsplit(address)


def addresses_to_str(addresses: Iterable[Address]) -> list[str]:
    return [address_str(address) for address in addresses]


def _host(address: Address) -> str:
    # netloc without userinfo, i.e. host[:port]
    return address.netloc.rpartition("@")[2]


def resolve_address(base: Address, raw: str) -> Address | None:
    """Resolve a possibly relative link against `base`.

    Returns None when the link cannot be parsed.
    """

    try:
        return parse_address(urljoin(address_str(base), raw))
    except ValueError:
        return None


def is_valid_target(address: Address, allowed_schemes: Sequence[str] = ALLOWED_SCHEMES) -> bool:
    """Return True if address is absolute with an allowed scheme and a host."""

    return address.scheme.lower() in allowed_schemes and bool(address.hostname)


# Modifiers


def remove_trailing_slash(address: Address) -> Address:
    """Strip trailing slashes from the path."""

    return address._replace(path=address.path.rstrip("/"))


def remove_fragment(address: Address) -> Address:
    """Clear the fragment."""

    return address._replace(fragment="")


def modify_url(address: Address, *modifiers: URLModifyFunc) -> Address:
    """Return a modified copy of `address`; the input is never changed."""

    for modifier in modifiers:
        address = modifier(address)
    return address


def modify_urls(addresses: Iterable[Address], *modifiers: URLModifyFunc) -> list[Address]:
    return [modify_url(address, *modifiers) for address in addresses]


# Filters


def filter_urls(addresses: list[Address], *filters: URLFilterFunc) -> list[Address]:
    """Run `addresses` through each filter in order."""

    for url_filter in filters:
        addresses = url_filter(addresses)
    return addresses


def remove_non_http_urls(addresses: list[Address]) -> list[Address]:
    """Drop addresses whose scheme is not http or https."""

    return [address for address in addresses if address.scheme in ALLOWED_SCHEMES]


def dedupe_urls(addresses: list[Address]) -> list[Address]:
    """Drop repeated addresses by canonical string, keeping first occurrence order."""

    seen: set[str] = set()
    output: list[Address] = []
    for address in addresses:
        key = address_str(address)
        if key in seen:
            continue
        seen.add(key)
        output.append(address)
    return output


def same_domain_filter(target: Address) -> URLFilterFunc:
    """Return a filter keeping only addresses with the target's scheme and host."""

    target_scheme = target.scheme
    target_host = _host(target)

    def keep_same_domain(addresses: list[Address]) -> list[Address]:
        return [
            address
            for address in addresses
            if _host(address) == target_host and address.scheme == target_scheme
        ]

    return keep_same_domain


def build_modifiers() -> list[URLModifyFunc]:
    """Standard normalization applied to every discovered address."""

    return [remove_trailing_slash, remove_fragment]


def build_filters(target: Address, *, same_domain: bool) -> list[URLFilterFunc]:
    """Standard filters; the order matters, dedup runs on normalized strings."""

    filters: list[URLFilterFunc] = [remove_non_http_urls, dedupe_urls]
    if same_domain:
        filters.append(same_domain_filter(target))
    return filters


@dataclass(slots=True)
class URLPipeline:
    """Modifiers then filters, applied to the links found on one page."""

    modifiers: list[URLModifyFunc] = field(default_factory=build_modifiers)
    filters: list[URLFilterFunc] = field(default_factory=list)

    @classmethod
    def for_target(cls, target: Address, *, same_domain: bool) -> "URLPipeline":
        return cls(
            modifiers=build_modifiers(),
            filters=build_filters(target, same_domain=same_domain),
        )

    def normalize(self, address: Address) -> Address:
        return modify_url(address, *self.modifiers)

    def process(self, addresses: Iterable[Address]) -> list[Address]:
        return filter_urls(modify_urls(addresses, *self.modifiers), *self.filters)


__all__ = [
    "URLFilterFunc",
    "URLModifyFunc",
    "URLPipeline",
    "address_str",
    "addresses_to_str",
    "build_filters",
    "build_modifiers",
    "dedupe_urls",
    "filter_urls",
    "is_valid_target",
    "modify_url",
    "modify_urls",
    "parse_address",
    "remove_fragment",
    "remove_non_http_urls",
    "remove_trailing_slash",
    "resolve_address",
    "same_domain_filter",
]
