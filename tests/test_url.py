"""Tests for webcrawler.url module."""

from __future__ import annotations

import pytest

from webcrawler.url import (
    URLPipeline,
    address_str,
    addresses_to_str,
    build_filters,
    build_modifiers,
    dedupe_urls,
    filter_urls,
    is_valid_target,
    modify_url,
    parse_address,
    remove_fragment,
    remove_non_http_urls,
    remove_trailing_slash,
    resolve_address,
    same_domain_filter,
)


def _addrs(*urls):
    return [parse_address(url) for url in urls]


class TestParseAddress:
    def test_round_trip(self):
        assert address_str(parse_address("https://localhost/index.html?q=1#top")) == (
            "https://localhost/index.html?q=1#top"
        )

    @pytest.mark.parametrize("raw", ["http://[::1", "http://localhost:notaport/"])
    def test_malformed(self, raw):
        with pytest.raises(ValueError):
            parse_address(raw)


class TestResolveAddress:
    base = parse_address("https://localhost/docs/index.html")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("about.html", "https://localhost/docs/about.html"),
            ("/contact.html", "https://localhost/contact.html"),
            ("../up.html", "https://localhost/up.html"),
            ("#section", "https://localhost/docs/index.html#section"),
            ("//cdn.example.com/x", "https://cdn.example.com/x"),
            ("https://test.com/page", "https://test.com/page"),
            ("mailto:test@localhost", "mailto:test@localhost"),
        ],
    )
    def test_resolves_against_base(self, raw, expected):
        assert address_str(resolve_address(self.base, raw)) == expected

    def test_unparseable_returns_none(self):
        assert resolve_address(self.base, "http://[::1") is None


class TestIsValidTarget:
    @pytest.mark.parametrize("raw", ["https://localhost/index.html", "http://example.com"])
    def test_valid(self, raw):
        assert is_valid_target(parse_address(raw))

    @pytest.mark.parametrize("raw", ["/relative/path", "ftp://example.com/file", "https://", "not a url"])
    def test_invalid(self, raw):
        assert not is_valid_target(parse_address(raw))


class TestModifiers:
    def test_remove_trailing_slash(self):
        assert address_str(remove_trailing_slash(parse_address("https://test.com/some/page/"))) == (
            "https://test.com/some/page"
        )

    def test_remove_trailing_slash_on_root(self):
        assert address_str(remove_trailing_slash(parse_address("https://test.com/"))) == "https://test.com"

    def test_remove_fragment(self):
        assert address_str(remove_fragment(parse_address("https://test.com/page#section"))) == (
            "https://test.com/page"
        )

    def test_input_is_not_changed(self):
        original = parse_address("https://test.com/page/#section")

        modified = modify_url(original, *build_modifiers())

        assert address_str(original) == "https://test.com/page/#section"
        assert address_str(modified) == "https://test.com/page"

    @pytest.mark.parametrize(
        "raw",
        ["https://test.com/a//", "https://test.com/a/#x", "https://test.com", "https://test.com/?q=1#f"],
    )
    def test_normalization_is_idempotent(self, raw):
        once = modify_url(parse_address(raw), *build_modifiers())
        twice = modify_url(once, *build_modifiers())
        assert address_str(once) == address_str(twice)


class TestFilters:
    def test_remove_non_http_urls(self):
        urls = _addrs("https://a.com", "mailto:x@a.com", "http://b.com", "tel:123", "ftp://c.com")
        assert addresses_to_str(remove_non_http_urls(urls)) == ["https://a.com", "http://b.com"]

    def test_dedupe_keeps_first_occurrence_order(self):
        urls = _addrs("https://a.com/2", "https://a.com/1", "https://a.com/2", "https://a.com/1")
        assert addresses_to_str(dedupe_urls(urls)) == ["https://a.com/2", "https://a.com/1"]

    def test_same_domain_requires_scheme_and_host(self):
        keep = same_domain_filter(parse_address("https://localhost/index.html"))
        urls = _addrs(
            "https://localhost/about.html",
            "http://localhost/about.html",
            "https://localhost:8443/about.html",
            "https://sub.localhost/about.html",
            "https://user@localhost/me",
        )
        assert addresses_to_str(keep(urls)) == [
            "https://localhost/about.html",
            "https://user@localhost/me",
        ]

    def test_filter_urls_applies_in_order(self):
        urls = _addrs("https://a.com", "https://a.com", "mailto:x@a.com")
        assert addresses_to_str(filter_urls(urls, remove_non_http_urls, dedupe_urls)) == ["https://a.com"]

    def test_build_filters(self):
        target = parse_address("https://localhost")
        assert build_filters(target, same_domain=False) == [remove_non_http_urls, dedupe_urls]
        assert len(build_filters(target, same_domain=True)) == 3


class TestURLPipeline:
    def test_dedup_runs_after_normalization(self):
        pipeline = URLPipeline.for_target(parse_address("https://localhost/"), same_domain=False)
        urls = _addrs(
            "https://test.com/duplicate",
            "https://test.com/duplicate/",
            "https://test.com/duplicate#top",
            "mailto:test@localhost",
        )
        assert addresses_to_str(pipeline.process(urls)) == ["https://test.com/duplicate"]

    def test_same_domain(self):
        pipeline = URLPipeline.for_target(parse_address("https://localhost/index.html"), same_domain=True)
        urls = _addrs("https://localhost/a/", "https://github.com/example/project")
        assert addresses_to_str(pipeline.process(urls)) == ["https://localhost/a"]

    def test_normalize(self):
        pipeline = URLPipeline()
        assert address_str(pipeline.normalize(parse_address("https://localhost/x/#y"))) == "https://localhost/x"
