from __future__ import annotations

import asyncio

import pytest

from sniperank.engine.crawler import CrawlError, crawl_site


def _html(*hrefs: str) -> str:
    links = "".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><head><title>t</title></head><body><h1>h</h1>{links}</body></html>"


SITE = {
    "https://example.com/": _html(
        "/a",
        "/b",
        "https://example.com/c?x=1#frag",
        "https://other.com/d",
        "/file.pdf",
        "/a#top",
        "notes.html",
    ),
    "https://example.com/a": _html("/a/deep", "/"),
    "https://example.com/c": _html("/c"),
    "https://example.com/a/deep": _html(),
}


def test_breadth_first_in_document_order(fake_fetcher):
    fetcher = fake_fetcher(SITE)
    pages = asyncio.run(crawl_site("https://example.com/", fetcher, max_pages=10))

    assert [p.url for p in pages] == [
        "https://example.com/",
        "https://example.com/a",
        "https://example.com/c",
        "https://example.com/a/deep",
    ]
    # /b is unreachable: tried once, skipped, never retried
    assert fetcher.calls.count("https://example.com/b") == 1
    assert "https://other.com/d" not in fetcher.calls
    assert not any(url.endswith(".pdf") for url in fetcher.calls)


def test_page_cap_truncates_in_traversal_order(fake_fetcher):
    pages = asyncio.run(crawl_site("https://example.com/", fake_fetcher(SITE), max_pages=2))
    assert [p.url for p in pages] == ["https://example.com/", "https://example.com/a"]


def test_no_duplicate_urls_and_depth_bounded(fake_fetcher):
    site = {"https://example.com/": _html("/x/y/z/w", "/", "/x")}
    site["https://example.com/x/y/z/w"] = _html("/never")
    site["https://example.com/x"] = _html("/x", "/x/")
    site["https://example.com/x/"] = _html()
    site["https://example.com/never"] = _html()
    fetcher = fake_fetcher(site)

    pages = asyncio.run(crawl_site("https://example.com/", fetcher, max_pages=50))

    urls = [p.url for p in pages]
    assert len(urls) == len(set(urls))
    assert all(p.depth <= 3 for p in pages)
    # a depth-3 page does not expand its links
    assert "https://example.com/never" not in fetcher.calls


def test_max_depth_gates_link_discovery(fake_fetcher):
    fetcher = fake_fetcher(SITE)
    pages = asyncio.run(crawl_site("https://example.com/", fetcher, max_pages=10, max_depth=1))

    assert "https://example.com/a/deep" not in [p.url for p in pages]


def test_zero_pages_is_fatal(fake_fetcher):
    with pytest.raises(CrawlError, match="no pages crawled"):
        asyncio.run(crawl_site("https://example.com/", fake_fetcher({}), max_pages=5))


def test_parse_failure_skips_page(fake_fetcher, monkeypatch):
    from sniperank.engine import crawler

    real_extract = crawler.signals_from_soup

    def flaky(soup, url, host, *, start_url=None):
        if url.endswith("/a"):
            raise ValueError("broken markup")
        return real_extract(soup, url, host, start_url=start_url)

    monkeypatch.setattr(crawler, "signals_from_soup", flaky)
    pages = asyncio.run(crawl_site("https://example.com/", fake_fetcher(SITE), max_pages=10))

    assert "https://example.com/a" not in [p.url for p in pages]
    assert pages[0].url == "https://example.com/"


def test_malformed_href_is_ignored(fake_fetcher):
    site = {
        "https://example.com/": _html("http://[oops/x", "/a", "//[::1"),
        "https://example.com/a": _html(),
    }
    pages = asyncio.run(crawl_site("https://example.com/", fake_fetcher(site), max_pages=10))

    assert [p.url for p in pages] == ["https://example.com/", "https://example.com/a"]


def test_www_and_trailing_slash_variants_are_one_page(fake_fetcher):
    site = {
        "https://example.com/": _html("https://www.example.com/", "/about", "/about/", "http://example.com/about"),
        "https://www.example.com/": _html(),
        "https://example.com/about": _html("https://www.example.com/about/"),
        "https://example.com/about/": _html(),
    }
    fetcher = fake_fetcher(site)
    pages = asyncio.run(crawl_site("https://example.com/", fetcher, max_pages=10))

    assert [p.url for p in pages] == ["https://example.com/", "https://example.com/about"]
    assert fetcher.calls == ["https://example.com/", "https://example.com/about"]
