from __future__ import annotations

import pytest

from sniperank.engine.fetcher import FetchError
from sniperank.engine.models import ContactSignals, PageSignal


def build_page(url: str = "https://example.com/", **overrides) -> PageSignal:
    values = {
        "url": url,
        "title": f"Page {url}",
        "meta_description": "A short summary of the page.",
        "h1_count": 1,
        "word_count": 650,
        "image_count": 2,
        "image_alt_count": 2,
        "internal_link_count": 8,
        "external_link_count": 2,
        "has_schema": True,
        "has_nav": True,
        "has_footer": True,
        "has_breadcrumbs": True,
        "social_link_count": 1,
        "contact_signals": ContactSignals(phone=True, email=True),
        "is_secure": url.startswith("https://"),
    }
    values.update(overrides)
    return PageSignal(**values)


def build_poor_page(url: str = "http://example.com/", **overrides) -> PageSignal:
    values = {
        "title": "",
        "meta_description": "",
        "h1_count": 0,
        "word_count": 50,
        "image_count": 4,
        "image_alt_count": 0,
        "internal_link_count": 0,
        "external_link_count": 0,
        "has_schema": False,
        "has_nav": False,
        "has_footer": False,
        "has_breadcrumbs": False,
        "social_link_count": 0,
        "contact_signals": ContactSignals(),
    }
    values.update(overrides)
    return build_page(url, **values)


class FakeFetcher:
    """In-memory site: url -> html. Unknown urls fail like an unreachable page."""

    def __init__(self, site: dict[str, str]):
        self.site = site
        self.calls: list[str] = []

    async def fetch_html(self, url: str) -> tuple[int, str]:
        self.calls.append(url)
        if url not in self.site:
            raise FetchError(f"{url} returned status 404")
        return 200, self.site[url]


@pytest.fixture
def page_factory():
    return build_page


@pytest.fixture
def poor_page_factory():
    return build_poor_page


@pytest.fixture
def fake_fetcher():
    return FakeFetcher
