from __future__ import annotations

import logging
from collections import deque

from bs4 import BeautifulSoup

from sniperank.engine.extractor import parse_html, signals_from_soup
from sniperank.engine.fetcher import FetchError, PageFetcher
from sniperank.engine.models import PageSignal
from sniperank.engine.urls import host_of, resolve_link, url_key

logger = logging.getLogger(__name__)

MAX_DEPTH = 3


class CrawlError(RuntimeError):
    pass


def _discover_links(soup: BeautifulSoup, start_url: str, host: str) -> list[str]:
    links: list[str] = []
    for a in soup.find_all("a", href=True):
        full = resolve_link(str(a.get("href") or ""), start_url, host)
        if full:
            links.append(full)
    return links


async def _safe_fetch(fetcher: PageFetcher, url: str) -> str | None:
    try:
        _, html = await fetcher.fetch_html(url)
        return html
    except FetchError as exc:
        logger.warning("Failed to crawl %s: %s", url, exc)
    except Exception as exc:
        # fetchers outside this package may raise their own transport errors
        logger.warning("Failed to crawl %s: %s: %s", url, type(exc).__name__, exc)
    return None


async def crawl_site(
    start_url: str,
    fetcher: PageFetcher,
    max_pages: int,
    max_depth: int = MAX_DEPTH,
) -> list[PageSignal]:
    host = host_of(start_url)
    max_pages = max(1, int(max_pages))
    max_depth = min(MAX_DEPTH, max(0, int(max_depth)))

    queue: deque[str] = deque([start_url])
    queued = {url_key(start_url)}
    visited: set[str] = set()
    pages: list[PageSignal] = []

    while queue and len(pages) < max_pages:
        current = queue.popleft()
        key = url_key(current)
        queued.discard(key)
        if key in visited:
            continue
        visited.add(key)

        html = await _safe_fetch(fetcher, current)
        if html is None:
            continue
        try:
            soup = parse_html(html)
            page = signals_from_soup(soup, current, host, start_url=start_url)
        except Exception:
            logger.warning("Failed to parse %s", current, exc_info=True)
            continue
        pages.append(page)

        if page.depth >= max_depth or len(pages) >= max_pages:
            continue
        for link in _discover_links(soup, start_url, host):
            link_key = url_key(link)
            if link_key in visited or link_key in queued:
                continue
            queued.add(link_key)
            queue.append(link)

    if not pages:
        raise CrawlError("no pages crawled")
    logger.info("Crawled %d pages on %s (%d urls visited)", len(pages), host, len(visited))
    return pages
