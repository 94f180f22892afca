from __future__ import annotations

from typing import Protocol

import httpx
from playwright.async_api import async_playwright

USER_AGENT = "SnipeRank SEO Analyzer Bot"


class FetchError(RuntimeError):
    """A single page could not be retrieved; the crawl skips it."""


class PageFetcher(Protocol):
    async def fetch_html(self, url: str) -> tuple[int, str]: ...


def _check_response(url: str, status: int, content_type: str) -> None:
    if status >= 400 or status == 0:
        raise FetchError(f"{url} returned status {status}")
    if content_type and "html" not in content_type.lower():
        raise FetchError(f"{url} is not html ({content_type})")


class HttpxFetcher:
    def __init__(
        self,
        timeout_seconds: float = 8.0,
        user_agent: str = USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
            transport=self._transport,
        )

    async def __aenter__(self) -> HttpxFetcher:
        self._client = self._new_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_html(self, url: str) -> tuple[int, str]:
        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with self._new_client() as client:
                    response = await client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"{type(exc).__name__}: {exc}") from exc
        _check_response(url, response.status_code, response.headers.get("content-type", ""))
        return response.status_code, response.text


class PlaywrightFetcher:
    def __init__(self, timeout_seconds: float = 20.0, user_agent: str = USER_AGENT):
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent

    async def __aenter__(self) -> PlaywrightFetcher:
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def fetch_html(self, url: str) -> tuple[int, str]:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True)
                try:
                    page = await browser.new_page(user_agent=self.user_agent)
                    resp = await page.goto(
                        url,
                        wait_until="domcontentloaded",
                        timeout=int(self.timeout_seconds * 1000),
                    )
                    status = resp.status if resp else 0
                    content_type = (resp.headers.get("content-type", "") if resp else "")
                    html = await page.content()
                finally:
                    await browser.close()
        except Exception as exc:
            raise FetchError(f"{type(exc).__name__}: {exc}") from exc
        _check_response(url, status, content_type)
        return status, html


def build_fetcher(kind: str, timeout_seconds: float, user_agent: str = USER_AGENT) -> HttpxFetcher | PlaywrightFetcher:
    if kind == "playwright":
        return PlaywrightFetcher(timeout_seconds=timeout_seconds, user_agent=user_agent)
    if kind == "httpx":
        return HttpxFetcher(timeout_seconds=timeout_seconds, user_agent=user_agent)
    raise ValueError(f"unknown fetcher: {kind}")
