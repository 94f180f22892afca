from __future__ import annotations

import copy
import re

from bs4 import BeautifulSoup

from sniperank.engine.models import ContactSignals, PageSignal
from sniperank.engine.urls import path_depth, same_host

SOCIAL_KEYWORDS = ["facebook", "twitter", "linkedin", "instagram"]

BUTTON_SELECTOR = 'button, input[type="submit"], .btn, [role="button"]'
BREADCRUMB_SELECTOR = '.breadcrumb, .breadcrumbs, nav[aria-label*="breadcrumb" i]'
SCHEMA_SELECTOR = 'script[type="application/ld+json"], [itemscope], [itemtype]'
NAV_SELECTOR = 'nav, [role="navigation"]'
FOOTER_SELECTOR = 'footer, [role="contentinfo"]'
PHONE_SELECTOR = 'a[href^="tel:"], .phone'
EMAIL_SELECTOR = 'a[href^="mailto:"]'
ADDRESS_SELECTOR = "address, .address, .location"


def _collapse(text: str) -> str:
    return " ".join(text.split())


def _title(soup: BeautifulSoup) -> str:
    tag = soup.find("title")
    if not tag:
        return ""
    return _collapse(tag.get_text(" ", strip=True))


def _meta_description(soup: BeautifulSoup) -> str:
    tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    if not tag:
        return ""
    return str(tag.get("content") or "").strip()


def _visible_word_count(soup: BeautifulSoup) -> int:
    body = copy.copy(soup.body or soup)
    for tag in body(["script", "style", "noscript", "template"]):
        tag.decompose()
    text = _collapse(body.get_text(" "))
    return len(text.split()) if text else 0


def _classify_links(soup: BeautifulSoup, host: str) -> tuple[int, int, int]:
    internal = 0
    external = 0
    social = 0
    for a in soup.find_all("a", href=True):
        href = str(a.get("href") or "").strip()
        if not href:
            continue
        lower = href.lower()
        if any(keyword in lower for keyword in SOCIAL_KEYWORDS):
            social += 1
        if href.startswith("/") and not href.startswith("//"):
            internal += 1
        elif lower.startswith(("http://", "https://", "//")):
            if same_host(href if not href.startswith("//") else f"https:{href}", host):
                internal += 1
            else:
                external += 1
    return internal, external, social


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def extract_signals(html: str, page_url: str, host: str, *, start_url: str | None = None) -> PageSignal:
    return signals_from_soup(parse_html(html), page_url, host, start_url=start_url)


def signals_from_soup(
    soup: BeautifulSoup,
    page_url: str,
    host: str,
    *,
    start_url: str | None = None,
) -> PageSignal:

    images = soup.find_all("img")
    internal, external, social = _classify_links(soup, host)

    contact = ContactSignals(
        phone=bool(soup.select(PHONE_SELECTOR)),
        email=bool(soup.select(EMAIL_SELECTOR)),
        address=bool(soup.select(ADDRESS_SELECTOR)),
    )

    return PageSignal(
        url=page_url,
        title=_title(soup),
        meta_description=_meta_description(soup),
        h1_count=len(soup.find_all("h1")),
        h2_count=len(soup.find_all("h2")),
        h3_count=len(soup.find_all("h3")),
        word_count=_visible_word_count(soup),
        image_count=len(images),
        image_alt_count=sum(1 for img in images if img.has_attr("alt")),
        internal_link_count=internal,
        external_link_count=external,
        has_schema=bool(soup.select(SCHEMA_SELECTOR)),
        has_nav=bool(soup.select(NAV_SELECTOR)),
        has_footer=bool(soup.select(FOOTER_SELECTOR)),
        has_breadcrumbs=bool(soup.select(BREADCRUMB_SELECTOR)),
        form_count=len(soup.find_all("form")),
        button_count=len(soup.select(BUTTON_SELECTOR)),
        social_link_count=social,
        contact_signals=contact,
        is_secure=page_url.lower().startswith("https://"),
        depth=path_depth(page_url, start_url or page_url),
    )
