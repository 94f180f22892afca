from __future__ import annotations

import ipaddress
import re
from urllib.parse import urljoin, urlparse, urlunparse

BINARY_EXTENSIONS = re.compile(r"\.(pdf|jpg|jpeg|png|gif|zip|doc|docx)$", re.I)


def validate_url(raw_url: str) -> str:
    value = (raw_url or "").strip()
    if not value:
        raise ValueError("url is required")
    parsed = urlparse(value)
    if not parsed.scheme:
        parsed = urlparse(f"https://{value}")
    if parsed.scheme not in {"http", "https"}:
        raise ValueError("url must start with http:// or https://")
    if not parsed.netloc:
        raise ValueError("invalid url")
    hostname = parsed.hostname or ""
    if hostname != "localhost":
        try:
            ipaddress.ip_address(hostname)
        except ValueError:
            if "." not in hostname:
                raise ValueError("invalid url host")
    return urlunparse(
        (
            parsed.scheme,
            parsed.netloc,
            parsed.path or "/",
            "",
            parsed.query,
            "",
        )
    )


def host_of(url: str) -> str:
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return re.sub(r"^www\.", "", hostname.lower())


def same_host(url: str, host: str) -> bool:
    return bool(host) and host_of(url) == host


def strip_fragment_and_query(url: str) -> str:
    return url.split("#", 1)[0].split("?", 1)[0]


def url_key(url: str) -> str:
    """Identity used for the visited/queued sets.

    Scheme, a leading `www.`, the fragment, the query and a trailing slash do
    not make a different page.
    """
    path = urlparse(strip_fragment_and_query(url)).path.rstrip("/")
    return host_of(url) + (path or "/")


def path_depth(url: str, start_url: str) -> int:
    if url_key(url) == url_key(start_url):
        return 0
    segments = [part for part in urlparse(url).path.split("/") if part]
    return min(3, len(segments))


def resolve_link(href: str, start_url: str, host: str) -> str | None:
    """Turn an anchor href into a crawlable same-host URL, or None.

    Root-relative hrefs resolve against the start URL; absolute hrefs must sit
    on the crawled host. Both lose their fragment and query.
    """
    href = (href or "").strip()
    if not href:
        return None
    if href.startswith("/") and not href.startswith("//"):
        absolute = False
    elif href.startswith(("http://", "https://", "//")):
        absolute = True
    else:
        return None
    try:
        full = strip_fragment_and_query(urljoin(start_url, href))
        path = urlparse(full).path
    except ValueError:
        return None
    if absolute and not same_host(full, host):
        return None
    if BINARY_EXTENSIONS.search(path):
        return None
    return full
