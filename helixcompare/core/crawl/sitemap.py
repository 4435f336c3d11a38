# helixcompare/core/crawl/sitemap.py
"""
Sitemap discovery (plain or gzipped XML, sitemap indexes followed) with a
pluggable fetch so tests never touch the network.

Best-effort: an unreachable or unreadable sitemap is logged and yields no URLs.
"""

from __future__ import annotations

import gzip
import logging
import time
from collections.abc import Callable

import requests
from bs4 import BeautifulSoup

from helixcompare.core.normalize.text import clean_text

logger = logging.getLogger(__name__)

# Fetch signature: (url) -> raw body bytes
FetchFn = Callable[[str], bytes]
AcceptFn = Callable[[str], bool]

DEFAULT_USER_AGENT = "HelixCompareBot/1.0 (+noncommercial)"
MAX_CHILD_SITEMAPS = 15
MAX_DEPTH = 2


def _http_get(url: str, ua: str, timeout: float) -> bytes:
    resp = requests.get(url, headers={"User-Agent": ua}, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def _maybe_gunzip(url: str, body: bytes) -> bytes:
    if url.endswith(".gz") or body[:2] == b"\x1f\x8b":
        return gzip.decompress(body)
    return body


def fetch_sitemap_urls(
    sitemap_url: str,
    accept: AcceptFn,
    *,
    fetch: FetchFn | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout_s: float = 20.0,
    max_children: int = MAX_CHILD_SITEMAPS,
    max_depth: int = MAX_DEPTH,
    pause_s: float = 0.15,
    _depth: int = 0,
) -> list[str]:
    """
    Page URLs listed by `sitemap_url` (recursing into at most `max_children`
    child sitemaps of an index) that satisfy `accept`, order kept, duplicates dropped.
    """
    fetcher = fetch or (lambda u: _http_get(u, user_agent, timeout_s))
    try:
        xml = _maybe_gunzip(sitemap_url, fetcher(sitemap_url))
    except (requests.RequestException, OSError, EOFError) as e:
        logger.warning("sitemap error %s: %s", sitemap_url, e)
        return []

    soup = BeautifulSoup(xml, "lxml-xml")
    locs = [clean_text(loc.get_text()) for loc in soup.find_all("loc")]

    if soup.find("sitemapindex") is None:
        return list(dict.fromkeys(u for u in locs if u and accept(u)))

    if _depth >= max_depth:
        logger.debug("sitemap index %s ignored (depth %d)", sitemap_url, _depth)
        return []

    out: list[str] = []
    for child in locs[:max_children]:
        out.extend(
            fetch_sitemap_urls(
                child,
                accept,
                fetch=fetcher,
                user_agent=user_agent,
                timeout_s=timeout_s,
                max_children=max_children,
                max_depth=max_depth,
                pause_s=pause_s,
                _depth=_depth + 1,
            )
        )
        if pause_s:
            time.sleep(pause_s)
    return list(dict.fromkeys(out))
