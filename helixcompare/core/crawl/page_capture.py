# helixcompare/core/crawl/page_capture.py
"""
Courteous live capture: discover offer URLs from operator sitemaps, render
each page with a headless browser and hand over RawPageContent.

Playwright is imported lazily so that offline runs (captured pages, tests)
never need a browser installed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator, Sequence

from helixcompare.schemas.models import OperatorProfile, RawPageContent

from .operators import filter_urls
from .page_text import page_content_from_html
from .sitemap import DEFAULT_USER_AGENT, fetch_sitemap_urls

logger = logging.getLogger(__name__)

ACCORDION_SELECTOR = "button, summary, [role='button']"
MAX_ACCORDION_CLICKS = 5


def discover_offer_urls(profile: OperatorProfile, *, max_pages: int = 80, user_agent: str = DEFAULT_USER_AGENT) -> list[str]:
    """Sitemap URLs accepted by `profile`, capped at `max_pages`."""
    if not profile.sitemap:
        return []
    urls = filter_urls(fetch_sitemap_urls(profile.sitemap, profile.accepts, user_agent=user_agent), profile)
    logger.info("%s: %d candidate page(s), keeping %d", profile.name, len(urls), min(len(urls), max_pages))
    return urls[:max_pages]


def _expand_accordions(page, wait_s: float) -> None:
    from playwright.sync_api import Error as PlaywrightError

    for el in page.query_selector_all(ACCORDION_SELECTOR)[:MAX_ACCORDION_CLICKS]:
        try:
            el.click(timeout=1000)
        except PlaywrightError:
            continue
    page.wait_for_timeout(int(wait_s * 1000))


def capture_pages(
    urls: Iterable[str],
    *,
    operator: str | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
    locale: str = "fr-CH",
    wait_s: float = 0.25,
    delay_s: float = 0.35,
    timeout_s: float = 45.0,
) -> Iterator[RawPageContent]:
    """
    Render each URL (networkidle) in one shared browser page and yield its content.
    A page that fails to load is logged and skipped.
    """
    try:
        from playwright.sync_api import Error as PlaywrightError
        from playwright.sync_api import sync_playwright
    except ImportError as e:  # pragma: no cover
        raise ImportError("playwright not installed") from e

    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=True)
        ctx = browser.new_context(user_agent=user_agent, locale=locale)
        page = ctx.new_page()
        page.set_default_timeout(int(timeout_s * 1000))
        try:
            for url in urls:
                try:
                    page.goto(url, wait_until="networkidle")
                    _expand_accordions(page, wait_s)
                    html = page.content()
                except PlaywrightError as e:
                    logger.warning("capture failed %s: %s", url, e)
                    continue
                yield page_content_from_html(url, html, operator=operator)
                if delay_s:
                    time.sleep(delay_s)
        finally:
            ctx.close()
            browser.close()


def capture_operators(
    profiles: Sequence[OperatorProfile],
    *,
    max_pages: int = 80,
    user_agent: str = DEFAULT_USER_AGENT,
    wait_s: float = 0.25,
    delay_s: float = 0.35,
) -> Iterator[RawPageContent]:
    for profile in profiles:
        logger.info("%s: reading sitemap", profile.name)
        urls = discover_offer_urls(profile, max_pages=max_pages, user_agent=user_agent)
        yield from capture_pages(urls, operator=profile.name, user_agent=user_agent, wait_s=wait_s, delay_s=delay_s)
