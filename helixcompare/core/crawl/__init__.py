# helixcompare/core/crawl/__init__.py
from .operators import DEFAULT_OPERATORS, filter_urls, profile_for_url, select_profiles
from .page_capture import capture_operators, capture_pages, discover_offer_urls
from .page_text import load_pages_jsonl, page_content_from_html
from .sitemap import fetch_sitemap_urls

__all__ = [
    "DEFAULT_OPERATORS",
    "select_profiles",
    "profile_for_url",
    "filter_urls",
    "fetch_sitemap_urls",
    "page_content_from_html",
    "load_pages_jsonl",
    "capture_pages",
    "capture_operators",
    "discover_offer_urls",
]
