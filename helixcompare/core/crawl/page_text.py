# helixcompare/core/crawl/page_text.py
"""
Build RawPageContent from rendered HTML or from a captured-pages JSONL file.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from pathlib import Path

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from helixcompare.core.normalize.text import clean_text
from helixcompare.schemas.models import RawPageContent, StructuralHints

_PRICE_SELECTOR = "[class*=price], [data-test*=price], [data-testid*=price]"
_PREVIOUS_PRICE_SELECTOR = "s, del, [class*=strike], [class*=old-price], [class*=previous-price]"
_NON_VISIBLE = ["script", "style", "noscript", "template", "svg"]
_HAS_DIGIT = re.compile(r"\d")
_STRUCK = ["s", "del"]


def _text(el: Tag | None) -> str:
    return clean_text(el.get_text(" ", strip=True)) if el is not None else ""


def _unstruck_text(el: Tag) -> str:
    """Element text without the strings inside <s>/<del> (crossed-out previous prices)."""
    if el.name in _STRUCK or el.find_parent(_STRUCK) is not None:
        return ""
    parts = [s for s in el.find_all(string=True) if s.find_parent(_STRUCK) is None]
    return clean_text(" ".join(parts))


def _first_with_digit(soup: BeautifulSoup, selector: str, *, skip_struck: bool = False) -> str | None:
    for el in soup.select(selector):
        txt = _unstruck_text(el) if skip_struck else _text(el)
        if txt and _HAS_DIGIT.search(txt):
            return txt
    return None


def page_content_from_html(url: str, html: str, *, operator: str | None = None) -> RawPageContent:
    """Visible text plus title/price hints (title: h1, then h2, then <title> before '|')."""
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(_NON_VISIBLE):
        tag.decompose()

    doc_title = clean_text(soup.title.string.split("|", 1)[0]) if soup.title and soup.title.string else ""
    title = _text(soup.find("h1")) or _text(soup.find("h2")) or doc_title

    body = soup.body or soup
    return RawPageContent(
        url=url,
        page_text=body.get_text(" ", strip=True),
        hints=StructuralHints(
            title=title or None,
            price_text=_first_with_digit(soup, _PRICE_SELECTOR, skip_struck=True),
            previous_price_text=_first_with_digit(soup, _PREVIOUS_PRICE_SELECTOR),
        ),
        operator=operator,
    )


def load_pages_jsonl(path: str | Path) -> Iterator[RawPageContent]:
    """
    Captured pages, one JSON object per line:
        {"url": ..., "pageText": ..., "structuralHints": {"title": ..., "priceText": ...}, "operator": ...}
    Blank lines are skipped; malformed lines raise ValueError with the line number.
    """
    p = Path(path)
    with p.open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield RawPageContent.model_validate(json.loads(line))
            except (json.JSONDecodeError, ValidationError) as e:
                raise ValueError(f"{p.name}:{lineno}: invalid captured page: {e}") from e
