# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from helixcompare.schemas.labels import OfferCategory
from helixcompare.schemas.models import CanonicalOffer, RawPageContent, StructuralHints

# -----------------------------
# Sample pages (edit once)
# -----------------------------

MOBILE_URL = "https://www.yallo.ch/fr/mobile/yallo-black"
MOBILE_TITLE = "Yallo Black | Yallo"
MOBILE_TEXT = (
    "Yallo Black "
    "Appels illimités en Suisse "
    "SMS & MMS illimités "
    "Données en itinérance 5 Go par mois "
    "Minutes roaming 100 min Pays inclus: FR, DE, IT, AT, LI "
    "Prix CHF 29.90 /mois au lieu de CHF 59.90 "
    "Vitesse 5G jusqu'à 2 Gbit/s "
    "Sans engagement"
)

HOME_URL = "https://www.sunrise.ch/fr/internet/fiber-tv"
HOME_TITLE = "Home Fiber TV"
HOME_TEXT = (
    "Internet Home Fiber TV "
    "Vitesse jusqu'à 10 Gbit/s "
    "280 chaînes TV incluses "
    "Prix CHF 65.– par mois "
    "24 mois d'engagement "
    "Remise permanente"
)

MOBILE_HTML = f"""
<html>
  <head><title>{MOBILE_TITLE}</title><script>var x = "CHF 999";</script></head>
  <body>
    <h1>Yallo Black</h1>
    <p>Appels illimités en Suisse</p>
    <div class="offer-price"><s>CHF 59.90</s></div>
    <div class="offer-price">CHF 29.90 /mois</div>
    <p>Vitesse 5G jusqu'à 2 Gbit/s</p>
  </body>
</html>
"""


# -----------------------------
# Factories
# -----------------------------


def make_page(
    url: str = MOBILE_URL,
    text: str = MOBILE_TEXT,
    *,
    title: str | None = MOBILE_TITLE,
    price_text: str | None = None,
    previous_price_text: str | None = None,
    operator: str | None = None,
) -> RawPageContent:
    return RawPageContent(
        url=url,
        page_text=text,
        hints=StructuralHints(title=title, price_text=price_text, previous_price_text=previous_price_text),
        operator=operator,
    )


def make_home_page(**overrides: Any) -> RawPageContent:
    kwargs: dict[str, Any] = {"url": HOME_URL, "text": HOME_TEXT, "title": HOME_TITLE}
    kwargs.update(overrides)
    return make_page(**kwargs)


def make_offer(**overrides: Any) -> CanonicalOffer:
    """Canonical mobile row; override any field by name."""
    base: dict[str, Any] = {
        "reference": "YALLO_T1_YALLOBLACK_0a1b2c3d",
        "operator": "Yallo",
        "offer_name": "Yallo Black",
        "price_chf": 29.9,
        "previous_price_chf": 59.9,
        "discount_percent": 50,
        "speed_mbps": 2000,
        "sms_allowance": "Illimité",
        "calls_allowance": "Illimité",
        "roaming_data_go": "5",
        "roaming_minutes": "100",
        "included_countries": "FR, DE, IT, AT, LI",
        "offer_category": OfferCategory.mobile,
        "co2_estimate_kg_year": 16.8,
        "source_url": MOBILE_URL,
    }
    base.update(overrides)
    return CanonicalOffer(**base)


def write_pages_jsonl(path: Path, pages: list[dict[str, Any]]) -> Path:
    """Captured-pages file in the crawler hand-off shape (camelCase keys)."""
    path.write_text("\n".join(json.dumps(p, ensure_ascii=False) for p in pages) + "\n", encoding="utf-8")
    return path


def captured_page(url: str, text: str, *, title: str | None = None, price_text: str | None = None, operator: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"url": url, "pageText": text, "structuralHints": {"title": title, "priceText": price_text}}
    if operator is not None:
        payload["operator"] = operator
    return payload
