# helixcompare/core/canonical/canonicalizer.py
"""
Row canonicalizer (ExtractedFields → CanonicalOffer).

Fixed rules:
  - any unlimited variant becomes the single sentinel; '-' or empty becomes ''
  - speed is coerced to digits and parsed; unknown stays None (not 0)
  - category is re-derived from content signals (home, TV) via CATEGORY_RULES
  - no included countries is written as the explicit 'Aucun' marker
  - discount is rounded, or inferred from current/previous price
  - contract term defaults to 'Sans engagement'
  - expiration note is set only for permanent discounts
The CO2 estimate and the reference are left empty; later steps fill them.
"""

from __future__ import annotations

import re

from helixcompare.core.normalize.text import (
    clean_text,
    convert_speed_to_mbps,
    is_blank,
    is_unlimited,
    round_half_up,
)
from helixcompare.schemas.labels import (
    NO_COMMITMENT,
    NO_COUNTRIES,
    NO_TV,
    PERMANENT_DISCOUNT_NOTE,
    TV_TIER,
    UNLIMITED,
    resolve_category,
)
from helixcompare.schemas.models import CanonicalOffer, ExtractedFields


def normalize_quantity(value: str | None) -> str:
    """Unlimited variants → 'Illimité'; placeholders → ''; anything else cleaned."""
    if is_blank(value):
        return ""
    if is_unlimited(value):
        return UNLIMITED
    return clean_text(value)


def normalize_speed(value: str, unit: str) -> int | None:
    mbps = convert_speed_to_mbps(value, unit)
    digits = re.sub(r"\D", "", "" if mbps is None else str(mbps))
    return int(digits) if digits else None


def infer_discount(explicit: int | None, current: float | None, previous: float | None) -> int | None:
    """
    Explicit percentage wins. Otherwise round((1 - current/previous) * 100) when
    both prices are known and previous >= current.
    """
    if explicit is not None:
        return int(round_half_up(explicit))
    if current is None or previous is None or previous <= 0 or current < 0 or current > previous:
        return None
    return int(round_half_up((1 - current / previous) * 100))


def _price(value: float | None) -> float | None:
    if value is None or value < 0:
        return None
    return round_half_up(value, 2)


def canonicalize(fields: ExtractedFields, *, operator: str, url: str = "") -> CanonicalOffer:
    price = _price(fields.current_price)
    previous = _price(fields.previous_price)
    discount = infer_discount(fields.discount_percent, price, previous)
    if discount is not None and not 0 <= discount <= 100:
        discount = None

    return CanonicalOffer(
        operator=clean_text(operator),
        offer_name=clean_text(fields.title),
        price_chf=price,
        previous_price_chf=previous,
        discount_percent=discount,
        tv_tier=TV_TIER if fields.has_tv else NO_TV,
        speed_mbps=normalize_speed(fields.speed_value, fields.speed_unit),
        sms_allowance=normalize_quantity(fields.sms_allowance),
        calls_allowance=normalize_quantity(fields.calls_allowance),
        roaming_data_go=normalize_quantity(fields.roaming_data),
        roaming_minutes=normalize_quantity(fields.roaming_minutes),
        included_countries=clean_text(fields.included_countries) or NO_COUNTRIES,
        offer_category=resolve_category(fields.home_signal, fields.has_tv),
        expiration_note=PERMANENT_DISCOUNT_NOTE if fields.permanent_discount else "",
        co2_estimate_kg_year=None,
        contract_term=clean_text(fields.contract_term) or NO_COMMITMENT,
        source_url=clean_text(url),
    )
