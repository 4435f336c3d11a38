# tests/unit/test_canonicalizer.py
from __future__ import annotations

import pytest

from helixcompare.core.canonical import canonicalize, infer_discount, normalize_quantity, normalize_speed
from helixcompare.schemas.labels import NO_COMMITMENT, NO_COUNTRIES, NO_TV, TV_TIER, UNLIMITED, OfferCategory
from helixcompare.schemas.models import ExtractedFields


@pytest.mark.parametrize("raw", ["illimité", "unlimited", "Illimité "])
def test_unlimited_variants_become_one_sentinel(raw):
    row = canonicalize(ExtractedFields(calls_allowance=raw, sms_allowance=raw, roaming_data=raw), operator="Yallo")
    assert row.calls_allowance == UNLIMITED
    assert row.sms_allowance == UNLIMITED
    assert row.roaming_data_go == UNLIMITED


def test_placeholders_become_empty():
    assert normalize_quantity("-") == ""
    assert normalize_quantity(None) == ""
    assert normalize_quantity(" 5 ") == "5"


def test_speed_normalization():
    assert normalize_speed("2", "Gbit/s") == 2000
    assert normalize_speed("300", "Mbit/s") == 300
    assert normalize_speed("", "") is None


def test_discount_inferred_from_prices():
    row = canonicalize(ExtractedFields(current_price=25.0, previous_price=50.0), operator="Salt")
    assert row.discount_percent == 50


def test_explicit_discount_wins():
    assert infer_discount(30, 25.0, 50.0) == 30


def test_no_inference_when_previous_below_current():
    assert infer_discount(None, 60.0, 50.0) is None
    assert infer_discount(None, 25.0, None) is None
    assert infer_discount(None, 25.0, 0.0) is None


def test_defaults_for_empty_fields():
    row = canonicalize(ExtractedFields(), operator="Yallo")
    assert row.included_countries == NO_COUNTRIES
    assert row.contract_term == NO_COMMITMENT
    assert row.tv_tier == NO_TV
    assert row.speed_mbps is None
    assert row.price_chf is None
    assert row.offer_category == OfferCategory.mobile
    assert row.expiration_note == ""
    assert row.co2_estimate_kg_year is None
    assert row.reference == ""


@pytest.mark.parametrize(
    ("home", "tv", "expected"),
    [
        (False, False, OfferCategory.mobile),
        (False, True, OfferCategory.mobile),
        (True, False, OfferCategory.home_no_tv),
        (True, True, OfferCategory.home_with_tv),
    ],
)
def test_category_from_signals(home, tv, expected):
    row = canonicalize(ExtractedFields(home_signal=home, has_tv=tv), operator="Sunrise")
    assert row.offer_category == expected
    assert row.tv_tier == (TV_TIER if tv else NO_TV)


def test_category_ignores_hint():
    row = canonicalize(ExtractedFields(offer_category_hint="home", home_signal=False), operator="Salt")
    assert row.offer_category == OfferCategory.mobile


def test_permanent_discount_sets_expiration_note():
    row = canonicalize(ExtractedFields(permanent_discount=True), operator="Salt")
    assert row.expiration_note == "Remise permanente"


def test_prices_rounded_to_cents():
    row = canonicalize(ExtractedFields(current_price=29.899), operator="Yallo", url="https://www.yallo.ch/fr/mobile/x")
    assert row.price_chf == 29.9
    assert row.source_url == "https://www.yallo.ch/fr/mobile/x"
