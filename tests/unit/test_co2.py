# tests/unit/test_co2.py
from __future__ import annotations

from helixcompare.core.co2 import Co2Factors, estimate_co2, with_co2
from helixcompare.schemas.labels import UNLIMITED, OfferCategory


def test_mobile_example(offer_factory):
    row = offer_factory(
        offer_name="Yallo Black",
        speed_mbps=300,
        calls_allowance=UNLIMITED,
        sms_allowance=UNLIMITED,
        roaming_data_go=UNLIMITED,
        roaming_minutes=UNLIMITED,
    )
    # 12.5 + 0.5 + 0.5 + 18.3 - 12.2 - 0.5
    assert estimate_co2(row) == 19.1


def test_home_example(offer_factory):
    row = offer_factory(offer_name="Home Fiber TV", offer_category=OfferCategory.home_with_tv)
    assert estimate_co2(row) == 80.0


def test_home_branches(offer_factory):
    assert estimate_co2(offer_factory(offer_name="Internet Box", offer_category=OfferCategory.home_no_tv)) == 35.0
    assert estimate_co2(offer_factory(offer_name="Home 5G", offer_category=OfferCategory.home_no_tv)) == 45.0


def test_mobile_roaming_gb_and_fast_speed(offer_factory):
    row = offer_factory(
        offer_name="Swiss Plus",
        speed_mbps=2000,
        calls_allowance="2 h",
        sms_allowance="",
        roaming_data_go="10",
        roaming_minutes="100",
    )
    # 14.5 + 10 * 0.35
    assert estimate_co2(row) == 18.0


def test_unknown_speed_uses_low_branch(offer_factory):
    row = offer_factory(offer_name="Basic", speed_mbps=None, calls_allowance="", sms_allowance="", roaming_data_go="", roaming_minutes="")
    assert estimate_co2(row) == 12.5


def test_estimate_is_never_negative(offer_factory):
    factors = Co2Factors(mobile_le_300=-100.0)
    row = offer_factory(offer_name="Basic", speed_mbps=None)
    assert estimate_co2(row, factors) == 0.0


def test_with_co2_returns_copy(offer_factory):
    row = offer_factory(co2_estimate_kg_year=None, offer_name="Home Fiber", offer_category=OfferCategory.home_no_tv)
    out = with_co2(row)
    assert out.co2_estimate_kg_year == 30.0
    assert row.co2_estimate_kg_year is None
