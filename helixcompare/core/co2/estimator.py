# helixcompare/core/co2/estimator.py
"""
Deterministic CO2 estimate (kg/year) for a canonical offer.

Mobile rows score network speed, unlimited domestic usage, roaming data and
roaming minutes; home rows score the access technology named in the offer
plus a flat TV surcharge. The result is rounded to one decimal and never
negative. Pure function: no I/O, no randomness.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from helixcompare.core.normalize.text import is_unlimited, parse_unlimited_aware, round_half_up
from helixcompare.schemas.labels import OfferCategory
from helixcompare.schemas.models import CanonicalOffer


@dataclass(frozen=True)
class Co2Factors:
    mobile_le_300: float = 12.5
    mobile_gt_300: float = 14.5
    speed_threshold_mbps: float = 300.0
    unlimited_calls: float = 0.5
    unlimited_sms: float = 0.5
    roam_kg_per_gb: float = 0.35
    roam_unlimited_data: float = 18.3
    roam_unlimited_minutes: float = -12.2
    premium_offset: float = -0.5
    home_fiber: float = 30.0
    home_cable: float = 35.0
    home_5g: float = 45.0
    tv_extra: float = 50.0


DEFAULT_FACTORS = Co2Factors()

_PREMIUM_TOKENS = ("noir", "black")


def _mobile(row: CanonicalOffer, f: Co2Factors) -> float:
    # Unknown speed counts as 0 and lands in the <=300 branch.
    speed = float(row.speed_mbps or 0)
    base = f.mobile_le_300 if speed <= f.speed_threshold_mbps else f.mobile_gt_300

    if is_unlimited(row.calls_allowance):
        base += f.unlimited_calls
    if is_unlimited(row.sms_allowance):
        base += f.unlimited_sms

    roam_gb = parse_unlimited_aware(row.roaming_data_go, default=0.0) or 0.0
    base += roam_gb * f.roam_kg_per_gb if math.isfinite(roam_gb) else f.roam_unlimited_data

    if is_unlimited(row.roaming_minutes):
        base += f.roam_unlimited_minutes

    name = row.offer_name.lower()
    if any(tok in name for tok in _PREMIUM_TOKENS):
        base += f.premium_offset
    return base


def _home(row: CanonicalOffer, f: Co2Factors) -> float:
    name = row.offer_name.lower()
    if "fiber" in name:
        base = f.home_fiber
    elif "5g" in name:
        base = f.home_5g
    else:
        base = f.home_cable
    if row.offer_category == OfferCategory.home_with_tv:
        base += f.tv_extra
    return base


def estimate_co2(row: CanonicalOffer, factors: Co2Factors = DEFAULT_FACTORS) -> float | None:
    """kg CO2 per year, or None for a category without a formula."""
    if row.offer_category == OfferCategory.mobile:
        base = _mobile(row, factors)
    elif row.offer_category in (OfferCategory.home_no_tv, OfferCategory.home_with_tv):
        base = _home(row, factors)
    else:
        return None
    return max(0.0, round_half_up(base, 1))


def with_co2(row: CanonicalOffer, factors: Co2Factors = DEFAULT_FACTORS) -> CanonicalOffer:
    """Copy of `row` with the estimate recomputed from its current state."""
    return row.model_copy(update={"co2_estimate_kg_year": estimate_co2(row, factors)})
