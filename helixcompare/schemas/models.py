# helixcompare/schemas/models.py

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from helixcompare.core.normalize.text import clean_text
from helixcompare.schemas.labels import NO_COMMITMENT, NO_COUNTRIES, NO_TV, OfferCategory

# =========================
# Crawler hand-off
# =========================


class StructuralHints(BaseModel):
    """Optional element texts picked by the crawler (title element, explicit price elements)."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    title: str | None = None
    price_text: str | None = Field(None, alias="priceText")
    previous_price_text: str | None = Field(None, alias="previousPriceText")


class RawPageContent(BaseModel):
    """
    Everything visible on one offer page, as handed over by the crawler.

    `page_text` is whitespace-collapsed on validation. Accepts both the snake_case
    field names and the camelCase shape of captured-page files
    (`pageText`, `structuralHints`).
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    url: str = ""
    page_text: str = Field("", alias="pageText")
    hints: StructuralHints = Field(default_factory=StructuralHints, alias="structuralHints")
    operator: str | None = Field(None, description="Operator name when the crawler already knows it.")

    @field_validator("page_text", mode="before")
    @classmethod
    def _clean_page_text(cls, v: Any) -> str:
        return clean_text(v)

    @field_validator("hints", mode="before")
    @classmethod
    def _none_hints(cls, v: Any) -> Any:
        return StructuralHints() if v is None else v


# =========================
# Extraction
# =========================


class ExtractedFields(BaseModel):
    """
    Best-effort field bag for one offer page. Every field may be empty.
    Created fresh per page and consumed once by the canonicalizer.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    current_price: float | None = None
    previous_price: float | None = None
    discount_percent: int | None = None
    has_tv: bool = False
    speed_value: str = ""
    speed_unit: str = ""
    calls_allowance: str = ""
    sms_allowance: str = ""
    roaming_data: str = ""
    roaming_minutes: str = ""
    included_countries: str = ""
    contract_term: str = ""
    permanent_discount: bool = False
    home_signal: bool = False
    offer_category_hint: Literal["mobile", "home"] = "mobile"


# =========================
# Canonical output
# =========================


class CanonicalOffer(BaseModel):
    """
    Fixed-schema row for one offer.

    Built by the canonicalizer; the CO2 estimate and the reference are filled in
    afterwards through `model_copy(update=...)`, so a completed row is never
    mutated in place.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    reference: str = ""
    operator: str = ""
    offer_name: str = ""
    price_chf: float | None = Field(None, ge=0, description="Current monthly price in CHF.")
    previous_price_chf: float | None = Field(None, ge=0, description="Price before discount, when advertised.")
    discount_percent: int | None = Field(None, ge=0, le=100)
    tv_tier: Literal["Non", "280 Chaines"] = NO_TV
    speed_mbps: int | None = Field(None, ge=0)
    sms_allowance: str = ""
    calls_allowance: str = ""
    roaming_data_go: str = ""
    roaming_minutes: str = ""
    included_countries: str = NO_COUNTRIES
    offer_category: OfferCategory = OfferCategory.mobile
    expiration_note: str = ""
    co2_estimate_kg_year: float | None = Field(None, ge=0)
    contract_term: str = NO_COMMITMENT
    source_url: str = Field("", description="Page the offer was extracted from (provenance only).")

    def summary(self) -> str:
        bits: list[str] = [self.reference or "(no ref)", self.operator, self.offer_name or "(untitled)"]
        if self.price_chf is not None:
            bits.append(f"CHF {self.price_chf:.2f}")
        if self.speed_mbps is not None:
            bits.append(f"{self.speed_mbps} Mbps")
        bits.append(self.offer_category.value)
        if self.co2_estimate_kg_year is not None:
            bits.append(f"CO2 {self.co2_estimate_kg_year:.1f} kg/an")
        return " | ".join(bits)


# =========================
# Operators & sink results
# =========================


class OperatorProfile(BaseModel):
    """Where an operator publishes its offers and which of its URLs are offer pages."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    hosts: tuple[str, ...] = Field(default_factory=tuple, description="Hostnames (suffix match) owned by the operator.")
    sitemap: str | None = None
    locale_pattern: str = Field(r"/fr/", description="URL must match this pattern (locale section).")
    section_patterns: tuple[str, ...] = Field(default_factory=tuple, description="URL must match at least one.")
    home_url_patterns: tuple[str, ...] = Field(
        default_factory=tuple, description="Extra URL tokens marking home/internet offers for this operator."
    )

    def accepts(self, url: str) -> bool:
        if self.locale_pattern and not re.search(self.locale_pattern, url):
            return False
        return any(re.search(p, url) for p in self.section_patterns)


class UpsertReport(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    batches_sent: int = Field(0, ge=0)
    records_upserted: int = Field(0, ge=0)
