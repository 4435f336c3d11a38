# helixcompare/tools/offer_pipeline.py
"""
Offer pipeline (page → canonical row), the single integration point for the CLI.

Per page (pure, total):
  1) core.extract.extract_fields(page) → ExtractedFields
  2) core.canonical.canonicalize(fields) → CanonicalOffer (no CO2, no reference)
  3) core.co2.with_co2(row) → CO2 estimate filled in
  4) ReferenceRegistry.assign_reference(row) → run-unique reference

Per run (OfferPipeline.run): operator resolution, repeated-URL skipping and
the final ordering (operator, then price with missing prices last).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from urllib.parse import urlparse

from helixcompare.core.canonical import canonicalize
from helixcompare.core.co2 import with_co2
from helixcompare.core.crawl.operators import DEFAULT_OPERATORS, profile_for_url
from helixcompare.core.extract import extract_fields
from helixcompare.core.normalize.text import clean_text
from helixcompare.core.reference import ReferenceRegistry
from helixcompare.schemas.models import CanonicalOffer, OperatorProfile, RawPageContent

logger = logging.getLogger(__name__)

MISSING_PRICE_SORT_KEY = 99999.0


def generate_offer(
    page: RawPageContent,
    *,
    operator: str,
    registry: ReferenceRegistry,
    home_url_patterns: Iterable[str] = (),
) -> CanonicalOffer:
    """
    Turn one page into one completed canonical row.

    Never raises on page content; the registry is the only state touched.
    """
    fields = extract_fields(page, home_url_patterns=home_url_patterns)
    row = canonicalize(fields, operator=operator, url=page.url)
    row = with_co2(row)
    return registry.assign_reference(row)


def sort_offers(rows: Iterable[CanonicalOffer]) -> list[CanonicalOffer]:
    return sorted(
        rows,
        key=lambda r: (
            r.operator.casefold(),
            r.price_chf if r.price_chf is not None else MISSING_PRICE_SORT_KEY,
        ),
    )


@dataclass
class OfferPipeline:
    """One scrape run: a fresh registry, so references are unique per run."""

    profiles: Sequence[OperatorProfile] = DEFAULT_OPERATORS
    registry: ReferenceRegistry = field(default_factory=ReferenceRegistry)

    def resolve_operator(self, page: RawPageContent) -> tuple[str, OperatorProfile | None]:
        """Operator name from the page, else the profile owning the URL host, else the host."""
        profile = profile_for_url(page.url, self.profiles)
        name = clean_text(page.operator)
        if name:
            if profile is None or profile.name.casefold() != name.casefold():
                profile = next((p for p in self.profiles if p.name.casefold() == name.casefold()), None)
            return name, profile
        if profile is not None:
            return profile.name, profile
        return (urlparse(page.url).hostname or ""), None

    def process(self, page: RawPageContent) -> CanonicalOffer:
        operator, profile = self.resolve_operator(page)
        return generate_offer(
            page,
            operator=operator,
            registry=self.registry,
            home_url_patterns=profile.home_url_patterns if profile else (),
        )

    def run(self, pages: Iterable[RawPageContent]) -> list[CanonicalOffer]:
        rows: list[CanonicalOffer] = []
        seen_urls: set[str] = set()
        skipped = 0

        for page in pages:
            if page.url and page.url in seen_urls:
                skipped += 1
                logger.debug("skipping repeated page %s", page.url)
                continue
            if page.url:
                seen_urls.add(page.url)
            row = self.process(page)
            logger.debug("extracted %s", row.summary())
            rows.append(row)

        priced = sum(1 for r in rows if r.price_chf is not None)
        logger.info(
            "processed %d page(s): %d offer(s), %d with a price, %d repeated skipped",
            len(rows) + skipped,
            len(rows),
            priced,
            skipped,
        )
        return sort_offers(rows)
