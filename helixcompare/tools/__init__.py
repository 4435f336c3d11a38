# helixcompare/tools/__init__.py
"""
HelixCompare tools package: run-level integration points used by the CLI.
"""

from .offer_pipeline import OfferPipeline, generate_offer, sort_offers

__all__ = ["OfferPipeline", "generate_offer", "sort_offers"]
