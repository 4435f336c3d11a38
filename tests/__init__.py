# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_page, make_offer
"""

from .utils import make_home_page, make_offer, make_page

__all__ = ["make_page", "make_home_page", "make_offer"]
