# helixcompare/core/crawl/operators.py
"""
Operator profiles: sitemap location, which URLs are offer pages, and the
operator-specific URL tokens that mark home/internet offers.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from urllib.parse import urlparse

from helixcompare.schemas.models import OperatorProfile

DEFAULT_OPERATORS: tuple[OperatorProfile, ...] = (
    OperatorProfile(
        name="Yallo",
        hosts=("yallo.ch",),
        sitemap="https://www.yallo.ch/sitemap.xml",
        section_patterns=(r"/mobile", r"home-?5g", r"home-?cable", r"home"),
    ),
    OperatorProfile(
        name="Sunrise",
        hosts=("sunrise.ch",),
        sitemap="https://www.sunrise.ch/sitemap.xml",
        section_patterns=(r"/mobile", r"/internet", r"/home"),
    ),
    OperatorProfile(
        name="Salt",
        hosts=("salt.ch",),
        sitemap="https://www.salt.ch/sitemap.xml",
        section_patterns=(r"/mobile", r"/internet", r"fiber"),
    ),
    OperatorProfile(
        name="Swisscom",
        hosts=("swisscom.ch",),
        sitemap="https://www.swisscom.ch/sitemap.xml",
        section_patterns=(r"/mobile", r"/internet", r"/tv"),
        home_url_patterns=(r"/tv(?:/|$|-)",),
    ),
)


def select_profiles(names: Iterable[str] | None, profiles: Sequence[OperatorProfile] = DEFAULT_OPERATORS) -> list[OperatorProfile]:
    """Profiles whose name is in `names` (case-insensitive); all profiles when `names` is empty."""
    wanted = {n.strip().lower() for n in (names or []) if n.strip()}
    if not wanted:
        return list(profiles)
    unknown = wanted - {p.name.lower() for p in profiles}
    if unknown:
        raise ValueError(f"unknown operator(s): {', '.join(sorted(unknown))}")
    return [p for p in profiles if p.name.lower() in wanted]


def profile_for_url(url: str, profiles: Sequence[OperatorProfile] = DEFAULT_OPERATORS) -> OperatorProfile | None:
    host = (urlparse(url or "").hostname or "").lower()
    if not host:
        return None
    for p in profiles:
        if any(host == h or host.endswith("." + h) for h in p.hosts):
            return p
    return None


def filter_urls(urls: Iterable[str], profile: OperatorProfile) -> list[str]:
    """Offer-page URLs of `profile`, order kept, duplicates dropped."""
    return list(dict.fromkeys(u for u in urls if profile.accepts(u)))
