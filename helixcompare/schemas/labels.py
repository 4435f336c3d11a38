# helixcompare/schemas/labels.py
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from enum import Enum
from re import Pattern

# =========================
# Canonical values
# =========================

UNLIMITED = "Illimité"
NO_TV = "Non"
TV_TIER = "280 Chaines"
NO_COUNTRIES = "Aucun"
NO_COMMITMENT = "Sans engagement"
PERMANENT_DISCOUNT_NOTE = "Remise permanente"


class OfferCategory(str, Enum):
    mobile = "Mobile"
    home_no_tv = "HomeNoTV"
    home_with_tv = "HomeWithTV"


# Short codes embedded in references
CATEGORY_CODES: dict[OfferCategory, str] = {
    OfferCategory.mobile: "T1",
    OfferCategory.home_no_tv: "T2",
    OfferCategory.home_with_tv: "T3",
}

# Single-select labels used by the record store ("Type offre")
STORE_CATEGORY_LABELS: dict[OfferCategory, str] = {
    OfferCategory.mobile: "1 SIM ( Mobile )",
    OfferCategory.home_no_tv: "2 Home Cable Box",
    OfferCategory.home_with_tv: "3 Home Cable Box + TV",
}


# =========================
# Signal vocabularies
# =========================

# "No cap" tokens across FR/EN/DE/IT plus the misspellings seen on operator pages.
UNLIMITED_PATTERN = r"il+imi?t|unlimi?t|\bflat\b|∞|unbegrenzt|senza\s+limiti"
UNLIMITED_RE: Pattern[str] = re.compile(UNLIMITED_PATTERN, re.IGNORECASE)

TV_RE: Pattern[str] = re.compile(
    r"\bTV\b|280\s*cha[îi]nes|280\s*channels|\breplay\b|box\s+tv",
    re.IGNORECASE,
)

# Home-type signals. URL tokens are broad; text phrases must name the offer
# itself since navigation menus mention "Internet" on every page.
HOME_URL_PATTERNS: tuple[str, ...] = (
    r"home",
    r"internet",
    r"fib(?:er|re)",
    r"c[âa]ble|kabel",
)

HOME_TEXT_RE: Pattern[str] = re.compile(
    r"internet\s+(?:à|a)\s+domicile"
    r"|internet\s+pour\s+la\s+maison"
    r"|\bhome\s*(?:5g|cable|box|internet)\b"
    r"|\binternet[-\s]box\b"
    r"|\bfibre\s+optique\b",
    re.IGNORECASE,
)

# Field labels used to segment page text into spans. Order matters: longer
# phrases come first so "Minutes roaming" is not read as "Roaming".
FIELD_LABELS: tuple[tuple[str, str], ...] = (
    (
        "roaming_minutes",
        r"\bminutes?\s+(?:de\s+|en\s+)?(?:roaming|itin[ée]rance)\b"
        r"|\bappels?\s+en\s+itin[ée]rance\b"
        r"|\broaming[-\s]?(?:minuten|calls)\b",
    ),
    ("roaming", r"\bdonn[ée]es\s+en\s+itin[ée]rance\b|\bitin[ée]rance\b|\broaming\b"),
    ("calls", r"\bappels?\b|\bcalls?\b|\banrufe\b|\btelefonie\b|\bchiamate\b"),
    ("sms", r"\bsms(?:\s*(?:&|et|/|und)\s*mms)?\b"),
    ("speed", r"\bvitesse\b|\bd[ée]bit\b|\brapidit[ée]\b|\bspeed\b|\bgeschwindigkeit\b"),
    ("price", r"\bprix\b|\bprice\b|\bpreis\b|\bprezzo\b"),
)

# Included-countries phrases, first match wins.
COUNTRY_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"\bFR,\s*DE,\s*IT,\s*AT,\s*LI\b", re.IGNORECASE),
    re.compile(r"\bEurope\b.{0,60}?\bUSA\b.{0,30}?\bCanada\b.{0,30}?\bTurquie\b", re.IGNORECASE),
    re.compile(r"\bTop\s*10\s*destinations\b", re.IGNORECASE),
    re.compile(r"\bPays\s+voisins(?:\s*\+\s*Balkans)?\b", re.IGNORECASE),
)

PERMANENT_DISCOUNT_RE: Pattern[str] = re.compile(
    r"remise\s+permanente|rabais\s+permanent|r[ée]duction\s+permanente"
    r"|permanent\s+discount|dauerhaft\w*\s+rabatt|rabatt\s+f[üu]r\s+immer",
    re.IGNORECASE,
)

CONTRACT_TERM_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"(\d{1,2})\s*mois\s*(?:d['’]\s*engagement|minimum|de\s+contrat)", re.IGNORECASE),
    re.compile(r"engagement\s*(?:minimum\s*)?(?:de\s*)?(\d{1,2})\s*mois", re.IGNORECASE),
    re.compile(r"(\d{1,2})\s*months?\s*(?:contract|minimum|commitment)", re.IGNORECASE),
    re.compile(r"(?:mindestlaufzeit|vertragslaufzeit)\s*(?:von\s*)?(\d{1,2})\s*monate", re.IGNORECASE),
    re.compile(r"(\d{1,2})\s*monate\s*(?:mindestlaufzeit|vertragslaufzeit)", re.IGNORECASE),
)

NO_COMMITMENT_RE: Pattern[str] = re.compile(
    r"sans\s+engagement|no\s+(?:commitment|contract)|ohne\s+(?:vertragsbindung|mindestlaufzeit)|senza\s+vincol\w*",
    re.IGNORECASE,
)


# =========================
# Category rules
# =========================

# (predicate(home, tv), category), evaluated in order; first match wins.
CATEGORY_RULES: tuple[tuple[Callable[[bool, bool], bool], OfferCategory], ...] = (
    (lambda home, tv: home and tv, OfferCategory.home_with_tv),
    (lambda home, tv: home, OfferCategory.home_no_tv),
    (lambda home, tv: True, OfferCategory.mobile),
)


# =========================
# Detectors
# =========================


def has_tv_signal(text: str) -> bool:
    return bool(TV_RE.search(text or ""))


def has_home_signal(url: str, text: str, extra_url_patterns: Iterable[str] = ()) -> bool:
    """Home/internet/cable/fiber tokens in the URL, or a home-offer phrase in the text."""
    low_url = (url or "").lower()
    for pat in (*HOME_URL_PATTERNS, *extra_url_patterns):
        if re.search(pat, low_url):
            return True
    return bool(HOME_TEXT_RE.search(text or ""))


def match_included_countries(text: str) -> str:
    for pat in COUNTRY_PATTERNS:
        m = pat.search(text or "")
        if m:
            return " ".join(m.group(0).split())
    return ""


def detect_contract_term(text: str) -> str:
    """'24 mois' for an explicit term, 'Sans engagement' when stated, else ''."""
    for pat in CONTRACT_TERM_PATTERNS:
        m = pat.search(text or "")
        if m:
            return f"{int(m.group(1))} mois"
    if NO_COMMITMENT_RE.search(text or ""):
        return NO_COMMITMENT
    return ""


def resolve_category(home: bool, tv: bool) -> OfferCategory:
    for predicate, category in CATEGORY_RULES:
        if predicate(home, tv):
            return category
    return OfferCategory.mobile
