# helixcompare/core/extract/fields.py
"""
Best-effort field extractors (RawPageContent → ExtractedFields).

Each extractor is independent and walks its own priority chain:
  1) structural hint supplied by the crawler, when it parses cleanly
  2) labeled span (see core.normalize.segments)
  3) unscoped regex over the full page text
  4) the field default (empty string, None, False)

Misses are not errors; they resolve to the default.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from urllib.parse import unquote, urlparse

from helixcompare.core.normalize.segments import segment_labeled_spans
from helixcompare.core.normalize.text import (
    clean_text,
    format_quantity,
    is_unlimited,
    parse_loose_number,
    parse_percent,
)
from helixcompare.schemas.labels import (
    PERMANENT_DISCOUNT_RE,
    UNLIMITED,
    UNLIMITED_PATTERN,
    detect_contract_term,
    has_home_signal,
    has_tv_signal,
    match_included_countries,
)
from helixcompare.schemas.models import ExtractedFields, RawPageContent

logger = logging.getLogger(__name__)

Spans = dict[str, str]

# ---------- Regex tables ----------

_AMOUNT = r"(\d{1,5}(?:[.,]\d{1,2})?)"
_CURRENCY_PREFIX = r"(?:CHF|Fr\.)"
_CURRENCY_SUFFIX = r"(?:CHF|Fr\.|\.[-–])"
_INSTEAD_OF = r"(?:au\s+lieu\s+de|instead\s+of|anstatt|statt|invece\s+di)"

_PRICE_RE = re.compile(rf"{_CURRENCY_PREFIX}\s*{_AMOUNT}|{_AMOUNT}\s*{_CURRENCY_SUFFIX}", re.IGNORECASE)
_INSTEAD_OF_TAIL_RE = re.compile(rf"{_INSTEAD_OF}\s*$", re.IGNORECASE)
_PREVIOUS_PRICE_RE = re.compile(
    rf"{_INSTEAD_OF}\s*{_CURRENCY_PREFIX}?\s*{_AMOUNT}(?:\s*{_CURRENCY_SUFFIX})?",
    re.IGNORECASE,
)

_DISCOUNT_WORDS = r"(?:rabais|remise|r[ée]duction|discount|rabatt|sconto)"
_DISCOUNT_RE = re.compile(
    rf"{_DISCOUNT_WORDS}\s*(?:de\s+|of\s+|von\s+)?-?\s*(\d{{1,3}})\s*%"
    rf"|-?\s*(\d{{1,3}})\s*%\s*(?:de\s+)?(?:{_DISCOUNT_WORDS}|off)",
    re.IGNORECASE,
)

_SPEED_UNITS = r"(Gbit/?s|Gbps|Gbit|Gb/s|Mbit/?s|Mbps|Mbit|Mb/s)"
_SPEED_RE = re.compile(rf"(?<![\d.,])(\d{{1,6}}(?:[.,]\d{{1,3}})?)\s*{_SPEED_UNITS}", re.IGNORECASE)
# Top-tier fiber is advertised in several ways; any of them pins the speed.
_SPEED_TOP_RE = re.compile(
    r"(?<![\d.,])10\s*(?:Gbit/?s|Gbps|Gb/s)|(?<![\d.,])10['’ ]?000\s*(?:Mbit/?s|Mbps|Mb/s)",
    re.IGNORECASE,
)

_CALL_WORDS = r"\b(?:appels?|calls?|anrufe|telefonie)\b"
_CALLS_NEAR_UNLIMITED_RE = re.compile(rf"{_CALL_WORDS}.{{0,25}}(?:{UNLIMITED_PATTERN})", re.IGNORECASE)
_CALLS_NEAR_ALLOWANCE_RE = re.compile(rf"{_CALL_WORDS}.{{0,15}}?(\d+\s*(?:h\b|min))", re.IGNORECASE)
_ALLOWANCE_RE = re.compile(r"(\d+\s*(?:h\b|heures?|hours?|min))", re.IGNORECASE)

_SMS_NEAR_UNLIMITED_RE = re.compile(rf"\bSMS\b.{{0,10}}(?:{UNLIMITED_PATTERN})", re.IGNORECASE)
_SMS_TARIFF_RE = re.compile(
    r"(0[.,]\d{2}\s*(?:CHF)?\s*/\s*SMS.{0,40}?0[.,]\d{2}\s*(?:CHF)?\s*/\s*MMS)",
    re.IGNORECASE,
)

_ROAMING_WORDS = r"(?:itin[ée]rance|roaming)"
_ROAMING_MENTION_RE = re.compile(_ROAMING_WORDS, re.IGNORECASE)
_ROAMING_NEAR_UNLIMITED_RE = re.compile(
    rf"{_ROAMING_WORDS}.{{0,30}}(?:{UNLIMITED_PATTERN})|(?:{UNLIMITED_PATTERN})\w*.{{0,30}}{_ROAMING_WORDS}",
    re.IGNORECASE,
)
_GB_RE = re.compile(r"(?<![\d.,])(\d{1,5}(?:[.,]\d{1,2})?)\s*(?:Go|GB)\b", re.IGNORECASE)
_ROAMING_GB_RE = re.compile(
    rf"(?<![\d.,])(\d{{1,5}}(?:[.,]\d{{1,2}})?)\s*(?:Go|GB)\b\s*(?:de\s+donn[ée]es\s+)?(?:en\s+{_ROAMING_WORDS}|d['’]\s*{_ROAMING_WORDS}|roaming)",
    re.IGNORECASE,
)
_MINUTES_RE = re.compile(r"(?<!\d)(\d{1,5})\s*(?:min|minutes)\b", re.IGNORECASE)
_ROAMING_MINUTES_RE = re.compile(
    rf"(?<!\d)(\d{{1,5}})\s*(?:min|minutes)\b\s*(?:de\s+|d['’]\s*)?(?:en\s+)?(?:{_ROAMING_WORDS}|international)",
    re.IGNORECASE,
)


# ---------- Helpers ----------


def _amount(raw: str | None) -> float | None:
    n = parse_loose_number(raw)
    return n if n is not None and 0 <= n and math.isfinite(n) else None


def _scan_price(text: str) -> float | None:
    """First currency-tagged amount not introduced by an 'instead of' phrase."""
    for m in _PRICE_RE.finditer(text):
        if _INSTEAD_OF_TAIL_RE.search(text[max(0, m.start() - 25) : m.start()]):
            continue
        value = _amount(m.group(1) or m.group(2))
        if value is not None:
            return value
    return None


def _scan_previous_price(text: str) -> float | None:
    m = _PREVIOUS_PRICE_RE.search(text)
    return _amount(m.group(1)) if m else None


def _title_from_url(url: str) -> str:
    segments = [s for s in urlparse(url or "").path.split("/") if s]
    if not segments:
        return ""
    last = re.sub(r"\.html?$", "", unquote(segments[-1]), flags=re.IGNORECASE)
    return clean_text(re.sub(r"[-_]+", " ", last)).title()


# ---------- Extractors ----------


def extract_title(page: RawPageContent) -> str:
    hint = clean_text(page.hints.title)
    if hint:
        # "Yallo Black | Yallo" -> "Yallo Black"
        head = clean_text(hint.split("|", 1)[0])
        if head:
            return head
    return _title_from_url(page.url)


def extract_price(page: RawPageContent, spans: Spans) -> float | None:
    hint = page.hints.price_text
    if hint:
        value = _scan_price(hint)
        if value is None:
            value = _amount(hint)
        if value is not None:
            return value
    span = spans.get("price")
    if span:
        value = _scan_price(span)
        if value is not None:
            return value
    return _scan_price(page.page_text)


def extract_previous_price(page: RawPageContent, spans: Spans) -> float | None:
    hint = page.hints.previous_price_text
    if hint:
        value = _scan_previous_price(hint)
        if value is None:
            value = _amount(hint)
        if value is not None:
            return value
    span = spans.get("price")
    if span:
        value = _scan_previous_price(span)
        if value is not None:
            return value
    return _scan_previous_price(page.page_text)


def extract_discount_percent(page: RawPageContent) -> int | None:
    """Explicit percentage only; inference from prices happens in the canonicalizer."""
    text = page.page_text
    m = _DISCOUNT_RE.search(text)
    if m:
        value = int(m.group(1) or m.group(2))
        if 0 <= value <= 100:
            return value
    value = parse_percent(text)
    if value is not None and 0 < value < 100:
        return value
    return None


def extract_speed(page: RawPageContent, spans: Spans) -> tuple[str, str]:
    """(value, unit) of the advertised speed, e.g. ('2', 'Gbit/s'); ('', '') when absent."""
    text = page.page_text
    if _SPEED_TOP_RE.search(text):
        return "10", "Gbit/s"
    for source in (spans.get("speed", ""), text):
        m = _SPEED_RE.search(source)
        if m:
            return m.group(1), m.group(2)
    return "", ""


def extract_has_tv(page: RawPageContent) -> bool:
    return has_tv_signal(page.page_text) or has_tv_signal(page.hints.title or "")


def extract_calls(page: RawPageContent, spans: Spans) -> str:
    span = spans.get("calls", "")
    if span:
        if is_unlimited(span):
            return UNLIMITED
        m = _ALLOWANCE_RE.search(span)
        if m:
            return clean_text(m.group(1))
    text = page.page_text
    if _CALLS_NEAR_UNLIMITED_RE.search(text):
        return UNLIMITED
    m = _CALLS_NEAR_ALLOWANCE_RE.search(text)
    return clean_text(m.group(1)) if m else ""


def extract_sms(page: RawPageContent, spans: Spans) -> str:
    span = spans.get("sms", "")
    if span:
        if is_unlimited(span):
            return UNLIMITED
        m = _SMS_TARIFF_RE.search(span)
        if m:
            return clean_text(m.group(1))
    text = page.page_text
    if _SMS_NEAR_UNLIMITED_RE.search(text):
        return UNLIMITED
    m = _SMS_TARIFF_RE.search(text)
    return clean_text(m.group(1)) if m else ""


def extract_roaming_data(page: RawPageContent, spans: Spans) -> str:
    """GB quantity as a number string, the unlimited sentinel, '0' when roaming is mentioned without data."""
    span = spans.get("roaming", "")
    if span:
        m = _GB_RE.search(span)
        if m:
            return format_quantity(float(m.group(1).replace(",", ".")))
        if is_unlimited(span):
            return UNLIMITED
    text = page.page_text
    m = _ROAMING_GB_RE.search(text)
    if m:
        return format_quantity(float(m.group(1).replace(",", ".")))
    if _ROAMING_NEAR_UNLIMITED_RE.search(text):
        return UNLIMITED
    return "0" if _ROAMING_MENTION_RE.search(text) else ""


def extract_roaming_minutes(page: RawPageContent, spans: Spans) -> str:
    for key in ("roaming_minutes", "roaming"):
        span = spans.get(key, "")
        if not span:
            continue
        m = _MINUTES_RE.search(span)
        if m:
            return str(int(m.group(1)))
        if is_unlimited(span):
            return UNLIMITED
    text = page.page_text
    m = _ROAMING_MINUTES_RE.search(text)
    if m:
        return str(int(m.group(1)))
    if _ROAMING_NEAR_UNLIMITED_RE.search(text):
        return UNLIMITED
    return ""


def extract_included_countries(page: RawPageContent) -> str:
    return match_included_countries(page.page_text)


def extract_contract_term(page: RawPageContent) -> str:
    return detect_contract_term(page.page_text)


def extract_permanent_discount(page: RawPageContent) -> bool:
    return bool(PERMANENT_DISCOUNT_RE.search(page.page_text))


def extract_home_signal(page: RawPageContent, home_url_patterns: Iterable[str] = ()) -> bool:
    return has_home_signal(page.url, page.page_text, home_url_patterns)


# ---------- Public API ----------


def extract_fields(page: RawPageContent, *, home_url_patterns: Iterable[str] = ()) -> ExtractedFields:
    """
    Run every extractor over one page. Never raises; empty text yields an
    ExtractedFields with all defaults.
    """
    spans = segment_labeled_spans(page.page_text)
    speed_value, speed_unit = extract_speed(page, spans)
    home = extract_home_signal(page, home_url_patterns)

    fields = ExtractedFields(
        title=extract_title(page),
        current_price=extract_price(page, spans),
        previous_price=extract_previous_price(page, spans),
        discount_percent=extract_discount_percent(page),
        has_tv=extract_has_tv(page),
        speed_value=speed_value,
        speed_unit=speed_unit,
        calls_allowance=extract_calls(page, spans),
        sms_allowance=extract_sms(page, spans),
        roaming_data=extract_roaming_data(page, spans),
        roaming_minutes=extract_roaming_minutes(page, spans),
        included_countries=extract_included_countries(page),
        contract_term=extract_contract_term(page),
        permanent_discount=extract_permanent_discount(page),
        home_signal=home,
        offer_category_hint="home" if home else "mobile",
    )

    if fields.current_price is None:
        logger.debug("no price found on %s", page.url or "(no url)")
    if not speed_value:
        logger.debug("no speed found on %s", page.url or "(no url)")
    return fields
