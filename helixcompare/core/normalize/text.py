# helixcompare/core/normalize/text.py
"""
Locale-tolerant text and number helpers.

Shared by the field extractors, the row canonicalizer, and the CO2 estimator.
Every helper is total: bad input yields an empty string, None, or the
caller-supplied default, never an exception.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from helixcompare.schemas.labels import UNLIMITED_RE

_WS_RE = re.compile(r"[\s\u200b]+")
_NUM_RE = re.compile(r"-?\d+(?:[.,]\d+)?")
_PERCENT_RE = re.compile(r"(?<![\d.,])(\d{1,3}(?:[.,]\d+)?)\s*%")
_GIGA_RE = re.compile(r"^\s*g", re.IGNORECASE)

# Above this, Decimal quantization would need more than its 28-digit context.
_MAX_ROUNDABLE = 1e15
# 1 Tbit/s; anything larger is a parsing artefact, not an advertised speed.
MAX_SPEED_MBPS = 1_000_000

# Placeholders that mean "no value" on scraped rows
_BLANKS = {"", "-", "–", "—", "null", "none", "n/a"}


def clean_text(s: object) -> str:
    """Collapse whitespace runs (NBSP and thin spaces included) and trim."""
    if s is None:
        return ""
    return _WS_RE.sub(" ", str(s)).strip()


def is_blank(s: object) -> bool:
    return clean_text(s).lower() in _BLANKS


def is_unlimited(s: object) -> bool:
    return bool(UNLIMITED_RE.search(clean_text(s)))


def parse_loose_number(s: object) -> float | None:
    """First signed decimal in free text; ',' and '.' both accepted as decimal separator."""
    m = _NUM_RE.search(clean_text(s))
    if not m:
        return None
    return float(m.group(0).replace(",", "."))


def parse_unlimited_aware(s: object, default: float | None = 0.0) -> float | None:
    """
    math.inf for an "unlimited" signal, else the first number, else `default`.

    Examples:
        "Illimité"  -> inf
        "5,5 Go"    -> 5.5
        "-"         -> default
    """
    if is_blank(s):
        return default
    if is_unlimited(s):
        return math.inf
    n = parse_loose_number(s)
    return default if n is None else n


def round_half_up(x: float, ndigits: int = 0) -> float:
    if not math.isfinite(x) or abs(x) >= _MAX_ROUNDABLE:
        return x
    q = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(x)).quantize(q, rounding=ROUND_HALF_UP))


def parse_percent(s: object) -> int | None:
    """Integer percentage (0-100) from the first `NN %` token; None when absent."""
    for m in _PERCENT_RE.finditer(clean_text(s)):
        value = int(round_half_up(float(m.group(1).replace(",", "."))))
        if 0 <= value <= 100:
            return value
    return None


def convert_speed_to_mbps(value_text: object, unit_text: object) -> int | None:
    """
    Integer Mbps from a value and a G/M unit token ("Gbit/s", "Gbps", "Mbit/s", ...).
    Gigabit units are multiplied by 1000.
    Non-finite or implausibly large values yield None.
    """
    n = parse_loose_number(value_text)
    if n is None:
        return None
    if _GIGA_RE.search(clean_text(unit_text)):
        n *= 1000
    n = abs(n)
    if not math.isfinite(n) or n > MAX_SPEED_MBPS:
        return None
    return int(round_half_up(n))


def format_quantity(x: float) -> str:
    """5.0 -> '5', 0.5 -> '0.5'."""
    if x.is_integer():
        return str(int(x))
    return str(x)
