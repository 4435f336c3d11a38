# helixcompare/core/export/csv_writer.py
"""
Tabular output of canonical offers.

Column order is fixed. Values are written with minimal quoting: a value
containing a comma, a double quote or a line break (LF or CR) is wrapped in
double quotes with inner quotes doubled. Downstream consumers depend on this exact format.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from helixcompare.schemas.models import CanonicalOffer

logger = logging.getLogger(__name__)


def _fmt_money(x: float | None) -> str:
    return "" if x is None else f"{x:.2f}"


def _fmt_one_decimal(x: float | None) -> str:
    return "" if x is None else f"{x:.1f}"


def _fmt_plain(x: object) -> str:
    if x is None:
        return ""
    if isinstance(x, Enum):
        return str(x.value)
    return str(x)


# (header, attribute, formatter)
CSV_COLUMNS: tuple[tuple[str, str, Callable[[Any], str]], ...] = (
    ("Reference", "reference", _fmt_plain),
    ("Operator", "operator", _fmt_plain),
    ("OfferName", "offer_name", _fmt_plain),
    ("PriceCHFPerMonth", "price_chf", _fmt_money),
    ("PreviousPriceCHF", "previous_price_chf", _fmt_money),
    ("DiscountPercent", "discount_percent", _fmt_plain),
    ("TV", "tv_tier", _fmt_plain),
    ("SpeedMbps", "speed_mbps", _fmt_plain),
    ("SMSAllowanceCH", "sms_allowance", _fmt_plain),
    ("CallsAllowanceCH", "calls_allowance", _fmt_plain),
    ("RoamingDataGo", "roaming_data_go", _fmt_plain),
    ("RoamingMinutes", "roaming_minutes", _fmt_plain),
    ("IncludedCountries", "included_countries", _fmt_plain),
    ("OfferCategory", "offer_category", _fmt_plain),
    ("ExpirationNote", "expiration_note", _fmt_plain),
    ("CO2EstimateKgYear", "co2_estimate_kg_year", _fmt_one_decimal),
    ("ContractTerm", "contract_term", _fmt_plain),
)

CSV_HEADERS: list[str] = [header for header, _attr, _fmt in CSV_COLUMNS]


def offer_to_csv_values(row: CanonicalOffer) -> list[str]:
    return [fmt(getattr(row, attr)) for _header, attr, fmt in CSV_COLUMNS]


def to_csv_line(values: Sequence[object]) -> str:
    """One serialized CSV line (no terminator)."""
    buf = io.StringIO()
    # Both characters of the terminator force quoting under QUOTE_MINIMAL.
    csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n").writerow(values)
    return buf.getvalue()[:-2]


def write_offers_csv(rows: Iterable[CanonicalOffer], out_path: str | Path) -> Path:
    """Write header + one line per offer (UTF-8, '\\n' line endings). Returns the path written."""
    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(to_csv_line(CSV_HEADERS) + "\n")
        for row in rows:
            f.write(to_csv_line(offer_to_csv_values(row)) + "\n")
            count += 1
    logger.info("wrote %d offers to %s", count, path)
    return path
