# helixcompare/core/normalize/__init__.py
from __future__ import annotations

from .segments import SPAN_MAX_CHARS, segment_labeled_spans
from .text import (
    clean_text,
    convert_speed_to_mbps,
    format_quantity,
    is_blank,
    is_unlimited,
    parse_loose_number,
    parse_percent,
    parse_unlimited_aware,
    round_half_up,
)

__all__ = [
    "clean_text",
    "convert_speed_to_mbps",
    "format_quantity",
    "is_blank",
    "is_unlimited",
    "parse_loose_number",
    "parse_percent",
    "parse_unlimited_aware",
    "round_half_up",
    "segment_labeled_spans",
    "SPAN_MAX_CHARS",
]
