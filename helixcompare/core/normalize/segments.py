# helixcompare/core/normalize/segments.py
"""
Single-pass segmentation of page text into labeled spans.

A span is the text following the first occurrence of a label, up to the next
recognized label (any key) or the end of the text, capped at SPAN_MAX_CHARS.
"""

from __future__ import annotations

import re

from helixcompare.schemas.labels import FIELD_LABELS

from .text import clean_text

SPAN_MAX_CHARS = 160

_LABEL_RE = re.compile(
    "|".join(f"(?P<{key}>{pattern})" for key, pattern in FIELD_LABELS),
    re.IGNORECASE,
)


def segment_labeled_spans(text: str, *, max_chars: int = SPAN_MAX_CHARS) -> dict[str, str]:
    t = clean_text(text)
    hits = [(m.lastgroup, m.start(), m.end()) for m in _LABEL_RE.finditer(t)]

    spans: dict[str, str] = {}
    for i, (key, _start, end) in enumerate(hits):
        if key is None or key in spans:
            continue
        stop = hits[i + 1][1] if i + 1 < len(hits) else len(t)
        spans[key] = t[end : min(stop, end + max_chars)].strip(" :-–|")
    return spans
