# helixcompare/core/reference/generator.py
"""
Stable offer references and run-scoped deduplication.

Reference layout: OPERATOR_CATEGORY_NAMESLUG_HASH, e.g. YALLO_T1_YALLOBLACK_3f9a01bc.
The hash covers only inputs that stay stable between runs (URL path and
name slug), so re-running against unchanged pages reproduces the same
reference and record-store upserts update instead of duplicating.
"""

from __future__ import annotations

import re
import threading
import unicodedata
from hashlib import sha256 as _sha256lib
from urllib.parse import urlparse

from helixcompare.schemas.labels import CATEGORY_CODES, OfferCategory
from helixcompare.schemas.models import CanonicalOffer

OPERATOR_SLUG_LEN = 12
NAME_SLUG_LEN = 32
HASH_LEN = 8
DELIMITER = "_"


def _sha256(data: str) -> str:
    return _sha256lib(data.encode("utf-8", errors="ignore")).hexdigest()


def slugify(value: str | None, max_len: int) -> str:
    """Accent-folded, uppercase alphanumerics only, truncated."""
    folded = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^A-Z0-9]", "", folded.upper())[:max_len]


def stable_url_path(url: str | None) -> str:
    raw = (url or "").strip()
    path = urlparse(raw).path if "://" in raw else raw
    return path.rstrip("/") or "/"


def generate_reference(
    operator: str,
    offer_category: OfferCategory | str,
    offer_name: str,
    source_url: str,
) -> str:
    """Base reference (before dedup suffixing); deterministic for the same inputs."""
    operator_slug = slugify(operator, OPERATOR_SLUG_LEN) or "UNKNOWN"
    code = CATEGORY_CODES[OfferCategory(offer_category)]
    name_slug = slugify(offer_name, NAME_SLUG_LEN) or "OFFER"
    digest = _sha256(f"{stable_url_path(source_url)}|{name_slug}")[:HASH_LEN]
    return DELIMITER.join((operator_slug, code, name_slug, digest))


class ReferenceRegistry:
    """
    References assigned during one run.

    Owns the only shared state of the pipeline; `assign` is guarded by a lock so
    offers may be processed from several worker threads.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def __contains__(self, reference: object) -> bool:
        with self._lock:
            return reference in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

    @property
    def seen(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._seen)

    def assign(self, base: str) -> str:
        """Return `base`, or `base_2`, `base_3`, ... when already taken in this run."""
        with self._lock:
            reference = base
            n = 1
            while reference in self._seen:
                n += 1
                reference = f"{base}{DELIMITER}{n}"
            self._seen.add(reference)
            return reference

    def assign_reference(self, row: CanonicalOffer) -> CanonicalOffer:
        base = generate_reference(row.operator, row.offer_category, row.offer_name, row.source_url)
        return row.model_copy(update={"reference": self.assign(base)})
