# helixcompare/core/sink/airtable.py
"""
Batched upsert of canonical offers into an Airtable table.

Records are keyed on the offer reference (`performUpsert.fieldsToMergeOn`), so
a reference seen in a previous run updates the existing record. Batches are
sent in order; the first rejected batch raises SinkBatchError and the rest are
not sent. Local CSV output written before the call is unaffected.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Sequence
from typing import Any
from urllib.parse import quote

import requests

from helixcompare.schemas.labels import STORE_CATEGORY_LABELS
from helixcompare.schemas.models import CanonicalOffer, UpsertReport

from .errors import SinkBatchError, SinkConfigError, sink_error_guard

logger = logging.getLogger(__name__)

AIRTABLE_API_ROOT = "https://api.airtable.com/v0"
MERGE_FIELD = "Référence de l'offre"
MAX_BATCH_SIZE = 10  # Airtable limit per request


# ---------------------------
# Field mapping
# ---------------------------


def _single(v: object) -> str | None:
    s = "" if v is None else str(v).strip()
    return s or None


def _percent_fraction(v: int | None) -> float | None:
    return None if v is None else v / 100


def offer_to_store_fields(row: CanonicalOffer) -> dict[str, Any]:
    """Canonical row → store field names (French labels of the Offres table)."""
    return {
        MERGE_FIELD: _single(row.reference),
        "Opérateur": _single(row.operator),
        "Type offre": STORE_CATEGORY_LABELS[row.offer_category],
        "Nom de l'offre": _single(row.offer_name),
        "Prix CHF/mois": row.price_chf,
        "Prix initial CHF": row.previous_price_chf,
        "Rabais (%)": _percent_fraction(row.discount_percent),
        "TV": [row.tv_tier] if row.tv_tier else [],
        "Rapidité réseau Mbps": row.speed_mbps,
        "SMS & MMS (Suisse)": _single(row.sms_allowance),
        "Appels en Suisse ( Heure )": _single(row.calls_allowance),
        "Données en itinérance (Go)": _single(row.roaming_data_go),
        "Minutes roaming ( Heure )": _single(row.roaming_minutes),
        "Pays voisins inclus": _single(row.included_countries),
        "Expiration": _single(row.expiration_note),
        "~Émission de CO2 (kg/an)": row.co2_estimate_kg_year,
        "Durée d'engagement": _single(row.contract_term),
    }


def _chunks(items: Sequence[dict[str, Any]], size: int) -> Iterator[list[dict[str, Any]]]:
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


# ---------------------------
# Sink
# ---------------------------


class AirtableSink:
    def __init__(
        self,
        token: str,
        base_id: str,
        table: str,
        *,
        batch_size: int = MAX_BATCH_SIZE,
        pause_s: float = 0.3,
        timeout_s: float = 30.0,
    ) -> None:
        if not (token and base_id and table):
            raise SinkConfigError("Airtable token, base and table are all required.")
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise SinkConfigError(f"batch_size must be in [1, {MAX_BATCH_SIZE}], got {batch_size}")
        self.token = token
        self.base_id = base_id
        self.table = table
        self.batch_size = batch_size
        self.pause_s = pause_s
        self.timeout_s = timeout_s

    @property
    def endpoint(self) -> str:
        return f"{AIRTABLE_API_ROOT}/{self.base_id}/{quote(self.table, safe='')}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Content-Type": "application/json"}

    def upsert(self, rows: Sequence[CanonicalOffer]) -> UpsertReport:
        """
        Send all rows in batches. Raises SinkBatchError on the first rejected batch
        and SinkNetworkError on transport failures.
        """
        records = [{"fields": offer_to_store_fields(r)} for r in rows]
        batches = list(_chunks(records, self.batch_size))
        sent = 0
        upserted = 0

        for idx, part in enumerate(batches):
            payload = {
                "performUpsert": {"fieldsToMergeOn": [MERGE_FIELD]},
                "records": part,
                "typecast": True,
            }
            with sink_error_guard():
                resp = requests.patch(self.endpoint, headers=self._headers(), json=payload, timeout=self.timeout_s)

            if resp.status_code >= 400:
                remaining = len(batches) - idx - 1
                body = resp.text[:2000]
                logger.error("record store rejected batch %d (HTTP %s): %s", idx, resp.status_code, body)
                raise SinkBatchError(
                    f"Airtable upsert failed on batch {idx} (HTTP {resp.status_code}); {remaining} batch(es) not sent",
                    batch_index=idx,
                    status_code=resp.status_code,
                    body=body,
                    remaining=remaining,
                )

            sent += 1
            upserted += len(part)
            if self.pause_s and idx < len(batches) - 1:
                time.sleep(self.pause_s)

        logger.info("upserted %d records in %d batch(es) to %s", upserted, sent, self.table)
        return UpsertReport(batches_sent=sent, records_upserted=upserted)
