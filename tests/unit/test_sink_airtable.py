# tests/unit/test_sink_airtable.py
from __future__ import annotations

from typing import Any

import pytest
import requests

from helixcompare.core.sink import (
    AirtableSink,
    SinkBatchError,
    SinkConfigError,
    SinkError,
    SinkNetworkError,
    classify_sink_error,
    offer_to_store_fields,
    sink_error_guard,
)
from helixcompare.core.sink.airtable import MERGE_FIELD
from helixcompare.schemas.labels import OfferCategory


class _FakeResp:
    def __init__(self, status: int, text: str = "{}"):
        self.status_code = status
        self.text = text


def _sink(**kw: Any) -> AirtableSink:
    return AirtableSink("tok", "appBASE", "Offres", pause_s=0, **kw)


def test_store_field_mapping(offer_factory):
    fields = offer_to_store_fields(offer_factory(discount_percent=25, tv_tier="280 Chaines"))
    assert fields[MERGE_FIELD] == "YALLO_T1_YALLOBLACK_0a1b2c3d"
    assert fields["Type offre"] == "1 SIM ( Mobile )"
    assert fields["Rabais (%)"] == 0.25
    assert fields["TV"] == ["280 Chaines"]
    assert fields["Prix CHF/mois"] == 29.9


def test_store_labels_for_home_rows(offer_factory):
    fields = offer_to_store_fields(offer_factory(offer_category=OfferCategory.home_with_tv, expiration_note=""))
    assert fields["Type offre"] == "3 Home Cable Box + TV"
    assert fields["Expiration"] is None


def test_upsert_batches(monkeypatch, offer_factory):
    calls: list[dict[str, Any]] = []

    def fake_patch(url: str, *, headers: dict[str, str], json: dict[str, Any], timeout: float):
        calls.append({"url": url, "headers": headers, "json": json})
        return _FakeResp(200)

    monkeypatch.setattr("helixcompare.core.sink.airtable.requests.patch", fake_patch)

    rows = [offer_factory(reference=f"REF_{i}") for i in range(23)]
    report = _sink().upsert(rows)

    assert report.batches_sent == 3
    assert report.records_upserted == 23
    assert [len(c["json"]["records"]) for c in calls] == [10, 10, 3]
    first = calls[0]
    assert first["url"] == "https://api.airtable.com/v0/appBASE/Offres"
    assert first["headers"]["Authorization"] == "Bearer tok"
    assert first["json"]["performUpsert"] == {"fieldsToMergeOn": [MERGE_FIELD]}
    assert first["json"]["typecast"] is True


def test_rejected_batch_stops_the_run(monkeypatch, offer_factory):
    statuses = iter([200, 422, 200])
    sent: list[int] = []

    def fake_patch(url, *, headers, json, timeout):
        sent.append(len(json["records"]))
        return _FakeResp(next(statuses), text='{"error": "INVALID_VALUE"}')

    monkeypatch.setattr("helixcompare.core.sink.airtable.requests.patch", fake_patch)

    rows = [offer_factory(reference=f"REF_{i}") for i in range(25)]
    with pytest.raises(SinkBatchError) as ei:
        _sink().upsert(rows)

    err = ei.value
    assert err.batch_index == 1
    assert err.status_code == 422
    assert err.remaining == 1
    assert "INVALID_VALUE" in err.body
    assert sent == [10, 10]


def test_transport_error_is_typed(monkeypatch, offer_factory):
    def fake_patch(url, *, headers, json, timeout):
        raise requests.ConnectionError("connection reset")

    monkeypatch.setattr("helixcompare.core.sink.airtable.requests.patch", fake_patch)
    with pytest.raises(SinkNetworkError):
        _sink().upsert([offer_factory()])


def test_empty_upsert_sends_nothing(monkeypatch):
    def fake_patch(*a, **kw):  # pragma: no cover
        raise AssertionError("no request expected")

    monkeypatch.setattr("helixcompare.core.sink.airtable.requests.patch", fake_patch)
    report = _sink().upsert([])
    assert report.batches_sent == 0
    assert report.records_upserted == 0


@pytest.mark.parametrize(
    ("args", "kwargs"),
    [
        (("", "appBASE", "Offres"), {}),
        (("tok", "", "Offres"), {}),
        (("tok", "appBASE", "Offres"), {"batch_size": 11}),
        (("tok", "appBASE", "Offres"), {"batch_size": 0}),
    ],
)
def test_bad_config(args, kwargs):
    with pytest.raises(SinkConfigError):
        AirtableSink(*args, **kwargs)


def test_table_name_is_url_quoted():
    assert AirtableSink("tok", "appBASE", "Offres CH").endpoint.endswith("/appBASE/Offres%20CH")


def test_classify_and_guard():
    assert isinstance(classify_sink_error(requests.Timeout("t")), SinkNetworkError)
    assert type(classify_sink_error(KeyError("k"))) is SinkError
    with pytest.raises(SinkError):
        with sink_error_guard():
            raise KeyError("k")
