# tests/unit/test_csv_writer.py
from __future__ import annotations

from pathlib import Path

from helixcompare.core.export import CSV_HEADERS, offer_to_csv_values, to_csv_line, write_offers_csv


def test_csv_escaping():
    assert to_csv_line(['Offer, "Black" edition']) == '"Offer, ""Black"" edition"'
    assert to_csv_line(["plain", "", "a\nb"]) == 'plain,,"a\nb"'
    assert to_csv_line(["a\rb", "c"]) == '"a\rb",c'


def test_header_order():
    assert CSV_HEADERS[0] == "Reference"
    assert CSV_HEADERS[-1] == "ContractTerm"
    assert len(CSV_HEADERS) == 17


def test_row_values_formatting(offer_factory):
    values = offer_to_csv_values(offer_factory(previous_price_chf=None, speed_mbps=None))
    by_header = dict(zip(CSV_HEADERS, values))
    assert by_header["PriceCHFPerMonth"] == "29.90"
    assert by_header["PreviousPriceCHF"] == ""
    assert by_header["SpeedMbps"] == ""
    assert by_header["OfferCategory"] == "Mobile"
    assert by_header["TV"] == "Non"
    assert by_header["CO2EstimateKgYear"] == "16.8"
    assert by_header["IncludedCountries"] == "FR, DE, IT, AT, LI"


def test_write_offers_csv(tmp_path: Path, offer_factory):
    out = write_offers_csv([offer_factory(offer_name='Offer, "Black" edition')], tmp_path / "nested" / "latest.csv")
    text = out.read_text(encoding="utf-8")
    lines = text.split("\n")
    assert lines[0] == ",".join(CSV_HEADERS)
    assert '"Offer, ""Black"" edition"' in lines[1]
    assert text.endswith("\n")
    assert "\r" not in text


def test_write_offers_csv_quotes_carriage_return(tmp_path: Path, offer_factory):
    out = write_offers_csv([offer_factory(offer_name="Swiss\rFlat")], tmp_path / "cr.csv")
    with out.open(encoding="utf-8", newline="") as f:
        text = f.read()
    assert '"Swiss\rFlat"' in text
    assert text.count("\n") == 2


def test_write_empty_csv_has_header_only(tmp_path: Path):
    out = write_offers_csv([], tmp_path / "empty.csv")
    assert out.read_text(encoding="utf-8") == ",".join(CSV_HEADERS) + "\n"
