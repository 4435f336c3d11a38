# scrape_cli.py

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable

from helixcompare.core.crawl import capture_operators, load_pages_jsonl, select_profiles
from helixcompare.core.export import write_offers_csv
from helixcompare.core.sink import AirtableSink, SinkError
from helixcompare.inputs.settings import AppSettings, SettingsLoader
from helixcompare.logs import configure_logging
from helixcompare.schemas.models import RawPageContent
from helixcompare.tools import OfferPipeline

logger = logging.getLogger("helixcompare.cli")

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_SINK_FAILED = 2


def _parse_operators(val: str | None) -> list[str] | None:
    if val is None:
        return None
    return [v.strip() for v in val.split(",") if v.strip()]


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="HelixCompare: telecom offers → canonical CSV (+ optional Airtable upsert)")
    p.add_argument("--config", type=str, default=None, help="Optional settings JSON")
    p.add_argument("--out", type=str, default=None, help="CSV output path (default data/latest.csv)")
    p.add_argument("--pages", type=str, default=None, help="JSONL of captured pages; skips crawling")
    p.add_argument("--operators", type=str, default=None, help="Comma-separated operator names (default: all)")
    p.add_argument("--max-pages", type=int, default=None, help="Max pages per operator when crawling")
    p.add_argument("--push", type=int, choices=(0, 1), default=None, help="Upsert rows into Airtable")
    return p


def _pages(settings: AppSettings, pages_path: str | None) -> Iterable[RawPageContent]:
    if pages_path:
        return load_pages_jsonl(pages_path)
    run = settings.run
    return capture_operators(
        select_profiles(run.operators),
        max_pages=run.max_pages_per_operator,
        user_agent=run.user_agent,
        wait_s=run.render_wait_s,
        delay_s=run.delay_s,
    )


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    try:
        loader = SettingsLoader()
        settings = loader.with_overrides(
            loader.load(args.config),
            out=args.out,
            max_pages=args.max_pages,
            operators=_parse_operators(args.operators),
            push=None if args.push is None else bool(args.push),
        )
        rows = OfferPipeline().run(_pages(settings, args.pages))
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_BAD_INPUT

    out_path = write_offers_csv(rows, settings.run.out)
    print(f"offers: {len(rows)} rows → {out_path}")

    if not settings.run.push:
        return EXIT_OK

    sink_cfg = settings.sink
    try:
        sink = AirtableSink(sink_cfg.token or "", sink_cfg.base or "", sink_cfg.table or "", batch_size=sink_cfg.batch_size)
        report = sink.upsert(rows)
    except SinkError as e:
        logger.error("record store push failed: %s", e)
        return EXIT_SINK_FAILED

    print(f"airtable: {report.records_upserted} records upserted in {report.batches_sent} batch(es)")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
