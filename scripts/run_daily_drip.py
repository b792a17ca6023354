#!/usr/bin/env python3
"""
Daily DRIP job: refresh market data for active ETFs, then recalculate and
cache every DRIP window.

Usage: from project root:
  python scripts/run_daily_drip.py
  python scripts/run_daily_drip.py --as-of 2025-08-29 --skip-refresh
  python scripts/run_daily_drip.py --force --investor-country US
  python scripts/run_daily_drip.py --import-prices prices.csv --import-dividends dividends.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from hilljump.app_context import AppContext
from hilljump.config.logging_config import setup_logging
from hilljump.core.timezone import parse_date, today_eastern

logger = logging.getLogger("hilljump.daily")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--as-of", help="As-of date YYYY-MM-DD (default: today, US/Eastern)")
    parser.add_argument("--data-dir", type=Path, help="Data directory (default from settings)")
    parser.add_argument("--investor-country", help="Investor country for withholding tax")
    parser.add_argument("--skip-refresh", action="store_true", help="Do not call the market data provider")
    parser.add_argument("--force", action="store_true", help="Clear the DRIP cache before recalculating")
    parser.add_argument("--import-prices", help="CSV of ticker,date,close_price to load first")
    parser.add_argument("--import-dividends", help="CSV of ticker,ex_date,amount,... to load first")
    parser.add_argument("--export", help="Write cached DRIP results to this CSV afterwards")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING... (default from settings)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    as_of = parse_date(args.as_of, default=today_eastern())
    ctx = AppContext(data_dir=args.data_dir)
    ctx.initialize()
    try:
        for path, load in (
            (args.import_prices, ctx.csv_importer.import_prices),
            (args.import_dividends, ctx.csv_importer.import_dividends),
        ):
            if path:
                summary = load(path)
                logger.info("Imported %d rows from %s (%d errors)", summary.imported_count, path, summary.error_count)
                for error in summary.errors:
                    logger.warning(error)

        if not args.skip_refresh:
            ctx.market_data.refresh_active(as_of)

        if args.force:
            result = ctx.drip.force_recalc(as_of, args.investor_country)
        else:
            result = ctx.drip.run_batch(as_of, investor_country=args.investor_country)

        if args.export:
            rows = ctx.csv_exporter.export_drip(args.export, investor_country=args.investor_country)
            logger.info("Exported %d DRIP rows to %s", rows, args.export)
    finally:
        ctx.close()

    return 1 if result.errors and not result.processed else 0


if __name__ == "__main__":
    sys.exit(main())
