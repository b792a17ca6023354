"""CSV export functionality."""

import csv
from decimal import Decimal
from pathlib import Path
from typing import Optional

from hilljump.services.drip_service import DripService
from hilljump.services.etf_service import EtfService


_SHARES_PLACES = Decimal("0.000001")
_MONEY_PLACES = Decimal("0.0001")
_PERCENT_PLACES = Decimal("0.01")

DRIP_EXPORT_COLUMNS = [
    "ticker",
    "window",
    "start_date",
    "end_date",
    "start_price_date",
    "start_price",
    "end_price",
    "end_shares",
    "total_dividends",
    "growth_percent",
    "skipped_dividends",
]


class CsvExporter:
    """
    CSV exporter for cached DRIP results.

    One row per ticker and lookback window; windows without enough data are
    written with empty figures.
    """

    def __init__(self, drip_service: DripService, etf_service: EtfService):
        self._drip = drip_service
        self._etfs = etf_service

    def export_drip(
        self,
        path: str,
        tickers: Optional[list[str]] = None,
        investor_country: Optional[str] = None,
    ) -> int:
        """
        Export the latest cached DRIP windows to a CSV file.

        Args:
            path: Output file path
            tickers: Optional list of tickers to export (None = all ETFs)
            investor_country: Cache perspective (None = configured default)

        Returns:
            Number of data rows written.
        """
        if tickers is None:
            tickers = [etf.ticker for etf in self._etfs.list_etfs()]

        # Export whatever is cached regardless of age
        cached = self._drip.get_cached(tickers, investor_country, max_age_seconds=0)

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        rows = 0
        with open(file_path, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=DRIP_EXPORT_COLUMNS)
            writer.writeheader()

            for ticker, windows in cached.drip_data.items():
                for window, result in windows.items():
                    if result is None:
                        writer.writerow({"ticker": ticker, "window": window})
                    else:
                        writer.writerow({
                            "ticker": ticker,
                            "window": window,
                            "start_date": result.start_date.isoformat(),
                            "end_date": result.end_date.isoformat(),
                            "start_price_date": result.start_price_date.isoformat(),
                            "start_price": str(result.start_price),
                            "end_price": str(result.end_price),
                            "end_shares": str(result.end_shares.quantize(_SHARES_PLACES)),
                            "total_dividends": str(result.total_dividends.quantize(_MONEY_PLACES)),
                            "growth_percent": str(result.growth_percent.quantize(_PERCENT_PLACES)),
                            "skipped_dividends": result.skipped_dividends,
                        })
                    rows += 1
        return rows

