"""CSV import functionality for price and dividend history."""

import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from hilljump.core.exceptions import ValidationError
from hilljump.core.timezone import parse_date
from hilljump.domain.models import DividendEvent, PricePoint
from hilljump.domain.views import ImportSummary
from hilljump.repositories.protocols import DividendRepository, PriceRepository


# Expected CSV columns
PRICE_COLUMNS = ["ticker", "date", "close_price"]
DIVIDEND_COLUMNS = ["ticker", "ex_date", "amount", "currency", "pay_date"]
REQUIRED_DIVIDEND_COLUMNS = ["ticker", "ex_date", "amount"]


class CsvImporter:
    """
    CSV importer for bulk history loading.

    Price format: ticker, date, close_price
    Dividend format: ticker, ex_date, amount[, currency, pay_date]
    Rows that fail to parse are reported in the summary; valid rows are kept.
    """

    def __init__(
        self,
        price_repo: PriceRepository,
        dividend_repo: DividendRepository,
    ):
        self._price_repo = price_repo
        self._dividend_repo = dividend_repo

    def import_prices(self, path: str) -> ImportSummary:
        """Import daily closes from a CSV file."""
        summary = ImportSummary()
        by_ticker: dict[str, list[PricePoint]] = {}

        for row_num, row in self._read_rows(path, PRICE_COLUMNS):
            try:
                ticker = self._parse_ticker(row)
                close = self._parse_decimal(row.get("close_price", ""), "close_price")
                if close is None or close <= 0:
                    raise ValidationError(f"close_price must be positive: {row.get('close_price')!r}")
                point = PricePoint(
                    date=self._parse_required_date(row.get("date", ""), "date"),
                    close_price=close,
                    ticker=ticker,
                )
                by_ticker.setdefault(ticker, []).append(point)
            except (ValidationError, ValueError, OverflowError) as e:
                summary.error_count += 1
                summary.errors.append(f"Row {row_num}: {self._message(e)}")

        for ticker, points in by_ticker.items():
            summary.imported_count += self._price_repo.upsert_many(ticker, points)
            summary.skipped_count += len(points) - len({p.date for p in points})
        summary.tickers = sorted(by_ticker)
        return summary

    def import_dividends(self, path: str) -> ImportSummary:
        """Import dividend events from a CSV file."""
        summary = ImportSummary()
        by_ticker: dict[str, list[DividendEvent]] = {}

        for row_num, row in self._read_rows(path, REQUIRED_DIVIDEND_COLUMNS):
            try:
                ticker = self._parse_ticker(row)
                amount = self._parse_decimal(row.get("amount", ""), "amount")
                if amount is None or amount <= 0:
                    raise ValidationError(f"amount must be positive: {row.get('amount')!r}")
                event = DividendEvent(
                    ex_date=self._parse_required_date(row.get("ex_date", ""), "ex_date"),
                    amount_per_share=amount,
                    currency=(row.get("currency") or "USD").strip().upper() or "USD",
                    pay_date=parse_date((row.get("pay_date") or "").strip()),
                    ticker=ticker,
                )
                by_ticker.setdefault(ticker, []).append(event)
            except (ValidationError, ValueError, OverflowError) as e:
                summary.error_count += 1
                summary.errors.append(f"Row {row_num}: {self._message(e)}")

        for ticker, events in by_ticker.items():
            summary.imported_count += self._dividend_repo.upsert_many(ticker, events)
            summary.skipped_count += len(events) - len({e.ex_date for e in events})
        summary.tickers = sorted(by_ticker)
        return summary

    @staticmethod
    def _read_rows(path: str, required: list[str]):
        """Yield (row_number, row) pairs after validating the header."""
        file_path = Path(path)
        if not file_path.exists():
            raise ValidationError(f"File not found: {path}")

        with open(file_path, newline="", encoding="utf-8") as csvfile:
            reader = csv.DictReader(csvfile)
            if reader.fieldnames:
                missing = set(required) - {f.strip() for f in reader.fieldnames}
                if missing:
                    raise ValidationError(f"Missing required columns: {sorted(missing)}")
            # Start at 2 (header is row 1)
            for row_num, row in enumerate(reader, start=2):
                yield row_num, {(k or "").strip(): v for k, v in row.items()}

    @staticmethod
    def _parse_ticker(row: dict[str, str]) -> str:
        ticker = (row.get("ticker") or "").strip().upper()
        if not ticker:
            raise ValidationError("Missing ticker")
        return ticker

    @staticmethod
    def _parse_required_date(value: str, field_name: str):
        parsed = parse_date((value or "").strip())
        if parsed is None:
            raise ValidationError(f"Missing {field_name}")
        return parsed

    @staticmethod
    def _parse_decimal(value: str, field_name: str) -> Optional[Decimal]:
        """Parse a decimal value from string, returning None for empty strings."""
        value = value.strip() if value else ""
        if not value:
            return None
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise ValidationError(f"Invalid {field_name} value: {value}")
        if not result.is_finite():
            raise ValidationError(f"Invalid {field_name} value: {value}")
        return result

    @staticmethod
    def _message(error: Exception) -> str:
        return error.message if isinstance(error, ValidationError) else str(error)
