"""ETF registry service."""

import logging
from typing import Optional

from hilljump.core.exceptions import NotFoundError, ValidationError
from hilljump.domain.models import Etf
from hilljump.repositories.protocols import EtfRepository

logger = logging.getLogger(__name__)


class EtfService:
    """Registers tracked ETFs and toggles which ones take part in batch runs."""

    def __init__(self, etf_repo: EtfRepository):
        self._etf_repo = etf_repo

    def register(
        self,
        ticker: str,
        name: Optional[str] = None,
        country: str = "US",
        currency: str = "USD",
        active: bool = True,
    ) -> Etf:
        """Create or update an ETF."""
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise ValidationError("Ticker is required")
        if len((country or "").strip()) != 2:
            raise ValidationError(f"Country must be a 2-letter code: {country!r}")
        etf = self._etf_repo.upsert(
            Etf(ticker=ticker, name=name, country=country, currency=currency, active=active)
        )
        logger.info("Registered ETF %s (%s, active=%s)", etf.ticker, etf.country, etf.active)
        return etf

    def get(self, ticker: str) -> Etf:
        etf = self._etf_repo.get(ticker.strip().upper())
        if etf is None:
            raise NotFoundError("ETF", ticker)
        return etf

    def list_etfs(self, active_only: bool = False) -> list[Etf]:
        if active_only:
            return self._etf_repo.list_active()
        return self._etf_repo.list_all()

    def set_active(self, ticker: str, active: bool) -> Etf:
        etf = self._etf_repo.set_active(ticker.strip().upper(), active)
        if etf is None:
            raise NotFoundError("ETF", ticker)
        return etf
