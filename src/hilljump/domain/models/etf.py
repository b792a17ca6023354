"""ETF metadata domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Etf:
    """
    Tracked dividend ETF.

    `country` is the fund's domicile and drives withholding tax on
    distributions paid to investors in another country.
    """

    ticker: str
    name: Optional[str] = None
    country: str = "US"
    currency: str = "USD"
    active: bool = True
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        self.ticker = self.ticker.strip().upper()
        self.country = self.country.strip().upper()
        self.currency = self.currency.strip().upper()
