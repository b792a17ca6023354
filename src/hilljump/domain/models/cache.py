"""Cache models for derived DRIP results."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from hilljump.domain.views.drip import DripResult


@dataclass
class DripCacheEntry:
    """
    Cached DRIP results for one ticker, calculation date and investor country.

    Never edited directly; always recomputed from price and dividend history.
    """

    ticker: str
    calculation_date: date
    investor_country: str
    windows: dict[str, Optional[DripResult]] = field(default_factory=dict)
    created_at: Optional[datetime] = field(default=None)
