"""ETF repository protocol."""

from typing import Protocol, Optional

from hilljump.domain.models import Etf


class EtfRepository(Protocol):
    """Interface for ETF metadata access."""

    def upsert(self, etf: Etf) -> Etf:
        """Insert or update an ETF by ticker."""
        ...

    def get(self, ticker: str) -> Optional[Etf]:
        """Retrieve an ETF by ticker."""
        ...

    def list_all(self) -> list[Etf]:
        """List all ETFs ordered by ticker."""
        ...

    def list_active(self) -> list[Etf]:
        """List active ETFs ordered by ticker."""
        ...

    def set_active(self, ticker: str, active: bool) -> Optional[Etf]:
        """Toggle the active flag; returns None for an unknown ticker."""
        ...
