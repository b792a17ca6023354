"""Enumerations for domain models."""

from enum import Enum


class DripWindow(str, Enum):
    """Trailing lookback windows for DRIP performance."""

    FOUR_WEEKS = "4w"
    THIRTEEN_WEEKS = "13w"
    TWENTY_SIX_WEEKS = "26w"
    FIFTY_TWO_WEEKS = "52w"

    @property
    def days(self) -> int:
        """Window length in calendar days."""
        return _WINDOW_DAYS[self]

    @classmethod
    def from_days(cls, days: int) -> "DripWindow":
        """Look up a window by its length in days."""
        for window, window_days in _WINDOW_DAYS.items():
            if window_days == days:
                return window
        raise ValueError(f"Unsupported window length: {days} days")


_WINDOW_DAYS = {
    DripWindow.FOUR_WEEKS: 28,
    DripWindow.THIRTEEN_WEEKS: 91,
    DripWindow.TWENTY_SIX_WEEKS: 182,
    DripWindow.FIFTY_TWO_WEEKS: 364,
}
