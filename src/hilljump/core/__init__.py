"""Core utilities and shared functionality."""

from hilljump.core.timezone import (
    now_eastern,
    today_eastern,
    utc_now,
    parse_date,
    add_business_days,
    EASTERN_TZ,
)
from hilljump.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientDataError,
    ProviderError,
)

__all__ = [
    "now_eastern",
    "today_eastern",
    "utc_now",
    "parse_date",
    "add_business_days",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientDataError",
    "ProviderError",
]
