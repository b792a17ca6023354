"""Timezone and calendar utilities for US/Eastern market time."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def today_eastern() -> date:
    """Return the current market date in US/Eastern."""
    return now_eastern().date()


def utc_now() -> datetime:
    """Naive UTC timestamp, as stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value, default: Optional[date] = None) -> Optional[date]:
    """
    Parse a date from a string, date or datetime.

    Empty values return `default`.
    """
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.parse(str(value).strip()).date()


def add_business_days(start: date, business_days: int) -> date:
    """Shift a date forward by a number of weekdays (Mon-Fri)."""
    current = start
    added = 0
    while added < business_days:
        current += timedelta(days=1)
        if current.weekday() < 5:
            added += 1
    return current
