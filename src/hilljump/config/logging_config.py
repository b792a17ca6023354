"""Logging setup shared by the API and the daily DRIP job."""

import logging
import sys
from typing import Optional

from hilljump.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Per-request chatter from SQL echo and Yahoo HTTP calls
QUIET_LOGGERS = ("sqlalchemy.engine", "yfinance", "urllib3", "peewee")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Send application logs to stdout.

    `level` overrides `settings.log_level` (the daily job's --log-level).
    Library loggers in QUIET_LOGGERS stay at WARNING either way.
    """
    name = (level or get_settings().log_level).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {name}")

    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # basicConfig is a no-op once handlers exist; still honour the level
    logging.getLogger().setLevel(numeric)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
