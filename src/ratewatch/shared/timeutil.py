# src/ratewatch/shared/timeutil.py
"""
Time Utilities - Date Parsing and Formatting

This module provides the date helpers used across layers: ISO date parsing,
the compact YYYYMMDD form used in provider URLs, and inclusive date ranges.

Files that USE this module:
- ratewatch.adapters.providers.unionpay (format_compact_date for the daily file URL)
- ratewatch.adapters.providers.ecb (format_date for the request path)
- ratewatch.application.fetch_rate (date_range for matrix sweeps)
- ratewatch.application.dto (format_date for responses)
- ratewatch.app (today)

Files that this module USES:
- None (pure utility functions)
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import List

DATE_FORMAT = "%Y-%m-%d"
COMPACT_DATE_FORMAT = "%Y%m%d"


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid date
    """
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_compact_date(value: date) -> str:
    """Format as YYYYMMDD (e.g. 20240115)."""
    return value.strftime(COMPACT_DATE_FORMAT)


def today() -> date:
    """Current UTC calendar date."""
    return datetime.now(timezone.utc).date()


def date_range(start: date, end: date) -> List[date]:
    """
    Every date from start to end, inclusive.

    Raises:
        ValueError: If end is before start
    """
    if end < start:
        raise ValueError("end date must not be before start date")
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]
