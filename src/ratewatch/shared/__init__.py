# src/ratewatch/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Date parsing and formatting
- Logging configuration
"""

from ratewatch.shared.logging_conf import setup_logging
from ratewatch.shared.timeutil import (
    date_range,
    format_compact_date,
    format_date,
    parse_date,
    today,
)

__all__ = [
    "setup_logging",
    "date_range",
    "format_compact_date",
    "format_date",
    "parse_date",
    "today",
]
