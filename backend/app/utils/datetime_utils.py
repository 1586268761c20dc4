"""
Date and time utilities for BizLedger.

Provides timezone-aware datetime helpers.
"""
from datetime import datetime, timezone, date


def utcnow() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Note:
        Always use this function instead of datetime.now() to ensure
        timezone-aware timestamps across the application.
    """
    return datetime.now(timezone.utc)


def today_date() -> date:
    """Current calendar date in UTC (default for transaction dates)."""
    return utcnow().date()
