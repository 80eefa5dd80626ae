"""
Utility functions for FinForecast.
"""

from __future__ import annotations

import math
from datetime import date, datetime

import numpy as np
import pandas as pd

from .errors import ConfigError


def month_range(start: date, months: int) -> np.ndarray:
    """
    Generate a range of monthly dates starting from a given date.

    This utility function creates a numpy array of datetime64 objects representing
    consecutive months, which is used as the time index of every projection.

    **Args:**
        start: The starting date for the range
        months: Number of months to generate

    **Returns:**
        A numpy array of datetime64[M] objects representing monthly intervals

    **Example:**
        ```python
        from datetime import date
        from finforecast.core.utils import month_range

        dates = month_range(date(2026, 1, 1), 13)
        print(dates)
        # Output: ['2026-01' '2026-02' ... '2027-01']
        ```
    """
    s = np.datetime64(start, "M")
    return s + np.arange(months).astype("timedelta64[M]")


def month_key(value: date | datetime | np.datetime64) -> np.datetime64:
    """Truncate a date to its calendar month (year + month)."""
    return np.datetime64(value, "M")


def is_same_month(d1: date | np.datetime64, d2: date | np.datetime64) -> bool:
    """True when both dates fall in the same calendar month."""
    return month_key(d1) == month_key(d2)


def add_months(d: date, months: int) -> date:
    """
    Add calendar months to a date, clamping the day to the end of the month.

    Offsets are always computed from the original date, so a series anchored on
    Jan 31 yields Feb 28/29, Mar 31, Apr 30, ... without drifting.
    """
    return (pd.Timestamp(d) + pd.DateOffset(months=months)).date()


def first_of_month(d: date | None = None) -> date:
    """First day of the month of ``d`` (today when omitted)."""
    d = d or date.today()
    return date(d.year, d.month, 1)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end`` (negative if end is earlier)."""
    return int((month_key(end) - month_key(start)).astype(int))


def coerce_date(value, label: str) -> date:
    """Parse an ISO string, date or datetime into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return pd.Timestamp(value).date()
        except ValueError as exc:
            raise ConfigError(f"{label}: invalid date {value!r}") from exc
    raise ConfigError(f"{label}: expected a date, got {type(value).__name__}")


def coerce_float(value, label: str, default: float | None = None) -> float:
    """Convert a number-like value to a finite float."""
    if value is None:
        if default is None:
            raise ConfigError(f"{label} is required")
        return float(default)
    if isinstance(value, bool):
        raise ConfigError(f"{label} must be a number, got bool")
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{label} must be a number, got {value!r}") from exc
    if not math.isfinite(result):
        raise ConfigError(f"{label} must be finite, got {value!r}")
    return result


def monthly_rate(annual_rate: float) -> float:
    """Monthly-equivalent rate of an annually compounded rate."""
    if annual_rate <= -1.0:
        return -1.0
    return (1.0 + annual_rate) ** (1.0 / 12.0) - 1.0
