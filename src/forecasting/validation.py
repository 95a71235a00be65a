"""
Input validation for the forecasting engine.

Insufficient history is not an error here; only input that cannot be
interpreted at all (wrong types, non-finite numbers, broken month
sequences) is rejected.
"""

import math
from datetime import date, datetime
from typing import List, Sequence

import numpy as np

from .exceptions import InvalidInputError
from .models import MonthlyPoint, add_months

# Largest magnitude accepted for a series value; squared sums of larger values overflow float64
MAX_ABS_VALUE = 1e150


def validate_horizon(horizon: int) -> int:
    """Return horizon as int, raising InvalidInputError if it is not a non-negative integer."""
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)):
        raise InvalidInputError("horizon", "must be an integer")
    if horizon < 0:
        raise InvalidInputError("horizon", "must not be negative")
    return int(horizon)


def validate_series(series: Sequence[MonthlyPoint]) -> List[float]:
    """
    Check a monthly series and return its values.

    Args:
        series: Ascending, contiguous MonthlyPoints

    Returns:
        The point values as floats

    Raises:
        InvalidInputError: Naming the first offending point
    """
    values: List[float] = []
    previous = None

    for i, point in enumerate(series):
        if not isinstance(point, MonthlyPoint):
            raise InvalidInputError(f"series[{i}]", "must be a MonthlyPoint")

        try:
            value = float(point.value)
        except (TypeError, ValueError):
            raise InvalidInputError(f"series[{i}].value", "must be a number")
        if not math.isfinite(value):
            raise InvalidInputError(f"series[{i}].value", "must be finite")
        if abs(value) > MAX_ABS_VALUE:
            raise InvalidInputError(f"series[{i}].value", f"magnitude must not exceed {MAX_ABS_VALUE:g}")

        month = month_start(point.date, f"series[{i}].date")
        if previous is not None and month != add_months(previous, 1):
            raise InvalidInputError(
                f"series[{i}].date",
                f"expected {add_months(previous, 1).isoformat()}, got {month.isoformat()}"
            )

        values.append(value)
        previous = month

    return values


def month_start(value, field: str) -> date:
    """Return a first-of-month date or datetime as a plain date."""
    if isinstance(value, datetime):
        value = value.date()
    elif not isinstance(value, date):
        raise InvalidInputError(field, "must be a date")
    if value.day != 1:
        raise InvalidInputError(field, "must be the first day of a month")
    return value
