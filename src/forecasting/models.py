"""
Forecast Data Model

Value objects shared by the series builder and the estimators: monthly
history points, forecast points, forecast results and the enums that
classify them.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import InvalidInputError


class TrendDirection(Enum):
    """Direction of trend"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class TransactionKind(Enum):
    """Transaction type tag"""
    INCOME = "income"
    EXPENSE = "expense"


class ForecastMethod(Enum):
    """Available forecasting methods"""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    MOVING_AVERAGE = "moving_average"
    ENSEMBLE = "ensemble"

    @property
    def label(self) -> str:
        """Display name reported in ForecastResult.method"""
        return _METHOD_LABELS[self]


_METHOD_LABELS = {
    ForecastMethod.LINEAR: "Linear Trend",
    ForecastMethod.EXPONENTIAL: "Exponential Smoothing",
    ForecastMethod.MOVING_AVERAGE: "Moving Average",
    ForecastMethod.ENSEMBLE: "Ensemble",
}


def add_months(month: date, count: int) -> date:
    """Return the first day of the month `count` months after `month`."""
    index = month.year * 12 + (month.month - 1) + count
    return date(index // 12, index % 12 + 1, 1)


@dataclass(frozen=True)
class Transaction:
    """A single income or expense record from the transaction store"""
    date: date
    kind: TransactionKind
    amount: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Transaction":
        """
        Parse a transaction from an API payload.

        Args:
            data: Mapping with 'date' (YYYY-MM-DD), 'type' and 'amount'
            index: Position in the enclosing list, used in error messages

        Raises:
            InvalidInputError: If any field is missing or malformed
        """
        prefix = f"transactions[{index}]"
        if not isinstance(data, dict):
            raise InvalidInputError(prefix, "must be an object")

        raw_date = data.get('date')
        try:
            parsed_date = datetime.strptime(str(raw_date)[:10], '%Y-%m-%d').date()
        except ValueError:
            raise InvalidInputError(f"{prefix}.date", f"invalid date {raw_date!r}")

        kind = parse_kind(data.get('type', data.get('kind')), field=f"{prefix}.type")

        raw_amount = data.get('amount')
        if isinstance(raw_amount, bool):
            raise InvalidInputError(f"{prefix}.amount", "must be a number")
        try:
            amount = float(raw_amount)
        except (TypeError, ValueError):
            raise InvalidInputError(f"{prefix}.amount", "must be a number")
        if not math.isfinite(amount):
            raise InvalidInputError(f"{prefix}.amount", "must be finite")

        return cls(date=parsed_date, kind=kind, amount=amount)


def parse_kind(value: Union[str, TransactionKind, None], field: str = "kind") -> TransactionKind:
    """Coerce a string or enum into a TransactionKind."""
    if isinstance(value, TransactionKind):
        return value
    try:
        return TransactionKind(str(value).lower())
    except ValueError:
        raise InvalidInputError(field, f"unknown transaction type {value!r}")


def parse_method(value: Union[str, ForecastMethod, None]) -> ForecastMethod:
    """Coerce a string or enum into a ForecastMethod."""
    if isinstance(value, ForecastMethod):
        return value
    try:
        return ForecastMethod(str(value).lower())
    except ValueError:
        raise InvalidInputError("method", f"unknown forecast method {value!r}")


@dataclass(frozen=True)
class MonthlyPoint:
    """Total for one calendar month; `date` is the first of the month"""
    date: date
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "value": self.value
        }


@dataclass(frozen=True)
class ForecastPoint:
    """Projected value for one future month with its confidence band"""
    date: date
    predicted: float
    lower: float
    upper: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "predicted": round(self.predicted, 2),
            "lower": round(self.lower, 2),
            "upper": round(self.upper, 2)
        }


@dataclass(frozen=True)
class ForecastResult:
    """Result of a single forecast call"""
    method: str
    trend: TrendDirection
    seasonality: bool
    forecasts: Tuple[ForecastPoint, ...]
    mae: Optional[float] = None  # in-sample mean absolute error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "trend": self.trend.value,
            "seasonality": self.seasonality,
            "forecasts": [p.to_dict() for p in self.forecasts],
            "mae": round(self.mae, 4) if self.mae is not None else None
        }
