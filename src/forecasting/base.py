"""
Estimator Base

Shared contract for the forecasting estimators. Each estimator turns a
validated monthly series into a Projection (arrays of predicted values and
bounds plus a trend call); the base class handles validation, empty input,
forecast dates, optional non-negative clamping and seasonality reporting.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .exceptions import InvalidInputError
from .models import ForecastMethod, ForecastPoint, ForecastResult, MonthlyPoint, TrendDirection, add_months
from .seasonality import SeasonalityDetector
from .validation import validate_horizon, validate_series

logger = logging.getLogger(__name__)

# Slope must exceed this fraction of the mean level per month to count as a trend
TREND_THRESHOLD = 0.01
# Absolute floor so that all-zero series stay stable under float noise
TREND_EPSILON = 1e-9
# Half-width of the band used when there is too little history to fit (±50%)
FALLBACK_BAND_RATIO = 0.5
# 95% two-sided normal quantile
Z_95 = 1.96


def classify_trend(
    slope: float,
    level: float,
    threshold: float = TREND_THRESHOLD
) -> TrendDirection:
    """
    Classify a per-month change against a threshold relative to the level.

    Args:
        slope: Change per month (fitted slope, smoothed trend or window delta)
        level: Reference level, normally the series mean
        threshold: Fraction of |level| the slope must exceed

    Returns:
        TrendDirection
    """
    limit = max(abs(level) * threshold, TREND_EPSILON)
    if slope > limit:
        return TrendDirection.INCREASING
    if slope < -limit:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


@dataclass(frozen=True)
class Projection:
    """Raw estimator output over the horizon, before dates are attached"""
    predicted: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    trend: TrendDirection
    mae: Optional[float] = None

    def clamped(self) -> "Projection":
        """Floor predictions and bounds at zero; ordering is preserved."""
        return Projection(
            predicted=np.maximum(self.predicted, 0.0),
            lower=np.maximum(self.lower, 0.0),
            upper=np.maximum(self.upper, 0.0),
            trend=self.trend,
            mae=self.mae
        )


def flat_projection(last_value: float, horizon: int) -> Projection:
    """Flat forecast at the last observation with a fixed wide band."""
    half_width = abs(last_value) * FALLBACK_BAND_RATIO
    predicted = np.full(horizon, float(last_value))
    return Projection(
        predicted=predicted,
        lower=predicted - half_width,
        upper=predicted + half_width,
        trend=TrendDirection.STABLE
    )


class Estimator(ABC):
    """
    Base class for monthly forecasting estimators.

    Subclasses set `method` and implement `_project`. Estimators hold only
    their tuning constants, so one instance can be shared between callers.

    Example:
    ```python
    estimator = LinearTrendEstimator()
    result = estimator.forecast(series, horizon=6)
    print(result.trend.value, [p.predicted for p in result.forecasts])
    ```
    """

    method: ForecastMethod

    def __init__(
        self,
        trend_threshold: float = TREND_THRESHOLD,
        non_negative: bool = False,
        detector: Optional[SeasonalityDetector] = None
    ):
        """
        Initialize estimator.

        Args:
            trend_threshold: Relative slope threshold for trend classification
            non_negative: Floor predictions and bounds at zero
            detector: Seasonality detector (default thresholds if omitted)
        """
        self.trend_threshold = trend_threshold
        self.non_negative = non_negative
        self.detector = detector or SeasonalityDetector()

    def forecast(self, series: Sequence[MonthlyPoint], horizon: int) -> ForecastResult:
        """
        Forecast `horizon` months after the last point of `series`.

        Args:
            series: Contiguous ascending monthly history
            horizon: Number of future months

        Returns:
            ForecastResult

        Raises:
            InvalidInputError: If the series or horizon is malformed
        """
        values = validate_series(series)
        horizon = validate_horizon(horizon)

        if not values:
            # No anchor month to project from
            return ForecastResult(
                method=self.method.label,
                trend=TrendDirection.STABLE,
                seasonality=False,
                forecasts=()
            )

        projection = self.project(np.asarray(values, dtype=float), horizon)

        last_date = series[-1].date
        try:
            dates = [add_months(last_date, step + 1) for step in range(horizon)]
        except ValueError:
            raise InvalidInputError("horizon", "runs past the last representable month")

        points = tuple(
            ForecastPoint(
                date=dates[step],
                predicted=float(projection.predicted[step]),
                lower=float(projection.lower[step]),
                upper=float(projection.upper[step])
            )
            for step in range(horizon)
        )

        logger.debug(
            f"{self.method.label}: n={len(values)} horizon={horizon} trend={projection.trend.value}"
        )

        return ForecastResult(
            method=self.method.label,
            trend=projection.trend,
            seasonality=self.detector.detect(values),
            forecasts=points,
            mae=projection.mae
        )

    def project(self, values: np.ndarray, horizon: int) -> Projection:
        """Projection for validated values, floored at zero when `non_negative` is set."""
        projection = self._project(values, horizon)
        if self.non_negative:
            projection = projection.clamped()
        return projection

    @abstractmethod
    def _project(self, values: np.ndarray, horizon: int) -> Projection:
        """Project `horizon` steps from a non-empty array of finite values."""

    def _classify(self, slope: float, values: np.ndarray) -> TrendDirection:
        return classify_trend(slope, float(np.mean(values)), self.trend_threshold)


def mean_absolute_error(actual: Sequence[float], predicted: Sequence[float]) -> Optional[float]:
    """Mean absolute error, or None when there is nothing to compare."""
    if len(actual) != len(predicted) or len(actual) == 0:
        return None
    return float(np.mean(np.abs(np.asarray(actual, dtype=float) - np.asarray(predicted, dtype=float))))
