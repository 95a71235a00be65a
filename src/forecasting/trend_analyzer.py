"""
Linear Trend Estimator

Fits an ordinary-least-squares line through a monthly series and projects
it forward with a regression prediction interval.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .base import Z_95, Estimator, Projection, flat_projection, mean_absolute_error
from .models import ForecastMethod, ForecastResult, MonthlyPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionFit:
    """Result of a simple linear regression over month indices"""
    slope: float
    intercept: float
    r_squared: float
    residual_std: float  # s = sqrt(SSR / (n - 2))
    n: int

    def predict(self, t):
        return self.intercept + self.slope * t


def linear_regression(values: Sequence[float]) -> RegressionFit:
    """
    Least-squares fit of value = intercept + slope * t, t = 0..n-1.

    With fewer than two points the slope is zero and the intercept is the
    single value (or 0). With exactly two points there are no residual
    degrees of freedom; residual_std falls back to the population standard
    deviation of the two values.
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    if n == 0:
        return RegressionFit(0.0, 0.0, 0.0, 0.0, 0)
    if n == 1:
        return RegressionFit(0.0, float(y[0]), 0.0, 0.0, 1)

    x = np.arange(n, dtype=float)
    x_mean = np.mean(x)
    y_mean = np.mean(y)

    numerator = np.sum((x - x_mean) * (y - y_mean))
    denominator = np.sum((x - x_mean) ** 2)

    slope = numerator / denominator
    intercept = y_mean - slope * x_mean

    # R-squared
    y_pred = slope * x + intercept
    ss_res = np.sum((y - y_pred) ** 2)
    ss_tot = np.sum((y - y_mean) ** 2)
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0

    if n > 2:
        residual_std = np.sqrt(ss_res / (n - 2))
    else:
        residual_std = np.std(y)

    return RegressionFit(
        slope=float(slope),
        intercept=float(intercept),
        r_squared=float(max(0.0, min(1.0, r_squared))),
        residual_std=float(residual_std),
        n=n
    )


class LinearTrendEstimator(Estimator):
    """
    Linear trend forecast with a 95% prediction interval.

    The band half-width at index t is
    z * s * sqrt(1 + 1/n + (t - t_mean)^2 / Sxx), so it widens with
    distance from the fitted data.

    Example:
    ```python
    estimator = LinearTrendEstimator()
    result = estimator.forecast(series, horizon=2)
    # series [10, 20, 30, 40, 50] -> predictions [60, 70]
    ```
    """

    method = ForecastMethod.LINEAR

    def __init__(self, z_score: float = Z_95, **kwargs):
        """
        Initialize estimator.

        Args:
            z_score: Normal quantile of the interval (1.96 = 95%)
        """
        super().__init__(**kwargs)
        self.z_score = z_score

    def _project(self, values: np.ndarray, horizon: int) -> Projection:
        n = len(values)
        if n < 2:
            return flat_projection(values[-1], horizon)

        fit = linear_regression(values)

        # Indices n .. n + horizon - 1 follow the last observed index n - 1
        t = np.arange(n, n + horizon, dtype=float)
        predicted = fit.predict(t)

        x = np.arange(n, dtype=float)
        x_mean = np.mean(x)
        sxx = np.sum((x - x_mean) ** 2)
        half_width = self.z_score * fit.residual_std * np.sqrt(1 + 1 / n + (t - x_mean) ** 2 / sxx)

        logger.debug(
            f"Linear fit: slope={fit.slope:.4f} intercept={fit.intercept:.4f} "
            f"r2={fit.r_squared:.4f} s={fit.residual_std:.4f}"
        )

        fitted = fit.predict(x)
        return Projection(
            predicted=predicted,
            lower=predicted - half_width,
            upper=predicted + half_width,
            trend=self._classify(fit.slope, values),
            mae=mean_absolute_error(values, fitted)
        )


def linear_trend_forecast(series: Sequence[MonthlyPoint], horizon: int) -> ForecastResult:
    """Linear trend forecast with default settings."""
    return LinearTrendEstimator().forecast(series, horizon)
