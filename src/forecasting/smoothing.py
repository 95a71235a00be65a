"""
Exponential Smoothing Estimator

Holt's double exponential smoothing (level + trend) with an additive
seasonal adjustment when the series shows an annual pattern.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from .base import Z_95, Estimator, Projection, flat_projection
from .models import ForecastMethod, ForecastResult, MonthlyPoint

logger = logging.getLogger(__name__)

ALPHA = 0.3  # level smoothing
BETA = 0.1   # trend smoothing


def exponential_moving_average(values: Sequence[float], alpha: float = ALPHA) -> float:
    """Single exponential moving average of `values` (0.0 for an empty series)."""
    if len(values) == 0:
        return 0.0
    ema = float(values[0])
    for value in values[1:]:
        ema = alpha * float(value) + (1 - alpha) * ema
    return ema


def holt_smoothing(
    values: Sequence[float],
    alpha: float = ALPHA,
    beta: float = BETA
) -> Tuple[float, float, np.ndarray]:
    """
    Run Holt's linear method over `values` (at least two points).

    The level starts at the first value and the trend at the first
    difference, so after two points level == values[1] and
    trend == values[1] - values[0].

    Returns:
        (level, trend, one_step_errors) where one_step_errors[k] is the
        error of the forecast made for values[k + 2]
    """
    y = np.asarray(values, dtype=float)
    level = y[0]
    trend = y[1] - y[0]
    errors = []

    for i in range(1, len(y)):
        if i >= 2:
            errors.append(y[i] - (level + trend))
        previous_level = level
        level = alpha * y[i] + (1 - alpha) * (level + trend)
        trend = beta * (level - previous_level) + (1 - beta) * trend

    return float(level), float(trend), np.asarray(errors, dtype=float)


class ExponentialSmoothingEstimator(Estimator):
    """
    Holt's method forecast.

    Projection is level + h * trend. The band half-width is
    z * s * h, where s is the root-mean-square one-step-ahead error, so
    uncertainty compounds linearly with the forecast step.
    """

    method = ForecastMethod.EXPONENTIAL

    def __init__(
        self,
        alpha: float = ALPHA,
        beta: float = BETA,
        z_score: float = Z_95,
        seasonal: bool = True,
        **kwargs
    ):
        """
        Initialize estimator.

        Args:
            alpha: Level smoothing factor in (0, 1)
            beta: Trend smoothing factor in (0, 1)
            z_score: Band multiplier
            seasonal: Apply seasonal offsets when seasonality is detected
        """
        super().__init__(**kwargs)
        if not 0 < alpha < 1:
            raise ValueError(f"alpha must be in (0, 1), got {alpha}")
        if not 0 < beta < 1:
            raise ValueError(f"beta must be in (0, 1), got {beta}")
        self.alpha = alpha
        self.beta = beta
        self.z_score = z_score
        self.seasonal = seasonal

    def _project(self, values: np.ndarray, horizon: int) -> Projection:
        n = len(values)
        if n < 2:
            return flat_projection(values[-1], horizon)

        period = self.detector.period
        offsets = None
        adjusted = values
        if self.seasonal and self.detector.detect(values):
            offsets = self.detector.offsets(values)
            adjusted = values - offsets[np.arange(n) % period]

        level, trend, errors = holt_smoothing(adjusted, self.alpha, self.beta)

        steps = np.arange(1, horizon + 1, dtype=float)
        predicted = level + steps * trend
        if offsets is not None:
            predicted = predicted + offsets[(n - 1 + np.arange(1, horizon + 1)) % period]

        if len(errors):
            spread = float(np.sqrt(np.mean(errors ** 2)))
        else:
            spread = float(np.std(values))
        half_width = self.z_score * spread * steps

        logger.debug(
            f"Holt smoothing: level={level:.4f} trend={trend:.4f} "
            f"spread={spread:.4f} seasonal={offsets is not None}"
        )

        return Projection(
            predicted=predicted,
            lower=predicted - half_width,
            upper=predicted + half_width,
            trend=self._classify(trend, values),
            mae=float(np.mean(np.abs(errors))) if len(errors) else None
        )


def exponential_smoothing_forecast(series: Sequence[MonthlyPoint], horizon: int) -> ForecastResult:
    """Exponential smoothing forecast with default settings."""
    return ExponentialSmoothingEstimator().forecast(series, horizon)
