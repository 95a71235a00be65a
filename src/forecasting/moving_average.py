"""
Moving-Average Estimator

Projects the trailing window average forward. Bands are constant across
the horizon: the estimator models reversion to the recent mean rather
than long-range drift.
"""

import logging
from typing import Sequence

import numpy as np

from .base import Estimator, Projection
from .models import ForecastMethod, ForecastResult, MonthlyPoint, TrendDirection

logger = logging.getLogger(__name__)

WINDOW = 3
BAND_MULTIPLIER = 1.5


def simple_moving_average(values: Sequence[float], window: int = WINDOW) -> float:
    """Mean of the last `window` values (0.0 for an empty series)."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values[-window:], dtype=float)))


class MovingAverageEstimator(Estimator):
    """
    Trailing window average forecast.

    The previous average is the same-size window shifted one month back.
    If the change between the two averages classifies as a trend, each
    step extends the forecast by that change; otherwise the projection is
    flat. Band half-width is `band_multiplier` times the standard deviation
    of the values inside the current window.
    """

    method = ForecastMethod.MOVING_AVERAGE

    def __init__(self, window: int = WINDOW, band_multiplier: float = BAND_MULTIPLIER, **kwargs):
        super().__init__(**kwargs)
        if window < 1:
            raise ValueError(f"window must be at least 1, got {window}")
        self.window = window
        self.band_multiplier = band_multiplier

    def _project(self, values: np.ndarray, horizon: int) -> Projection:
        n = len(values)
        window = min(self.window, n)

        recent = values[-window:]
        current = float(np.mean(recent))

        delta = 0.0
        if n > window:
            previous = float(np.mean(values[-window - 1:-1]))
            delta = current - previous

        trend = self._classify(delta, values)
        steps = np.arange(1, horizon + 1, dtype=float)
        if trend == TrendDirection.STABLE:
            predicted = np.full(horizon, current)
        else:
            predicted = current + steps * delta

        half_width = self.band_multiplier * float(np.std(recent))

        # One-step errors of the trailing average over the history
        errors = [
            values[i] - np.mean(values[i - window:i])
            for i in range(window, n)
        ]

        logger.debug(f"Moving average: window={window} mean={current:.4f} delta={delta:.4f}")

        return Projection(
            predicted=predicted,
            lower=predicted - half_width,
            upper=predicted + half_width,
            trend=trend,
            mae=float(np.mean(np.abs(errors))) if errors else None
        )


def moving_average_forecast(series: Sequence[MonthlyPoint], horizon: int) -> ForecastResult:
    """Moving average forecast with default settings."""
    return MovingAverageEstimator().forecast(series, horizon)
