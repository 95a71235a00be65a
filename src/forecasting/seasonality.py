"""
Seasonality Detector

Flags annual recurrence in a monthly series by comparing each month with
the same month one year earlier, and derives additive monthly offsets for
estimators that adjust projections for season.
"""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

SEASONAL_PERIOD = 12
# Mean year-over-year relative difference below which months "recur"
SEASONALITY_THRESHOLD = 0.15
# Coefficient of variation a series needs before it can be seasonal
MIN_SEASONAL_VARIATION = 0.05


class SeasonalityDetector:
    """
    Detects annual seasonality in monthly values.

    A series is seasonal when same-month values recur year over year
    (mean relative difference below `threshold`) and the series actually
    varies month to month (coefficient of variation of at least
    `min_variation`). A perfectly flat series recurs trivially and is
    reported as not seasonal.
    """

    def __init__(
        self,
        threshold: float = SEASONALITY_THRESHOLD,
        min_variation: float = MIN_SEASONAL_VARIATION,
        period: int = SEASONAL_PERIOD
    ):
        self.threshold = threshold
        self.min_variation = min_variation
        self.period = period

    def detect(self, values: Sequence[float]) -> bool:
        """Return True when `values` shows a recurring annual pattern."""
        if len(values) < self.period:
            return False

        y = np.asarray(values, dtype=float)
        current = y[self.period:]
        year_ago = y[:-self.period]
        if len(current) == 0:
            return False

        scale = np.maximum(np.abs(current), np.abs(year_ago))
        diffs = np.abs(current - year_ago)
        relative = np.divide(diffs, scale, out=np.zeros_like(diffs), where=scale > 0)
        mean_relative = float(np.mean(relative))

        mean_val = float(np.mean(y))
        std_val = float(np.std(y))
        if mean_val == 0:
            varied = std_val > 0
        else:
            varied = std_val / abs(mean_val) >= self.min_variation

        seasonal = mean_relative < self.threshold and varied
        logger.debug(
            f"Seasonality check: n={len(y)} yoy_diff={mean_relative:.4f} varied={varied} -> {seasonal}"
        )
        return seasonal

    def offsets(self, values: Sequence[float]) -> np.ndarray:
        """
        Additive seasonal offsets by position in the period.

        Offsets are the mean detrended residual for each position
        (index % period), centered to sum to zero. Position p applies to
        every series index i with i % period == p.

        With more than one period of history the slope is the mean
        year-over-year change divided by the period, which the seasonal
        component cancels out of; shorter series use a least-squares line.
        """
        y = np.asarray(values, dtype=float)
        offsets = np.zeros(self.period)
        if len(y) < 2:
            return offsets

        t = np.arange(len(y))
        if len(y) > self.period:
            slope = np.mean(y[self.period:] - y[:-self.period]) / self.period
            intercept = np.mean(y) - slope * np.mean(t)
        else:
            slope, intercept = np.polyfit(t, y, 1)
        residuals = y - (intercept + slope * t)

        for position in range(self.period):
            bucket = residuals[position::self.period]
            if len(bucket):
                offsets[position] = np.mean(bucket)

        return offsets - np.mean(offsets)


def detect_seasonality(values: Sequence[float]) -> bool:
    """Seasonality check with the default thresholds."""
    return SeasonalityDetector().detect(values)


def seasonal_offsets(values: Sequence[float], period: int = SEASONAL_PERIOD) -> np.ndarray:
    """Additive seasonal offsets with the default thresholds."""
    return SeasonalityDetector(period=period).offsets(values)
