"""
Ensemble Combiner

Blends the linear, smoothing and moving-average estimators. Predictions
are averaged; bands take the union of the constituent bands, so
disagreement between models shows up as a wider interval.
"""

import logging
from collections import Counter
from typing import List, Optional, Sequence

import numpy as np

from .base import Estimator, Projection
from .models import ForecastMethod, ForecastResult, MonthlyPoint, TrendDirection
from .moving_average import MovingAverageEstimator
from .smoothing import ExponentialSmoothingEstimator
from .trend_analyzer import LinearTrendEstimator

logger = logging.getLogger(__name__)


def majority_trend(trends: Sequence[TrendDirection]) -> TrendDirection:
    """Most common trend when it has a strict majority, else STABLE."""
    if not trends:
        return TrendDirection.STABLE
    direction, count = Counter(trends).most_common(1)[0]
    if count * 2 > len(trends):
        return direction
    return TrendDirection.STABLE


class EnsembleEstimator(Estimator):
    """
    Combines several estimators run on the same series and horizon.

    Example:
    ```python
    ensemble = EnsembleEstimator()
    result = ensemble.forecast(series, horizon=6)
    print(result.method)  # "Ensemble"
    ```
    """

    method = ForecastMethod.ENSEMBLE

    def __init__(self, estimators: Optional[List[Estimator]] = None, **kwargs):
        """
        Initialize ensemble.

        Args:
            estimators: Constituent estimators (linear, smoothing and
                moving average with the same settings if omitted)
        """
        super().__init__(**kwargs)
        if estimators is None:
            shared = {
                "trend_threshold": self.trend_threshold,
                "non_negative": self.non_negative,
                "detector": self.detector,
            }
            estimators = [
                LinearTrendEstimator(**shared),
                ExponentialSmoothingEstimator(**shared),
                MovingAverageEstimator(**shared),
            ]
        if not estimators:
            raise ValueError("Ensemble needs at least one estimator")
        self.estimators = estimators

    def _project(self, values: np.ndarray, horizon: int) -> Projection:
        projections = [estimator.project(values, horizon) for estimator in self.estimators]

        predicted = np.mean([p.predicted for p in projections], axis=0)
        lower = np.min([p.lower for p in projections], axis=0)
        upper = np.max([p.upper for p in projections], axis=0)
        # Averaging can round a hair outside the union band
        predicted = np.clip(predicted, lower, upper)

        trend = majority_trend([p.trend for p in projections])
        logger.debug(
            f"Ensemble of {len(projections)}: trends={[p.trend.value for p in projections]} -> {trend.value}"
        )

        return Projection(
            predicted=predicted,
            lower=lower,
            upper=upper,
            trend=trend
        )


def ensemble_forecast(series: Sequence[MonthlyPoint], horizon: int) -> ForecastResult:
    """Ensemble forecast with default settings."""
    return EnsembleEstimator().forecast(series, horizon)
