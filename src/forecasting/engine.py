"""
Forecast Engine

Selects an estimator by ForecastMethod and runs it. The engine only holds
tuning constants; every call is a pure function of its series and horizon.
"""

import logging
from typing import Any, Dict, Sequence, Union

from .base import TREND_THRESHOLD, Z_95, Estimator
from .ensemble import EnsembleEstimator
from .models import ForecastMethod, ForecastResult, MonthlyPoint, parse_method
from .moving_average import BAND_MULTIPLIER, WINDOW, MovingAverageEstimator
from .seasonality import MIN_SEASONAL_VARIATION, SEASONALITY_THRESHOLD, SeasonalityDetector
from .smoothing import ALPHA, BETA, ExponentialSmoothingEstimator
from .trend_analyzer import LinearTrendEstimator
from .validation import validate_series

logger = logging.getLogger(__name__)


class ForecastEngine:
    """
    Monthly income/expense forecasting engine.

    Provides:
    - Linear trend, exponential smoothing and moving-average forecasts
    - Ensemble forecast blending all three
    - Side-by-side comparison of every method

    Example:
    ```python
    engine = ForecastEngine()

    series = prepare_monthly_series(transactions, "expense", 12, as_of=date.today())
    result = engine.forecast(series, horizon=6, method="ensemble")
    print(f"Trend: {result.trend.value}")
    ```
    """

    def __init__(
        self,
        alpha: float = ALPHA,
        beta: float = BETA,
        window: int = WINDOW,
        band_multiplier: float = BAND_MULTIPLIER,
        z_score: float = Z_95,
        trend_threshold: float = TREND_THRESHOLD,
        seasonality_threshold: float = SEASONALITY_THRESHOLD,
        min_seasonal_variation: float = MIN_SEASONAL_VARIATION,
        non_negative: bool = False
    ):
        """
        Initialize engine.

        Args:
            alpha: Holt level smoothing factor
            beta: Holt trend smoothing factor
            window: Moving-average window
            band_multiplier: Moving-average band width in window std devs
            z_score: Interval multiplier for linear and smoothing bands
            trend_threshold: Relative slope threshold for trend classification
            seasonality_threshold: Max mean year-over-year relative difference
            min_seasonal_variation: Min coefficient of variation for seasonality
            non_negative: Floor predictions and bounds at zero
        """
        detector = SeasonalityDetector(
            threshold=seasonality_threshold,
            min_variation=min_seasonal_variation
        )
        common = {
            "trend_threshold": trend_threshold,
            "non_negative": non_negative,
            "detector": detector,
        }

        linear = LinearTrendEstimator(z_score=z_score, **common)
        smoothing = ExponentialSmoothingEstimator(alpha=alpha, beta=beta, z_score=z_score, **common)
        moving = MovingAverageEstimator(window=window, band_multiplier=band_multiplier, **common)

        self.estimators: Dict[ForecastMethod, Estimator] = {
            ForecastMethod.LINEAR: linear,
            ForecastMethod.EXPONENTIAL: smoothing,
            ForecastMethod.MOVING_AVERAGE: moving,
            ForecastMethod.ENSEMBLE: EnsembleEstimator(estimators=[linear, smoothing, moving], **common),
        }
        self.detector = detector

        logger.debug(
            f"Forecast engine ready (alpha={alpha}, beta={beta}, window={window}, "
            f"non_negative={non_negative})"
        )

    @classmethod
    def from_config(cls, config: Any) -> "ForecastEngine":
        """
        Build an engine from a config class or Flask config mapping.

        Reads FORECAST_ALPHA, FORECAST_BETA, FORECAST_WINDOW,
        FORECAST_BAND_MULTIPLIER, FORECAST_Z_SCORE, FORECAST_TREND_THRESHOLD,
        FORECAST_SEASONALITY_THRESHOLD, FORECAST_MIN_SEASONAL_VARIATION and
        FORECAST_NON_NEGATIVE; missing keys keep the defaults.
        """
        if isinstance(config, dict):
            get = config.get
        else:
            def get(key, default=None):
                return getattr(config, key, default)

        return cls(
            alpha=float(get('FORECAST_ALPHA', ALPHA)),
            beta=float(get('FORECAST_BETA', BETA)),
            window=int(get('FORECAST_WINDOW', WINDOW)),
            band_multiplier=float(get('FORECAST_BAND_MULTIPLIER', BAND_MULTIPLIER)),
            z_score=float(get('FORECAST_Z_SCORE', Z_95)),
            trend_threshold=float(get('FORECAST_TREND_THRESHOLD', TREND_THRESHOLD)),
            seasonality_threshold=float(get('FORECAST_SEASONALITY_THRESHOLD', SEASONALITY_THRESHOLD)),
            min_seasonal_variation=float(get('FORECAST_MIN_SEASONAL_VARIATION', MIN_SEASONAL_VARIATION)),
            non_negative=bool(get('FORECAST_NON_NEGATIVE', False))
        )

    def estimator(self, method: Union[str, ForecastMethod]) -> Estimator:
        """Return the estimator registered for `method`."""
        return self.estimators[parse_method(method)]

    def forecast(
        self,
        series: Sequence[MonthlyPoint],
        horizon: int,
        method: Union[str, ForecastMethod] = ForecastMethod.ENSEMBLE
    ) -> ForecastResult:
        """
        Generate a forecast.

        Args:
            series: Monthly history from prepare_monthly_series
            horizon: Months to forecast
            method: linear, exponential, moving_average or ensemble

        Returns:
            ForecastResult

        Raises:
            InvalidInputError: For an unknown method or malformed input
        """
        return self.estimator(method).forecast(series, horizon)

    def forecast_all(
        self,
        series: Sequence[MonthlyPoint],
        horizon: int
    ) -> Dict[str, ForecastResult]:
        """
        Run every method on the same series.

        Returns:
            Dict mapping method values to ForecastResults
        """
        return {
            method.value: estimator.forecast(series, horizon)
            for method, estimator in self.estimators.items()
        }

    def detect_seasonality(self, series: Sequence[MonthlyPoint]) -> bool:
        """Seasonality flag for a monthly series."""
        return self.detector.detect(validate_series(series))


def forecast(
    series: Sequence[MonthlyPoint],
    horizon: int,
    method: Union[str, ForecastMethod] = ForecastMethod.ENSEMBLE
) -> ForecastResult:
    """Forecast with the default engine."""
    return ForecastEngine().forecast(series, horizon, method)
