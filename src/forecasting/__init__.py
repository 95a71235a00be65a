"""
Forecasting Module for Personal Finance

Monthly income/expense series building and time series forecasting.
"""

from .base import Estimator, classify_trend, mean_absolute_error
from .engine import ForecastEngine, forecast
from .ensemble import EnsembleEstimator, ensemble_forecast
from .exceptions import InvalidInputError
from .models import (
    ForecastMethod,
    ForecastPoint,
    ForecastResult,
    MonthlyPoint,
    Transaction,
    TransactionKind,
    TrendDirection
)
from .moving_average import MovingAverageEstimator, moving_average_forecast, simple_moving_average
from .seasonality import SeasonalityDetector, detect_seasonality, seasonal_offsets
from .series_builder import prepare_monthly_data, prepare_monthly_series
from .smoothing import (
    ExponentialSmoothingEstimator,
    exponential_moving_average,
    exponential_smoothing_forecast,
    holt_smoothing
)
from .trend_analyzer import LinearTrendEstimator, linear_regression, linear_trend_forecast

__all__ = [
    # Data model
    'ForecastMethod',
    'ForecastPoint',
    'ForecastResult',
    'MonthlyPoint',
    'Transaction',
    'TransactionKind',
    'TrendDirection',
    'InvalidInputError',
    # Series
    'prepare_monthly_series',
    'prepare_monthly_data',
    # Estimators
    'Estimator',
    'LinearTrendEstimator',
    'ExponentialSmoothingEstimator',
    'MovingAverageEstimator',
    'EnsembleEstimator',
    'linear_trend_forecast',
    'exponential_smoothing_forecast',
    'moving_average_forecast',
    'ensemble_forecast',
    # Engine
    'ForecastEngine',
    'forecast',
    # Helpers
    'SeasonalityDetector',
    'detect_seasonality',
    'seasonal_offsets',
    'classify_trend',
    'linear_regression',
    'holt_smoothing',
    'simple_moving_average',
    'exponential_moving_average',
    'mean_absolute_error',
]
