import math

import pytest

from forecasting import (
    ExponentialSmoothingEstimator,
    TrendDirection,
    exponential_moving_average,
    exponential_smoothing_forecast,
    holt_smoothing,
)


def test_flat_series_stays_flat(make_series):
    result = exponential_smoothing_forecast(make_series([100, 100, 100, 100]), 6)

    assert result.method == "Exponential Smoothing"
    assert len(result.forecasts) == 6
    for point in result.forecasts:
        assert point.predicted == pytest.approx(100.0)
        assert point.lower <= point.predicted <= point.upper
    assert result.trend == TrendDirection.STABLE


def test_two_points_initialize_level_and_trend(make_series):
    result = exponential_smoothing_forecast(make_series([10, 20]), 2)

    assert [p.predicted for p in result.forecasts] == pytest.approx([30.0, 40.0])
    # No one-step errors yet: spread falls back to std([10, 20]) = 5
    assert result.forecasts[0].upper - result.forecasts[0].predicted == pytest.approx(1.96 * 5)
    assert result.forecasts[1].upper - result.forecasts[1].predicted == pytest.approx(1.96 * 5 * 2)
    assert result.trend == TrendDirection.INCREASING
    assert result.mae is None


def test_holt_tracks_a_perfect_line():
    level, trend, errors = holt_smoothing([10, 20, 30, 40])

    assert level == pytest.approx(40.0)
    assert trend == pytest.approx(10.0)
    assert list(errors) == pytest.approx([0.0, 0.0])


def test_band_widens_linearly_with_step(noisy_series):
    result = exponential_smoothing_forecast(noisy_series, 4)
    widths = [p.upper - p.lower for p in result.forecasts]

    assert widths[0] > 0
    for step, width in enumerate(widths, start=1):
        assert width == pytest.approx(widths[0] * step)


def test_decreasing_series(make_series):
    result = exponential_smoothing_forecast(make_series([500, 460, 430, 380, 350, 300]), 3)

    assert result.trend == TrendDirection.DECREASING
    predictions = [p.predicted for p in result.forecasts]
    assert predictions[0] > predictions[1] > predictions[2]


def test_single_point_falls_back_to_flat(make_series):
    result = exponential_smoothing_forecast(make_series([80]), 2)

    assert [(p.lower, p.predicted, p.upper) for p in result.forecasts] == [(40.0, 80.0, 120.0)] * 2


def test_seasonal_adjustment_reproduces_annual_cycle(seasonal_series):
    result = exponential_smoothing_forecast(seasonal_series, 12)

    assert result.seasonality is True
    expected = [1000 + 200 * math.sin(2 * math.pi * (36 + k) / 12) for k in range(12)]
    assert [p.predicted for p in result.forecasts] == pytest.approx(expected, abs=1e-6)


def test_seasonal_adjustment_can_be_disabled(seasonal_series):
    adjusted = ExponentialSmoothingEstimator().forecast(seasonal_series, 12)
    plain = ExponentialSmoothingEstimator(seasonal=False).forecast(seasonal_series, 12)

    assert [p.predicted for p in adjusted.forecasts] != [p.predicted for p in plain.forecasts]
    # The flag reports the detector either way
    assert plain.seasonality is True


def test_smoothing_factors_validated():
    with pytest.raises(ValueError):
        ExponentialSmoothingEstimator(alpha=0)
    with pytest.raises(ValueError):
        ExponentialSmoothingEstimator(beta=1.0)


def test_exponential_moving_average():
    assert exponential_moving_average([], 0.5) == 0.0
    assert exponential_moving_average([10], 0.5) == 10.0
    assert exponential_moving_average([10, 20], 0.5) == 15.0
