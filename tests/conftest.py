"""
Shared pytest fixtures for the forecasting test suite.
"""
import math
from datetime import date

import pytest
from hypothesis import HealthCheck, settings

from forecasting.models import MonthlyPoint, add_months

# Numerical property tests can be slow on loaded CI machines; the
# deadline is a performance check, not a functional one.
settings.register_profile(
    "forecast_stable",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("forecast_stable")


def build_series(values, start=date(2024, 1, 1)):
    """Contiguous MonthlyPoints starting at `start`."""
    return [MonthlyPoint(date=add_months(start, i), value=float(v)) for i, v in enumerate(values)]


@pytest.fixture
def make_series():
    """Factory turning a list of numbers into a monthly series."""
    return build_series


@pytest.fixture
def linear_series():
    return build_series([10, 20, 30, 40, 50])


@pytest.fixture
def noisy_series():
    return build_series([120, 135, 128, 150, 142, 160, 155, 171, 165, 180])


@pytest.fixture
def seasonal_series():
    """Three years of a pure annual cycle around 1000."""
    return build_series([1000 + 200 * math.sin(2 * math.pi * i / 12) for i in range(36)])
