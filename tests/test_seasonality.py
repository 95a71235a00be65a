import math
from datetime import date

import pytest
from hypothesis import given, strategies as st

from forecasting import SeasonalityDetector, detect_seasonality, prepare_monthly_series, seasonal_offsets
from forecasting.demo_data import HOUSEHOLD_PROFILES, DemoDataGenerator


@given(st.lists(st.floats(min_value=-1e6, max_value=1e6, allow_nan=False), max_size=11))
def test_short_series_never_seasonal(values):
    assert detect_seasonality(values) is False


def test_exactly_one_year_has_nothing_to_compare():
    values = [1000 + 200 * math.sin(2 * math.pi * i / 12) for i in range(12)]

    assert detect_seasonality(values) is False


def test_recurring_annual_cycle_is_seasonal(seasonal_series):
    assert detect_seasonality([p.value for p in seasonal_series]) is True


def test_flat_series_is_not_seasonal():
    assert detect_seasonality([100.0] * 24) is False
    assert detect_seasonality([0.0] * 24) is False


def test_steady_growth_is_not_seasonal():
    assert detect_seasonality([100 + 10 * i for i in range(24)]) is False


def test_thresholds_are_configurable():
    # Same months differ by ~10% year over year
    values = [100 + 30 * (i % 12 == 6) for i in range(12)] + [110 + 33 * (i % 12 == 6) for i in range(12)]

    assert SeasonalityDetector(threshold=0.15).detect(values) is True
    assert SeasonalityDetector(threshold=0.05).detect(values) is False


def test_offsets_recover_cycle_around_a_trend():
    values = [500 + 5 * t + 100 * math.cos(2 * math.pi * t / 12) for t in range(36)]
    offsets = seasonal_offsets(values)

    expected = [100 * math.cos(2 * math.pi * p / 12) for p in range(12)]
    assert list(offsets) == pytest.approx(expected, abs=1e-6)
    assert sum(offsets) == pytest.approx(0.0, abs=1e-9)


def test_offsets_for_short_series():
    assert list(seasonal_offsets([5.0])) == [0.0] * 12
    assert sum(seasonal_offsets([1.0, 4.0, 2.0, 8.0])) == pytest.approx(0.0, abs=1e-9)


def test_demo_households_are_reproducible():
    as_of = date(2024, 12, 1)
    first = DemoDataGenerator(seed=7).generate_household("retired_couple", months=24, as_of=as_of)
    second = DemoDataGenerator(seed=7).generate_household("retired_couple", months=24, as_of=as_of)

    assert first.transactions == second.transactions
    income = prepare_monthly_series(first.transactions, "income", 24, as_of=as_of)
    assert len(income) == 24
    assert all(p.value > 0 for p in income)


def test_demo_set_covers_every_profile():
    households = DemoDataGenerator(seed=1).generate_demo_set(months=6, as_of=date(2024, 6, 1))

    assert {h.profile for h in households} == set(HOUSEHOLD_PROFILES)
    for household in households:
        totals = household.totals_by_kind()
        assert totals["income"] > 0
        assert totals["expense"] > 0


def test_demo_generator_requires_anchor():
    with pytest.raises(ValueError):
        DemoDataGenerator(seed=1).generate_household("freelancer", months=6)
