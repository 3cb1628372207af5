"""
Unit tests for weather window aggregation

Tests cover:
- Empty / missing windows
- Means, sums and counts
- Non-finite value handling
- Temperature and ET0 fallbacks
"""

import math
import pytest
from datetime import date, timedelta

from agririsk.engine.aggregator import (
    NEUTRAL_ET0,
    WeatherAggregate,
    aggregate_weather,
    avg,
    clamp01,
    total
)
from agririsk.models.weather import WeatherDay, WeatherWindow, WindowType


def make_window(days):
    return WeatherWindow(plot_id="P1", window_type=WindowType.PAST, days=days)


@pytest.fixture
def three_day_window():
    start = date(2025, 7, 1)
    return make_window([
        WeatherDay(date=start, t_min=22, t_max=30, rh_morning=90, rh_evening=70,
                   rainfall_mm=10, leaf_wetness_hours=8, et0=4.0, fog=True),
        WeatherDay(date=start + timedelta(days=1), t_min=24, t_max=32, rh_morning=80, rh_evening=60,
                   rainfall_mm=0, leaf_wetness_hours=2, et0=5.0),
        WeatherDay(date=start + timedelta(days=2), t_min=23, t_max=31, rh_morning=85, rh_evening=65,
                   rainfall_mm=5, leaf_wetness_hours=5, et0=6.0),
    ])


class TestHelpers:
    """Test the reduction helpers"""

    def test_avg_skips_none_and_nan(self):
        assert avg([1.0, None, float("nan"), 3.0]) == 2.0

    def test_avg_of_nothing_is_zero(self):
        assert avg([]) == 0.0
        assert avg([None, float("inf")]) == 0.0
        assert avg(None) == 0.0

    def test_total_skips_non_finite(self):
        assert total([2.0, float("-inf"), None, 3.5]) == 5.5

    def test_bools_are_not_numbers(self):
        assert avg([True, 4.0]) == 4.0

    def test_clamp01(self):
        assert clamp01(-0.5) == 0.0
        assert clamp01(1.7) == 1.0
        assert clamp01(0.25) == 0.25
        assert clamp01(None) == 0.0
        assert clamp01(float("nan")) == 0.0


class TestAggregateWeather:
    """Test aggregate_weather"""

    def test_none_window_gives_defaults(self):
        agg = aggregate_weather(None)

        assert agg == WeatherAggregate()
        assert agg.et0_mean == NEUTRAL_ET0
        assert agg.day_count == 0

    def test_empty_window_gives_defaults(self):
        agg = aggregate_weather(make_window([]))

        assert agg.rain_total == 0.0
        assert agg.rainy_days == 0
        assert agg.et0_mean == NEUTRAL_ET0

    def test_means_and_sums(self, three_day_window):
        agg = aggregate_weather(three_day_window)

        assert agg.t_min_mean == pytest.approx(23.0)
        assert agg.t_max_mean == pytest.approx(31.0)
        assert agg.rh_morning_mean == pytest.approx(85.0)
        assert agg.rh_evening_mean == pytest.approx(65.0)
        assert agg.rain_total == pytest.approx(15.0)
        assert agg.rainy_days == 2
        assert agg.leaf_wetness_mean == pytest.approx(5.0)
        assert agg.et0_mean == pytest.approx(5.0)
        assert agg.fog_days == 1
        assert agg.day_count == 3

    def test_t_mean_falls_back_to_min_max_midpoint(self, three_day_window):
        agg = aggregate_weather(three_day_window)

        assert agg.t_mean == pytest.approx(27.0)

    def test_non_finite_values_are_excluded(self):
        window = make_window([
            WeatherDay(date=date(2025, 7, 1), t_min=20.0, solar_radiation=float("nan")),
            WeatherDay(date=date(2025, 7, 2), t_min=float("nan"), solar_radiation=12.0),
        ])

        agg = aggregate_weather(window)

        assert agg.t_min_mean == pytest.approx(20.0)
        assert agg.solar_radiation_mean == pytest.approx(12.0)
        assert all(
            math.isfinite(v) for v in agg.to_dict().values()
        )

    def test_missing_et0_uses_neutral_value(self):
        window = make_window([WeatherDay(date=date(2025, 7, 1), rainfall_mm=1.0)])

        assert aggregate_weather(window).et0_mean == NEUTRAL_ET0
