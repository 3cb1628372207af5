"""
Unit tests for weather and plot models
"""

import pytest
from datetime import date, timedelta
from pydantic import ValidationError

from agririsk.models.plot import FieldObservation, PlotContext
from agririsk.models.weather import (
    CropStage,
    ManagementContext,
    NitrogenLevel,
    WaterStatus,
    WeatherDay,
    WeatherWindow,
    WindowType
)


def days_from(start, count, step=1):
    return [WeatherDay(date=start + timedelta(days=i * step)) for i in range(count)]


class TestWeatherDay:
    def test_humidity_clamped_to_percent_range(self):
        day = WeatherDay(date=date(2025, 7, 1), rh_mean=120, rh_morning=100.4, rh_evening=-2)

        assert day.rh_mean == 100.0
        assert day.rh_morning == 100.0
        assert day.rh_evening == 0.0

    def test_negative_rainfall_clamped(self):
        assert WeatherDay(date=date(2025, 7, 1), rainfall_mm=-3).rainfall_mm == 0.0

    def test_fog_coerced(self):
        assert WeatherDay(date=date(2025, 7, 1), fog=1).fog is True
        assert WeatherDay(date=date(2025, 7, 1), fog=None).fog is False


class TestWeatherWindow:
    def test_dates_must_increase(self):
        day = WeatherDay(date=date(2025, 7, 1))
        with pytest.raises(ValidationError):
            WeatherWindow(plot_id="P1", window_type=WindowType.PAST, days=[day, day])

    def test_complete_window(self):
        window = WeatherWindow(
            plot_id="P1", window_type=WindowType.FORECAST, days=days_from(date(2025, 7, 1), 7)
        )

        assert window.is_complete(7)
        assert not window.is_complete(5)
        assert window.anchor_date == date(2025, 7, 7)
        assert window.midpoint_date == date(2025, 7, 4)

    def test_gaps_make_window_incomplete(self):
        window = WeatherWindow(
            plot_id="P1", window_type=WindowType.FORECAST, days=days_from(date(2025, 7, 1), 7, step=2)
        )

        assert window.has_gaps
        assert not window.is_complete(7)

    def test_empty_window(self):
        window = WeatherWindow(plot_id="P1", window_type=WindowType.PAST)

        assert window.is_empty
        assert window.anchor_date is None
        assert window.midpoint_date is None


class TestManagementContext:
    def test_missing_values_are_unreported(self):
        context = ManagementContext(nitrogen_level=None, water_status="")

        assert context.nitrogen_level == NitrogenLevel.UNREPORTED
        assert context.water_status == WaterStatus.UNREPORTED
        assert not context.is_reported

    def test_enum_members_pass_through(self):
        context = ManagementContext(nitrogen_level=NitrogenLevel.HIGH, water_status=WaterStatus.STRESSED)

        assert context.nitrogen_level == NitrogenLevel.HIGH
        assert context.water_status == WaterStatus.STRESSED
        assert context.is_reported

    def test_lowercase_values_accepted(self):
        context = ManagementContext(nitrogen_level="high", water_status="flooded")

        assert context.nitrogen_level == NitrogenLevel.HIGH
        assert context.water_status == WaterStatus.FLOODED
        assert context.is_reported


class TestCropStage:
    @pytest.mark.parametrize("raw,expected", [
        ("Tillering", CropStage.TILLERING),
        ("panicle initiation", CropStage.PANICLE_INIT),
        ("PANICLE_INIT", CropStage.PANICLE_INIT),
        ("flowering", CropStage.UNKNOWN),
        (None, CropStage.UNKNOWN),
        (CropStage.HEADING, CropStage.HEADING),
    ])
    def test_parse(self, raw, expected):
        assert CropStage.parse(raw) == expected


class TestPlotContext:
    def test_plot_id_coerced_to_string(self):
        assert PlotContext(plot_id=42).plot_id == "42"

    def test_invalid_latitude(self):
        with pytest.raises(ValidationError):
            PlotContext(plot_id="P1", latitude=95.0)

    def test_management_defaults_to_unreported(self):
        assert PlotContext(plot_id="P1").management == ManagementContext.unreported()

    def test_management_from_observation(self):
        plot = PlotContext(
            plot_id="P1",
            latest_observation=FieldObservation(
                observation_date=date(2025, 7, 1), crop_stage="booting", nitrogen_level="HIGH"
            ),
        )

        assert plot.management.nitrogen_level == NitrogenLevel.HIGH
        assert plot.management.water_status == WaterStatus.UNREPORTED
        assert plot.latest_observation.crop_stage == CropStage.BOOTING

    def test_unknown_observed_stage_is_dropped(self):
        observation = FieldObservation(crop_stage="flowering")

        assert observation.crop_stage is None
