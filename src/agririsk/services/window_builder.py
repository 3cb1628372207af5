"""
Weather window construction

Turns raw daily weather rows into a WeatherWindow for one plot:
computes the date range for the window type, applies per-day field
fallbacks, and attaches the crop stage and management context.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

from loguru import logger

from .interfaces import WeatherRecordSource
from ..engine.crop_stage import estimate_leaf_wetness_hours, infer_crop_stage
from ..models.plot import PlotContext
from ..models.weather import CropStage, WeatherDay, WeatherWindow, WindowType

# Accepted raw keys per WeatherDay field, first match wins
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "t_min": ("t_min", "tmin", "temperature_min", "temperature_2m_min"),
    "t_max": ("t_max", "tmax", "temperature_max", "temperature_2m_max"),
    "t_mean": ("t_mean", "tmean", "temperature_avg", "temperature_2m_mean"),
    "rh_mean": ("rh_mean", "humidity_mean", "humidity_percent"),
    "rh_morning": ("rh_morning",),
    "rh_evening": ("rh_evening",),
    "rainfall_mm": ("rainfall_mm", "precipitation", "precipitation_sum", "rain"),
    "wind_speed": ("wind_speed", "windspeed", "wind_speed_mean"),
    "solar_radiation": ("solar_radiation", "shortwave_radiation", "shortwave_radiation_sum"),
    "sunshine_hours": ("sunshine_hours",),
    "leaf_wetness_hours": ("leaf_wetness_hours",),
    "vpd": ("vpd", "vpd_mean"),
    "dew_point": ("dew_point", "dew_point_mean"),
    "et0": ("et0", "evapotranspiration", "et0_fao_evapotranspiration"),
}


def _first(record: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def weather_day_from_record(record: Mapping[str, Any]) -> WeatherDay:
    """
    Build a WeatherDay from one raw row

    Fallbacks:
    - t_mean from (t_max + t_min) / 2
    - morning / evening humidity from the daily mean
    - rainfall defaults to 0
    - leaf wetness estimated from rain and humidity when not measured
    """
    values = {name: _as_float(_first(record, keys)) for name, keys in FIELD_ALIASES.items()}

    if values["t_mean"] is None and values["t_min"] is not None and values["t_max"] is not None:
        values["t_mean"] = (values["t_min"] + values["t_max"]) / 2

    if values["rh_morning"] is None:
        values["rh_morning"] = values["rh_mean"]
    if values["rh_evening"] is None:
        values["rh_evening"] = values["rh_mean"]

    if values["rainfall_mm"] is None:
        values["rainfall_mm"] = 0.0

    if values["leaf_wetness_hours"] is None:
        values["leaf_wetness_hours"] = estimate_leaf_wetness_hours(values["rh_mean"], values["rainfall_mm"])

    return WeatherDay(
        date=_as_date(record.get("date")),
        fog=bool(_first(record, ("fog", "fog_flag"))),
        **values,
    )


def window_date_range(window_type: WindowType, days_window: int, as_of: date) -> Tuple[date, date]:
    """
    Inclusive date range for a window

    PAST covers the last `days_window` days ending on `as_of`;
    FORECAST covers `days_window` days starting the day after.
    """
    if days_window < 1:
        raise ValueError(f"days_window {days_window} must be >= 1")

    if WindowType(window_type) == WindowType.PAST:
        return as_of - timedelta(days=days_window - 1), as_of
    return as_of + timedelta(days=1), as_of + timedelta(days=days_window)


class WeatherWindowBuilder:
    """
    Weather window provider backed by a raw daily record source
    """

    def __init__(self, records: WeatherRecordSource):
        self.records = records

    def get_window(
        self,
        plot: PlotContext,
        window_type: WindowType,
        days_window: int,
        as_of: Optional[date] = None
    ) -> Optional[WeatherWindow]:
        """
        Build the weather window for a plot

        Args:
            plot: Plot context (crop, sowing date, latest observation)
            window_type: PAST or FORECAST
            days_window: Horizon in days
            as_of: Evaluation day (defaults to today)

        Returns:
            WeatherWindow, or None when no rows fall inside the range
        """
        as_of = as_of or date.today()
        window_type = WindowType(window_type)
        start, end = window_date_range(window_type, days_window, as_of)

        rows = self.records.fetch_daily(plot.plot_id, start, end, window_type)

        by_date: Dict[date, WeatherDay] = {}
        for row in rows:
            day = weather_day_from_record(row)
            if start <= day.date <= end:
                by_date[day.date] = day
        days: List[WeatherDay] = [by_date[d] for d in sorted(by_date)]

        logger.debug(
            f"Window [{window_type.value}] for plot {plot.plot_id}: "
            f"{start} -> {end}, {len(days)}/{days_window} days"
        )

        if not days:
            return None

        window = WeatherWindow(
            plot_id=plot.plot_id,
            window_type=window_type,
            days=days,
            management=plot.management,
            meta={
                "window_type": window_type.value,
                "start_date": days[0].date.isoformat(),
                "end_date": days[-1].date.isoformat(),
                "district": plot.district,
                "mandal": plot.mandal,
                "lat": plot.latitude,
                "lon": plot.longitude,
            },
        )
        window.crop_stage = self._resolve_crop_stage(plot, window)
        return window

    @staticmethod
    def _resolve_crop_stage(plot: PlotContext, window: WeatherWindow) -> CropStage:
        """Observed stage wins; otherwise infer at the window midpoint"""
        observation = plot.latest_observation
        if observation is not None and observation.crop_stage is not None:
            return observation.crop_stage
        return infer_crop_stage(plot.sowing_date, window.midpoint_date)
