"""
Weather window aggregation

Reduces a WeatherWindow into the scalar statistics every disease model
consumes. The reduction never raises: missing, None and non-finite values
are dropped and empty series fall back to neutral defaults.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Optional

import numpy as np

from ..models.weather import WeatherWindow

# Neutral ET0 (mm/day) used when a window carries no evapotranspiration data
NEUTRAL_ET0 = 5.0


def _finite(values: Iterable) -> np.ndarray:
    """Finite numeric entries of `values` as a float array"""
    numeric = [
        v for v in (values if values is not None else [])
        if isinstance(v, (int, float, np.number)) and not isinstance(v, bool)
    ]
    arr = np.asarray(numeric, dtype=float)
    return arr[np.isfinite(arr)]


def avg(values: Iterable) -> float:
    """Mean over finite entries; 0 when there are none"""
    arr = _finite(values)
    return float(arr.mean()) if arr.size else 0.0


def total(values: Iterable) -> float:
    """Sum over finite entries; 0 when there are none"""
    arr = _finite(values)
    return float(arr.sum()) if arr.size else 0.0


def clamp01(x: Optional[float]) -> float:
    """Clamp to [0, 1]; None and non-finite values map to 0"""
    if x is None or not np.isfinite(x):
        return 0.0
    return float(min(1.0, max(0.0, x)))


@dataclass(frozen=True)
class WeatherAggregate:
    """Scalar statistics over one weather window"""
    t_min_mean: float = 0.0
    t_max_mean: float = 0.0
    t_mean: float = 0.0
    rh_morning_mean: float = 0.0
    rh_evening_mean: float = 0.0
    solar_radiation_mean: float = 0.0
    sunshine_hours_mean: float = 0.0
    rain_total: float = 0.0
    rainy_days: int = 0
    wind_speed_mean: float = 0.0
    leaf_wetness_mean: float = 0.0
    et0_mean: float = NEUTRAL_ET0
    vpd_mean: float = 0.0
    dew_point_mean: float = 0.0
    fog_days: int = 0
    day_count: int = 0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _daily_mean_temperature(day) -> Optional[float]:
    if day.t_mean is not None:
        return day.t_mean
    if day.t_max is not None and day.t_min is not None:
        return (day.t_max + day.t_min) / 2
    return None


def aggregate_weather(window: Optional[WeatherWindow]) -> WeatherAggregate:
    """
    Aggregate a weather window

    Args:
        window: Weather window (PAST or FORECAST); None yields the default aggregate

    Returns:
        WeatherAggregate with means, sums and counts over the window
    """
    if window is None or not window.days:
        return WeatherAggregate()

    days = window.days
    rainfall = [d.rainfall_mm for d in days]
    et0 = _finite(d.et0 for d in days)

    return WeatherAggregate(
        t_min_mean=avg(d.t_min for d in days),
        t_max_mean=avg(d.t_max for d in days),
        t_mean=avg(_daily_mean_temperature(d) for d in days),
        rh_morning_mean=avg(d.rh_morning for d in days),
        rh_evening_mean=avg(d.rh_evening for d in days),
        solar_radiation_mean=avg(d.solar_radiation for d in days),
        sunshine_hours_mean=avg(d.sunshine_hours for d in days),
        rain_total=total(rainfall),
        rainy_days=int((_finite(rainfall) > 0).sum()),
        wind_speed_mean=avg(d.wind_speed for d in days),
        leaf_wetness_mean=avg(d.leaf_wetness_hours for d in days),
        et0_mean=float(et0.mean()) if et0.size else NEUTRAL_ET0,
        vpd_mean=avg(d.vpd for d in days),
        dew_point_mean=avg(d.dew_point for d in days),
        fog_days=sum(1 for d in days if d.fog),
        day_count=len(days),
    )
