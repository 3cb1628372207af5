"""
Weather data models for the AgriRisk engine
"""

import math
import datetime as dt
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator
from enum import Enum


class WindowType(str, Enum):
    """Origin of the days in a weather window"""
    PAST = "PAST"
    FORECAST = "FORECAST"


class CropStage(str, Enum):
    """Crop growth stages used by the stage modifiers"""
    NURSERY = "nursery"
    TILLERING = "tillering"
    PANICLE_INIT = "panicle-init"
    BOOTING = "booting"
    HEADING = "heading"
    MATURITY = "maturity"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "CropStage":
        """Map a free-text stage (e.g. from a field observation) to a CropStage"""
        if value is None:
            return cls.UNKNOWN
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-").replace(" ", "-")
        if normalized == "panicle-initiation":
            normalized = cls.PANICLE_INIT.value
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


class NitrogenLevel(str, Enum):
    """Reported nitrogen fertilisation level"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNREPORTED = "UNREPORTED"


class WaterStatus(str, Enum):
    """Reported field water status"""
    FLOODED = "FLOODED"
    NORMAL = "NORMAL"
    STRESSED = "STRESSED"
    UNREPORTED = "UNREPORTED"


class ManagementContext(BaseModel):
    """
    Field management signals from the latest observation

    UNREPORTED is the explicit absent state for each signal.
    """
    nitrogen_level: NitrogenLevel = Field(NitrogenLevel.UNREPORTED, description="Nitrogen level")
    water_status: WaterStatus = Field(WaterStatus.UNREPORTED, description="Water status")

    @field_validator('nitrogen_level', 'water_status', mode='before')
    @classmethod
    def default_unreported(cls, v):
        """Treat None / empty values as unreported"""
        if v is None or v == "":
            return "UNREPORTED"
        if isinstance(v, Enum):
            return v
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def unreported(cls) -> "ManagementContext":
        return cls()

    @property
    def is_reported(self) -> bool:
        return (
            self.nitrogen_level != NitrogenLevel.UNREPORTED
            or self.water_status != WaterStatus.UNREPORTED
        )


class WeatherDay(BaseModel):
    """
    One calendar day of observed or forecast weather

    Numeric fields are optional; None means "not reported".
    """
    date: dt.date = Field(..., description="Calendar day")
    t_min: Optional[float] = Field(None, description="Minimum temperature (°C)")
    t_max: Optional[float] = Field(None, description="Maximum temperature (°C)")
    t_mean: Optional[float] = Field(None, description="Mean temperature (°C)")
    rh_mean: Optional[float] = Field(None, description="Mean relative humidity (%)")
    rh_morning: Optional[float] = Field(None, description="Morning relative humidity (%)")
    rh_evening: Optional[float] = Field(None, description="Evening relative humidity (%)")
    rainfall_mm: Optional[float] = Field(None, description="Rainfall (mm)")
    wind_speed: Optional[float] = Field(None, description="Wind speed (m/s)")
    solar_radiation: Optional[float] = Field(None, description="Solar radiation (MJ/m²/day)")
    sunshine_hours: Optional[float] = Field(None, description="Sunshine duration (h)")
    leaf_wetness_hours: Optional[float] = Field(None, description="Leaf wetness duration (h)")
    vpd: Optional[float] = Field(None, description="Vapour pressure deficit (kPa)")
    dew_point: Optional[float] = Field(None, description="Dew point (°C)")
    fog: bool = Field(False, description="Fog observed / forecast")
    et0: Optional[float] = Field(None, description="Reference evapotranspiration (mm/day)")

    @field_validator('rh_mean', 'rh_morning', 'rh_evening')
    @classmethod
    def validate_humidity(cls, v: Optional[float]) -> Optional[float]:
        """Clamp sensor overshoot into 0-100"""
        if v is not None and math.isfinite(v):
            return min(100.0, max(0.0, v))
        return v

    @field_validator('rainfall_mm')
    @classmethod
    def validate_rainfall(cls, v: Optional[float]) -> Optional[float]:
        """Ensure rainfall is non-negative"""
        if v is not None and math.isfinite(v):
            return max(0.0, v)
        return v

    @field_validator('fog', mode='before')
    @classmethod
    def coerce_fog(cls, v) -> bool:
        return bool(v)


class WeatherWindow(BaseModel):
    """
    Contiguous, date-ordered slice of daily weather for one plot
    """
    plot_id: str = Field(..., description="Plot identifier")
    window_type: WindowType = Field(..., description="PAST or FORECAST")
    days: List[WeatherDay] = Field(default_factory=list, description="Daily records, oldest first")
    crop_stage: CropStage = Field(CropStage.UNKNOWN, description="Observed or inferred crop stage")
    management: ManagementContext = Field(default_factory=ManagementContext.unreported)
    meta: Dict[str, Any] = Field(default_factory=dict, description="Window metadata")

    @field_validator('days')
    @classmethod
    def validate_dates_increasing(cls, v: List[WeatherDay]) -> List[WeatherDay]:
        """Dates must be strictly increasing"""
        for previous, current in zip(v, v[1:]):
            if current.date <= previous.date:
                raise ValueError(
                    f"Window dates must be strictly increasing ({previous.date} then {current.date})"
                )
        return v

    @property
    def dates(self) -> List[dt.date]:
        return [day.date for day in self.days]

    @property
    def is_empty(self) -> bool:
        return not self.days

    @property
    def anchor_date(self) -> Optional[dt.date]:
        """Last day covered by the window"""
        return self.days[-1].date if self.days else None

    @property
    def midpoint_date(self) -> Optional[dt.date]:
        if not self.days:
            return None
        first, last = self.days[0].date, self.days[-1].date
        return first + dt.timedelta(days=(last - first).days // 2)

    @property
    def has_gaps(self) -> bool:
        return any(
            (current.date - previous.date).days != 1
            for previous, current in zip(self.days, self.days[1:])
        )

    def is_complete(self, days_window: int) -> bool:
        """Exactly `days_window` consecutive days"""
        return len(self.days) == days_window and not self.has_gaps
