"""
Plot context models consumed by the AgriRisk engine
"""

import datetime as dt
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .weather import CropStage, ManagementContext, NitrogenLevel, WaterStatus


class FieldObservation(BaseModel):
    """
    Latest field observation for a plot (stage and management signals)
    """
    observation_date: Optional[dt.date] = Field(None, description="Date of the observation")
    crop_stage: Optional[CropStage] = Field(None, description="Observed crop stage")
    nitrogen_level: NitrogenLevel = Field(NitrogenLevel.UNREPORTED, description="Nitrogen level")
    water_status: WaterStatus = Field(WaterStatus.UNREPORTED, description="Water status")

    @field_validator('crop_stage', mode='before')
    @classmethod
    def parse_stage(cls, v):
        """Unrecognised or empty stages are treated as not observed"""
        if v is None or v == "":
            return None
        stage = CropStage.parse(v) if not isinstance(v, CropStage) else v
        return None if stage == CropStage.UNKNOWN else stage

    @field_validator('nitrogen_level', 'water_status', mode='before')
    @classmethod
    def default_unreported(cls, v):
        if v is None or v == "":
            return "UNREPORTED"
        if isinstance(v, Enum):
            return v
        return v.upper() if isinstance(v, str) else v

    @property
    def management(self) -> ManagementContext:
        return ManagementContext(
            nitrogen_level=self.nitrogen_level,
            water_status=self.water_status,
        )


class PlotContext(BaseModel):
    """
    Plot attributes needed to evaluate disease risk
    """
    plot_id: str = Field(..., description="Plot identifier")
    name: Optional[str] = Field(None, description="Plot name")
    crop: str = Field("RICE", description="Crop grown on the plot")
    variety: Optional[str] = Field(None, description="Crop variety")
    sowing_date: Optional[dt.date] = Field(None, description="Sowing / transplanting date")
    latitude: Optional[float] = Field(None, description="Latitude")
    longitude: Optional[float] = Field(None, description="Longitude")
    district: Optional[str] = Field(None, description="District")
    mandal: Optional[str] = Field(None, description="Mandal")
    village: Optional[str] = Field(None, description="Village")
    latest_observation: Optional[FieldObservation] = Field(None, description="Latest field observation")

    @field_validator('plot_id', mode='before')
    @classmethod
    def coerce_plot_id(cls, v) -> str:
        return str(v)

    @field_validator('latitude')
    @classmethod
    def validate_latitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -90 <= v <= 90:
            raise ValueError(f"Latitude {v} must be between -90 and 90")
        return v

    @field_validator('longitude')
    @classmethod
    def validate_longitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -180 <= v <= 180:
            raise ValueError(f"Longitude {v} must be between -180 and 180")
        return v

    @property
    def management(self) -> ManagementContext:
        if self.latest_observation is None:
            return ManagementContext.unreported()
        return self.latest_observation.management
