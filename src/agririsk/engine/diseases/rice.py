"""
Rice (paddy) disease risk models: blast, bacterial leaf blight,
sheath blight and brown spot
"""

from datetime import date
from typing import Dict, List, Optional

from .base import (
    DiseaseRiskModel,
    flooding_score,
    high_nitrogen_score,
    low_nitrogen_score,
    water_stress_score,
)
from ..aggregator import WeatherAggregate, clamp01
from ...models.risk import Disease
from ...models.weather import CropStage, ManagementContext

SUSCEPTIBLE_VEGETATIVE_TO_HEADING = (
    CropStage.TILLERING,
    CropStage.PANICLE_INIT,
    CropStage.BOOTING,
    CropStage.HEADING,
)


class RiceDiseaseModel(DiseaseRiskModel):
    """Rice models phrase every strong driver instead of listing the top two"""

    DRIVER_PHRASES = {
        "night_temperature": "favourable night temperature",
        "morning_humidity": "high morning humidity",
        "humidity": "high humidity",
        "low_radiation": "low solar radiation (cloudy conditions)",
        "leaf_wetness": "long leaf wetness duration",
        "rain_frequency": "frequent rainfall events",
        "low_rain": "low rainfall and possible water stress",
        "high_nitrogen": "high nitrogen level",
        "water_stress": "reported water stress in field",
        "flooding": "continuous flooding and dense canopy",
    }
    FALLBACK_EXPLANATION = "Weather and crop conditions are not strongly favourable"

    def explain(self, drivers: Dict[str, float], contributions: Dict[str, float]) -> List[str]:
        parts = [
            phrase for name, phrase in self.DRIVER_PHRASES.items()
            if drivers.get(name, 0.0) > 0.5
        ]
        return parts or [self.FALLBACK_EXPLANATION]


class BlastModel(RiceDiseaseModel):
    """
    Rice blast (Magnaporthe oryzae)

    Cool nights, humid mornings/evenings, cloudy skies and long leaf
    wetness drive infection; solar radiation carries the largest weight.
    """

    disease = Disease.PADDY_BLAST
    WEIGHTS = {
        "low_radiation": 1.6,
        "night_temperature": 1.2,
        "morning_humidity": 1.0,
        "evening_humidity": 0.6,
        "leaf_wetness": 0.7,
        "low_evaporation": 0.4,
        "rain": 0.3,
    }
    BIAS = 2.5
    STAGE_MULTIPLIERS = {
        **{stage: 1.2 for stage in SUSCEPTIBLE_VEGETATIVE_TO_HEADING},
        CropStage.MATURITY: 0.7,
    }

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            # 1 at ~18°C nights, 0 from 25°C up
            "night_temperature": clamp01((25 - agg.t_min_mean) / 7),
            "morning_humidity": clamp01((agg.rh_morning_mean - 75) / 20),
            "evening_humidity": clamp01((agg.rh_evening_mean - 60) / 25),
            # MJ/m²/day: <=12 cloudy, >=18 sunny
            "low_radiation": clamp01((18 - agg.solar_radiation_mean) / 6),
            "leaf_wetness": clamp01(agg.leaf_wetness_mean / 10),
            "rain": clamp01(agg.rain_total / 80),
            "low_evaporation": clamp01((5 - agg.et0_mean) / 3),
        }

    def seasonal_multiplier(self, anchor_date: Optional[date]) -> float:
        """Blast season calendar (south Indian pattern)"""
        if anchor_date is None:
            return 1.0

        md = anchor_date.month * 100 + anchor_date.day

        # mid-Nov to end of Jan: severe season
        if md >= 1115 or md <= 131:
            return 1.4
        # Sep to mid-Nov, first half of Feb
        if 901 <= md <= 1114 or 201 <= md <= 215:
            return 1.2
        # mid-Apr to mid-Jun: hot and dry
        if 415 <= md <= 615:
            return 0.6
        return 1.0


class BacterialLeafBlightModel(RiceDiseaseModel):
    """Bacterial leaf blight: warm, humid, rain/wind splash, high N"""

    disease = Disease.PADDY_BLB
    WEIGHTS = {
        "temperature": 1.1,
        "humidity": 1.1,
        "rain_frequency": 0.7,
        "rain_amount": 0.4,
        "wind": 0.4,
        "low_evaporation": 0.4,
        "high_nitrogen": 0.5,
    }
    BIAS = 2.3
    STAGE_MULTIPLIERS = {stage: 1.2 for stage in SUSCEPTIBLE_VEGETATIVE_TO_HEADING}
    DEFAULT_STAGE_MULTIPLIER = 0.9

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "temperature": clamp01((agg.t_mean - 22) / 10),
            "humidity": clamp01((max(agg.rh_morning_mean, agg.rh_evening_mean) - 75) / 20),
            "rain_frequency": clamp01(agg.rainy_days / 5),
            "rain_amount": clamp01(agg.rain_total / 100),
            "wind": clamp01(agg.wind_speed_mean / 3),
            "low_evaporation": clamp01((5 - agg.et0_mean) / 3),
            "high_nitrogen": high_nitrogen_score(management),
        }


class SheathBlightModel(RiceDiseaseModel):
    """Sheath blight: very humid, warm, wet canopy, high N, flooding"""

    disease = Disease.PADDY_SHEATH_BLIGHT
    WEIGHTS = {
        "temperature": 1.1,
        "humidity": 1.2,
        "leaf_wetness": 1.0,
        "rain_frequency": 0.4,
        "rain_amount": 0.3,
        "high_nitrogen": 0.6,
        "flooding": 0.5,
    }
    BIAS = 2.4
    STAGE_MULTIPLIERS = {
        CropStage.PANICLE_INIT: 1.3,
        CropStage.BOOTING: 1.3,
        CropStage.HEADING: 1.3,
        CropStage.TILLERING: 1.0,
    }
    DEFAULT_STAGE_MULTIPLIER = 0.8

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "temperature": clamp01((agg.t_mean - 24) / 8),
            "humidity": clamp01((max(agg.rh_morning_mean, agg.rh_evening_mean) - 80) / 15),
            "leaf_wetness": clamp01(agg.leaf_wetness_mean / 10),
            "rain_frequency": clamp01(agg.rainy_days / 5),
            "rain_amount": clamp01(agg.rain_total / 80),
            "high_nitrogen": high_nitrogen_score(management),
            "flooding": flooding_score(management),
        }


class BrownSpotModel(RiceDiseaseModel):
    """Brown spot: a stress disease (low fertility, water stress, dry spells)"""

    disease = Disease.PADDY_BROWN_SPOT
    WEIGHTS = {
        "temperature": 0.8,
        "humidity": 0.6,
        "low_rain": 0.8,
        "water_stress": 0.7,
        "low_nitrogen": 0.6,
    }
    BIAS = 2.0
    STAGE_MULTIPLIERS = {
        CropStage.TILLERING: 1.1,
        CropStage.PANICLE_INIT: 1.1,
        CropStage.BOOTING: 1.1,
    }

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "temperature": clamp01((agg.t_mean - 20) / 10),
            # moderate humidity band 60-80%
            "humidity": clamp01((agg.rh_morning_mean - 60) / 20),
            "low_rain": clamp01((40 - agg.rain_total) / 40),
            "water_stress": water_stress_score(management),
            "low_nitrogen": low_nitrogen_score(management),
        }


RICE_MODELS = (BlastModel, BacterialLeafBlightModel, SheathBlightModel, BrownSpotModel)
