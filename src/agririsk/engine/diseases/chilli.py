"""
Chilli disease and pest risk models: anthracnose, powdery mildew, thrips
"""

from typing import Dict

from .base import DiseaseRiskModel, peak_score
from ..aggregator import WeatherAggregate, clamp01
from ...models.risk import Disease
from ...models.weather import ManagementContext


class AnthracnoseModel(DiseaseRiskModel):
    """Fruit rot / anthracnose: rain, humidity > 80%, 24-30°C, long leaf wetness"""

    disease = Disease.CHILLI_ANTHRACNOSE
    WEIGHTS = {
        "rain": 0.8,
        "humidity": 1.0,
        "temperature": 0.7,
        "leaf_wetness": 0.5,
    }
    BIAS = 2.0

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "rain": clamp01(agg.rain_total / 20),
            "humidity": clamp01((agg.rh_morning_mean - 75) / 15),
            "temperature": peak_score(agg.t_mean, optimum=27, half_width=5),
            "leaf_wetness": clamp01(agg.leaf_wetness_mean / 10),
        }


class ChilliPowderyMildewModel(DiseaseRiskModel):
    """Powdery mildew: warm days, cool nights, moderate (not saturated) humidity, dry"""

    disease = Disease.CHILLI_POWDERY_MILDEW
    WEIGHTS = {
        "day_temperature": 0.8,
        "cool_nights": 0.6,
        "humidity": 1.0,
        "dry_weather": 0.7,
    }
    BIAS = 2.0

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        rh = agg.rh_morning_mean
        return {
            "day_temperature": peak_score(agg.t_max_mean, optimum=28, half_width=8),
            "cool_nights": clamp01((20 - agg.t_min_mean) / 10),
            # rises from 60%, penalised once humidity saturates above 85%
            "humidity": clamp01((rh - 60) / 20) * clamp01((95 - rh) / 10),
            "dry_weather": clamp01((10 - agg.rain_total) / 10),
        }


class ThripsModel(DiseaseRiskModel):
    """Thrips: hot and dry spells"""

    disease = Disease.CHILLI_THRIPS
    WEIGHTS = {
        "heat": 1.2,
        "dry_weather": 1.5,
    }
    BIAS = 1.8

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "heat": clamp01((agg.t_max_mean - 25) / 10),
            "dry_weather": clamp01((5 - agg.rain_total) / 5),
        }


CHILLI_MODELS = (AnthracnoseModel, ChilliPowderyMildewModel, ThripsModel)
