"""
Black gram disease risk models: powdery mildew, Cercospora leaf spot,
yellow mosaic virus (whitefly-borne)
"""

from typing import Dict

from .base import DiseaseRiskModel, peak_score
from ..aggregator import WeatherAggregate, clamp01
from ...models.risk import Disease
from ...models.weather import ManagementContext


class BlackgramPowderyMildewModel(DiseaseRiskModel):
    disease = Disease.BLACKGRAM_POWDERY_MILDEW
    WEIGHTS = {
        "temperature": 1.0,
        "humidity": 0.8,
        "low_rain": 0.5,
    }
    BIAS = 1.5

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "temperature": peak_score(agg.t_mean, optimum=25, half_width=7),
            "humidity": clamp01((agg.rh_morning_mean - 60) / 25),
            "low_rain": clamp01((20 - agg.rain_total) / 20),
        }


class LeafSpotModel(DiseaseRiskModel):
    """Cercospora leaf spot: humid and warm, rain spreads spores"""

    disease = Disease.BLACKGRAM_LEAF_SPOT
    WEIGHTS = {
        "humidity": 1.2,
        "temperature": 0.8,
        "rain": 0.6,
    }
    BIAS = 1.8

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "humidity": clamp01((agg.rh_morning_mean - 75) / 15),
            "temperature": peak_score(agg.t_mean, optimum=27, half_width=5),
            "rain": clamp01(agg.rain_total / 30),
        }


class YellowMosaicModel(DiseaseRiskModel):
    """
    Yellow mosaic virus

    Scored through its whitefly vector: warm and humid weather favours the
    vector, heavy rain washes it off.
    """

    disease = Disease.BLACKGRAM_YMV
    WEIGHTS = {
        "temperature": 1.5,
        "humidity": 0.8,
        "no_heavy_rain": 1.0,
    }
    BIAS = 2.2

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "temperature": peak_score(agg.t_mean, optimum=28, half_width=4),
            "humidity": clamp01((agg.rh_morning_mean - 65) / 20),
            "no_heavy_rain": clamp01((50 - agg.rain_total) / 50),
        }


BLACKGRAM_MODELS = (BlackgramPowderyMildewModel, LeafSpotModel, YellowMosaicModel)
