"""
Maize risk models: fall armyworm and turcicum leaf blight
"""

from typing import Dict

from .base import DiseaseRiskModel, peak_score
from ..aggregator import WeatherAggregate, clamp01
from ...models.risk import Disease
from ...models.weather import ManagementContext


class FallArmywormModel(DiseaseRiskModel):
    """Fall armyworm: optimal near 28°C, heavy rain (> 30 mm/week) suppresses larvae"""

    disease = Disease.MAIZE_FAW
    WEIGHTS = {
        "temperature": 1.5,
        "rain_suppression": 1.2,
    }
    BIAS = 1.8

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "temperature": peak_score(agg.t_mean, optimum=28, half_width=5),
            # 1 with no rain, 0 from 30 mm up
            "rain_suppression": clamp01((30 - agg.rain_total) / 30),
        }


class TurcicumLeafBlightModel(DiseaseRiskModel):
    """Turcicum leaf blight: cool (18-27°C), humid, long leaf wetness"""

    disease = Disease.MAIZE_LEAF_BLIGHT
    WEIGHTS = {
        "cool_temperature": 0.8,
        "humidity": 1.0,
        "leaf_wetness": 1.2,
    }
    BIAS = 2.0

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        return {
            "cool_temperature": clamp01((28 - agg.t_mean) / 10),
            "humidity": clamp01((agg.rh_morning_mean - 80) / 15),
            "leaf_wetness": clamp01(agg.leaf_wetness_mean / 8),
        }


MAIZE_MODELS = (FallArmywormModel, TurcicumLeafBlightModel)
