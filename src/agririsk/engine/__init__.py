"""
Risk scoring engine: aggregation, disease models, classification, dispatch
"""

from .aggregator import WeatherAggregate, aggregate_weather, avg, total, clamp01
from .classifier import RiskClassification, classify_risk, classify_score, round_half_up
from .crop_stage import infer_crop_stage, estimate_leaf_wetness_hours
from .dispatch import CropDiseaseDispatch

__all__ = [
    'WeatherAggregate',
    'aggregate_weather',
    'avg',
    'total',
    'clamp01',
    'RiskClassification',
    'classify_risk',
    'classify_score',
    'round_half_up',
    'infer_crop_stage',
    'estimate_leaf_wetness_hours',
    'CropDiseaseDispatch'
]
