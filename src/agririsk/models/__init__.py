"""
Data models for the AgriRisk engine

This module includes:
- Weather window models (Pydantic)
- Plot context and field observation models (Pydantic)
- Disease catalogue, risk results and persisted risk events
"""

from .weather import (
    WindowType,
    CropStage,
    NitrogenLevel,
    WaterStatus,
    ManagementContext,
    WeatherDay,
    WeatherWindow
)

from .plot import PlotContext, FieldObservation

from .risk import (
    CropType,
    Disease,
    Severity,
    EvaluationMode,
    EvaluationStatus,
    RiskSource,
    CreatedBy,
    DiseaseRiskResult,
    RiskEvent,
    PlotEvaluationResult
)

__all__ = [
    # Weather models
    'WindowType',
    'CropStage',
    'NitrogenLevel',
    'WaterStatus',
    'ManagementContext',
    'WeatherDay',
    'WeatherWindow',

    # Plot models
    'PlotContext',
    'FieldObservation',

    # Risk models
    'CropType',
    'Disease',
    'Severity',
    'EvaluationMode',
    'EvaluationStatus',
    'RiskSource',
    'CreatedBy',
    'DiseaseRiskResult',
    'RiskEvent',
    'PlotEvaluationResult'
]
