"""
Evaluation services: window building, orchestration and batch runs
"""

from .window_builder import WeatherWindowBuilder, weather_day_from_record, window_date_range
from .orchestrator import RiskEvaluationOrchestrator
from .batch import RiskBatchRunner

__all__ = [
    'WeatherWindowBuilder',
    'weather_day_from_record',
    'window_date_range',
    'RiskEvaluationOrchestrator',
    'RiskBatchRunner'
]
