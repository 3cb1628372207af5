"""
Storage adapters for plots, weather rows and risk events
"""

from .memory import InMemoryPlotRepository, InMemoryRiskStore, InMemoryWeatherRecordSource
from .postgres import PostgresPlotRepository, PostgresRiskStore, PostgresWeatherRecordSource

__all__ = [
    'InMemoryPlotRepository',
    'InMemoryRiskStore',
    'InMemoryWeatherRecordSource',
    'PostgresPlotRepository',
    'PostgresRiskStore',
    'PostgresWeatherRecordSource'
]
