"""
AgriRisk: weather-driven plant disease risk scoring for farm plots
"""

__version__ = "0.1.0"
