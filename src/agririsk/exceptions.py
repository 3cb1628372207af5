"""
Exception types raised by the AgriRisk engine
"""


class AgriRiskError(Exception):
    """Base class for engine errors"""


class PlotNotFoundError(AgriRiskError):
    """The requested plot does not exist"""

    def __init__(self, plot_id: str):
        self.plot_id = plot_id
        super().__init__(f"Plot not found: {plot_id}")


class InsufficientWeatherDataError(AgriRiskError):
    """A weather window is missing or shorter than the requested horizon"""


class IngestionError(AgriRiskError):
    """The external weather ingestion collaborator failed"""


class UnmappedDiseaseError(AgriRiskError):
    """A disease has no registered scoring model"""
