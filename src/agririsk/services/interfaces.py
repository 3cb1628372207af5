"""
Collaborator interfaces consumed and produced by the engine
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Protocol

from ..models.plot import PlotContext
from ..models.risk import Disease, RiskEvent
from ..models.weather import WeatherWindow, WindowType


class WeatherRecordSource(Protocol):
    """Raw daily weather rows for a plot (one mapping per day)"""

    def fetch_daily(
        self,
        plot_id: str,
        start: date,
        end: date,
        window_type: WindowType
    ) -> List[Dict[str, Any]]:
        ...


class WeatherWindowProvider(Protocol):
    def get_window(
        self,
        plot: PlotContext,
        window_type: WindowType,
        days_window: int,
        as_of: Optional[date] = None
    ) -> Optional[WeatherWindow]:
        ...


class IngestionTrigger(Protocol):
    """
    On-demand forecast ingestion

    Implementations raise IngestionError (or any exception) on failure.
    """

    def ingest_forecast(self, plot_id: str, days: int) -> Dict[str, Any]:
        ...


class PlotContextProvider(Protocol):
    def get_plot(self, plot_id: str) -> Optional[PlotContext]:
        ...

    def list_plots(self) -> List[PlotContext]:
        ...


class RiskStore(Protocol):
    """Upsert-by-key sink for RiskEvents, plus read helpers"""

    def upsert(self, event: RiskEvent) -> RiskEvent:
        ...

    def list_for_plot(self, plot_id: str) -> List[RiskEvent]:
        ...

    def latest_by_plot(self, plot_ids: Iterable[str]) -> Dict[str, Dict[Disease, RiskEvent]]:
        ...
