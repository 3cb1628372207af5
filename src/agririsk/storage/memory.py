"""
In-memory adapters for tests and dry runs
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..models.plot import PlotContext
from ..models.risk import Disease, RiskEvent
from ..models.weather import WindowType


class InMemoryRiskStore:
    """
    RiskStore keyed by (plot, disease, date, source); last writer wins
    """

    def __init__(self):
        self._events: Dict[tuple, RiskEvent] = {}

    def upsert(self, event: RiskEvent) -> RiskEvent:
        now = datetime.now()
        existing = self._events.get(event.key)
        event.created_at = existing.created_at if existing else (event.created_at or now)
        event.updated_at = now
        self._events[event.key] = event
        logger.debug(f"Upserted risk event {event.key}")
        return event

    def list_for_plot(self, plot_id: str) -> List[RiskEvent]:
        events = [e for e in self._events.values() if str(e.plot_id) == str(plot_id)]
        return sorted(events, key=lambda e: (e.event_date, list(Disease).index(Disease(e.disease))))

    def latest_by_plot(self, plot_ids: Iterable[str]) -> Dict[str, Dict[Disease, RiskEvent]]:
        """Most recent event per (plot, disease)"""
        wanted = {str(p) for p in plot_ids}
        latest: Dict[str, Dict[Disease, RiskEvent]] = {p: {} for p in wanted}
        for event in self._events.values():
            plot_id = str(event.plot_id)
            if plot_id not in wanted:
                continue
            disease = Disease(event.disease)
            current = latest[plot_id].get(disease)
            if current is None or (event.event_date, event.updated_at) > (current.event_date, current.updated_at):
                latest[plot_id][disease] = event
        return latest

    def __len__(self) -> int:
        return len(self._events)


class InMemoryWeatherRecordSource:
    """
    WeatherRecordSource over plain dict rows

    Observed and forecast rows are kept apart, mirroring the
    is_forecast flag of the weather_daily table.
    """

    def __init__(self):
        self._rows: Dict[tuple, Dict[date, Dict[str, Any]]] = {}

    def add(self, plot_id: str, window_type: WindowType, rows: Iterable[Dict[str, Any]]):
        bucket = self._rows.setdefault((str(plot_id), WindowType(window_type)), {})
        for row in rows:
            row_date = row["date"]
            if not isinstance(row_date, date):
                row_date = date.fromisoformat(str(row_date)[:10])
            bucket[row_date] = dict(row, date=row_date)

    def fetch_daily(
        self,
        plot_id: str,
        start: date,
        end: date,
        window_type: WindowType
    ) -> List[Dict[str, Any]]:
        bucket = self._rows.get((str(plot_id), WindowType(window_type)), {})
        return [bucket[d] for d in sorted(bucket) if start <= d <= end]


class InMemoryPlotRepository:
    """PlotContextProvider over a fixed list of plots"""

    def __init__(self, plots: Optional[Iterable[PlotContext]] = None):
        self._plots: Dict[str, PlotContext] = {}
        for plot in plots or []:
            self.add(plot)

    def add(self, plot: PlotContext):
        self._plots[plot.plot_id] = plot

    def get_plot(self, plot_id: str) -> Optional[PlotContext]:
        return self._plots.get(str(plot_id))

    def list_plots(self) -> List[PlotContext]:
        return list(self._plots.values())
