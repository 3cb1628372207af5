"""
Unit tests for the in-memory adapters
"""

import pytest
from datetime import date

from agririsk.models.plot import PlotContext
from agririsk.models.risk import Disease, RiskEvent, RiskSource, Severity
from agririsk.models.weather import WindowType
from agririsk.storage.memory import (
    InMemoryPlotRepository,
    InMemoryRiskStore,
    InMemoryWeatherRecordSource
)


def make_event(plot_id="P1", disease=Disease.PADDY_BLAST, event_date=date(2025, 7, 10),
               score=40, source=RiskSource.WEATHER_V2_FORECAST):
    return RiskEvent(
        plot_id=plot_id,
        disease=disease,
        event_date=event_date,
        severity=Severity.YELLOW,
        score=score,
        source=source,
    )


@pytest.fixture
def store():
    return InMemoryRiskStore()


class TestInMemoryRiskStore:
    def test_upsert_sets_timestamps(self, store):
        event = store.upsert(make_event())

        assert event.created_at is not None
        assert event.updated_at is not None
        assert len(store) == 1

    def test_same_key_replaces(self, store):
        first = store.upsert(make_event(score=40))
        second = store.upsert(make_event(score=60))

        assert len(store) == 1
        assert store.list_for_plot("P1")[0].score == 60
        assert second.created_at == first.created_at

    def test_source_is_part_of_key(self, store):
        store.upsert(make_event(source=RiskSource.WEATHER_V2_PAST))
        store.upsert(make_event(source=RiskSource.WEATHER_V2_FORECAST))

        assert len(store) == 2

    def test_list_for_plot_ordered(self, store):
        store.upsert(make_event(disease=Disease.PADDY_BLB, event_date=date(2025, 7, 11)))
        store.upsert(make_event(disease=Disease.PADDY_BLB))
        store.upsert(make_event(disease=Disease.PADDY_BLAST))
        store.upsert(make_event(plot_id="P2"))

        events = store.list_for_plot("P1")

        assert [(e.event_date.day, e.disease) for e in events] == [
            (10, Disease.PADDY_BLAST),
            (10, Disease.PADDY_BLB),
            (11, Disease.PADDY_BLB),
        ]

    def test_latest_by_plot(self, store):
        store.upsert(make_event(event_date=date(2025, 7, 9), score=10))
        store.upsert(make_event(event_date=date(2025, 7, 10), score=55))
        store.upsert(make_event(plot_id="P2", score=70))

        latest = store.latest_by_plot(["P1", "P3"])

        assert set(latest) == {"P1", "P3"}
        assert latest["P1"][Disease.PADDY_BLAST].score == 55
        assert latest["P3"] == {}


class TestInMemoryWeatherRecordSource:
    def test_fetch_filters_by_range_and_type(self):
        source = InMemoryWeatherRecordSource()
        source.add("P1", WindowType.FORECAST, [
            {"date": "2025-07-12", "rainfall_mm": 3},
            {"date": date(2025, 7, 11), "rainfall_mm": 1},
            {"date": date(2025, 7, 20), "rainfall_mm": 9},
        ])

        fetched = source.fetch_daily("P1", date(2025, 7, 11), date(2025, 7, 17), WindowType.FORECAST)

        assert [row["date"] for row in fetched] == [date(2025, 7, 11), date(2025, 7, 12)]
        assert source.fetch_daily("P1", date(2025, 7, 11), date(2025, 7, 17), WindowType.PAST) == []


class TestInMemoryPlotRepository:
    def test_get_and_list(self):
        repo = InMemoryPlotRepository([PlotContext(plot_id="P1"), PlotContext(plot_id=2)])

        assert repo.get_plot("P1").plot_id == "P1"
        assert repo.get_plot(2).plot_id == "2"
        assert repo.get_plot("missing") is None
        assert len(repo.list_plots()) == 2
