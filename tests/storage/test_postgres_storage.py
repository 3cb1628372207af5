"""
Unit tests for the PostgreSQL adapters (database mocked)
"""

import pytest
from datetime import date, datetime
from unittest.mock import MagicMock
from psycopg2.extras import Json

from agririsk.models.risk import Disease, EvaluationMode, RiskEvent, RiskSource, Severity
from agririsk.models.weather import CropStage, NitrogenLevel, WindowType
from agririsk.storage.postgres import (
    PostgresPlotRepository,
    PostgresRiskStore,
    PostgresWeatherRecordSource
)


@pytest.fixture
def mock_cursor():
    return MagicMock()


@pytest.fixture
def mock_db(mock_cursor):
    """Mock database connection"""
    db = MagicMock()
    db.get_cursor.return_value.__enter__.return_value = mock_cursor
    return db


@pytest.fixture
def event():
    return RiskEvent(
        plot_id="P1",
        disease=Disease.PADDY_BLAST,
        event_date=date(2025, 7, 10),
        severity=Severity.ORANGE,
        score=62,
        explanation="high morning humidity",
        drivers={"morning_humidity": 1.0},
        mode=EvaluationMode.FORECAST,
        source=RiskSource.WEATHER_V2_FORECAST,
    )


class TestPostgresRiskStore:
    def test_upsert(self, mock_db, mock_cursor, event):
        stamp = datetime(2025, 7, 10, 6, 0)
        mock_cursor.fetchone.return_value = {"created_at": stamp, "updated_at": stamp}

        saved = PostgresRiskStore(mock_db).upsert(event)

        sql, params = mock_cursor.execute.call_args[0]
        assert "ON CONFLICT (plot_id, disease, event_date, source)" in sql
        assert params[:5] == ("P1", "PADDY_BLAST", date(2025, 7, 10), "ORANGE", 62)
        assert isinstance(params[7], Json)
        assert params[8] == "FORECAST"
        assert params[9] == "WEATHER_V2_FORECAST"
        assert params[10] == "RULE_ENGINE"
        assert saved.created_at == stamp

    def test_create_schema(self, mock_db, mock_cursor):
        PostgresRiskStore(mock_db).create_schema()

        sql = mock_cursor.execute.call_args[0][0]
        assert "CREATE TABLE IF NOT EXISTS risk_events" in sql
        assert "UNIQUE (plot_id, disease, event_date, source)" in sql

    def test_list_for_plot(self, mock_db, mock_cursor):
        mock_cursor.fetchall.return_value = [{
            "plot_id": "P1",
            "disease": "PADDY_BLB",
            "event_date": date(2025, 7, 10),
            "severity": "GREEN",
            "score": 12,
            "horizon_days": 7,
            "explanation": "",
            "drivers": {"humidity": 0.2},
            "mode": "PAST",
            "source": "WEATHER_V2_PAST",
            "created_by": "RULE_ENGINE",
            "created_at": None,
            "updated_at": None,
        }]

        events = PostgresRiskStore(mock_db).list_for_plot("P1")

        assert len(events) == 1
        assert events[0].disease == Disease.PADDY_BLB
        assert events[0].mode == EvaluationMode.PAST
        assert events[0].drivers == {"humidity": 0.2}

    def test_latest_by_plot_empty_ids_skips_query(self, mock_db, mock_cursor):
        assert PostgresRiskStore(mock_db).latest_by_plot([]) == {}
        mock_cursor.execute.assert_not_called()


class TestPostgresWeatherRecordSource:
    @pytest.mark.parametrize("window_type,is_forecast", [
        (WindowType.FORECAST, True),
        (WindowType.PAST, False),
    ])
    def test_is_forecast_filter(self, mock_db, mock_cursor, window_type, is_forecast):
        mock_cursor.fetchall.return_value = [{"date": date(2025, 7, 11), "rainfall_mm": 2.0}]

        rows = PostgresWeatherRecordSource(mock_db).fetch_daily(
            "P1", date(2025, 7, 11), date(2025, 7, 17), window_type
        )

        sql, params = mock_cursor.execute.call_args[0]
        assert "FROM weather_daily" in sql
        assert params == ("P1", date(2025, 7, 11), date(2025, 7, 17), is_forecast)
        assert rows == [{"date": date(2025, 7, 11), "rainfall_mm": 2.0}]


class TestPostgresPlotRepository:
    def test_get_plot_with_observation(self, mock_db, mock_cursor):
        mock_cursor.fetchone.return_value = {
            "plot_id": "17",
            "name": "River plot",
            "crop": "PADDY",
            "variety": "BPT-5204",
            "sowing_date": date(2025, 6, 1),
            "latitude": 16.3,
            "longitude": 80.4,
            "district": "Guntur",
            "mandal": "Tenali",
            "village": None,
            "observation_date": date(2025, 7, 5),
            "crop_stage": "Tillering",
            "nitrogen_level": "high",
            "water_status": None,
        }

        plot = PostgresPlotRepository(mock_db).get_plot("17")

        assert plot.plot_id == "17"
        assert plot.crop == "PADDY"
        assert plot.latest_observation.crop_stage == CropStage.TILLERING
        assert plot.management.nitrogen_level == NitrogenLevel.HIGH

    def test_get_plot_missing(self, mock_db, mock_cursor):
        mock_cursor.fetchone.return_value = None

        assert PostgresPlotRepository(mock_db).get_plot("404") is None

    def test_list_plots_without_observation(self, mock_db, mock_cursor):
        mock_cursor.fetchall.return_value = [
            {"plot_id": "1", "crop": None, "observation_date": None},
        ]

        plots = PostgresPlotRepository(mock_db).list_plots()

        assert plots[0].crop == "RICE"
        assert plots[0].latest_observation is None
