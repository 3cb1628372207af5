"""
PostgreSQL adapters

- PostgresRiskStore: upserts RiskEvents into risk_events
- PostgresWeatherRecordSource: daily rows from weather_daily
- PostgresPlotRepository: plots joined with their latest field observation
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from psycopg2.extras import Json

from ..models.plot import FieldObservation, PlotContext
from ..models.risk import CreatedBy, Disease, EvaluationMode, RiskEvent, RiskSource, Severity
from ..models.weather import WindowType
from ..utils.database import DatabaseConnection, get_db_connection

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS risk_events (
    id BIGSERIAL PRIMARY KEY,
    plot_id TEXT NOT NULL,
    disease TEXT NOT NULL,
    event_date DATE NOT NULL,
    severity TEXT NOT NULL,
    score SMALLINT NOT NULL CHECK (score BETWEEN 0 AND 100),
    horizon_days INTEGER NOT NULL DEFAULT 7,
    explanation TEXT,
    drivers JSONB,
    mode TEXT,
    source TEXT NOT NULL,
    created_by TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (plot_id, disease, event_date, source)
);

CREATE INDEX IF NOT EXISTS idx_risk_events_plot_date
    ON risk_events (plot_id, event_date DESC);
"""

UPSERT_SQL = """
    INSERT INTO risk_events (
        plot_id, disease, event_date, severity, score, horizon_days,
        explanation, drivers, mode, source, created_by
    ) VALUES (
        %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
    )
    ON CONFLICT (plot_id, disease, event_date, source)
    DO UPDATE SET
        severity = EXCLUDED.severity,
        score = EXCLUDED.score,
        horizon_days = EXCLUDED.horizon_days,
        explanation = EXCLUDED.explanation,
        drivers = EXCLUDED.drivers,
        mode = EXCLUDED.mode,
        created_by = EXCLUDED.created_by,
        updated_at = CURRENT_TIMESTAMP
    RETURNING created_at, updated_at
"""


def _row_to_event(row: Dict[str, Any]) -> RiskEvent:
    return RiskEvent(
        plot_id=str(row["plot_id"]),
        disease=Disease(row["disease"]),
        event_date=row["event_date"],
        severity=Severity(row["severity"]),
        score=int(row["score"]),
        horizon_days=row.get("horizon_days") or 7,
        explanation=row.get("explanation") or "",
        drivers=row.get("drivers") or {},
        mode=EvaluationMode(row["mode"]) if row.get("mode") else None,
        source=RiskSource(row["source"]),
        created_by=CreatedBy(row["created_by"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class PostgresRiskStore:
    """
    RiskStore backed by the risk_events table
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_db_connection()

    def create_schema(self):
        """Create risk_events and its unique key if missing"""
        with self.db.get_cursor() as cursor:
            cursor.execute(SCHEMA_SQL)
        logger.info("risk_events schema ready")

    def upsert(self, event: RiskEvent) -> RiskEvent:
        with self.db.get_cursor() as cursor:
            cursor.execute(UPSERT_SQL, (
                str(event.plot_id),
                Disease(event.disease).value,
                event.event_date,
                Severity(event.severity).value,
                event.score,
                event.horizon_days,
                event.explanation,
                Json(event.drivers),
                EvaluationMode(event.mode).value if event.mode else None,
                RiskSource(event.source).value,
                CreatedBy(event.created_by).value,
            ))
            row = cursor.fetchone()

        if row:
            event.created_at = row["created_at"]
            event.updated_at = row["updated_at"]
        logger.debug(f"Upserted risk event {event.key}")
        return event

    def list_for_plot(self, plot_id: str) -> List[RiskEvent]:
        with self.db.get_cursor() as cursor:
            cursor.execute("""
                SELECT *
                FROM risk_events
                WHERE plot_id = %s
                ORDER BY event_date, disease
            """, (str(plot_id),))
            rows = cursor.fetchall()
        return [_row_to_event(row) for row in rows]

    def latest_by_plot(self, plot_ids: Iterable[str]) -> Dict[str, Dict[Disease, RiskEvent]]:
        """Most recent event per (plot, disease)"""
        ids = [str(p) for p in plot_ids]
        latest: Dict[str, Dict[Disease, RiskEvent]] = {p: {} for p in ids}
        if not ids:
            return latest

        with self.db.get_cursor() as cursor:
            cursor.execute("""
                SELECT DISTINCT ON (plot_id, disease) *
                FROM risk_events
                WHERE plot_id = ANY(%s)
                ORDER BY plot_id, disease, event_date DESC, updated_at DESC
            """, (ids,))
            rows = cursor.fetchall()

        for row in rows:
            event = _row_to_event(row)
            latest[event.plot_id][Disease(event.disease)] = event
        return latest


class PostgresWeatherRecordSource:
    """
    WeatherRecordSource over weather_daily

    Observed and forecast days share the table and are told apart by
    is_forecast.
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_db_connection()

    def fetch_daily(
        self,
        plot_id: str,
        start: date,
        end: date,
        window_type: WindowType
    ) -> List[Dict[str, Any]]:
        is_forecast = WindowType(window_type) == WindowType.FORECAST
        with self.db.get_cursor() as cursor:
            cursor.execute("""
                SELECT
                    date, t_min, t_max, t_mean, rh_mean, rh_morning, rh_evening,
                    rainfall_mm, wind_speed, solar_radiation, sunshine_hours,
                    leaf_wetness_hours, vpd, dew_point, fog, et0
                FROM weather_daily
                WHERE plot_id = %s
                  AND date BETWEEN %s AND %s
                  AND is_forecast = %s
                ORDER BY date
            """, (str(plot_id), start, end, is_forecast))
            rows = cursor.fetchall()
        return [dict(row) for row in rows]


class PostgresPlotRepository:
    """
    PlotContextProvider over plots and field_observations
    """

    PLOT_SQL = """
        SELECT
            p.id::text AS plot_id, p.name, p.crop, p.variety, p.sowing_date,
            p.latitude, p.longitude, p.district, p.mandal, p.village,
            o.observation_date, o.crop_stage, o.nitrogen_level, o.water_status
        FROM plots p
        LEFT JOIN LATERAL (
            SELECT observation_date, crop_stage, nitrogen_level, water_status
            FROM field_observations fo
            WHERE fo.plot_id = p.id
            ORDER BY fo.observation_date DESC
            LIMIT 1
        ) o ON TRUE
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_db_connection()

    @staticmethod
    def _to_context(row: Dict[str, Any]) -> PlotContext:
        observation = None
        if row.get("observation_date") is not None:
            observation = FieldObservation(
                observation_date=row["observation_date"],
                crop_stage=row.get("crop_stage"),
                nitrogen_level=row.get("nitrogen_level"),
                water_status=row.get("water_status"),
            )
        return PlotContext(
            plot_id=row["plot_id"],
            name=row.get("name"),
            crop=row.get("crop") or "RICE",
            variety=row.get("variety"),
            sowing_date=row.get("sowing_date"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            district=row.get("district"),
            mandal=row.get("mandal"),
            village=row.get("village"),
            latest_observation=observation,
        )

    def get_plot(self, plot_id: str) -> Optional[PlotContext]:
        with self.db.get_cursor() as cursor:
            cursor.execute(self.PLOT_SQL + " WHERE p.id::text = %s", (str(plot_id),))
            row = cursor.fetchone()
        return self._to_context(row) if row else None

    def list_plots(self) -> List[PlotContext]:
        with self.db.get_cursor() as cursor:
            cursor.execute(self.PLOT_SQL + " ORDER BY p.id")
            rows = cursor.fetchall()
        return [self._to_context(row) for row in rows]
