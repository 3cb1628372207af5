"""
Batch Disease Risk Evaluation

Evaluates every plot sequentially in one mode:
- Loads plots from the plot provider
- Runs the orchestrator per plot, isolating per-plot failures
- Summarizes severity distribution and failures

Usage:
    agririsk-batch --mode PROACTIVE --days 7
"""

import json
import sys
from collections import Counter
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from loguru import logger

from .interfaces import IngestionTrigger, PlotContextProvider
from .orchestrator import RiskEvaluationOrchestrator
from .window_builder import WeatherWindowBuilder
from ..cache.ingestion import wrap_ingestion
from ..config import Settings, get_settings
from ..engine.dispatch import CropDiseaseDispatch
from ..models.risk import EvaluationMode


class RiskBatchRunner:
    """
    Evaluate disease risk for all plots
    """

    def __init__(self, orchestrator: RiskEvaluationOrchestrator, plots: PlotContextProvider):
        self.orchestrator = orchestrator
        self.plots = plots

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        ingestion: Optional[IngestionTrigger] = None,
        in_memory: bool = False
    ) -> "RiskBatchRunner":
        """
        Wire the PostgreSQL adapters from settings

        Args:
            settings: Settings (cached instance when None)
            ingestion: Forecast ingestion trigger, wrapped with the ingestion cache
            in_memory: Keep results in memory instead of writing risk_events
        """
        from ..storage import (
            InMemoryRiskStore,
            PostgresPlotRepository,
            PostgresRiskStore,
            PostgresWeatherRecordSource,
        )
        from ..utils.database import DatabaseConnection

        settings = settings or get_settings()
        db = DatabaseConnection(
            host=settings.POSTGRES_HOST,
            port=settings.POSTGRES_PORT,
            database=settings.POSTGRES_DB,
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
        )

        plots = PostgresPlotRepository(db)
        risk_store = InMemoryRiskStore() if in_memory else PostgresRiskStore(db)
        orchestrator = RiskEvaluationOrchestrator(
            plots=plots,
            windows=WeatherWindowBuilder(PostgresWeatherRecordSource(db)),
            risk_store=risk_store,
            ingestion=wrap_ingestion(ingestion, settings),
            dispatch=CropDiseaseDispatch(overrides=settings.MODEL_OVERRIDES),
        )
        return cls(orchestrator, plots)

    def evaluate_all(
        self,
        mode: EvaluationMode = EvaluationMode.FORECAST,
        days_window: int = 7,
        auto_ingest: bool = True,
        past_weight: float = 0.4,
        future_weight: float = 0.6,
        as_of: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """
        Evaluate every plot; one entry per plot

        A plot that raises is recorded with an `error` entry and the
        run continues with the next plot.
        """
        mode = EvaluationMode(mode)
        plots = self.plots.list_plots()
        logger.info(f"Evaluating {len(plots)} plots [{mode.value}, {days_window} days]")

        results = []
        for plot in plots:
            entry = {
                'plot_id': plot.plot_id,
                'plot_name': plot.name,
                'district': plot.district,
                'mandal': plot.mandal,
                'mode': mode.value,
            }
            try:
                result = self.orchestrator.evaluate_plot(
                    plot.plot_id,
                    mode=mode,
                    days_window=days_window,
                    auto_ingest=auto_ingest,
                    past_weight=past_weight,
                    future_weight=future_weight,
                    as_of=as_of,
                )
                entry.update({
                    'status': result.status.value,
                    'risks': [risk.to_dict() for risk in result.risks],
                    'message': result.message,
                })
            except Exception as e:
                logger.error(f"Error evaluating plot {plot.plot_id}: {str(e)}")
                entry['error'] = str(e)

            results.append(entry)

        return results

    def run(
        self,
        mode: EvaluationMode = EvaluationMode.FORECAST,
        days_window: int = 7,
        auto_ingest: bool = True,
        past_weight: float = 0.4,
        future_weight: float = 0.6,
        as_of: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Execute the batch and summarize it

        Returns:
            Summary statistics
        """
        start_time = datetime.now()
        logger.info("=" * 60)
        logger.info("Starting Batch Disease Risk Evaluation")
        logger.info("=" * 60)

        results = self.evaluate_all(mode, days_window, auto_ingest, past_weight, future_weight, as_of)

        failures = [r for r in results if 'error' in r]
        status_counts = Counter(r['status'] for r in results if 'status' in r)
        severity_distribution = Counter(
            risk['severity'] for r in results for risk in r.get('risks', [])
        )

        duration = (datetime.now() - start_time).total_seconds()

        summary = {
            'status': 'success' if not failures else 'partial',
            'timestamp': start_time.isoformat(),
            'duration_seconds': duration,
            'mode': EvaluationMode(mode).value,
            'plots_processed': len(results),
            'failures': len(failures),
            'status_counts': dict(status_counts),
            'severity_distribution': dict(severity_distribution),
            'results': results,
        }

        logger.info("=" * 60)
        logger.info("Batch Evaluation Completed")
        logger.info(f"Plots processed: {len(results)} ({len(failures)} failed)")
        logger.info(f"Duration: {duration:.2f} seconds")
        for level, count in sorted(severity_distribution.items()):
            logger.info(f"  {level}: {count}")
        logger.info("=" * 60)

        return summary


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    import argparse

    from ..utils.logger import setup_logging

    settings = get_settings()

    parser = argparse.ArgumentParser(description='Batch Disease Risk Evaluation')
    parser.add_argument('--mode', default=settings.DEFAULT_MODE,
                        choices=[m.value for m in EvaluationMode],
                        help='Evaluation mode')
    parser.add_argument('--days', type=int, default=settings.DEFAULT_DAYS_WINDOW,
                        help='Window length in days')
    parser.add_argument('--past-weight', type=float, default=settings.PAST_WEIGHT,
                        help='PROACTIVE weight of the past score')
    parser.add_argument('--future-weight', type=float, default=settings.FUTURE_WEIGHT,
                        help='PROACTIVE weight of the forecast score')
    parser.add_argument('--no-ingest', action='store_true', help='Never request forecast ingestion')
    parser.add_argument('--date', help='Evaluation date (YYYY-MM-DD)')
    parser.add_argument('--in-memory', action='store_true', help='Do not write risk events to the database')

    args = parser.parse_args(argv)

    setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)

    as_of = None
    if args.date:
        as_of = datetime.strptime(args.date, '%Y-%m-%d').date()

    runner = RiskBatchRunner.from_settings(settings, in_memory=args.in_memory)

    try:
        summary = runner.run(
            mode=EvaluationMode(args.mode),
            days_window=args.days,
            auto_ingest=settings.AUTO_INGEST and not args.no_ingest,
            past_weight=args.past_weight,
            future_weight=args.future_weight,
            as_of=as_of,
        )
    except Exception as e:
        logger.exception(f"Batch evaluation failed: {e}")
        sys.exit(1)

    print(json.dumps(summary, indent=2, default=str))
    sys.exit(0)


if __name__ == "__main__":
    main()
