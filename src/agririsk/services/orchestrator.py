"""
Risk Evaluation Orchestrator

Evaluates disease risk for one plot in one of three modes:
- PAST: last N days of observed weather (ending on the evaluation day)
- FORECAST: next N days of forecast weather (starting the day after)
- PROACTIVE: weighted blend of the PAST and FORECAST scores

Per (plot, mode) the flow is
BUILD_WINDOW -> [short forecast -> INGEST -> REBUILD once] -> EVALUATE -> PERSIST,
with NO_DATA as the terminal state when no usable weather remains.
"""

from datetime import date
from typing import Callable, List, Optional, Tuple

from loguru import logger

from .interfaces import IngestionTrigger, PlotContextProvider, RiskStore, WeatherWindowProvider
from ..engine.classifier import RiskClassification, classify_risk, classify_score, round_half_up
from ..engine.dispatch import CropDiseaseDispatch
from ..exceptions import InsufficientWeatherDataError, PlotNotFoundError
from ..models.plot import PlotContext
from ..models.risk import (
    CreatedBy,
    Disease,
    EvaluationMode,
    EvaluationStatus,
    PlotEvaluationResult,
    RiskEvent,
    RiskSource,
    Severity,
)
from ..models.weather import WeatherWindow, WindowType

ABSENT_SIDE = RiskClassification(score=0, level=Severity.GREEN)


class RiskEvaluationOrchestrator:
    """
    Evaluates and persists disease risk for single plots
    """

    def __init__(
        self,
        plots: PlotContextProvider,
        windows: WeatherWindowProvider,
        risk_store: RiskStore,
        ingestion: Optional[IngestionTrigger] = None,
        dispatch: Optional[CropDiseaseDispatch] = None,
        today: Callable[[], date] = date.today
    ):
        """
        Initialize the orchestrator

        Args:
            plots: Plot context provider
            windows: Weather window provider
            risk_store: Upsert sink for RiskEvents
            ingestion: On-demand forecast ingestion (None disables ingestion)
            dispatch: Disease dispatch (default registry when None)
            today: Clock returning the local evaluation day
        """
        self.plots = plots
        self.windows = windows
        self.risk_store = risk_store
        self.ingestion = ingestion
        self.dispatch = dispatch or CropDiseaseDispatch()
        self._today = today

    def evaluate_plot(
        self,
        plot_id: str,
        mode: EvaluationMode = EvaluationMode.FORECAST,
        days_window: int = 7,
        auto_ingest: bool = True,
        past_weight: float = 0.4,
        future_weight: float = 0.6,
        as_of: Optional[date] = None
    ) -> PlotEvaluationResult:
        """
        Evaluate every disease relevant to a plot's crop and upsert the results

        Args:
            plot_id: Plot identifier
            mode: PAST, FORECAST or PROACTIVE
            days_window: Horizon in days for each window
            auto_ingest: Request forecast ingestion when the forecast window is short
            past_weight: PROACTIVE weight of the past score
            future_weight: PROACTIVE weight of the forecast score
            as_of: Evaluation day (defaults to today); also the RiskEvent date

        Returns:
            PlotEvaluationResult (NO_DATA / UNSUPPORTED_CROP are not errors)

        Raises:
            PlotNotFoundError: If the plot does not exist
        """
        mode = EvaluationMode(mode)
        if days_window < 1:
            raise ValueError(f"days_window {days_window} must be >= 1")

        plot = self.plots.get_plot(plot_id)
        if plot is None:
            raise PlotNotFoundError(plot_id)

        as_of = as_of or self._today()

        diseases = self.dispatch.diseases_for_crop(plot.crop)
        if not diseases:
            logger.info(f"Plot {plot.plot_id}: crop '{plot.crop}' has no risk models, skipping")
            return PlotEvaluationResult(
                plot=plot,
                mode=mode,
                status=EvaluationStatus.UNSUPPORTED_CROP,
                message=f"Crop '{plot.crop}' is not supported by the risk engine",
            )

        if mode == EvaluationMode.PROACTIVE:
            return self._evaluate_proactive(
                plot, diseases, days_window, auto_ingest, past_weight, future_weight, as_of
            )
        return self._evaluate_single(plot, diseases, mode, days_window, auto_ingest, as_of)

    # ------------------------------------------------------------------
    # Window resolution
    # ------------------------------------------------------------------

    def _resolve_window(
        self,
        plot: PlotContext,
        window_type: WindowType,
        days_window: int,
        as_of: date,
        auto_ingest: bool
    ) -> WeatherWindow:
        """
        Build a usable window, ingesting the forecast side at most once

        Raises:
            InsufficientWeatherDataError: If no usable window can be built
        """
        window = self.windows.get_window(plot, window_type, days_window, as_of)

        if window_type == WindowType.PAST:
            if window is None or window.is_empty:
                raise InsufficientWeatherDataError(
                    f"No data: no past weather for plot {plot.plot_id} in the last {days_window} days"
                )
            return window

        if window is not None and window.is_complete(days_window):
            return window

        available = 0 if window is None else len(window.days)

        if not auto_ingest or self.ingestion is None:
            if window is None or window.is_empty:
                raise InsufficientWeatherDataError(
                    f"No data: no forecast weather for plot {plot.plot_id}"
                )
            logger.warning(
                f"Forecast window for plot {plot.plot_id} is incomplete "
                f"({available}/{days_window} days), evaluating as-is"
            )
            return window

        logger.warning(
            f"Forecast window for plot {plot.plot_id} is missing or incomplete "
            f"({available}/{days_window} days). Requesting ingestion..."
        )
        try:
            self.ingestion.ingest_forecast(plot.plot_id, days_window)
        except Exception as e:
            logger.error(f"Failed to ingest weather for plot {plot.plot_id}: {e}")
            raise InsufficientWeatherDataError(f"Failed to ingest weather data: {e}") from e

        window = self.windows.get_window(plot, window_type, days_window, as_of)
        if window is None or not window.is_complete(days_window):
            available = 0 if window is None else len(window.days)
            raise InsufficientWeatherDataError(
                f"No data: forecast window for plot {plot.plot_id} has "
                f"{available}/{days_window} days even after ingestion"
            )
        return window

    def _try_window(
        self,
        plot: PlotContext,
        window_type: WindowType,
        days_window: int,
        as_of: date,
        auto_ingest: bool
    ) -> Tuple[Optional[WeatherWindow], Optional[str]]:
        try:
            return self._resolve_window(plot, window_type, days_window, as_of, auto_ingest), None
        except InsufficientWeatherDataError as e:
            return None, str(e)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def _evaluate_single(
        self,
        plot: PlotContext,
        diseases: List[Disease],
        mode: EvaluationMode,
        days_window: int,
        auto_ingest: bool,
        as_of: date
    ) -> PlotEvaluationResult:
        window_type = WindowType.PAST if mode == EvaluationMode.PAST else WindowType.FORECAST

        window, reason = self._try_window(plot, window_type, days_window, as_of, auto_ingest)
        if window is None:
            logger.info(f"Plot {plot.plot_id} [{mode.value}]: {reason}")
            return PlotEvaluationResult(
                plot=plot, mode=mode, status=EvaluationStatus.NO_DATA, message=reason
            )

        source = RiskSource.for_mode(mode)
        risks = []
        for disease in diseases:
            result = self.dispatch.evaluate(disease, window)
            classification = classify_risk(result.adjusted_risk01)

            event = RiskEvent(
                plot_id=plot.plot_id,
                disease=disease,
                event_date=as_of,
                severity=classification.level,
                score=classification.score,
                horizon_days=days_window,
                explanation=result.explanation_text,
                drivers=dict(result.drivers),
                mode=mode,
                source=source,
                created_by=CreatedBy.RULE_ENGINE,
            )
            risks.append(self.risk_store.upsert(event))

        logger.info(
            f"Plot {plot.plot_id} [{mode.value}]: evaluated {len(risks)} diseases "
            f"over {len(window.days)} days ({window.crop_stage.value})"
        )
        return PlotEvaluationResult(plot=plot, mode=mode, risks=risks)

    def _evaluate_proactive(
        self,
        plot: PlotContext,
        diseases: List[Disease],
        days_window: int,
        auto_ingest: bool,
        past_weight: float,
        future_weight: float,
        as_of: date
    ) -> PlotEvaluationResult:
        if past_weight < 0 or future_weight < 0 or past_weight + future_weight == 0:
            raise ValueError(
                f"Invalid blend weights past={past_weight}, future={future_weight}"
            )

        mode = EvaluationMode.PROACTIVE
        past_window, past_reason = self._try_window(
            plot, WindowType.PAST, days_window, as_of, auto_ingest
        )
        future_window, future_reason = self._try_window(
            plot, WindowType.FORECAST, days_window, as_of, auto_ingest
        )

        if past_window is None and future_window is None:
            message = f"No data: no weather history or forecast for plot {plot.plot_id}"
            logger.info(f"{message} ({past_reason}; {future_reason})")
            return PlotEvaluationResult(
                plot=plot, mode=mode, status=EvaluationStatus.NO_DATA, message=message
            )

        risks = []
        for disease in diseases:
            past_result = self.dispatch.evaluate(disease, past_window) if past_window else None
            future_result = self.dispatch.evaluate(disease, future_window) if future_window else None

            past = classify_risk(past_result.adjusted_risk01) if past_result else ABSENT_SIDE
            future = classify_risk(future_result.adjusted_risk01) if future_result else ABSENT_SIDE

            combined_score = min(100, round_half_up(past_weight * past.score + future_weight * future.score))
            combined_level = classify_score(combined_score)

            event = RiskEvent(
                plot_id=plot.plot_id,
                disease=disease,
                event_date=as_of,
                severity=combined_level,
                score=combined_score,
                horizon_days=days_window,
                explanation=(
                    f"Past {days_window} days: {past.level.value} ({past.score}); "
                    f"Next {days_window} days: {future.level.value} ({future.score})"
                ),
                drivers={
                    "pastScore": past.score,
                    "pastLevel": past.level.value,
                    "futureScore": future.score,
                    "futureLevel": future.level.value,
                    "pastDrivers": dict(past_result.drivers) if past_result else None,
                    "futureDrivers": dict(future_result.drivers) if future_result else None,
                },
                mode=mode,
                source=RiskSource.WEATHER_V2_PROACTIVE,
                created_by=CreatedBy.RULE_ENGINE,
            )
            risks.append(self.risk_store.upsert(event))

        message = past_reason or future_reason
        logger.info(
            f"Plot {plot.plot_id} [PROACTIVE]: evaluated {len(risks)} diseases "
            f"(past={'yes' if past_window else 'no'}, forecast={'yes' if future_window else 'no'})"
        )
        return PlotEvaluationResult(plot=plot, mode=mode, risks=risks, message=message)
