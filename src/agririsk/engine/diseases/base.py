"""
Base class for weather-driven disease risk models

Every model follows the same three stages:

1. Sub-scores: each weather or management signal is mapped to [0, 1]
   against an agronomic optimum or threshold.
2. Weighted sum of the sub-scores (the contributions), squashed through
   a logistic curve centred on a per-disease bias.
3. Seasonal and crop-stage multipliers applied after squashing, then
   clamped back to [0, 1].

Weights and bias are class-level defaults that can be overridden per
instance (see Settings.MODEL_OVERRIDES).
"""

import math
from datetime import date
from typing import Dict, List, Optional

from loguru import logger

from ..aggregator import WeatherAggregate, clamp01
from ...models.risk import Disease, DiseaseRiskResult
from ...models.weather import CropStage, ManagementContext, NitrogenLevel, WaterStatus


def logistic(x: float) -> float:
    """Numerically safe 1 / (1 + e^-x)"""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def high_nitrogen_score(management: ManagementContext) -> float:
    return {NitrogenLevel.HIGH: 1.0, NitrogenLevel.MEDIUM: 0.5}.get(management.nitrogen_level, 0.0)


def low_nitrogen_score(management: ManagementContext) -> float:
    return {NitrogenLevel.LOW: 1.0, NitrogenLevel.MEDIUM: 0.5}.get(management.nitrogen_level, 0.0)


def flooding_score(management: ManagementContext) -> float:
    return {WaterStatus.FLOODED: 1.0, WaterStatus.NORMAL: 0.5}.get(management.water_status, 0.0)


def water_stress_score(management: ManagementContext) -> float:
    return {WaterStatus.STRESSED: 1.0, WaterStatus.NORMAL: 0.3}.get(management.water_status, 0.0)


def peak_score(value: float, optimum: float, half_width: float) -> float:
    """1 at the optimum, falling linearly to 0 at optimum +/- half_width"""
    return clamp01(1 - abs(value - optimum) / half_width)


class DiseaseRiskModel:
    """
    Weighted-signal logistic risk model for one disease

    Subclasses set `disease`, `WEIGHTS`, `BIAS` and implement `sub_scores`.
    """

    disease: Disease
    WEIGHTS: Dict[str, float] = {}
    BIAS: float = 2.0
    STAGE_MULTIPLIERS: Dict[CropStage, float] = {}
    DEFAULT_STAGE_MULTIPLIER: float = 1.0

    def __init__(
        self,
        weights: Optional[Dict[str, float]] = None,
        bias: Optional[float] = None
    ):
        """
        Initialize the model

        Args:
            weights: Per-signal weight overrides (keys must be known signals)
            bias: Logistic bias override
        """
        overrides = dict(weights or {})
        unknown = set(overrides) - set(self.WEIGHTS)
        if unknown:
            raise ValueError(
                f"Unknown signals for {self.disease.value}: {', '.join(sorted(unknown))}"
            )

        self.weights = {**self.WEIGHTS, **{k: float(v) for k, v in overrides.items()}}
        self.bias = self.BIAS if bias is None else float(bias)

        if overrides or bias is not None:
            logger.info(f"{self.disease.value} model using overrides: bias={self.bias}, weights={overrides}")

    def sub_scores(self, agg: WeatherAggregate, management: ManagementContext) -> Dict[str, float]:
        """Per-signal sub-scores in [0, 1], keyed like WEIGHTS"""
        raise NotImplementedError

    def seasonal_multiplier(self, anchor_date: Optional[date]) -> float:
        return 1.0

    def stage_multiplier(self, stage: CropStage) -> float:
        return self.STAGE_MULTIPLIERS.get(stage, self.DEFAULT_STAGE_MULTIPLIER)

    def explain(self, drivers: Dict[str, float], contributions: Dict[str, float]) -> List[str]:
        """Name the two largest contributions"""
        top = sorted(contributions.items(), key=lambda item: item[1], reverse=True)[:2]
        names = ", ".join(name.replace("_", " ") for name, _ in top)
        return [f"Main drivers: {names}"] if names else []

    def score(
        self,
        agg: WeatherAggregate,
        management: Optional[ManagementContext] = None
    ) -> DiseaseRiskResult:
        """
        Score aggregated weather before any modifier

        Args:
            agg: Aggregated weather window
            management: Field management context (unreported if None)

        Returns:
            DiseaseRiskResult with risk01, contributions and drivers
        """
        management = management or ManagementContext.unreported()

        drivers = {name: clamp01(value) for name, value in self.sub_scores(agg, management).items()}
        contributions = {
            name: weight * drivers.get(name, 0.0)
            for name, weight in self.weights.items()
        }
        raw = sum(contributions.values())
        risk01 = logistic(raw - self.bias)

        return DiseaseRiskResult(
            disease=self.disease,
            risk01=risk01,
            contributions=contributions,
            drivers=drivers,
            explanation=self.explain(drivers, contributions),
        )

    def apply_modifiers(
        self,
        result: DiseaseRiskResult,
        anchor_date: Optional[date],
        stage: CropStage
    ) -> DiseaseRiskResult:
        """Apply seasonal and stage multipliers after squashing"""
        seasonal = self.seasonal_multiplier(anchor_date)
        stage_factor = self.stage_multiplier(stage)

        result.modifiers = {"seasonal": seasonal, "stage": stage_factor}
        result.adjusted_risk01 = clamp01(result.risk01 * seasonal * stage_factor)
        return result

    def evaluate(
        self,
        agg: WeatherAggregate,
        management: Optional[ManagementContext] = None,
        stage: CropStage = CropStage.UNKNOWN,
        anchor_date: Optional[date] = None
    ) -> DiseaseRiskResult:
        """Score and apply modifiers"""
        return self.apply_modifiers(self.score(agg, management), anchor_date, stage)
