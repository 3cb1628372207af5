"""
Risk data models for the AgriRisk engine

Covers the disease catalogue, severity levels, per-model scoring results
and the persisted RiskEvent snapshot.
"""

from datetime import date, datetime
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .plot import PlotContext


class CropType(str, Enum):
    """Crops with a scoring family"""
    RICE = "RICE"
    CHILLI = "CHILLI"
    BLACKGRAM = "BLACKGRAM"
    MAIZE = "MAIZE"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["CropType"]:
        """Return the CropType for a plot's crop string, or None if unsupported"""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper().replace(" ", "").replace("_", "")
        if normalized == "PADDY":
            normalized = cls.RICE.value
        try:
            return cls(normalized)
        except ValueError:
            return None


class Disease(str, Enum):
    """Diseases and pests scored by the engine"""
    PADDY_BLAST = "PADDY_BLAST"
    PADDY_BLB = "PADDY_BLB"
    PADDY_SHEATH_BLIGHT = "PADDY_SHEATH_BLIGHT"
    PADDY_BROWN_SPOT = "PADDY_BROWN_SPOT"
    CHILLI_ANTHRACNOSE = "CHILLI_ANTHRACNOSE"
    CHILLI_POWDERY_MILDEW = "CHILLI_POWDERY_MILDEW"
    CHILLI_THRIPS = "CHILLI_THRIPS"
    BLACKGRAM_POWDERY_MILDEW = "BLACKGRAM_POWDERY_MILDEW"
    BLACKGRAM_LEAF_SPOT = "BLACKGRAM_LEAF_SPOT"
    BLACKGRAM_YMV = "BLACKGRAM_YMV"
    MAIZE_FAW = "MAIZE_FAW"
    MAIZE_LEAF_BLIGHT = "MAIZE_LEAF_BLIGHT"

    @property
    def crop(self) -> CropType:
        return _DISEASE_CROPS[self]


_DISEASE_CROPS = {
    Disease.PADDY_BLAST: CropType.RICE,
    Disease.PADDY_BLB: CropType.RICE,
    Disease.PADDY_SHEATH_BLIGHT: CropType.RICE,
    Disease.PADDY_BROWN_SPOT: CropType.RICE,
    Disease.CHILLI_ANTHRACNOSE: CropType.CHILLI,
    Disease.CHILLI_POWDERY_MILDEW: CropType.CHILLI,
    Disease.CHILLI_THRIPS: CropType.CHILLI,
    Disease.BLACKGRAM_POWDERY_MILDEW: CropType.BLACKGRAM,
    Disease.BLACKGRAM_LEAF_SPOT: CropType.BLACKGRAM,
    Disease.BLACKGRAM_YMV: CropType.BLACKGRAM,
    Disease.MAIZE_FAW: CropType.MAIZE,
    Disease.MAIZE_LEAF_BLIGHT: CropType.MAIZE,
}


class Severity(str, Enum):
    """Risk severity levels (HIGH / CRITICAL kept for legacy rows)"""
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    ORANGE = "ORANGE"
    RED = "RED"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class EvaluationMode(str, Enum):
    """Evaluation horizon strategy"""
    PAST = "PAST"
    FORECAST = "FORECAST"
    PROACTIVE = "PROACTIVE"


class RiskSource(str, Enum):
    """Pipeline that produced a RiskEvent; part of the uniqueness key"""
    WEATHER_V2 = "WEATHER_V2"
    WEATHER_V2_PAST = "WEATHER_V2_PAST"
    WEATHER_V2_FORECAST = "WEATHER_V2_FORECAST"
    WEATHER_V2_PROACTIVE = "WEATHER_V2_PROACTIVE"
    MODEL = "MODEL"
    MANUAL = "MANUAL"

    @classmethod
    def for_mode(cls, mode: EvaluationMode) -> "RiskSource":
        return {
            EvaluationMode.PAST: cls.WEATHER_V2_PAST,
            EvaluationMode.FORECAST: cls.WEATHER_V2_FORECAST,
            EvaluationMode.PROACTIVE: cls.WEATHER_V2_PROACTIVE,
        }[EvaluationMode(mode)]


class CreatedBy(str, Enum):
    """Origin of a RiskEvent"""
    RULE_ENGINE = "RULE_ENGINE"
    MODEL = "MODEL"
    MANUAL = "MANUAL"


class EvaluationStatus(str, Enum):
    """Terminal state of a single plot evaluation"""
    DONE = "DONE"
    NO_DATA = "NO_DATA"
    UNSUPPORTED_CROP = "UNSUPPORTED_CROP"


@dataclass
class DiseaseRiskResult:
    """
    Output of one disease scoring model

    Attributes:
        disease: Disease that was scored
        risk01: Logistic probability before seasonal / stage modifiers
        contributions: Weighted per-signal terms that make up the raw score
        drivers: Raw per-signal sub-scores in [0, 1]
        explanation: Human-readable fragments
        modifiers: Multipliers applied after squashing
        adjusted_risk01: Final probability after modifiers, clamped to [0, 1]
    """
    disease: Disease
    risk01: float
    contributions: Dict[str, float] = field(default_factory=dict)
    drivers: Dict[str, float] = field(default_factory=dict)
    explanation: List[str] = field(default_factory=list)
    modifiers: Dict[str, float] = field(default_factory=dict)
    adjusted_risk01: Optional[float] = None

    def __post_init__(self):
        if self.adjusted_risk01 is None:
            self.adjusted_risk01 = self.risk01

    @property
    def explanation_text(self) -> str:
        return "; ".join(self.explanation)


@dataclass
class RiskEvent:
    """
    Persisted risk snapshot for one (plot, disease, date, source)
    """
    plot_id: str
    disease: Disease
    event_date: date
    severity: Severity
    score: int
    horizon_days: int = 7
    explanation: str = ""
    drivers: Dict[str, Any] = field(default_factory=dict)
    mode: Optional[EvaluationMode] = None
    source: RiskSource = RiskSource.WEATHER_V2
    created_by: CreatedBy = CreatedBy.RULE_ENGINE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not 0 <= self.score <= 100:
            raise ValueError(f"Score {self.score} must be between 0 and 100")

    @property
    def key(self) -> Tuple[str, str, date, str]:
        """Uniqueness key: (plot, disease, date, source)"""
        return (
            str(self.plot_id),
            Disease(self.disease).value,
            self.event_date,
            RiskSource(self.source).value,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage / API responses"""
        return {
            "plot_id": self.plot_id,
            "disease": Disease(self.disease).value,
            "date": self.event_date.isoformat(),
            "severity": Severity(self.severity).value,
            "score": self.score,
            "horizon_days": self.horizon_days,
            "explanation": self.explanation,
            "drivers": self.drivers,
            "mode": EvaluationMode(self.mode).value if self.mode else None,
            "source": RiskSource(self.source).value,
            "created_by": CreatedBy(self.created_by).value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class PlotEvaluationResult:
    """Structured outcome of evaluating one plot in one mode"""
    plot: PlotContext
    mode: EvaluationMode
    status: EvaluationStatus = EvaluationStatus.DONE
    risks: List[RiskEvent] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plot_id": self.plot.plot_id,
            "mode": EvaluationMode(self.mode).value,
            "status": EvaluationStatus(self.status).value,
            "risks": [risk.to_dict() for risk in self.risks],
            "message": self.message,
        }
