"""
Risk classification: probability -> 0-100 score -> severity level
"""

import math
from typing import NamedTuple

from .aggregator import clamp01
from ..models.risk import Severity

# Inclusive lower bounds, highest first
RED_THRESHOLD = 75
ORANGE_THRESHOLD = 50
YELLOW_THRESHOLD = 30


class RiskClassification(NamedTuple):
    score: int
    level: Severity


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going up"""
    return int(math.floor(x + 0.5))


def classify_score(score: int) -> Severity:
    """Map a 0-100 score to its severity level"""
    if score >= RED_THRESHOLD:
        return Severity.RED
    if score >= ORANGE_THRESHOLD:
        return Severity.ORANGE
    if score >= YELLOW_THRESHOLD:
        return Severity.YELLOW
    return Severity.GREEN


def classify_risk(risk01: float) -> RiskClassification:
    """
    Convert a probability into a score and severity level

    Args:
        risk01: Probability; values outside [0, 1] are clamped

    Returns:
        RiskClassification(score, level)
    """
    score = round_half_up(clamp01(risk01) * 100)
    return RiskClassification(score=score, level=classify_score(score))
