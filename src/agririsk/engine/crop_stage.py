"""
Crop stage inference and leaf wetness estimation
"""

from datetime import date
from typing import Optional

from ..models.weather import CropStage

# (upper bound in days since sowing, stage), checked in order
STAGE_BANDS = (
    (20, CropStage.NURSERY),
    (45, CropStage.TILLERING),
    (65, CropStage.PANICLE_INIT),
    (80, CropStage.BOOTING),
    (100, CropStage.HEADING),
)


def infer_crop_stage(sowing_date: Optional[date], reference_date: date) -> CropStage:
    """
    Infer the growth stage from days elapsed since sowing

    Args:
        sowing_date: Sowing / transplanting date (None -> UNKNOWN)
        reference_date: Day at which the stage is wanted

    Returns:
        CropStage for the elapsed-day band
    """
    if sowing_date is None:
        return CropStage.UNKNOWN

    elapsed = (reference_date - sowing_date).days
    for upper_bound, stage in STAGE_BANDS:
        if elapsed <= upper_bound:
            return stage
    return CropStage.MATURITY


def estimate_leaf_wetness_hours(rh_mean: Optional[float], rainfall_mm: Optional[float]) -> float:
    """Rough leaf wetness duration when no sensor value is available"""
    if rainfall_mm is not None and rainfall_mm > 0:
        return 8.0
    rh = rh_mean or 0.0
    if rh >= 90:
        return 6.0
    if rh >= 85:
        return 3.0
    return 0.0
