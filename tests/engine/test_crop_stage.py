"""
Unit tests for crop stage inference and leaf wetness estimation
"""

import pytest
from datetime import date, timedelta

from agririsk.engine.crop_stage import estimate_leaf_wetness_hours, infer_crop_stage
from agririsk.models.weather import CropStage

SOWING = date(2025, 6, 1)


class TestInferCropStage:
    """Days-since-sowing bands"""

    @pytest.mark.parametrize("elapsed,expected", [
        (0, CropStage.NURSERY),
        (20, CropStage.NURSERY),
        (21, CropStage.TILLERING),
        (45, CropStage.TILLERING),
        (50, CropStage.PANICLE_INIT),
        (65, CropStage.PANICLE_INIT),
        (80, CropStage.BOOTING),
        (100, CropStage.HEADING),
        (101, CropStage.MATURITY),
    ])
    def test_bands(self, elapsed, expected):
        assert infer_crop_stage(SOWING, SOWING + timedelta(days=elapsed)) == expected

    def test_unknown_without_sowing_date(self):
        assert infer_crop_stage(None, date(2025, 7, 1)) == CropStage.UNKNOWN


class TestLeafWetness:
    """Leaf wetness estimate from rain and humidity"""

    def test_rain_day(self):
        assert estimate_leaf_wetness_hours(50, 2.0) == 8.0

    def test_very_humid(self):
        assert estimate_leaf_wetness_hours(92, 0.0) == 6.0

    def test_humid(self):
        assert estimate_leaf_wetness_hours(86, 0.0) == 3.0

    def test_dry(self):
        assert estimate_leaf_wetness_hours(70, 0.0) == 0.0
        assert estimate_leaf_wetness_hours(None, None) == 0.0
