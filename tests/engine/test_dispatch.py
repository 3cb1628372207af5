"""
Unit tests for crop / disease dispatch
"""

import pytest
from datetime import date, timedelta

from agririsk.engine.dispatch import CropDiseaseDispatch
from agririsk.engine.diseases import ALL_MODELS, RICE_MODELS, BlastModel
from agririsk.exceptions import UnmappedDiseaseError
from agririsk.models.risk import CropType, Disease
from agririsk.models.weather import CropStage, WeatherDay, WeatherWindow, WindowType


@pytest.fixture
def dispatch():
    return CropDiseaseDispatch()


@pytest.fixture
def humid_window():
    start = date(2025, 12, 1)
    return WeatherWindow(
        plot_id="P1",
        window_type=WindowType.FORECAST,
        crop_stage=CropStage.TILLERING,
        days=[
            WeatherDay(date=start + timedelta(days=i), t_min=19, t_max=28,
                       rh_morning=95, rh_evening=85, rainfall_mm=8, solar_radiation=11,
                       leaf_wetness_hours=9)
            for i in range(7)
        ],
    )


class TestRegistry:
    """Building and validating the disease -> model table"""

    def test_all_diseases_registered(self, dispatch):
        for disease in Disease:
            assert dispatch.model_for(disease).disease == disease

    def test_missing_model_raises(self):
        with pytest.raises(UnmappedDiseaseError, match="CHILLI_ANTHRACNOSE"):
            CropDiseaseDispatch(model_classes=RICE_MODELS)

    def test_duplicate_model_raises(self):
        with pytest.raises(UnmappedDiseaseError, match="Duplicate"):
            CropDiseaseDispatch(model_classes=ALL_MODELS + (BlastModel,))

    def test_overrides_applied(self):
        dispatch = CropDiseaseDispatch(overrides={
            "PADDY_BLAST": {"bias": 3.0, "weights": {"low_radiation": 1.0}}
        })
        model = dispatch.model_for("PADDY_BLAST")

        assert model.bias == 3.0
        assert model.weights["low_radiation"] == 1.0
        assert model.weights["night_temperature"] == BlastModel.WEIGHTS["night_temperature"]

    def test_override_for_unknown_signal_rejected(self):
        with pytest.raises(ValueError, match="solar_radiation"):
            CropDiseaseDispatch(overrides={"PADDY_BLAST": {"weights": {"solar_radiation": 1.4}}})

    def test_override_for_unknown_disease_rejected(self):
        with pytest.raises(ValueError, match="PADDY_RUST"):
            CropDiseaseDispatch(overrides={"PADDY_RUST": {"bias": 1.0}})


class TestDiseasesForCrop:
    def test_rice_in_fixed_order(self, dispatch):
        assert dispatch.diseases_for_crop("RICE") == [
            Disease.PADDY_BLAST,
            Disease.PADDY_BLB,
            Disease.PADDY_SHEATH_BLIGHT,
            Disease.PADDY_BROWN_SPOT,
        ]

    def test_paddy_alias_and_case(self, dispatch):
        assert dispatch.diseases_for_crop("paddy") == dispatch.diseases_for_crop(CropType.RICE)

    @pytest.mark.parametrize("crop,count", [
        ("CHILLI", 3),
        ("Blackgram", 3),
        ("maize", 2),
    ])
    def test_other_crops(self, dispatch, crop, count):
        assert len(dispatch.diseases_for_crop(crop)) == count

    def test_unsupported_crop_is_empty(self, dispatch):
        assert dispatch.diseases_for_crop("COTTON") == []
        assert dispatch.diseases_for_crop(None) == []
        assert not dispatch.is_supported("COTTON")


class TestEvaluate:
    def test_missing_window_scores_zero(self, dispatch):
        result = dispatch.evaluate(Disease.PADDY_BLAST, None)

        assert result.risk01 == 0.0
        assert result.adjusted_risk01 == 0.0
        assert result.explanation == ["No recent weather data"]

    def test_empty_window_scores_zero(self, dispatch):
        window = WeatherWindow(plot_id="P1", window_type=WindowType.PAST)

        assert dispatch.evaluate("PADDY_BLB", window).risk01 == 0.0

    def test_window_modifiers_applied(self, dispatch, humid_window):
        result = dispatch.evaluate(Disease.PADDY_BLAST, humid_window)

        assert result.modifiers == {"seasonal": 1.4, "stage": 1.2}
        assert result.adjusted_risk01 >= result.risk01
        assert 0.0 <= result.adjusted_risk01 <= 1.0

    def test_deterministic(self, dispatch, humid_window):
        first = dispatch.evaluate(Disease.PADDY_SHEATH_BLIGHT, humid_window)
        second = dispatch.evaluate(Disease.PADDY_SHEATH_BLIGHT, humid_window)

        assert first.adjusted_risk01 == second.adjusted_risk01
        assert first.drivers == second.drivers
