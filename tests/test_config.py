"""
Unit tests for engine settings
"""

import pytest
from pydantic import ValidationError

from agririsk.config import Settings
from agririsk.engine.dispatch import CropDiseaseDispatch


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.DEFAULT_MODE == "FORECAST"
        assert settings.DEFAULT_DAYS_WINDOW == 7
        assert settings.PAST_WEIGHT == 0.4
        assert settings.FUTURE_WEIGHT == 0.6
        assert settings.INGEST_CACHE_TTL == 3600

    def test_mode_normalized(self):
        assert Settings(DEFAULT_MODE="proactive").DEFAULT_MODE == "PROACTIVE"

    @pytest.mark.parametrize("field,value", [
        ("DEFAULT_MODE", "HINDCAST"),
        ("DEFAULT_DAYS_WINDOW", 0),
        ("PAST_WEIGHT", -0.1),
        ("INGEST_CACHE_BACKEND", "memcached"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_overrides_from_environment(self, monkeypatch):
        monkeypatch.setenv("MODEL_OVERRIDES", '{"PADDY_BLAST": {"bias": 2.7}}')
        monkeypatch.setenv("INGEST_CACHE_BACKEND", "REDIS")

        settings = Settings()

        assert settings.MODEL_OVERRIDES == {"PADDY_BLAST": {"bias": 2.7}}
        assert settings.INGEST_CACHE_BACKEND == "redis"

    def test_documented_override_shape_builds_dispatch(self, monkeypatch):
        monkeypatch.setenv(
            "MODEL_OVERRIDES", '{"PADDY_BLAST": {"bias": 2.7, "weights": {"low_radiation": 1.4}}}'
        )

        model = CropDiseaseDispatch(overrides=Settings().MODEL_OVERRIDES).model_for("PADDY_BLAST")

        assert model.bias == 2.7
        assert model.weights["low_radiation"] == 1.4
