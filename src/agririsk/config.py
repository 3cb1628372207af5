from pydantic_settings import BaseSettings
from typing import Any, Dict, Optional
from functools import lru_cache
from pydantic import field_validator


class Settings(BaseSettings):
    """Engine settings loaded from environment variables"""

    # Application
    APP_NAME: str = "AgriRisk Engine"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Evaluation defaults
    DEFAULT_MODE: str = "FORECAST"
    DEFAULT_DAYS_WINDOW: int = 7
    PAST_WEIGHT: float = 0.4
    FUTURE_WEIGHT: float = 0.6
    AUTO_INGEST: bool = True

    # Ingestion cache
    INGEST_CACHE_BACKEND: str = "memory"  # "memory" or "redis"
    INGEST_CACHE_TTL: int = 3600  # 1 hour

    # Per-disease scoring overrides, e.g.
    # {"PADDY_BLAST": {"bias": 2.7, "weights": {"low_radiation": 1.4}}}
    MODEL_OVERRIDES: Dict[str, Dict[str, Any]] = {}

    # Database
    POSTGRES_USER: str = "agririsk"
    POSTGRES_PASSWORD: str = "agririsk"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "agririsk"

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    @field_validator('DEFAULT_MODE')
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Mode must be one of PAST, FORECAST, PROACTIVE"""
        mode = v.strip().upper()
        if mode not in ("PAST", "FORECAST", "PROACTIVE"):
            raise ValueError(f"Unknown evaluation mode: {v}")
        return mode

    @field_validator('INGEST_CACHE_BACKEND')
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        backend = v.strip().lower()
        if backend not in ("memory", "redis"):
            raise ValueError(f"Unknown cache backend: {v}")
        return backend

    @field_validator('DEFAULT_DAYS_WINDOW')
    @classmethod
    def validate_days_window(cls, v: int) -> int:
        """Horizon must cover at least one day"""
        if v < 1:
            raise ValueError(f"DEFAULT_DAYS_WINDOW {v} must be >= 1")
        return v

    @field_validator('PAST_WEIGHT', 'FUTURE_WEIGHT')
    @classmethod
    def validate_weight(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Blend weight {v} cannot be negative")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()
