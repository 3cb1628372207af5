"""
Memoized forecast ingestion

Wraps an IngestionTrigger so repeated evaluations of the same plot within
the TTL do not call the external weather API again. Only successful
ingestions are remembered.
"""

from typing import Any, Dict, Optional, Union

from loguru import logger

from .redis_cache import RedisTTLCache
from .ttl_cache import TTLCache
from ..config import Settings

NAMESPACE = "ingest:forecast"


class CachedIngestionTrigger:
    """
    IngestionTrigger decorator keyed per (plot, days)
    """

    def __init__(self, inner, cache: Union[TTLCache, RedisTTLCache], ttl: int = 3600):
        self.inner = inner
        self.cache = cache
        self.ttl = ttl

    def ingest_forecast(self, plot_id: str, days: int) -> Dict[str, Any]:
        identifier = f"{plot_id}:{days}"

        cached = self.cache.get(NAMESPACE, identifier)
        if cached is not None:
            logger.debug(f"Forecast ingestion for plot {plot_id} already done within TTL")
            return cached

        result = self.inner.ingest_forecast(plot_id, days)
        self.cache.set(NAMESPACE, identifier, result if result is not None else {}, self.ttl)
        return result


def build_ingestion_cache(settings: Settings) -> Union[TTLCache, RedisTTLCache]:
    """Cache backend selected by INGEST_CACHE_BACKEND"""
    if settings.INGEST_CACHE_BACKEND == "redis":
        return RedisTTLCache(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
        )
    return TTLCache()


def wrap_ingestion(inner, settings: Settings) -> Optional[CachedIngestionTrigger]:
    """Wrap an ingestion trigger with the configured cache; None stays None"""
    if inner is None:
        return None
    return CachedIngestionTrigger(inner, build_ingestion_cache(settings), ttl=settings.INGEST_CACHE_TTL)
