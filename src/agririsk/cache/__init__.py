"""
Caching for forecast ingestion
"""

from .ttl_cache import TTLCache
from .redis_cache import RedisTTLCache
from .ingestion import CachedIngestionTrigger, build_ingestion_cache, wrap_ingestion

__all__ = [
    'TTLCache',
    'RedisTTLCache',
    'CachedIngestionTrigger',
    'build_ingestion_cache',
    'wrap_ingestion'
]
