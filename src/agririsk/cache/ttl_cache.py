"""
In-process TTL cache
"""

import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple

from loguru import logger


class TTLCache:
    """
    Namespaced key/value cache with per-entry expiry and a size cap

    Same get/set/delete surface as RedisTTLCache so either can back
    the ingestion memo. Expired entries are purged on every write; past
    `maxsize` the least recently used entry is evicted.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, maxsize: int = 1024):
        self._clock = clock
        self.maxsize = max(1, maxsize)
        self._entries: "OrderedDict[str, Tuple[Any, Optional[float]]]" = OrderedDict()

    @staticmethod
    def _make_key(namespace: str, identifier: str) -> str:
        return f"{namespace}:{identifier}"

    def _purge_expired(self, now: float):
        expired = [
            key for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]

    def set(self, namespace: str, identifier: str, value: Any, ttl: Optional[int] = None) -> bool:
        now = self._clock()
        self._purge_expired(now)

        key = self._make_key(namespace, identifier)
        self._entries[key] = (value, now + ttl if ttl else None)
        self._entries.move_to_end(key)

        while len(self._entries) > self.maxsize:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Cache full, evicted: {evicted}")
        return True

    def get(self, namespace: str, identifier: str, default: Any = None) -> Any:
        key = self._make_key(namespace, identifier)
        entry = self._entries.get(key)
        if entry is None:
            return default

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            logger.debug(f"Cache expired: {key}")
            del self._entries[key]
            return default

        self._entries.move_to_end(key)
        return value

    def delete(self, namespace: str, identifier: str) -> bool:
        return self._entries.pop(self._make_key(namespace, identifier), None) is not None

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
