"""
Redis counterpart of TTLCache, so batch workers on different hosts
share one ingestion memo.
"""

import json
from typing import Any, Optional

import redis
from loguru import logger


class RedisTTLCache:
    """
    Same interface as TTLCache; keys are stored as `{prefix}:{namespace}:{identifier}`

    Redis failures are logged and read as a miss, so a dead cache only costs
    an extra ingestion request.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        prefix: str = "agririsk",
        client: Optional[redis.Redis] = None
    ):
        self.prefix = prefix
        self.client = client or redis.Redis(
            host=host,
            port=port,
            db=db,
            password=password,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        if client is None:
            logger.info(f"Ingestion cache backed by Redis at {host}:{port}/{db}")

    def _make_key(self, namespace: str, identifier: str) -> str:
        return f"{self.prefix}:{namespace}:{identifier}"

    def set(self, namespace: str, identifier: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON-encoded value; a falsy ttl means no expiry"""
        key = self._make_key(namespace, identifier)
        payload = json.dumps(value, default=str)
        try:
            stored = self.client.setex(key, ttl, payload) if ttl else self.client.set(key, payload)
        except redis.RedisError as e:
            logger.warning(f"Redis write failed for {key}: {e}")
            return False
        return bool(stored)

    def get(self, namespace: str, identifier: str, default: Any = None) -> Any:
        key = self._make_key(namespace, identifier)
        try:
            raw = self.client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Redis read failed for {key}, treating as miss: {e}")
            return default
        return default if raw is None else json.loads(raw)

    def delete(self, namespace: str, identifier: str) -> bool:
        key = self._make_key(namespace, identifier)
        try:
            return bool(self.client.delete(key))
        except redis.RedisError as e:
            logger.warning(f"Redis delete failed for {key}: {e}")
            return False
