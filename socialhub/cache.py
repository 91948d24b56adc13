"""
Namespaced key-value cache on the shared Redis client.

Values that are dicts or lists are stored as JSON. Every operation degrades to
a falsy result when Redis is not connected or a command fails, so callers
treat the cache as advisory.
"""
import json
from typing import Any, Optional
from . import core
import logging

logger = logging.getLogger(__name__)

class KeyValueCache:

    def __init__(self, namespace: str = "", default_ttl: int = 3600):
        self.namespace = namespace
        self.default_ttl = default_ttl

    def key(self, name: str) -> str:
        return f"{self.namespace}:{name}" if self.namespace else name

    async def set(self, name: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store ``value`` under ``name`` with an expiry in seconds"""
        redis_client = await core.get_redis()
        if not redis_client:
            return False
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        try:
            await redis_client.set(self.key(name), value, ex=ttl or self.default_ttl)
        except Exception as e:
            logger.error(f"Cache write failed for {self.key(name)}: {e}")
            return False
        return True

    async def get(self, name: str) -> Optional[Any]:
        redis_client = await core.get_redis()
        if not redis_client:
            return None
        try:
            raw = await redis_client.get(self.key(name))
        except Exception as e:
            logger.error(f"Cache read failed for {self.key(name)}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return raw

    async def delete(self, name: str) -> bool:
        redis_client = await core.get_redis()
        if not redis_client:
            return False
        try:
            return await redis_client.delete(self.key(name)) > 0
        except Exception as e:
            logger.error(f"Cache delete failed for {self.key(name)}: {e}")
            return False

    async def exists(self, name: str) -> bool:
        redis_client = await core.get_redis()
        if not redis_client:
            return False
        try:
            return await redis_client.exists(self.key(name)) > 0
        except Exception as e:
            logger.error(f"Cache lookup failed for {self.key(name)}: {e}")
            return False
