"""Thin Redis client wrapper used by the portal DAO."""
import json
import logging
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)


class PortalRedisClient:
    """Redis client wrapper with JSON and set helpers."""

    def __init__(self, client: redis.Redis):
        """Initialize the wrapper.

        Args:
            client: Redis client (created with decode_responses=True)
        """
        self.client = client

        try:
            self.ping()
            logger.info("Connected to Redis")
        except redis.ConnectionError as e:
            logger.error(f"Could not connect to Redis: {e}")
            raise

    def get(self, key: str) -> Optional[str]:
        """Get value for a given key, or None if the key doesn't exist."""
        return self.client.get(key)

    def keys(self, pattern: str) -> list[str]:
        """Return all keys matching the given pattern (e.g. "prefix:*")."""
        return self.client.keys(pattern)

    def set_json(self, key: str, data: Any) -> None:
        """Serialize ``data`` (pydantic model or plain object) and store it."""
        if hasattr(data, "model_dump_json"):
            json_data = data.model_dump_json(by_alias=True)
        else:
            json_data = json.dumps(data)
        self.client.set(key, json_data)

    def sadd(self, name: str, *values: str) -> int:
        """Add members to a set."""
        return self.client.sadd(name, *values)

    def smembers(self, name: str) -> set[str]:
        """Return all members of a set."""
        return self.client.smembers(name)

    def scard(self, name: str) -> int:
        """Return the number of members in a set."""
        return self.client.scard(name)

    def mget(self, keys: list[str]) -> list[Optional[str]]:
        """Get several keys in one round trip."""
        if not keys:
            return []
        return self.client.mget(keys)

    def ping(self) -> bool:
        """Check connectivity to Redis.

        Raises:
            redis.ConnectionError if connection fails
        """
        return self.client.ping()
