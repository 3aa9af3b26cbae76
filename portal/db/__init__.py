"""Redis access layer."""
from portal.db.redis_client import PortalRedisClient

__all__ = ["PortalRedisClient"]
