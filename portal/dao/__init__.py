"""Data access objects."""
from portal.dao.redis_portal_dao import RedisPortalDAO

__all__ = ["RedisPortalDAO"]
