"""Dependency injection container for application components."""
import logging

import redis

from portal.config import Settings
from portal.dao import RedisPortalDAO
from portal.db import PortalRedisClient
from portal.handlers import AnalyticsHandler, EventHandler, VenueHandler
from portal.services import AnalyticsService, EventService, SessionService, VenueService

logger = logging.getLogger(__name__)


class Container:
    """Dependency injection container.

    Initializes and wires up all application dependencies.
    """

    def __init__(self, settings: Settings):
        """Initialize container with all dependencies.

        Args:
            settings: Application settings
        """
        logger.info("[Container] Initializing container")
        self.settings = settings

        logger.info(
            f"[Container] Connecting to Redis at {settings.redis_host}:{settings.redis_port}"
        )
        self.redis_internal_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password or None,
            db=settings.redis_db,
            decode_responses=True,
        )

        try:
            self.redis_internal_client.ping()
            logger.info("[Container] Redis connection successful")
        except redis.RedisError as e:
            logger.error(f"[Container] Failed to connect to Redis: {e}")
            raise

        self.redis_client = PortalRedisClient(self.redis_internal_client)
        self.portal_dao = RedisPortalDAO(self.redis_client)

        self.session_service = SessionService(self.portal_dao)
        self.event_service = EventService(
            self.portal_dao,
            default_timezone=settings.venue_timezone,
            default_occurrences=settings.default_occurrences,
            max_occurrences=settings.max_occurrences,
        )
        self.analytics_service = AnalyticsService(
            self.portal_dao,
            default_timezone=settings.venue_timezone,
            day_window=settings.analytics_day_window,
            recent_days_window=settings.recent_days_window,
            reviews_recent_days=settings.reviews_recent_days,
            top_vibe_tags_limit=settings.top_vibe_tags_limit,
        )
        self.venue_service = VenueService(self.portal_dao)
        logger.info("[Container] Services initialized")

        self.event_handler = EventHandler(self.session_service, self.event_service)
        self.analytics_handler = AnalyticsHandler(self.session_service, self.analytics_service)
        self.venue_handler = VenueHandler(self.session_service, self.venue_service)
        logger.info("[Container] Handlers initialized")

    def shutdown(self) -> None:
        """Close the Redis connection pool."""
        logger.info("[Container] Closing Redis connection")
        self.redis_internal_client.close()
