"""Main entry point for the venue portal backend.

Startup sequence:
1. Load settings
2. Initialize DI container (Redis, DAO, services, handlers)
3. Inject handlers into routers
4. Serve HTTP with FastAPI
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from portal.config import Settings
from portal.container import Container
from portal.middleware import PrometheusMiddleware
from portal.routers import (
    analytics_router,
    event_router,
    set_analytics_handler,
    set_event_handler,
    set_venue_handler,
    venue_router,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global container
container: Container = None


def startup_sequence(settings: Settings):
    """Build the container and wire handlers into the routers."""
    global container

    logger.info("[Main] Starting startup sequence")
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info("[Main] Initializing DI container")
    container = Container(settings)

    logger.info("[Main] Injecting handlers into routers")
    set_event_handler(container.event_handler)
    set_analytics_handler(container.analytics_handler)
    set_venue_handler(container.venue_handler)

    logger.info("[Main] Startup sequence completed")


def shutdown_sequence():
    """Clean up resources on shutdown."""
    global container

    logger.info("[Main] Starting shutdown sequence")
    if container:
        container.shutdown()
        container = None
    logger.info("[Main] Shutdown sequence completed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown."""
    startup_sequence(Settings())
    yield
    shutdown_sequence()


# Create FastAPI app
settings = Settings()
app = FastAPI(
    title="Venue Portal API",
    description="Venue events, weekly recurrence, venue profile and venue analytics",
    version="1.0.0",
    lifespan=lifespan,
)

# Add Prometheus metrics middleware
app.add_middleware(PrometheusMiddleware)

# Register routers at app creation time (before uvicorn starts)
app.include_router(event_router)
app.include_router(analytics_router)
app.include_router(venue_router)


# Health check endpoint
@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Prometheus metrics endpoint
@app.get("/metrics", response_class=PlainTextResponse)
def metrics():
    """Prometheus metrics endpoint for scraping."""
    return PlainTextResponse(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


if __name__ == "__main__":
    import uvicorn

    logger.info("[Main] Starting Venue Portal")
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
