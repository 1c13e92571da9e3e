"""Main FastAPI application for the route weather service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi_cache import FastAPICache
from fastapi_cache.backends.redis import RedisBackend

from route_weather.api.endpoints import router as api_router
from route_weather.api.pages import STATIC_PATH, router as pages_router
from route_weather.config import (
    HOST, PORT, DEBUG, REDIS_URL, CACHE_PREFIX, RATE_LIMIT_ENABLED
)
from route_weather.logging_config import configure_logging
from route_weather.middleware.rate_limit import RateLimitMiddleware

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info(f"Connecting to Redis at {REDIS_URL}")
    redis_client = redis.from_url(REDIS_URL)
    FastAPICache.init(RedisBackend(redis_client), prefix=CACHE_PREFIX)
    logger.info(f"Cache backend active: {FastAPICache.get_backend()}")

    logger.info("Starting Route Weather Planner")
    try:
        yield
    finally:
        logger.info("Shutting down Route Weather Planner")
        await redis_client.aclose()


def create_app(rate_limit_enabled: bool = RATE_LIMIT_ENABLED) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        rate_limit_enabled: Whether API calls are rate limited

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Route Weather Planner",
        description="Driving routes with the weather forecast expected along the way, "
                    "using OpenRouteService and MET Norway's yr.no API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RateLimitMiddleware, enabled=rate_limit_enabled)

    app.include_router(api_router)
    app.mount("/static", StaticFiles(directory=STATIC_PATH), name="static")
    # Registered last: "/{locale}/" would otherwise shadow other routes
    app.include_router(pages_router)

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        "route_weather.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
