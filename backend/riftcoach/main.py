"""Main FastAPI application for the RiftCoach backend."""

from contextlib import asynccontextmanager
from typing import Any, Dict

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from riftcoach.core import get_global_settings, setup_logging
from riftcoach.core.database import db_manager
from riftcoach.features.analysis.router import router as analysis_router
from riftcoach.features.benchmarks.router import router as benchmarks_router
from riftcoach.features.scoring.router import router as scoring_router
from riftcoach.features.scoring.roles import SCORING_VERSION

settings = get_global_settings()
setup_logging(settings.log_level)
logger = structlog.get_logger(__name__)

API_VERSION = "0.1.0"


def _validate_api_key_configuration() -> None:
    """Log whether a Riot API key is configured."""
    api_key = settings.riot_api_key
    if not api_key or api_key == "your_riot_api_key_here":
        logger.warning(
            "RIOT_API_KEY not configured, analysis endpoints will fail",
            hint="Get your key from https://developer.riotgames.com",
        )
    elif api_key.startswith("RGAPI-"):
        logger.info("Riot API key configured (development key detected)")
        logger.warning("Development API keys expire every 24 hours")
    else:
        logger.info("Riot API key configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting up RiftCoach backend", scoring_version=SCORING_VERSION)
    _validate_api_key_configuration()
    yield
    logger.info("Shutting down RiftCoach backend")
    await db_manager.close()


tags_metadata = [
    {
        "name": "analysis",
        "description": "Multi-match player analysis: aggregates, trends and coaching.",
    },
    {
        "name": "matches",
        "description": "Single-match performance grades.",
    },
    {
        "name": "champion-benchmarks",
        "description": "Stored champion population benchmarks.",
    },
    {
        "name": "health",
        "description": "Health check and system status endpoints.",
    },
]

app = FastAPI(
    title="RiftCoach - Performance Insights Service",
    description="""
    League of Legends performance grading and coaching API.

    ## Features

    * **Match Score**: Grade one game with sub-scores and short insights
    * **Player Analysis**: Role and champion aggregates, trends, strengths,
      weaknesses and an improvement plan over recent ranked games
    * **Champion Benchmarks**: Population averages per champion and role
    """,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router, prefix="/api/v1")
app.include_router(scoring_router, prefix="/api/v1")
app.include_router(benchmarks_router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Used by monitoring tools and load balancers to check the service is up.
    """
    return {
        "status": "healthy",
        "message": "Application is running",
        "version": API_VERSION,
        "scoringVersion": SCORING_VERSION,
        "debug": settings.debug,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "riftcoach.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
