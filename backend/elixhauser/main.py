"""FastAPI application for the Elixhauser composite score service."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI

from elixhauser.api import scores_router
from elixhauser.core.config import settings
from elixhauser.services.elixhauser_scores import get_elixhauser_score_service

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Applies the configured log level and pre-warms the score service so
    the weight tables are built before the first request.
    """
    startup_start = time.perf_counter()
    logging.getLogger("elixhauser").setLevel(settings.log_level.upper())

    service = get_elixhauser_score_service()
    app.state.score_stats = service.get_stats()

    startup_ms = (time.perf_counter() - startup_start) * 1000
    logger.info(f"Server ready - total startup time: {startup_ms:.0f}ms")

    yield


app = FastAPI(
    title=settings.app_name,
    description="API for computing Elixhauser comorbidity composite scores (van Walraven, SID_30, SID_29) from HCUP comorbidity indicators.",
    version=VERSION,
    lifespan=lifespan,
    debug=settings.debug,
)

app.include_router(scores_router, prefix=settings.api_v1_prefix)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """Health check endpoint (liveness probe)."""
    return {
        "status": "healthy",
        "service": "elixhauser-composite-score",
        "version": VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "service": f"{settings.app_name} API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "scores": f"{settings.api_v1_prefix}/elixhauser/scores",
    }
