# ============================================================================
# DASHBOARD RUNTIME - MAIN APPLICATION
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire repositories, services and routes
# CREATED: 09 FEB 2026
# ============================================================================
"""
Dashboard Runtime Main Application

FastAPI application that:
1. Provides HTTP API for Resource/App/Dashboard definitions
2. Runs Apps as outbound HTTP calls
3. Runs dashboard prepare and action flows

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, EPOCH, RUNTIME_VERSION
from api.routes import router, set_services
from core.config import get_defaults
from core.logging import configure_logging, get_logger
from infrastructure import HttpExecutor
from repositories import (
    InMemoryAppRepository,
    InMemoryDashboardRepository,
    InMemoryEventRepository,
    InMemoryResourceRepository,
    InMemoryRunRepository,
)
from services import DashboardService, EventService, LayerService, RunService

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Builds repositories and services on startup.
    """
    logger.info(f"Starting Dashboard Runtime v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    defaults = get_defaults()
    resource_repo = InMemoryResourceRepository()
    app_repo = InMemoryAppRepository()
    run_repo = InMemoryRunRepository()
    dashboard_repo = InMemoryDashboardRepository()

    event_service = EventService(InMemoryEventRepository())
    run_service = RunService(
        app_repo=app_repo,
        resource_repo=resource_repo,
        run_repo=run_repo,
        event_service=event_service,
        http_executor=HttpExecutor(defaults.http),
    )
    dashboard_service = DashboardService(
        dashboard_repo=dashboard_repo,
        run_repo=run_repo,
        run_service=run_service,
        event_service=event_service,
    )

    set_services(
        layer_service=LayerService(resource_repo, app_repo, dashboard_repo),
        run_service=run_service,
        dashboard_service=dashboard_service,
        event_service=event_service,
    )
    logger.info(f"Services initialized (HTTP timeout {defaults.http.timeout_seconds}s)")

    yield

    logger.info("Dashboard Runtime stopped")


# Create FastAPI app
app = FastAPI(
    title="Dashboard Runtime",
    description=f"Epoch {EPOCH} Resource/App request composition and dashboard runtime",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Dashboard Runtime",
        "version": __version__,
        "runtime": RUNTIME_VERSION,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/livez")
async def livez():
    """Liveness probe."""
    return {"status": "ok"}


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
