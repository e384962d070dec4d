# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for definitions, runs and dashboards
# CREATED: 09 FEB 2026
# ============================================================================
"""
API Module

FastAPI routes for the dashboard runtime.
"""

from .routes import router, set_services
from .schemas import (
    AppCreate,
    DashboardActionRequest,
    DashboardCreate,
    DashboardPrepareRequest,
    DashboardRunResponse,
    EventResponse,
    LayersUpdate,
    ResourceCreate,
    RunCreate,
    RunResponse,
)

__all__ = [
    "router",
    "set_services",
    "ResourceCreate",
    "LayersUpdate",
    "AppCreate",
    "DashboardCreate",
    "RunCreate",
    "RunResponse",
    "DashboardPrepareRequest",
    "DashboardActionRequest",
    "DashboardRunResponse",
    "EventResponse",
]
