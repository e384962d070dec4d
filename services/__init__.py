# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Business logic layer
# PURPOSE: Definition, run, dashboard and audit services
# CREATED: 07 FEB 2026
# ============================================================================
"""
Services Module

Business logic for the dashboard runtime.
Services coordinate between repositories, the engine and the HTTP executor.

Usage:
    from services import RunService

    run_service = RunService(app_repo, resource_repo, run_repo, event_service, executor)
    run = await run_service.create_run(app_id, input_values, current_user)
"""

from .event_service import EventService
from .layer_service import LayerService
from .run_service import RunService
from .dashboard_service import DashboardService, DashboardRunResult

__all__ = [
    "EventService",
    "LayerService",
    "RunService",
    "DashboardService",
    "DashboardRunResult",
]
