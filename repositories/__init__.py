# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Storage layer
# PURPOSE: Entity and event store contracts plus in-memory implementations
# CREATED: 06 FEB 2026
# ============================================================================
"""
Repositories Module

Storage contracts for resources, apps, runs, dashboards and audit events.

Usage:
    from repositories import InMemoryRunRepository

    run_repo = InMemoryRunRepository()
    await run_repo.add(run)
    stored = await run_repo.get_by_id(run.id)
"""

from .base import (
    AppRepository,
    DashboardRepository,
    EventRepository,
    ResourceRepository,
    RunRepository,
)
from .memory import (
    InMemoryAppRepository,
    InMemoryDashboardRepository,
    InMemoryEventRepository,
    InMemoryResourceRepository,
    InMemoryRunRepository,
)

__all__ = [
    "ResourceRepository",
    "AppRepository",
    "RunRepository",
    "DashboardRepository",
    "EventRepository",
    "InMemoryResourceRepository",
    "InMemoryAppRepository",
    "InMemoryRunRepository",
    "InMemoryDashboardRepository",
    "InMemoryEventRepository",
]
