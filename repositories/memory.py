# ============================================================================
# IN-MEMORY REPOSITORIES
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Process-local storage
# PURPOSE: Dict-backed stores for the service, tests and local runs
# CREATED: 06 FEB 2026
# ============================================================================
"""
In-Memory Repositories

Dict-backed implementations of the repository contracts. Nothing survives a
restart. Run storage enforces the concurrency token the same way a database
row version would.
"""

import logging
from typing import Dict, List, Optional

from core.errors import ConflictError, NotFoundError
from core.models import App, AuditEvent, Dashboard, Resource, Run
from repositories.base import (
    AppRepository,
    DashboardRepository,
    EventRepository,
    ResourceRepository,
    RunRepository,
)

logger = logging.getLogger(__name__)


class InMemoryResourceRepository(ResourceRepository):

    def __init__(self):
        self._items: Dict[str, Resource] = {}

    async def get_by_id(self, resource_id: str) -> Optional[Resource]:
        return self._items.get(resource_id)

    async def add(self, resource: Resource) -> None:
        if resource.id in self._items:
            raise ConflictError(f"Resource {resource.id} already exists")
        self._items[resource.id] = resource

    async def update(self, resource: Resource) -> None:
        if resource.id not in self._items:
            raise NotFoundError("Resource not found")
        self._items[resource.id] = resource


class InMemoryAppRepository(AppRepository):

    def __init__(self):
        self._items: Dict[str, App] = {}

    async def get_by_id(self, app_id: str) -> Optional[App]:
        return self._items.get(app_id)

    async def list_by_resource(self, resource_id: str) -> List[App]:
        return [app for app in self._items.values() if app.resource_id == resource_id]

    async def add(self, app: App) -> None:
        if app.id in self._items:
            raise ConflictError(f"App {app.id} already exists")
        self._items[app.id] = app

    async def update(self, app: App) -> None:
        if app.id not in self._items:
            raise NotFoundError("App not found")
        self._items[app.id] = app


class InMemoryRunRepository(RunRepository):
    """
    Stores runs with a monotonically increasing version per run.

    Stored runs never carry pending events; those are committed to the
    event store by the caller.
    """

    def __init__(self):
        self._items: Dict[str, Run] = {}

    async def get_by_id(self, run_id: str) -> Optional[Run]:
        return self._items.get(run_id)

    async def add(self, run: Run) -> None:
        if run.id in self._items:
            raise ConflictError(f"Run {run.id} already exists")
        self._items[run.id] = run.with_committed_events(version=1)

    async def update(self, run: Run) -> None:
        stored = self._items.get(run.id)
        if stored is None:
            raise NotFoundError("Run not found")
        if stored.version != run.version:
            logger.warning(
                f"Rejected stale update for run {run.id}: "
                f"version {run.version}, stored {stored.version}"
            )
            raise ConflictError(f"Run {run.id} was modified concurrently")
        self._items[run.id] = run.with_committed_events(version=stored.version + 1)


class InMemoryDashboardRepository(DashboardRepository):

    def __init__(self):
        self._items: Dict[str, Dashboard] = {}

    async def get_by_id(self, dashboard_id: str) -> Optional[Dashboard]:
        return self._items.get(dashboard_id)

    async def add(self, dashboard: Dashboard) -> None:
        if dashboard.id in self._items:
            raise ConflictError(f"Dashboard {dashboard.id} already exists")
        self._items[dashboard.id] = dashboard


class InMemoryEventRepository(EventRepository):
    """Saved events become visible in `events` only after commit."""

    def __init__(self):
        self._staged: List[AuditEvent] = []
        self.events: List[AuditEvent] = []

    async def save_event(self, event: AuditEvent) -> None:
        self._staged.append(event)

    async def commit(self) -> None:
        self.events.extend(self._staged)
        self._staged = []

    async def list_for_run(self, run_id: str) -> List[AuditEvent]:
        return [e for e in self.events if e.run_id == run_id]

    async def list_for_dashboard(self, dashboard_id: str) -> List[AuditEvent]:
        return [e for e in self.events if e.dashboard_id == dashboard_id]


__all__ = [
    "InMemoryResourceRepository",
    "InMemoryAppRepository",
    "InMemoryRunRepository",
    "InMemoryDashboardRepository",
    "InMemoryEventRepository",
]
