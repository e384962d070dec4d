# ============================================================================
# REPOSITORY CONTRACTS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Storage boundary
# PURPOSE: Abstract entity and event stores consumed by the services
# CREATED: 06 FEB 2026
# ============================================================================
"""
Repository Contracts

The services depend only on these interfaces. Each entity store exposes
get_by_id / add / update; the event store exposes save_event / commit.

Run stores own the concurrency token: `add` assigns the first version and
`update` must reject a run whose version is stale. Callers therefore re-read
a run after `add` before applying further transitions.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from core.models import App, AuditEvent, Dashboard, Resource, Run


class ResourceRepository(ABC):

    @abstractmethod
    async def get_by_id(self, resource_id: str) -> Optional[Resource]:
        ...

    @abstractmethod
    async def add(self, resource: Resource) -> None:
        ...

    @abstractmethod
    async def update(self, resource: Resource) -> None:
        ...


class AppRepository(ABC):

    @abstractmethod
    async def get_by_id(self, app_id: str) -> Optional[App]:
        ...

    @abstractmethod
    async def list_by_resource(self, resource_id: str) -> List[App]:
        """Apps currently referencing a Resource."""
        ...

    @abstractmethod
    async def add(self, app: App) -> None:
        ...

    @abstractmethod
    async def update(self, app: App) -> None:
        ...


class RunRepository(ABC):

    @abstractmethod
    async def get_by_id(self, run_id: str) -> Optional[Run]:
        ...

    @abstractmethod
    async def add(self, run: Run) -> None:
        """
        Persist a new run and assign its first concurrency token.

        Raises:
            ConflictError: a run with this id already exists
        """
        ...

    @abstractmethod
    async def update(self, run: Run) -> None:
        """
        Persist a transitioned run.

        Raises:
            NotFoundError: run was never added
            ConflictError: run.version is stale
        """
        ...


class DashboardRepository(ABC):

    @abstractmethod
    async def get_by_id(self, dashboard_id: str) -> Optional[Dashboard]:
        ...

    @abstractmethod
    async def add(self, dashboard: Dashboard) -> None:
        ...


class EventRepository(ABC):

    @abstractmethod
    async def save_event(self, event: AuditEvent) -> None:
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Make every saved event durable as one unit."""
        ...

    @abstractmethod
    async def list_for_run(self, run_id: str) -> List[AuditEvent]:
        ...

    @abstractmethod
    async def list_for_dashboard(self, dashboard_id: str) -> List[AuditEvent]:
        ...


__all__ = [
    "ResourceRepository",
    "AppRepository",
    "RunRepository",
    "DashboardRepository",
    "EventRepository",
]
