# ============================================================================
# LAYER SERVICE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Resource/App/Dashboard definitions
# PURPOSE: Create and update definitions with symmetric layer conflict checks
# CREATED: 07 FEB 2026
# ============================================================================
"""
Layer Service

Owns writes to Resource, App and Dashboard definitions. The only rule that
spans entities lives here: an App's layers must never share a key with its
Resource's layers, checked whichever side changes.

- create_app / update_app_layers: App against its Resource
- update_resource_layers: Resource against every App referencing it
"""

import logging
from typing import Any, Optional, Sequence

from core.errors import NotFoundError
from core.models import App, Dashboard, KeyValuePair, Resource, build_model
from orchestrator.engine.bindings import DashboardConfiguration
from orchestrator.engine.conflicts import check_layer_conflicts, check_resource_against_apps
from repositories import AppRepository, DashboardRepository, ResourceRepository

logger = logging.getLogger(__name__)


class LayerService:
    """Service for Resource, App and Dashboard definitions."""

    def __init__(
        self,
        resource_repo: ResourceRepository,
        app_repo: AppRepository,
        dashboard_repo: DashboardRepository,
    ):
        self.resource_repo = resource_repo
        self.app_repo = app_repo
        self.dashboard_repo = dashboard_repo

    async def _get_resource(self, resource_id: str) -> Resource:
        resource = await self.resource_repo.get_by_id(resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        return resource

    async def _get_app(self, app_id: str) -> App:
        app = await self.app_repo.get_by_id(app_id)
        if app is None:
            raise NotFoundError("App not found")
        return app

    # =========================================================================
    # RESOURCES
    # =========================================================================

    async def create_resource(self, **fields: Any) -> Resource:
        resource = Resource.create(**fields)
        await self.resource_repo.add(resource)
        logger.info(f"Created resource {resource.id} ({resource.name})")
        return resource

    async def update_resource_layers(
        self,
        resource_id: str,
        url_parameters: Optional[Sequence[KeyValuePair]] = None,
        headers: Optional[Sequence[KeyValuePair]] = None,
        body: Optional[Sequence[KeyValuePair]] = None,
    ) -> Resource:
        """
        Replace the given layers of a Resource. None leaves a layer unchanged.

        Raises:
            NotFoundError: no such Resource
            ValidationError: invalid layer entries
            ConflictError: a key collides with an App on this Resource
        """
        resource = await self._get_resource(resource_id)
        updated = build_model(Resource, **{
            **resource.model_dump(),
            "url_parameters": resource.url_parameters if url_parameters is None else url_parameters,
            "headers": resource.headers if headers is None else headers,
            "body": resource.body if body is None else body,
        })

        apps = await self.app_repo.list_by_resource(resource_id)
        check_resource_against_apps(apps, updated.url_parameters, updated.headers, updated.body)

        await self.resource_repo.update(updated)
        logger.info(f"Updated layers of resource {resource_id} ({len(apps)} apps checked)")
        return updated

    # =========================================================================
    # APPS
    # =========================================================================

    async def create_app(self, **fields: Any) -> App:
        """
        Create an App on an existing Resource.

        Raises:
            ValidationError: invalid fields
            NotFoundError: Resource missing
            ConflictError: a layer key collides with the Resource
        """
        app = App.create(**fields)
        resource = await self._get_resource(app.resource_id)
        check_layer_conflicts(resource, app.url_parameters, app.headers, app.body)
        await self.app_repo.add(app)
        logger.info(f"Created app {app.id} ({app.name}) on resource {resource.id}")
        return app

    async def update_app_layers(
        self,
        app_id: str,
        url_parameters: Optional[Sequence[KeyValuePair]] = None,
        headers: Optional[Sequence[KeyValuePair]] = None,
        body: Optional[Sequence[KeyValuePair]] = None,
    ) -> App:
        """Replace the given layers of an App. None leaves a layer unchanged."""
        app = await self._get_app(app_id)
        updated = build_model(App, **{
            **app.model_dump(),
            "url_parameters": app.url_parameters if url_parameters is None else url_parameters,
            "headers": app.headers if headers is None else headers,
            "body": app.body if body is None else body,
        })

        resource = await self._get_resource(updated.resource_id)
        check_layer_conflicts(resource, updated.url_parameters, updated.headers, updated.body)

        await self.app_repo.update(updated)
        logger.info(f"Updated layers of app {app_id}")
        return updated

    # =========================================================================
    # DASHBOARDS
    # =========================================================================

    async def create_dashboard(self, **fields: Any) -> Dashboard:
        """
        Create a Dashboard whose configuration parses and whose prepare app
        exists.
        """
        dashboard = Dashboard.create(**fields)
        DashboardConfiguration.parse(dashboard.configuration)
        if dashboard.prepare_app_id is not None:
            await self._get_app(dashboard.prepare_app_id)
        await self.dashboard_repo.add(dashboard)
        logger.info(f"Created dashboard {dashboard.id} ({dashboard.name})")
        return dashboard


__all__ = ["LayerService"]
