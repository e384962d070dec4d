# ============================================================================
# API ROUTES
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP endpoints for definitions, runs and dashboard runtime
# CREATED: 09 FEB 2026
# ============================================================================
"""
API Routes

Endpoints:
- POST /api/v1/resources                                   - Create Resource
- PUT  /api/v1/resources/{resource_id}/layers              - Update Resource layers
- POST /api/v1/apps                                        - Create App
- PUT  /api/v1/apps/{app_id}/layers                        - Update App layers
- POST /api/v1/dashboards                                  - Create Dashboard
- POST /api/v1/apps/{app_id}/runs                          - Run an App
- GET  /api/v1/runs/{run_id}                               - Get run
- GET  /api/v1/runs/{run_id}/events                        - Run audit events
- POST /api/v1/dashboards/{dashboard_id}/prepare           - Prepare dashboard
- POST /api/v1/dashboards/{dashboard_id}/actions/{action_id}/run - Run action

The current user comes from X-User-* headers set by the fronting identity
layer.
"""

import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, Header, HTTPException

from core.errors import (
    ConflictError,
    DomainError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from core.models import CurrentUser, LayeredModel
from core.models.request import redact_headers

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

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidOperationError, 422),
)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_layer_service = None
_run_service = None
_dashboard_service = None
_event_service = None


def set_services(layer_service, run_service, dashboard_service, event_service):
    """Called by main.py at startup to inject services."""
    global _layer_service, _run_service, _dashboard_service, _event_service
    _layer_service = layer_service
    _run_service = run_service
    _dashboard_service = dashboard_service
    _event_service = event_service


def _require(service, name: str):
    if service is None:
        raise HTTPException(503, f"{name} not initialized")
    return service


def _raise_http(error: DomainError) -> NoReturn:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            raise HTTPException(status_code, str(error))
    raise HTTPException(500, str(error))


def _redacted(definition: LayeredModel):
    """Definitions are returned with Authorization header values redacted."""
    return definition.model_copy(update={"headers": redact_headers(definition.headers)})


def get_current_user(
    x_user_id: str = Header(..., description="Authenticated user id"),
    x_user_email: str = Header(default=""),
    x_user_first_name: str = Header(default=""),
    x_user_last_name: str = Header(default=""),
) -> CurrentUser:
    return CurrentUser(
        id=x_user_id,
        email=x_user_email,
        first_name=x_user_first_name,
        last_name=x_user_last_name,
    )


# ============================================================================
# DEFINITIONS
# ============================================================================

@router.post("/resources", status_code=201)
async def create_resource(request: ResourceCreate):
    """Create a Resource."""
    svc = _require(_layer_service, "Layer service")
    try:
        resource = await svc.create_resource(**request.model_dump())
    except DomainError as e:
        _raise_http(e)
    return _redacted(resource)


@router.put("/resources/{resource_id}/layers")
async def update_resource_layers(resource_id: str, request: LayersUpdate):
    """Replace Resource layers, checked against every App on the Resource."""
    svc = _require(_layer_service, "Layer service")
    try:
        resource = await svc.update_resource_layers(
            resource_id,
            url_parameters=request.url_parameters,
            headers=request.headers,
            body=request.body,
        )
    except DomainError as e:
        _raise_http(e)
    return _redacted(resource)


@router.post("/apps", status_code=201)
async def create_app(request: AppCreate):
    """Create an App, checked against its Resource."""
    svc = _require(_layer_service, "Layer service")
    try:
        app = await svc.create_app(**request.model_dump())
    except DomainError as e:
        _raise_http(e)
    return _redacted(app)


@router.put("/apps/{app_id}/layers")
async def update_app_layers(app_id: str, request: LayersUpdate):
    """Replace App layers, checked against its Resource."""
    svc = _require(_layer_service, "Layer service")
    try:
        app = await svc.update_app_layers(
            app_id,
            url_parameters=request.url_parameters,
            headers=request.headers,
            body=request.body,
        )
    except DomainError as e:
        _raise_http(e)
    return _redacted(app)


@router.post("/dashboards", status_code=201)
async def create_dashboard(request: DashboardCreate):
    """Create a Dashboard; its configuration must parse."""
    svc = _require(_layer_service, "Layer service")
    try:
        return await svc.create_dashboard(**request.model_dump())
    except DomainError as e:
        _raise_http(e)


# ============================================================================
# RUNS
# ============================================================================

@router.post("/apps/{app_id}/runs", response_model=RunResponse, status_code=201)
async def create_run(
    app_id: str,
    request: RunCreate,
    user: CurrentUser = Depends(get_current_user),
):
    """
    Validate, compose and execute a run of an App.

    Setup failures come back as a run in InvalidConfiguration, not an error.
    """
    svc = _require(_run_service, "Run service")
    try:
        run = await svc.create_run(app_id, request.input_values, user)
    except DomainError as e:
        _raise_http(e)
    return RunResponse.from_run(run)


@router.get("/runs/{run_id}", response_model=RunResponse)
async def get_run(run_id: str):
    """Get a run; Authorization headers are redacted."""
    svc = _require(_run_service, "Run service")
    try:
        run = await svc.get_run(run_id)
    except DomainError as e:
        _raise_http(e)
    return RunResponse.from_run(run)


@router.get("/runs/{run_id}/events", response_model=List[EventResponse])
async def get_run_events(run_id: str):
    """Audit trail of a run."""
    svc = _require(_event_service, "Event service")
    events = await svc.get_run_events(run_id)
    return [EventResponse.from_event(e) for e in events]


# ============================================================================
# DASHBOARD RUNTIME
# ============================================================================

@router.post("/dashboards/{dashboard_id}/prepare", response_model=DashboardRunResponse)
async def prepare_dashboard(
    dashboard_id: str,
    request: DashboardPrepareRequest,
    user: CurrentUser = Depends(get_current_user),
):
    """Run the dashboard's prepare app."""
    svc = _require(_dashboard_service, "Dashboard service")
    try:
        result = await svc.prepare_dashboard(dashboard_id, user, request.load_inputs)
    except DomainError as e:
        _raise_http(e)
    return DashboardRunResponse(
        run_id=result.run_id,
        status=result.status,
        response=result.response,
        error_message=result.error_message,
    )


@router.post(
    "/dashboards/{dashboard_id}/actions/{action_id}/run",
    response_model=DashboardRunResponse,
)
async def run_dashboard_action(
    dashboard_id: str,
    action_id: str,
    request: DashboardActionRequest,
    user: CurrentUser = Depends(get_current_user),
):
    """Run one dashboard action, optionally fed by a prepare run."""
    svc = _require(_dashboard_service, "Dashboard service")
    try:
        result = await svc.run_dashboard_action(
            dashboard_id,
            action_id,
            user,
            load_inputs=request.load_inputs,
            action_inputs=request.action_inputs,
            prepare_run_id=request.prepare_run_id,
            prior_action_run_ids=request.prior_action_run_ids,
        )
    except DomainError as e:
        _raise_http(e)
    return DashboardRunResponse(
        run_id=result.run_id,
        status=result.status,
        response=result.response,
        error_message=result.error_message,
    )


__all__ = ["router", "set_services", "get_current_user"]
