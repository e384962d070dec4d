# ============================================================================
# API SCHEMAS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 09 FEB 2026
# ============================================================================
"""
API Schemas

Request and response models for the API. Run responses always carry the
redacted form of the executable request.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.contracts import HttpMethod, RunStatus
from core.models import AuditEvent, ExecutableRequest, KeyValuePair, Run, RunInputValue


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class ResourceCreate(BaseModel):
    """Request to create a Resource."""
    name: str = Field(..., max_length=200)
    base_url: str = Field(..., description="http(s) URL, may contain @tokens")
    description: Optional[str] = None
    url_parameters: List[KeyValuePair] = Field(default_factory=list)
    headers: List[KeyValuePair] = Field(default_factory=list)
    body: List[KeyValuePair] = Field(default_factory=list)


class LayersUpdate(BaseModel):
    """Replace one or more layers; omitted layers are left unchanged."""
    url_parameters: Optional[List[KeyValuePair]] = None
    headers: Optional[List[KeyValuePair]] = None
    body: Optional[List[KeyValuePair]] = None


class AppCreate(BaseModel):
    """Request to create an App on a Resource."""
    name: str = Field(..., max_length=200)
    resource_id: str
    folder_id: Optional[str] = None
    http_method: HttpMethod = HttpMethod.GET
    url_path: Optional[str] = None
    inputs: List[Dict[str, Any]] = Field(default_factory=list)
    use_json_body: bool = False
    url_parameters: List[KeyValuePair] = Field(default_factory=list)
    headers: List[KeyValuePair] = Field(default_factory=list)
    body: List[KeyValuePair] = Field(default_factory=list)


class DashboardCreate(BaseModel):
    """Request to create a Dashboard."""
    name: str = Field(..., max_length=200)
    folder_id: Optional[str] = None
    prepare_app_id: Optional[str] = None
    configuration: str = Field(default="{}", description="Actions and bindings JSON")


class RunCreate(BaseModel):
    """Request to run an App."""
    input_values: List[RunInputValue] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "input_values": [
                        {"title": "userId", "value": "42"},
                        {"title": "email", "value": "ada@example.com"},
                    ]
                }
            ]
        }
    }


class DashboardPrepareRequest(BaseModel):
    """Request to run a dashboard's prepare app."""
    load_inputs: List[RunInputValue] = Field(default_factory=list)


class DashboardActionRequest(BaseModel):
    """Request to run one dashboard action."""
    load_inputs: List[RunInputValue] = Field(default_factory=list)
    action_inputs: List[RunInputValue] = Field(default_factory=list)
    prepare_run_id: Optional[str] = None
    prior_action_run_ids: List[str] = Field(default_factory=list)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class RunResponse(BaseModel):
    """Run as returned by the API."""
    id: str
    app_id: str
    status: RunStatus
    input_values: List[RunInputValue]
    executable_request: Optional[ExecutableRequest] = None
    response: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_run(cls, run: Run) -> "RunResponse":
        request = run.executable_request
        return cls(
            id=run.id,
            app_id=run.app_id,
            status=run.status,
            input_values=list(run.input_values),
            executable_request=request.redacted() if request else None,
            response=run.response,
            error_message=run.error_message,
            created_at=run.created_at,
            started_at=run.started_at,
            completed_at=run.completed_at,
        )


class DashboardRunResponse(BaseModel):
    """Outcome of a dashboard prepare or action run."""
    run_id: str
    status: RunStatus
    response: Optional[str] = None
    error_message: Optional[str] = None


class EventResponse(BaseModel):
    """Audit event as returned by the API."""
    event_id: str
    event_type: str
    event_status: str
    run_id: Optional[str] = None
    dashboard_id: Optional[str] = None
    action_id: Optional[str] = None
    error_message: Optional[str] = None
    event_data: Dict = Field(default_factory=dict)
    occurred_at: datetime

    @classmethod
    def from_event(cls, event: AuditEvent) -> "EventResponse":
        return cls(
            event_id=event.event_id,
            event_type=event.event_type.value,
            event_status=event.event_status.value,
            run_id=event.run_id,
            dashboard_id=event.dashboard_id,
            action_id=event.action_id,
            error_message=event.error_message,
            event_data=event.event_data,
            occurred_at=event.occurred_at,
        )


__all__ = [
    "ResourceCreate",
    "LayersUpdate",
    "AppCreate",
    "DashboardCreate",
    "RunCreate",
    "DashboardPrepareRequest",
    "DashboardActionRequest",
    "RunResponse",
    "DashboardRunResponse",
    "EventResponse",
]
