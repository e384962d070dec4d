# ============================================================================
# CORE MODELS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Pydantic models
# PURPOSE: Export domain models for resources, apps, runs and dashboards
# CREATED: 02 FEB 2026
# ============================================================================

from core.models.layers import KeyValuePair, LayerCategory, LayeredModel, build_model, to_layer
from core.models.resource import Resource
from core.models.app import App, Input, InputKind, InputType
from core.models.request import CurrentUser, ExecutableRequest, RunInputValue, redact_authorization
from core.models.events import AuditEvent, EventStatus, EventType
from core.models.dashboard import Dashboard
from core.models.run import Run

__all__ = [
    # Layers
    "KeyValuePair",
    "LayerCategory",
    "LayeredModel",
    "build_model",
    "to_layer",
    # Entities
    "Resource",
    "App",
    "Input",
    "InputKind",
    "InputType",
    "Dashboard",
    "Run",
    # Request
    "CurrentUser",
    "ExecutableRequest",
    "RunInputValue",
    "redact_authorization",
    # Events
    "AuditEvent",
    "EventType",
    "EventStatus",
]
