# ============================================================================
# AUDIT EVENT MODEL
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - Run and dashboard audit trail
# PURPOSE: Record run lifecycle and dashboard runtime outcomes
# CREATED: 03 FEB 2026
# EXPORTS: AuditEvent, EventType, EventStatus
# DEPENDENCIES: pydantic, enum
# ============================================================================
"""
Audit Event Model

AuditEvent records run lifecycle transitions and dashboard runtime outcomes.

Run events are emitted by the Run aggregate itself (pending_events) and are
committed when the run is persisted. Dashboard events are recorded by the
dashboard service after each prepare or action run.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of audit events."""

    # Run lifecycle
    RUN_CREATED = "run_created"
    RUN_STATUS_CHANGED = "run_status_changed"

    # Dashboard runtime
    DASHBOARD_PREPARED = "dashboard_prepared"
    DASHBOARD_PREPARE_FAILED = "dashboard_prepare_failed"
    DASHBOARD_ACTION_EXECUTED = "dashboard_action_executed"
    DASHBOARD_ACTION_FAILED = "dashboard_action_failed"


class EventStatus(str, Enum):
    """Status/severity of an event."""
    SUCCESS = "success"
    FAILURE = "failure"
    INFO = "info"


class AuditEvent(BaseModel):
    """
    A single entry in the audit trail.

    Exactly one of run_id / dashboard_id identifies the subject; dashboard
    events also carry the run they produced when there is one.
    """

    # Identity
    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: EventType
    event_status: EventStatus = Field(default=EventStatus.INFO)

    # Subject
    run_id: Optional[str] = None
    app_id: Optional[str] = None
    dashboard_id: Optional[str] = None
    action_id: Optional[str] = Field(default=None, max_length=100)

    # Who triggered it
    actor_user_id: Optional[str] = None

    # Flexible data payload
    event_data: Dict[str, Any] = Field(default_factory=dict)

    # Error details
    error_message: Optional[str] = Field(default=None, max_length=2000)

    occurred_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"frozen": True}

    # ========================================================================
    # Factory Methods
    # ========================================================================

    @classmethod
    def run_created(
        cls,
        run_id: str,
        app_id: str,
        actor_user_id: Optional[str] = None,
    ) -> "AuditEvent":
        """Create a run-created event."""
        return cls(
            event_type=EventType.RUN_CREATED,
            run_id=run_id,
            app_id=app_id,
            actor_user_id=actor_user_id,
        )

    @classmethod
    def run_status_changed(
        cls,
        run_id: str,
        app_id: str,
        old_status: str,
        new_status: str,
        error_message: Optional[str] = None,
    ) -> "AuditEvent":
        """Create a run status transition event."""
        if new_status == "Success":
            status = EventStatus.SUCCESS
        elif error_message:
            status = EventStatus.FAILURE
        else:
            status = EventStatus.INFO
        return cls(
            event_type=EventType.RUN_STATUS_CHANGED,
            event_status=status,
            run_id=run_id,
            app_id=app_id,
            event_data={"old_status": old_status, "new_status": new_status},
            error_message=_truncate(error_message),
        )

    @classmethod
    def dashboard_prepared(
        cls,
        dashboard_id: str,
        prepare_app_id: str,
        run_id: str,
        actor_user_id: str,
    ) -> "AuditEvent":
        return cls(
            event_type=EventType.DASHBOARD_PREPARED,
            event_status=EventStatus.SUCCESS,
            dashboard_id=dashboard_id,
            app_id=prepare_app_id,
            run_id=run_id,
            actor_user_id=actor_user_id,
        )

    @classmethod
    def dashboard_prepare_failed(
        cls,
        dashboard_id: str,
        prepare_app_id: str,
        actor_user_id: str,
        error_message: str,
        run_id: Optional[str] = None,
    ) -> "AuditEvent":
        return cls(
            event_type=EventType.DASHBOARD_PREPARE_FAILED,
            event_status=EventStatus.FAILURE,
            dashboard_id=dashboard_id,
            app_id=prepare_app_id,
            run_id=run_id,
            actor_user_id=actor_user_id,
            error_message=_truncate(error_message),
        )

    @classmethod
    def dashboard_action_executed(
        cls,
        dashboard_id: str,
        action_id: str,
        app_id: str,
        run_id: str,
        actor_user_id: str,
        prepare_run_id: Optional[str] = None,
    ) -> "AuditEvent":
        return cls(
            event_type=EventType.DASHBOARD_ACTION_EXECUTED,
            event_status=EventStatus.SUCCESS,
            dashboard_id=dashboard_id,
            action_id=action_id,
            app_id=app_id,
            run_id=run_id,
            actor_user_id=actor_user_id,
            event_data={"prepare_run_id": prepare_run_id} if prepare_run_id else {},
        )

    @classmethod
    def dashboard_action_failed(
        cls,
        dashboard_id: str,
        action_id: str,
        app_id: str,
        actor_user_id: str,
        error_message: str,
        run_id: Optional[str] = None,
        prepare_run_id: Optional[str] = None,
    ) -> "AuditEvent":
        return cls(
            event_type=EventType.DASHBOARD_ACTION_FAILED,
            event_status=EventStatus.FAILURE,
            dashboard_id=dashboard_id,
            action_id=action_id,
            app_id=app_id,
            run_id=run_id,
            actor_user_id=actor_user_id,
            event_data={"prepare_run_id": prepare_run_id} if prepare_run_id else {},
            error_message=_truncate(error_message),
        )


def _truncate(message: Optional[str], limit: int = 2000) -> Optional[str]:
    if message is None or len(message) <= limit:
        return message
    return message[: limit - 3] + "..."


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "AuditEvent",
    "EventType",
    "EventStatus",
]
