# ============================================================================
# RUN MODEL
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - Run state machine
# PURPOSE: One execution attempt of an App with concrete input values
# CREATED: 03 FEB 2026
# EXPORTS: Run
# DEPENDENCIES: pydantic
# ============================================================================
"""
Run Model

A Run is an immutable value plus an append-only tuple of pending audit events.
Every transition returns a new Run; nothing mutates in place.

State transitions:
    Pending -> Running -> Success
                       -> Failure
    Pending -> InvalidConfiguration

`version` is the store's concurrency token. It is 0 until the run is first
persisted, so a run must be re-read after `add` before it can be updated.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field

from core.contracts import RunStatus
from core.errors import InvalidOperationError, ValidationError
from core.models.app import App
from core.models.events import AuditEvent
from core.models.request import CurrentUser, ExecutableRequest, RunInputValue
from core.models.resource import Resource


class Run(BaseModel):
    """
    One execution attempt of an App.
    """

    # Identity
    id: str = Field(default_factory=lambda: str(uuid4()))
    app_id: str
    created_by: Optional[str] = None

    # Inputs and composed request
    input_values: Tuple[RunInputValue, ...] = ()
    executable_request: Optional[ExecutableRequest] = None

    # Outcome
    status: RunStatus = RunStatus.PENDING
    response: Optional[str] = None
    error_message: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Persistence
    version: int = Field(default=0, ge=0, description="Concurrency token, 0 = unsaved")
    pending_events: Tuple[AuditEvent, ...] = ()

    model_config = {"frozen": True}

    # ========================================================================
    # Creation
    # ========================================================================

    @classmethod
    def create_with_validation(
        cls,
        app: App,
        input_values: Iterable[RunInputValue],
        created_by: Optional[str] = None,
    ) -> "Run":
        """
        Validate input values against the App's input schema and create a
        Pending run.

        Raises:
            ValidationError: duplicate, missing, unknown or ill-typed inputs
        """
        values = list(input_values)
        titles = [item.title for item in values]

        duplicates = sorted({t for t in titles if titles.count(t) > 1})
        if duplicates:
            raise ValidationError(f"Duplicate input values: {', '.join(duplicates)}")

        supplied = set(titles)
        missing = [t for t in app.required_titles if t not in supplied]
        if missing:
            raise ValidationError(f"Missing required inputs: {', '.join(missing)}")

        unknown = [t for t in titles if app.get_input(t) is None]
        if unknown:
            raise ValidationError(f"Invalid inputs not defined in app: {', '.join(unknown)}")

        problems: List[str] = []
        for item in values:
            problem = app.get_input(item.title).type.check_value(item.title, item.value)
            if problem:
                problems.append(problem)
        if problems:
            raise ValidationError("; ".join(problems))

        run_id = str(uuid4())
        return cls(
            id=run_id,
            app_id=app.id,
            created_by=created_by,
            input_values=tuple(values),
            pending_events=(AuditEvent.run_created(run_id, app.id, created_by),),
        )

    # ========================================================================
    # Composition
    # ========================================================================

    def compose_executable_request(
        self,
        app: App,
        resource: Resource,
        current_user: CurrentUser,
        prior_response: Optional[str] = None,
    ) -> "Run":
        """
        Merge Resource and App into a request and resolve its templates with
        this run's input values and the current user.

        Raises:
            ValidationError: identity mismatch or an unevaluable expression
            InvalidOperationError: run has already left Pending
        """
        from orchestrator.engine.composer import compose_executable_request
        from orchestrator.engine.templates import TemplateContext

        if self.status is not RunStatus.PENDING:
            raise InvalidOperationError(
                f"Cannot compose request for run in status {self.status.value}"
            )
        if app.id != self.app_id:
            raise ValidationError("App does not match the run's app")

        context = TemplateContext.for_run(self.input_values, current_user, prior_response)
        request = compose_executable_request(resource, app, context)
        return self.model_copy(update={"executable_request": request})

    # ========================================================================
    # State Transitions
    # ========================================================================

    def can_transition_to(self, target: RunStatus) -> bool:
        return self.status.can_transition_to(target)

    def _transition(self, target: RunStatus, **changes) -> "Run":
        if not self.can_transition_to(target):
            raise InvalidOperationError(
                f"Cannot transition run from {self.status.value} to {target.value}"
            )
        event = AuditEvent.run_status_changed(
            run_id=self.id,
            app_id=self.app_id,
            old_status=self.status.value,
            new_status=target.value,
            error_message=changes.get("error_message"),
        )
        return self.model_copy(update={
            **changes,
            "status": target,
            "pending_events": self.pending_events + (event,),
        })

    def mark_as_running(self) -> "Run":
        return self._transition(RunStatus.RUNNING, started_at=datetime.utcnow())

    def mark_as_success(self, response: str) -> "Run":
        return self._transition(
            RunStatus.SUCCESS,
            response=response,
            completed_at=datetime.utcnow(),
        )

    def mark_as_failure(self, error_message: str) -> "Run":
        return self._transition(
            RunStatus.FAILURE,
            error_message=error_message,
            completed_at=datetime.utcnow(),
        )

    def mark_as_invalid_configuration(self, error_message: str) -> "Run":
        """Setup-time failure; the request was never sent."""
        return self._transition(
            RunStatus.INVALID_CONFIGURATION,
            error_message=error_message,
            completed_at=datetime.utcnow(),
        )

    # ========================================================================
    # Persistence helpers
    # ========================================================================

    def with_committed_events(self, version: int) -> "Run":
        """Copy as stored: new concurrency token, no pending events."""
        return self.model_copy(update={"version": version, "pending_events": ()})


__all__ = ["Run"]
