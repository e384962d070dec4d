# ============================================================================
# DASHBOARD SERVICE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Dashboard prepare and action orchestration
# PURPOSE: Sequence the prepare run and dependent action runs
# CREATED: 08 FEB 2026
# ============================================================================
"""
Dashboard Service

Drives the two dashboard runtime flows:

Prepare:
    dashboard -> prepare app bindings -> prepare run -> audit event
Action:
    dashboard -> action lookup -> prepare run checks -> action bindings
              -> action run -> audit event

The prepare run must have completed successfully, and be referenced by id,
before an action that depends on it runs. Every run outcome is audited before
returning; if the audit write fails, that failure replaces the outcome.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from __version__ import RUNTIME_VERSION
from core.contracts import RunStatus
from core.errors import InvalidOperationError, NotFoundError, ValidationError
from core.logging import get_logger, log_checkpoint, log_context
from core.models import CurrentUser, Dashboard, Run, RunInputValue
from orchestrator.engine.bindings import (
    UNSUPPORTED_PREVIOUS_OUTPUT,
    DashboardConfiguration,
    build_run_inputs,
    parse_action_id,
)
from repositories import DashboardRepository, RunRepository
from services.event_service import EventService
from services.run_service import RunService

logger = get_logger(__name__)

UNSUPPORTED_PRIOR_ACTION_RUNS = (
    f"priorActionRunIds are not supported in runtime {RUNTIME_VERSION}"
)


@dataclass(frozen=True)
class DashboardRunResult:
    """Outcome of a prepare or action run."""
    run_id: str
    status: RunStatus
    response: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def from_run(cls, run: Run) -> "DashboardRunResult":
        return cls(
            run_id=run.id,
            status=run.status,
            response=run.response,
            error_message=run.error_message,
        )


class DashboardService:
    """Service for the dashboard runtime flows."""

    def __init__(
        self,
        dashboard_repo: DashboardRepository,
        run_repo: RunRepository,
        run_service: RunService,
        event_service: EventService,
    ):
        self.dashboard_repo = dashboard_repo
        self.run_repo = run_repo
        self.run_service = run_service
        self._event_service = event_service

    async def _get_dashboard(self, dashboard_id: str) -> Dashboard:
        dashboard = await self.dashboard_repo.get_by_id(dashboard_id)
        if dashboard is None:
            raise NotFoundError("Dashboard not found")
        return dashboard

    # =========================================================================
    # PREPARE FLOW
    # =========================================================================

    async def prepare_dashboard(
        self,
        dashboard_id: str,
        current_user: CurrentUser,
        load_inputs: Sequence[RunInputValue] = (),
    ) -> DashboardRunResult:
        """
        Run the dashboard's prepare app.

        Returns:
            Result of the successful prepare run

        Raises:
            NotFoundError: dashboard or prepare app missing
            InvalidOperationError: no prepare app configured, prepare run did
                not succeed, or its audit event could not be saved
            ValidationError: bindings cannot be resolved
        """
        dashboard = await self._get_dashboard(dashboard_id)
        prepare_app_id = dashboard.prepare_app_id
        if prepare_app_id is None:
            raise InvalidOperationError("Dashboard is not configured with a prepare app")

        with log_context(dashboard_id=dashboard.id, app_id=prepare_app_id, operation="prepare"):
            configuration = DashboardConfiguration.parse(dashboard.configuration)
            inputs = build_run_inputs(
                configuration.bindings,
                app_id=prepare_app_id,
                action_id=None,
                load_inputs=load_inputs,
                action_inputs=(),
            )

            try:
                run = await self.run_service.create_run(prepare_app_id, inputs, current_user)
            except Exception as e:
                logger.warning(f"Prepare run could not be created: {e}")
                await self._event_service.record_dashboard_prepare_failed(
                    dashboard_id=dashboard.id,
                    prepare_app_id=prepare_app_id,
                    actor_user_id=current_user.id,
                    error_message=str(e),
                )
                raise

            if run.status is RunStatus.SUCCESS:
                await self._event_service.record_dashboard_prepared(
                    dashboard_id=dashboard.id,
                    prepare_app_id=prepare_app_id,
                    run_id=run.id,
                    actor_user_id=current_user.id,
                )
                log_checkpoint("dashboard_prepared", {"run_id": run.id})
                return DashboardRunResult.from_run(run)

            message = run.error_message or f"Prepare run ended with status {run.status.value}"
            await self._event_service.record_dashboard_prepare_failed(
                dashboard_id=dashboard.id,
                prepare_app_id=prepare_app_id,
                actor_user_id=current_user.id,
                error_message=message,
                run_id=run.id,
            )
            raise InvalidOperationError(message)

    # =========================================================================
    # ACTION FLOW
    # =========================================================================

    async def _get_prepare_response(
        self,
        dashboard: Dashboard,
        prepare_run_id: Optional[str],
    ) -> Optional[str]:
        """Check the prepare run reference and return its response."""
        if dashboard.prepare_app_id is None:
            if prepare_run_id:
                raise ValidationError(
                    "prepareRunId was provided but dashboard has no prepare app"
                )
            return None

        if not prepare_run_id:
            raise ValidationError(
                "prepareRunId is required to run dashboard actions "
                "when prepare app is configured"
            )
        prepare_run = await self.run_repo.get_by_id(prepare_run_id)
        if prepare_run is None:
            raise NotFoundError(f"Prepare run '{prepare_run_id}' was not found")
        if prepare_run.app_id != dashboard.prepare_app_id:
            raise ValidationError("prepareRunId does not belong to this dashboard prepare app")
        if prepare_run.status is not RunStatus.SUCCESS:
            raise ValidationError("prepareRunId must reference a successful prepare run")
        return prepare_run.response

    async def run_dashboard_action(
        self,
        dashboard_id: str,
        action_id: str,
        current_user: CurrentUser,
        load_inputs: Sequence[RunInputValue] = (),
        action_inputs: Sequence[RunInputValue] = (),
        prepare_run_id: Optional[str] = None,
        prior_action_run_ids: Optional[List[str]] = None,
    ) -> DashboardRunResult:
        """
        Run one dashboard action.

        Returns:
            Result of the action run, successful or not

        Raises:
            InvalidOperationError: unsupported runtime features, or the audit
                event could not be saved
            NotFoundError: dashboard, action or prepare run missing
            ValidationError: bad prepare run reference or unresolvable bindings
        """
        if prior_action_run_ids:
            raise InvalidOperationError(UNSUPPORTED_PRIOR_ACTION_RUNS)

        dashboard = await self._get_dashboard(dashboard_id)
        configuration = DashboardConfiguration.parse(dashboard.configuration)
        if configuration.has_previous_action_output():
            raise InvalidOperationError(UNSUPPORTED_PREVIOUS_OUTPUT)

        action_id = parse_action_id(action_id)
        action = configuration.actions.get(action_id)
        if action is None:
            raise NotFoundError(f"Dashboard action '{action_id}' was not found")

        with log_context(dashboard_id=dashboard.id, action_id=action_id, app_id=action.app_id):
            prepare_response = await self._get_prepare_response(dashboard, prepare_run_id)
            inputs = build_run_inputs(
                configuration.bindings,
                app_id=action.app_id,
                action_id=action_id,
                load_inputs=load_inputs,
                action_inputs=action_inputs,
                prepare_response=prepare_response,
            )

            try:
                run = await self.run_service.create_run(
                    action.app_id, inputs, current_user, prior_response=prepare_response
                )
            except Exception as e:
                logger.warning(f"Action run could not be created: {e}")
                await self._event_service.record_dashboard_action_failed(
                    dashboard_id=dashboard.id,
                    action_id=action_id,
                    app_id=action.app_id,
                    actor_user_id=current_user.id,
                    error_message=str(e),
                    prepare_run_id=prepare_run_id,
                )
                raise

            if run.status is RunStatus.SUCCESS:
                await self._event_service.record_dashboard_action_executed(
                    dashboard_id=dashboard.id,
                    action_id=action_id,
                    app_id=action.app_id,
                    run_id=run.id,
                    actor_user_id=current_user.id,
                    prepare_run_id=prepare_run_id,
                )
                log_checkpoint("dashboard_action_executed", {"run_id": run.id})
            else:
                await self._event_service.record_dashboard_action_failed(
                    dashboard_id=dashboard.id,
                    action_id=action_id,
                    app_id=action.app_id,
                    actor_user_id=current_user.id,
                    error_message=run.error_message or f"Action run ended with status {run.status.value}",
                    run_id=run.id,
                    prepare_run_id=prepare_run_id,
                )

            return DashboardRunResult.from_run(run)


__all__ = ["DashboardService", "DashboardRunResult"]
