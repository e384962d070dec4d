# ============================================================================
# RUN SERVICE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Run lifecycle management
# PURPOSE: Validate, compose, execute and persist runs
# CREATED: 07 FEB 2026
# ============================================================================
"""
Run Service

Manages run lifecycle:
- Validate input values against the App's schema
- Divert setup failures (missing Resource, composition errors) straight to
  InvalidConfiguration without any network call
- Persist, re-read, execute over HTTP, record Success or Failure

Every persistence round-trip is followed by committing the run's pending
events. After `add` the run is re-read so the next `update` carries the
concurrency token assigned by the store.
"""

from typing import Iterable, Optional

from core.errors import DomainError, NotFoundError
from core.logging import get_logger, log_checkpoint, log_context
from core.models import CurrentUser, Run, RunInputValue
from infrastructure.http_executor import HttpExecutionError, HttpExecutor
from repositories import AppRepository, ResourceRepository, RunRepository
from services.event_service import EventService

logger = get_logger(__name__)


class RunService:
    """Service for run lifecycle management."""

    def __init__(
        self,
        app_repo: AppRepository,
        resource_repo: ResourceRepository,
        run_repo: RunRepository,
        event_service: EventService,
        http_executor: HttpExecutor,
    ):
        self.app_repo = app_repo
        self.resource_repo = resource_repo
        self.run_repo = run_repo
        self._event_service = event_service
        self._http = http_executor

    async def create_run(
        self,
        app_id: str,
        input_values: Iterable[RunInputValue],
        current_user: CurrentUser,
        prior_response: Optional[str] = None,
    ) -> Run:
        """
        Create and execute a run of an App.

        Args:
            app_id: App to execute
            input_values: Values keyed by Input Title
            current_user: User the run executes as
            prior_response: Prepare run response (dashboard action runs only)

        Returns:
            The stored run in a terminal state

        Raises:
            NotFoundError: App missing, or run vanished after save
            ValidationError: input values do not match the App's schema
        """
        app = await self.app_repo.get_by_id(app_id)
        if app is None:
            raise NotFoundError("App not found")

        run = Run.create_with_validation(app, input_values, created_by=current_user.id)

        with log_context(run_id=run.id, app_id=app.id, resource_id=app.resource_id):
            log_checkpoint("run_created", {"inputs": len(run.input_values)})

            resource = await self.resource_repo.get_by_id(app.resource_id)
            if resource is None:
                return await self._store_invalid(run, "Associated resource not found")

            try:
                run = run.compose_executable_request(
                    app, resource, current_user, prior_response
                )
            except DomainError as e:
                return await self._store_invalid(run, str(e))

            await self.run_repo.add(run)
            await self._event_service.record_run_events(run)

            stored = await self.run_repo.get_by_id(run.id)
            if stored is None:
                raise NotFoundError("Run not found after save")

            return await self._execute(stored)

    async def _store_invalid(self, run: Run, message: str) -> Run:
        logger.warning(f"Run {run.id} has invalid configuration: {message}")
        run = run.mark_as_invalid_configuration(message)
        await self.run_repo.add(run)
        await self._event_service.record_run_events(run)
        log_checkpoint("run_completed", {"status": run.status.value})
        return await self.run_repo.get_by_id(run.id) or run

    async def _execute(self, run: Run) -> Run:
        run = run.mark_as_running()
        request = run.executable_request
        logger.info(f"Executing {request.http_method.value} {request.base_url}")

        try:
            response = await self._http.execute(request)
            run = run.mark_as_success(response)
        except HttpExecutionError as e:
            logger.warning(f"Run {run.id} failed: {e}")
            run = run.mark_as_failure(str(e))

        await self.run_repo.update(run)
        await self._event_service.record_run_events(run)
        log_checkpoint("run_completed", {"status": run.status.value})

        return await self.run_repo.get_by_id(run.id) or run

    async def get_run(self, run_id: str) -> Run:
        """
        Get a run by ID.

        Raises:
            NotFoundError: no such run
        """
        run = await self.run_repo.get_by_id(run_id)
        if run is None:
            raise NotFoundError("Run not found")
        return run


__all__ = ["RunService"]
