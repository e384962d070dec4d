# ============================================================================
# EVENT SERVICE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Audit event recording and retrieval
# PURPOSE: Record run lifecycle and dashboard runtime events
# CREATED: 07 FEB 2026
# ============================================================================
"""
Event Service

Records audit events through the event repository (save, then commit).

Unlike a fire-and-forget timeline, audit writes here are part of the
operation's outcome: if a dashboard event cannot be saved, the caller gets
InvalidOperationError even though the run itself already happened.
"""

import logging
from typing import List, Optional

from core.errors import InvalidOperationError
from core.models import AuditEvent, Run
from repositories import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    """Service for recording and retrieving audit events."""

    def __init__(self, event_repo: EventRepository):
        """
        Initialize event service.

        Args:
            event_repo: Event store
        """
        self._repo = event_repo

    # =========================================================================
    # CORE RECORD METHOD
    # =========================================================================

    async def _save(self, events: List[AuditEvent], failure_label: str) -> None:
        if not events:
            return
        try:
            for event in events:
                await self._repo.save_event(event)
            await self._repo.commit()
        except Exception as e:
            logger.error(f"Failed to save {len(events)} {failure_label} event(s): {e}")
            raise InvalidOperationError(f"Failed to save {failure_label} event: {e}") from e

        for event in events:
            logger.debug(
                f"Event recorded: {event.event_type.value}"
                + (f" run={event.run_id}" if event.run_id else "")
                + (f" dashboard={event.dashboard_id}" if event.dashboard_id else "")
            )

    async def record(self, event: AuditEvent) -> AuditEvent:
        """
        Record one dashboard runtime event.

        Raises:
            InvalidOperationError: the event store rejected the write
        """
        await self._save([event], "dashboard runtime")
        return event

    async def record_run_events(self, run: Run) -> None:
        """Commit the run's pending lifecycle events."""
        await self._save(list(run.pending_events), "run")

    # =========================================================================
    # DASHBOARD EVENTS
    # =========================================================================

    async def record_dashboard_prepared(
        self,
        dashboard_id: str,
        prepare_app_id: str,
        run_id: str,
        actor_user_id: str,
    ) -> AuditEvent:
        return await self.record(AuditEvent.dashboard_prepared(
            dashboard_id=dashboard_id,
            prepare_app_id=prepare_app_id,
            run_id=run_id,
            actor_user_id=actor_user_id,
        ))

    async def record_dashboard_prepare_failed(
        self,
        dashboard_id: str,
        prepare_app_id: str,
        actor_user_id: str,
        error_message: str,
        run_id: Optional[str] = None,
    ) -> AuditEvent:
        return await self.record(AuditEvent.dashboard_prepare_failed(
            dashboard_id=dashboard_id,
            prepare_app_id=prepare_app_id,
            actor_user_id=actor_user_id,
            error_message=error_message,
            run_id=run_id,
        ))

    async def record_dashboard_action_executed(
        self,
        dashboard_id: str,
        action_id: str,
        app_id: str,
        run_id: str,
        actor_user_id: str,
        prepare_run_id: Optional[str] = None,
    ) -> AuditEvent:
        return await self.record(AuditEvent.dashboard_action_executed(
            dashboard_id=dashboard_id,
            action_id=action_id,
            app_id=app_id,
            run_id=run_id,
            actor_user_id=actor_user_id,
            prepare_run_id=prepare_run_id,
        ))

    async def record_dashboard_action_failed(
        self,
        dashboard_id: str,
        action_id: str,
        app_id: str,
        actor_user_id: str,
        error_message: str,
        run_id: Optional[str] = None,
        prepare_run_id: Optional[str] = None,
    ) -> AuditEvent:
        return await self.record(AuditEvent.dashboard_action_failed(
            dashboard_id=dashboard_id,
            action_id=action_id,
            app_id=app_id,
            actor_user_id=actor_user_id,
            error_message=error_message,
            run_id=run_id,
            prepare_run_id=prepare_run_id,
        ))

    # =========================================================================
    # RETRIEVAL
    # =========================================================================

    async def get_run_events(self, run_id: str) -> List[AuditEvent]:
        return await self._repo.list_for_run(run_id)

    async def get_dashboard_events(self, dashboard_id: str) -> List[AuditEvent]:
        return await self._repo.list_for_dashboard(dashboard_id)


__all__ = ["EventService"]
