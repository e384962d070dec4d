# ============================================================================
# DASHBOARD SERVICE TESTS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Tests - Prepare and action flows
# PURPOSE: Verify prepare run gating, bindings, unsupported features, audit
# CREATED: 12 FEB 2026
# ============================================================================
"""
DashboardService Tests

Real RunService over in-memory repositories; only the HTTP executor is
mocked, answering by URL.

Run with:
    pytest tests/test_dashboard_service.py -v
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from core.contracts import RunStatus
from core.errors import InvalidOperationError, NotFoundError, ValidationError
from core.models import Dashboard, EventType, Input, InputType, RunInputValue
from infrastructure.http_executor import HttpExecutionError
from repositories import (
    InMemoryAppRepository,
    InMemoryDashboardRepository,
    InMemoryEventRepository,
    InMemoryResourceRepository,
    InMemoryRunRepository,
)
from services import DashboardService, EventService, RunService

from builders import make_app, make_resource, make_user, text_input

PREPARE_RESPONSE = '{"order": {"id": 42, "status": "open"}}'


class _DashboardEventsDown(InMemoryEventRepository):
    """Event store that rejects dashboard events but accepts run events."""

    async def save_event(self, event):
        if event.dashboard_id is not None:
            raise RuntimeError("store down")
        await super().save_event(event)


class _Harness:
    """Wires repositories, services and a Resource with two Apps."""

    def __init__(self, event_repo=None, prepare_status=200):
        self.event_repo = event_repo or InMemoryEventRepository()
        self.run_repo = InMemoryRunRepository()
        self.app_repo = InMemoryAppRepository()
        self.resource_repo = InMemoryResourceRepository()
        self.dashboard_repo = InMemoryDashboardRepository()
        self.prepare_status = prepare_status

        self.http = AsyncMock()
        self.http.execute = AsyncMock(side_effect=self._answer)
        event_service = EventService(self.event_repo)
        self.run_service = RunService(
            self.app_repo, self.resource_repo, self.run_repo, event_service, self.http
        )
        self.svc = DashboardService(
            self.dashboard_repo, self.run_repo, self.run_service, event_service
        )

        self.resource = make_resource()
        self.prepare_app = make_app(
            self.resource, url_path="orders/@OrderRef",
            inputs=[text_input("OrderRef", required=True)], name="Load order",
        )
        self.action_app = make_app(
            self.resource, url_path="orders/@OrderId/approve",
            inputs=[Input.create("OrderId", InputType.integer(), required=True)],
            name="Approve",
        )
        asyncio.run(self.resource_repo.add(self.resource))
        asyncio.run(self.app_repo.add(self.prepare_app))
        asyncio.run(self.app_repo.add(self.action_app))

    async def _answer(self, request):
        if request.base_url.endswith("/approve"):
            return '{"approved": true}'
        if self.prepare_status != 200:
            raise HttpExecutionError(f"HTTP request failed with status {self.prepare_status}: x")
        return PREPARE_RESPONSE

    def dashboard(self, configuration=None, with_prepare=True):
        if configuration is None:
            configuration = {
                "actions": [{"id": "approve", "appId": self.action_app.id}],
                "bindings": [
                    {"appId": self.prepare_app.id, "inputName": "OrderRef",
                     "sourceType": "load_input", "sourceKey": "ref"},
                    {"actionId": "approve", "inputName": "OrderId",
                     "source": {"type": "prepare_output", "path": "order.id"}},
                ],
            }
        dashboard = Dashboard.create(
            name="Orders",
            prepare_app_id=self.prepare_app.id if with_prepare else None,
            configuration=json.dumps(configuration),
        )
        asyncio.run(self.dashboard_repo.add(dashboard))
        return dashboard

    def prepare(self, dashboard, ref="A-1"):
        return asyncio.run(self.svc.prepare_dashboard(
            dashboard.id, make_user(), [RunInputValue(title="ref", value=ref)]
        ))

    def dashboard_events(self, dashboard):
        return [e.event_type for e in self.event_repo.events if e.dashboard_id == dashboard.id]


# ============================================================================
# PREPARE FLOW
# ============================================================================

class TestPrepareDashboard:

    def test_successful_prepare(self):
        h = _Harness()
        dashboard = h.dashboard()

        result = h.prepare(dashboard)

        assert result.status is RunStatus.SUCCESS
        assert result.response == PREPARE_RESPONSE
        sent = h.http.execute.call_args.args[0]
        assert sent.base_url == "https://api.example.com/orders/A-1"
        assert h.dashboard_events(dashboard) == [EventType.DASHBOARD_PREPARED]

    def test_unknown_dashboard(self):
        h = _Harness()
        with pytest.raises(NotFoundError, match="Dashboard not found"):
            asyncio.run(h.svc.prepare_dashboard("missing", make_user()))

    def test_no_prepare_app(self):
        h = _Harness()
        dashboard = h.dashboard(with_prepare=False)
        with pytest.raises(InvalidOperationError, match="not configured with a prepare app"):
            h.prepare(dashboard)

    def test_failed_prepare_run_raises_and_is_audited(self):
        h = _Harness(prepare_status=500)
        dashboard = h.dashboard()

        with pytest.raises(InvalidOperationError, match="failed with status 500"):
            h.prepare(dashboard)

        assert h.dashboard_events(dashboard) == [EventType.DASHBOARD_PREPARE_FAILED]

    def test_run_creation_error_is_audited_then_raised(self):
        h = _Harness()
        dashboard = h.dashboard(configuration={"bindings": [
            {"appId": h.prepare_app.id, "inputName": "Unknown",
             "sourceType": "literal", "value": "x"},
        ]})

        with pytest.raises(ValidationError, match="Missing required inputs: OrderRef"):
            h.prepare(dashboard)

        assert h.dashboard_events(dashboard) == [EventType.DASHBOARD_PREPARE_FAILED]

    def test_binding_errors_raise_before_any_run(self):
        h = _Harness()
        dashboard = h.dashboard()

        with pytest.raises(ValidationError, match="Missing load input 'ref'"):
            asyncio.run(h.svc.prepare_dashboard(dashboard.id, make_user()))

        h.http.execute.assert_not_awaited()

    def test_event_failure_replaces_outcome(self):
        h = _Harness(event_repo=_DashboardEventsDown())
        dashboard = h.dashboard()

        with pytest.raises(InvalidOperationError) as exc_info:
            h.prepare(dashboard)

        assert str(exc_info.value) == "Failed to save dashboard runtime event: store down"
        runs = [e.run_id for e in h.event_repo.events if e.event_type is EventType.RUN_CREATED]
        stored = asyncio.run(h.run_repo.get_by_id(runs[0]))
        assert stored.status is RunStatus.SUCCESS


# ============================================================================
# ACTION FLOW
# ============================================================================

class TestRunDashboardAction:

    def test_action_fed_by_prepare_output(self):
        h = _Harness()
        dashboard = h.dashboard()
        prepared = h.prepare(dashboard)

        result = asyncio.run(h.svc.run_dashboard_action(
            dashboard.id, " approve ", make_user(), prepare_run_id=prepared.run_id
        ))

        assert result.status is RunStatus.SUCCESS
        assert result.response == '{"approved": true}'
        sent = h.http.execute.call_args.args[0]
        assert sent.base_url == "https://api.example.com/orders/42/approve"
        assert h.dashboard_events(dashboard) == [
            EventType.DASHBOARD_PREPARED,
            EventType.DASHBOARD_ACTION_EXECUTED,
        ]
        executed = [e for e in h.event_repo.events
                    if e.event_type is EventType.DASHBOARD_ACTION_EXECUTED][0]
        assert executed.action_id == "approve"
        assert executed.event_data == {"prepare_run_id": prepared.run_id}

    def test_prepare_run_required_when_prepare_app_configured(self):
        h = _Harness()
        dashboard = h.dashboard()
        with pytest.raises(ValidationError, match="prepareRunId is required"):
            asyncio.run(h.svc.run_dashboard_action(dashboard.id, "approve", make_user()))

    def test_prepare_run_rejected_without_prepare_app(self):
        h = _Harness()
        dashboard = h.dashboard(
            configuration={"actions": [{"id": "approve", "appId": h.action_app.id}]},
            with_prepare=False,
        )
        with pytest.raises(ValidationError, match="dashboard has no prepare app"):
            asyncio.run(h.svc.run_dashboard_action(
                dashboard.id, "approve", make_user(), prepare_run_id="r-1"
            ))

    def test_unknown_prepare_run(self):
        h = _Harness()
        dashboard = h.dashboard()
        with pytest.raises(NotFoundError, match="Prepare run 'r-1' was not found"):
            asyncio.run(h.svc.run_dashboard_action(
                dashboard.id, "approve", make_user(), prepare_run_id="r-1"
            ))

    def test_prepare_run_of_another_app(self):
        h = _Harness()
        dashboard = h.dashboard()
        prepared = h.prepare(dashboard)
        action_run = asyncio.run(h.svc.run_dashboard_action(
            dashboard.id, "approve", make_user(), prepare_run_id=prepared.run_id
        ))

        with pytest.raises(ValidationError, match="does not belong to this dashboard prepare app"):
            asyncio.run(h.svc.run_dashboard_action(
                dashboard.id, "approve", make_user(), prepare_run_id=action_run.run_id
            ))

    def test_prepare_run_must_have_succeeded(self):
        h = _Harness(prepare_status=500)
        dashboard = h.dashboard()
        with pytest.raises(InvalidOperationError):
            h.prepare(dashboard)
        failed = [e.run_id for e in h.event_repo.events
                  if e.event_type is EventType.DASHBOARD_PREPARE_FAILED][0]

        with pytest.raises(ValidationError, match="must reference a successful prepare run"):
            asyncio.run(h.svc.run_dashboard_action(
                dashboard.id, "approve", make_user(), prepare_run_id=failed
            ))

    def test_unknown_action(self):
        h = _Harness()
        dashboard = h.dashboard()
        with pytest.raises(NotFoundError, match="Dashboard action 'reject' was not found"):
            asyncio.run(h.svc.run_dashboard_action(dashboard.id, "reject", make_user()))

    def test_prior_action_run_ids_rejected(self):
        h = _Harness()
        dashboard = h.dashboard()
        with pytest.raises(InvalidOperationError, match="priorActionRunIds are not supported"):
            asyncio.run(h.svc.run_dashboard_action(
                dashboard.id, "approve", make_user(), prior_action_run_ids=["r-1"]
            ))

    def test_previous_action_output_anywhere_rejects_every_action(self):
        h = _Harness()
        dashboard = h.dashboard(configuration={
            "actions": [{"id": "approve", "appId": h.action_app.id}],
            "bindings": [{"actionId": "other", "inputName": "x",
                          "source": {"type": "previous_action_output", "path": "id"}}],
        }, with_prepare=False)

        with pytest.raises(InvalidOperationError, match="previous_action_output bindings"):
            asyncio.run(h.svc.run_dashboard_action(dashboard.id, "approve", make_user()))

    def test_unbound_action_merges_inputs(self):
        h = _Harness()
        dashboard = h.dashboard(
            configuration={"actions": [{"id": "approve", "appId": h.action_app.id}]},
            with_prepare=False,
        )

        result = asyncio.run(h.svc.run_dashboard_action(
            dashboard.id, "approve", make_user(),
            load_inputs=[RunInputValue(title="OrderId", value="1")],
            action_inputs=[RunInputValue(title="OrderId", value="2")],
        ))

        assert result.status is RunStatus.SUCCESS
        sent = h.http.execute.call_args.args[0]
        assert sent.base_url == "https://api.example.com/orders/2/approve"

    def test_failed_action_run_returned_and_audited(self):
        h = _Harness()
        h.http.execute = AsyncMock(side_effect=HttpExecutionError("HTTP request failed: refused"))
        dashboard = h.dashboard(
            configuration={"actions": [{"id": "approve", "appId": h.action_app.id}]},
            with_prepare=False,
        )

        result = asyncio.run(h.svc.run_dashboard_action(
            dashboard.id, "approve", make_user(),
            action_inputs=[RunInputValue(title="OrderId", value="5")],
        ))

        assert result.status is RunStatus.FAILURE
        assert result.error_message == "HTTP request failed: refused"
        assert h.dashboard_events(dashboard) == [EventType.DASHBOARD_ACTION_FAILED]
