# ============================================================================
# API ROUTES TESTS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Tests - HTTP surface
# PURPOSE: Verify status codes, error mapping and Authorization redaction
# CREATED: 12 FEB 2026
# ============================================================================
"""
API Routes Tests

FastAPI TestClient over real services and in-memory repositories; the
outgoing HTTP executor is mocked.

Run with:
    pytest tests/test_api_routes.py -v
"""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import router, set_services
from core.models.request import REDACTED_VALUE
from repositories import (
    InMemoryAppRepository,
    InMemoryDashboardRepository,
    InMemoryEventRepository,
    InMemoryResourceRepository,
    InMemoryRunRepository,
)
from services import DashboardService, EventService, LayerService, RunService

USER_HEADERS = {"X-User-Id": "user-1", "X-User-Email": "ada@example.com"}


# ============================================================================
# FIXTURES
# ============================================================================

def _make_test_app(http):
    """Create a test FastAPI app with routes wired to in-memory services."""
    resource_repo = InMemoryResourceRepository()
    app_repo = InMemoryAppRepository()
    run_repo = InMemoryRunRepository()
    dashboard_repo = InMemoryDashboardRepository()
    event_service = EventService(InMemoryEventRepository())
    run_service = RunService(app_repo, resource_repo, run_repo, event_service, http)

    set_services(
        layer_service=LayerService(resource_repo, app_repo, dashboard_repo),
        run_service=run_service,
        dashboard_service=DashboardService(dashboard_repo, run_repo, run_service, event_service),
        event_service=event_service,
    )
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    return app


@pytest.fixture
def http():
    executor = AsyncMock()
    executor.execute = AsyncMock(return_value='{"ok": true}')
    return executor


@pytest.fixture
def client(http):
    return TestClient(_make_test_app(http))


def _create_resource(client, **overrides):
    payload = {
        "name": "Example API",
        "base_url": "https://api.example.com",
        "headers": [{"key": "Authorization", "value": "Bearer secret-token"}],
    }
    payload.update(overrides)
    response = client.post("/api/v1/resources", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _create_app(client, resource_id, **overrides):
    payload = {
        "name": "Lookup",
        "resource_id": resource_id,
        "url_path": "users/@userId",
        "inputs": [{"title": "userId", "type": {"kind": "Text", "max_length": 20},
                    "required": True}],
    }
    payload.update(overrides)
    return client.post("/api/v1/apps", json=payload)


# ============================================================================
# DEFINITIONS
# ============================================================================

class TestDefinitionRoutes:

    def test_resource_response_redacts_authorization(self, client):
        body = _create_resource(client)
        assert body["headers"] == [
            {"key": "Authorization", "value": f"Bearer {REDACTED_VALUE}"}
        ]

    def test_invalid_resource_is_400(self, client):
        response = client.post("/api/v1/resources", json={
            "name": "Bad", "base_url": "not a url",
        })
        assert response.status_code == 400
        assert "valid http or https URL" in response.json()["detail"]

    def test_conflicting_app_is_409(self, client):
        resource = _create_resource(client, url_parameters=[{"key": "page", "value": "1"}])
        response = _create_app(client, resource["id"], url_parameters=[{"key": "page", "value": "2"}])
        assert response.status_code == 409
        assert response.json()["detail"] == (
            "App cannot override existing Resource values: URL parameters: page"
        )

    def test_app_on_unknown_resource_is_404(self, client):
        response = _create_app(client, "missing")
        assert response.status_code == 404

    def test_invalid_input_default_is_400(self, client):
        resource = _create_resource(client)
        response = _create_app(client, resource["id"], inputs=[
            {"title": "n", "type": {"kind": "Integer"}, "default_value": "abc"},
        ])
        assert response.status_code == 400
        assert "Invalid default value" in response.json()["detail"]

    def test_resource_layer_update_conflict_is_409(self, client):
        resource = _create_resource(client)
        app = _create_app(client, resource["id"], headers=[{"key": "X-Trace", "value": "1"}])
        assert app.status_code == 201

        response = client.put(
            f"/api/v1/resources/{resource['id']}/layers",
            json={"headers": [{"key": "X-Trace", "value": "0"}]},
        )
        assert response.status_code == 409

    def test_invalid_dashboard_configuration_is_400(self, client):
        response = client.post("/api/v1/dashboards", json={"name": "D", "configuration": "["})
        assert response.status_code == 400


# ============================================================================
# RUNS
# ============================================================================

class TestRunRoutes:

    def test_run_app_redacts_authorization(self, client, http):
        resource = _create_resource(client)
        app = _create_app(client, resource["id"]).json()

        response = client.post(
            f"/api/v1/apps/{app['id']}/runs",
            json={"input_values": [{"title": "userId", "value": "42"}]},
            headers=USER_HEADERS,
        )

        assert response.status_code == 201, response.text
        run = response.json()
        assert run["status"] == "Success"
        assert run["executable_request"]["base_url"] == "https://api.example.com/users/42"
        assert run["executable_request"]["headers"][0]["value"] == f"Bearer {REDACTED_VALUE}"
        sent = http.execute.call_args.args[0]
        assert sent.header("Authorization") == "Bearer secret-token"

        fetched = client.get(f"/api/v1/runs/{run['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["executable_request"]["headers"][0]["value"].endswith(REDACTED_VALUE)

        events = client.get(f"/api/v1/runs/{run['id']}/events").json()
        assert [e["event_type"] for e in events] == [
            "run_created", "run_status_changed", "run_status_changed",
        ]

    def test_missing_required_input_is_400(self, client):
        resource = _create_resource(client)
        app = _create_app(client, resource["id"]).json()
        response = client.post(
            f"/api/v1/apps/{app['id']}/runs", json={"input_values": []}, headers=USER_HEADERS
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required inputs: userId"

    def test_user_header_required(self, client):
        response = client.post("/api/v1/apps/x/runs", json={"input_values": []})
        assert response.status_code == 422

    def test_unknown_run_is_404(self, client):
        assert client.get("/api/v1/runs/missing").status_code == 404


# ============================================================================
# DASHBOARDS
# ============================================================================

class TestDashboardRoutes:

    def test_prepare_then_action(self, client, http):
        http.execute = AsyncMock(side_effect=['{"order": {"id": 7}}', '{"done": true}'])
        resource = _create_resource(client, headers=[])
        prepare_app = _create_app(client, resource["id"], url_path="orders", inputs=[]).json()
        action_app = _create_app(client, resource["id"], name="Approve").json()
        configuration = {
            "actions": [{"id": "approve", "appId": action_app["id"]}],
            "bindings": [{"actionId": "approve", "inputName": "userId",
                          "source": {"type": "prepare_output", "path": "order.id"}}],
        }
        dashboard = client.post("/api/v1/dashboards", json={
            "name": "Orders",
            "prepare_app_id": prepare_app["id"],
            "configuration": json.dumps(configuration),
        }).json()

        prepared = client.post(
            f"/api/v1/dashboards/{dashboard['id']}/prepare", json={}, headers=USER_HEADERS
        )
        assert prepared.status_code == 200, prepared.text

        action = client.post(
            f"/api/v1/dashboards/{dashboard['id']}/actions/approve/run",
            json={"prepare_run_id": prepared.json()["run_id"]},
            headers=USER_HEADERS,
        )
        assert action.status_code == 200, action.text
        assert action.json()["status"] == "Success"
        assert http.execute.call_args.args[0].base_url == "https://api.example.com/users/7"

    def test_prior_action_run_ids_is_422(self, client):
        response = client.post(
            "/api/v1/dashboards/d/actions/a/run",
            json={"prior_action_run_ids": ["r-1"]},
            headers=USER_HEADERS,
        )
        assert response.status_code == 422
        assert "priorActionRunIds are not supported" in response.json()["detail"]

    def test_unknown_dashboard_is_404(self, client):
        response = client.post("/api/v1/dashboards/missing/prepare", json={}, headers=USER_HEADERS)
        assert response.status_code == 404
