# ============================================================================
# HTTP EXECUTOR TESTS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Tests - Outgoing HTTP calls
# PURPOSE: Verify request encoding and failure mapping over a mock transport
# CREATED: 11 FEB 2026
# ============================================================================
"""
HTTP Executor Tests

Uses httpx.MockTransport; no network.

Run with:
    pytest tests/test_http_executor.py -v
"""

import asyncio
import json

import httpx
import pytest

from core.config import HttpDefaults
from core.contracts import HttpMethod
from core.models import ExecutableRequest, to_layer
from infrastructure.http_executor import (
    HttpExecutionError,
    HttpExecutor,
    build_url,
    coerce_json_value,
)


def _request(method=HttpMethod.GET, params=None, headers=None, body=None, use_json_body=False):
    return ExecutableRequest(
        base_url="https://api.example.com/orders",
        http_method=method,
        url_parameters=to_layer(params),
        headers=to_layer(headers),
        body=to_layer(body),
        use_json_body=use_json_body,
    )


def _capture(status_code=200, text="ok"):
    """Transport recording every request it receives."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, text=text)

    return httpx.MockTransport(handler), seen


class TestHelpers:

    def test_build_url_appends_query(self):
        assert build_url("https://a.io/x", to_layer({"q": "a b", "n": "1"})) == (
            "https://a.io/x?q=a+b&n=1"
        )

    def test_build_url_extends_existing_query(self):
        assert build_url("https://a.io/x?v=1", to_layer({"n": "2"})) == "https://a.io/x?v=1&n=2"

    def test_build_url_without_parameters(self):
        assert build_url("https://a.io/x", []) == "https://a.io/x"

    @pytest.mark.parametrize("value,expected", [
        ("42", 42),
        ("-1.5", -1.5),
        ("true", True),
        ("FALSE", False),
        ("null", None),
        ("007a", "007a"),
        ("hello", "hello"),
    ])
    def test_coerce_json_value(self, value, expected):
        assert coerce_json_value(value) == expected


class TestExecute:

    def test_get_sends_query_headers_and_no_body(self):
        transport, seen = _capture(text='{"id": 1}')
        executor = HttpExecutor(HttpDefaults(), transport=transport)

        result = asyncio.run(executor.execute(
            _request(params={"page": "2"}, headers={"X-Key": "k"}, body={"ignored": "1"})
        ))

        assert result == '{"id": 1}'
        sent = seen[0]
        assert sent.method == "GET"
        assert str(sent.url) == "https://api.example.com/orders?page=2"
        assert sent.headers["X-Key"] == "k"
        assert sent.headers["User-Agent"].startswith("dashrun/")
        assert sent.content == b""

    def test_explicit_user_agent_kept(self):
        transport, seen = _capture()
        executor = HttpExecutor(HttpDefaults(), transport=transport)
        asyncio.run(executor.execute(_request(headers={"user-agent": "custom/1"})))
        assert seen[0].headers["User-Agent"] == "custom/1"

    def test_post_json_body_is_typed(self):
        transport, seen = _capture()
        executor = HttpExecutor(HttpDefaults(), transport=transport)

        asyncio.run(executor.execute(_request(
            method=HttpMethod.POST,
            body={"amount": "-10.5", "count": "3", "active": "true", "name": "Ada"},
            use_json_body=True,
        )))

        sent = seen[0]
        assert sent.headers["Content-Type"] == "application/json"
        assert json.loads(sent.content) == {
            "amount": -10.5, "count": 3, "active": True, "name": "Ada",
        }

    def test_put_form_body(self):
        transport, seen = _capture()
        executor = HttpExecutor(HttpDefaults(), transport=transport)

        asyncio.run(executor.execute(_request(method=HttpMethod.PUT, body={"a": "1", "b": "x y"})))

        sent = seen[0]
        assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert sent.content == b"a=1&b=x+y"

    def test_non_success_status_raises_with_truncated_body(self):
        transport, _ = _capture(status_code=503, text="x" * 50)
        executor = HttpExecutor(HttpDefaults(max_error_body_chars=10), transport=transport)

        with pytest.raises(HttpExecutionError) as exc_info:
            asyncio.run(executor.execute(_request()))

        assert str(exc_info.value) == "HTTP request failed with status 503: " + "x" * 10
        assert exc_info.value.status_code == 503

    def test_timeout_mapped(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        executor = HttpExecutor(
            HttpDefaults(timeout_seconds=2.5), transport=httpx.MockTransport(handler)
        )
        with pytest.raises(HttpExecutionError, match="timed out after 2.5 seconds"):
            asyncio.run(executor.execute(_request()))

    def test_transport_error_mapped(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        executor = HttpExecutor(HttpDefaults(), transport=httpx.MockTransport(handler))
        with pytest.raises(HttpExecutionError, match="HTTP request failed: refused"):
            asyncio.run(executor.execute(_request()))
