# ============================================================================
# HTTP EXECUTOR
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Infrastructure - Outgoing HTTP calls for runs
# PURPOSE: Send a composed ExecutableRequest and return the response text
# CREATED: 06 FEB 2026
# ============================================================================
"""
HTTP Executor

Async httpx client that sends one ExecutableRequest:

- URL parameters are appended as an encoded query string ('&' when the URL
  already carries a query)
- GET, DELETE and HEAD are sent without a body
- Body is JSON when the App sets use_json_body, otherwise form-encoded
- Any non-2xx status, timeout or transport failure raises HttpExecutionError

JSON bodies coerce values: integers, decimals, true/false and null become
their JSON types; everything else stays a string.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from core.config import HttpDefaults, get_defaults
from core.errors import InvalidOperationError
from core.models.layers import KeyValuePair, layer_as_dict
from core.models.request import ExecutableRequest

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"^-?\d+$")
_FLOAT_PATTERN = re.compile(r"^-?\d+\.\d+$")


class HttpExecutionError(InvalidOperationError):
    """The outgoing call failed; the run moves to Failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def build_url(base_url: str, url_parameters: List[KeyValuePair]) -> str:
    if not url_parameters:
        return base_url
    query = urlencode([(p.key, p.value) for p in url_parameters])
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{query}"


def coerce_json_value(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INT_PATTERN.match(value.strip()):
        return int(value)
    if _FLOAT_PATTERN.match(value.strip()):
        return float(value)
    return value


def build_json_body(body: List[KeyValuePair]) -> Dict[str, Any]:
    return {pair.key: coerce_json_value(pair.value) for pair in body}


class HttpExecutor:
    """
    Sends composed requests over HTTP.

    A new AsyncClient is opened per call; `transport` is injectable for tests.
    """

    def __init__(
        self,
        defaults: Optional[HttpDefaults] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._defaults = defaults or get_defaults().http
        self._transport = transport

    def _request_kwargs(self, request: ExecutableRequest) -> Dict[str, Any]:
        headers: List[Tuple[str, str]] = [(h.key, h.value) for h in request.headers]
        if not any(key.lower() == "user-agent" for key, _ in headers):
            headers.append(("User-Agent", self._defaults.user_agent))

        kwargs: Dict[str, Any] = {"headers": headers}
        if not request.http_method.sends_body() or not request.body:
            return kwargs
        if request.use_json_body:
            kwargs["json"] = build_json_body(request.body)
        else:
            kwargs["data"] = layer_as_dict(request.body)
        return kwargs

    async def execute(self, request: ExecutableRequest) -> str:
        """
        Send the request.

        Returns:
            Response body text of a 2xx response

        Raises:
            HttpExecutionError: non-2xx status, timeout, or transport failure
        """
        url = build_url(request.base_url, request.url_parameters)
        method = request.http_method.value
        timeout = self._defaults.timeout_seconds

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.request(method, url, **self._request_kwargs(request))
        except httpx.TimeoutException as e:
            logger.warning(f"{method} request timed out after {timeout}s: {e}")
            raise HttpExecutionError(f"HTTP request timed out after {timeout} seconds")
        except httpx.InvalidURL as e:
            raise HttpExecutionError(f"Invalid URL format: {e}")
        except httpx.HTTPError as e:
            logger.warning(f"{method} request failed: {e}")
            raise HttpExecutionError(f"HTTP request failed: {e}")

        if not response.is_success:
            body = response.text[: self._defaults.max_error_body_chars]
            logger.info(f"{method} request returned {response.status_code}")
            raise HttpExecutionError(
                f"HTTP request failed with status {response.status_code}: {body}",
                status_code=response.status_code,
            )

        return response.text


__all__ = [
    "HttpExecutor",
    "HttpExecutionError",
    "build_url",
    "build_json_body",
    "coerce_json_value",
]
