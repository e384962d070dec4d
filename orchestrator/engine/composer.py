# ============================================================================
# REQUEST COMPOSER
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Resource + App merge
# PURPOSE: Build one request shape from a Resource and an App
# CREATED: 04 FEB 2026
# ============================================================================
"""
Request Composer

Merges a Resource and one of its Apps into an ExecutableRequest:

- URL: base URL joined to the App's path with exactly one slash
- Method and body encoding: from the App
- Layers: Resource entries followed by App entries

Layer keys are already disjoint (see conflicts.py), so concatenation never
shadows a value. The result is still templated until resolved with a run's
context.
"""

import logging
from typing import Optional

from core.errors import ValidationError
from core.models.app import App
from core.models.request import ExecutableRequest
from core.models.resource import Resource
from orchestrator.engine.templates import TemplateContext, get_resolver

logger = logging.getLogger(__name__)


def join_url(base_url: str, url_path: Optional[str]) -> str:
    """
    Join base URL and path with exactly one separating slash.

    No path leaves the base URL unchanged, trailing slash included.
    """
    if not url_path or not url_path.strip():
        return base_url
    return f"{base_url.rstrip('/')}/{url_path.strip().lstrip('/')}"


def compose(resource: Resource, app: App) -> ExecutableRequest:
    """
    Merge Resource and App into an unresolved request.

    Raises:
        ValidationError: If the App does not belong to the Resource
    """
    if app.resource_id != resource.id:
        raise ValidationError(
            f"App {app.id} belongs to resource {app.resource_id}, not {resource.id}"
        )

    return ExecutableRequest(
        base_url=join_url(resource.base_url, app.url_path),
        http_method=app.http_method,
        url_parameters=[*resource.url_parameters, *app.url_parameters],
        headers=[*resource.headers, *app.headers],
        body=[*resource.body, *app.body],
        use_json_body=app.use_json_body,
    )


def compose_executable_request(
    resource: Resource,
    app: App,
    context: TemplateContext,
) -> ExecutableRequest:
    """
    Compose and resolve templates for one run.

    Raises:
        ValidationError: identity mismatch
        TemplateExpressionError: an expression block cannot be evaluated
    """
    request = compose(resource, app)
    resolved = get_resolver().resolve_request(request, context)
    logger.debug(
        f"Composed {resolved.http_method.value} request for app {app.id} "
        f"({len(resolved.url_parameters)} params, {len(resolved.headers)} headers, "
        f"{len(resolved.body)} body)"
    )
    return resolved


__all__ = [
    "join_url",
    "compose",
    "compose_executable_request",
]
