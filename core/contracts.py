# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Foundation - Core enums shared across layers
# PURPOSE: Run status state graph and HTTP method enum
# CREATED: 02 FEB 2026
# EXPORTS: RunStatus, HttpMethod
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the run engine.

These enums cross every boundary (models, services, API responses) so they
live in one place.
"""

from enum import Enum
from typing import Dict, FrozenSet


# ============================================================================
# STATUS ENUMS
# ============================================================================

class RunStatus(str, Enum):
    """
    Run lifecycle states.

    State transitions:
        PENDING -> RUNNING -> SUCCESS
                           -> FAILURE
                -> INVALID_CONFIGURATION (never sent over the network)
    """
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCESS = "Success"
    FAILURE = "Failure"
    INVALID_CONFIGURATION = "InvalidConfiguration"

    def is_terminal(self) -> bool:
        """Check if this is a terminal state (no further transitions)."""
        return self in (
            RunStatus.SUCCESS,
            RunStatus.FAILURE,
            RunStatus.INVALID_CONFIGURATION,
        )

    def can_transition_to(self, target: "RunStatus") -> bool:
        return target in _RUN_TRANSITIONS.get(self, frozenset())


_RUN_TRANSITIONS: Dict[RunStatus, FrozenSet[RunStatus]] = {
    RunStatus.PENDING: frozenset({RunStatus.RUNNING, RunStatus.INVALID_CONFIGURATION}),
    RunStatus.RUNNING: frozenset({RunStatus.SUCCESS, RunStatus.FAILURE}),
}


class HttpMethod(str, Enum):
    """HTTP methods an App may use."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    def sends_body(self) -> bool:
        """GET and DELETE requests are sent without a body."""
        return self not in (HttpMethod.GET, HttpMethod.DELETE)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "RunStatus",
    "HttpMethod",
]
