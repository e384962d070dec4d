# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Infrastructure - Outgoing HTTP
# PURPOSE: Transport used by runs to call configured endpoints
# CREATED: 06 FEB 2026
# ============================================================================
"""
Infrastructure module for the dashboard runtime.

Provides:
- HttpExecutor: sends a composed ExecutableRequest with httpx

Usage:
    from infrastructure import HttpExecutor

    executor = HttpExecutor()
    response_text = await executor.execute(run.executable_request)
"""

from infrastructure.http_executor import (
    HttpExecutor,
    HttpExecutionError,
)

__all__ = [
    "HttpExecutor",
    "HttpExecutionError",
]
