# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core module initialization
# PURPOSE: Export core contracts and error kinds
# CREATED: 02 FEB 2026
# ============================================================================

from core.contracts import HttpMethod, RunStatus
from core.errors import (
    ConflictError,
    DomainError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    # Enums
    "RunStatus",
    "HttpMethod",
    # Errors
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InvalidOperationError",
]
