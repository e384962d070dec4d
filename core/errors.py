# ============================================================================
# DOMAIN ERRORS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Error kinds shared by engine, services and API
# PURPOSE: Four caller-facing error kinds with stable messages
# CREATED: 02 FEB 2026
# ============================================================================
"""
Domain Errors

Every failure raised by the engine and services is one of four kinds:

    ValidationError        malformed or out-of-schema input (caller can fix)
    NotFoundError          referenced entity does not exist
    ConflictError          identity or cross-layer key collision
    InvalidOperationError  precondition or state violation

The API layer maps each kind to an HTTP status code.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    kind = "domain"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    kind = "validation"


class NotFoundError(DomainError):
    kind = "not_found"


class ConflictError(DomainError):
    kind = "conflict"


class InvalidOperationError(DomainError):
    kind = "invalid_operation"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InvalidOperationError",
]
