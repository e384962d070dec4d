# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for HTTP execution and validation limits
# CREATED: 02 FEB 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for outgoing HTTP execution and for the limits enforced by
the model smart constructors. These can be overridden via environment
variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from __version__ import __version__


@dataclass(frozen=True)
class HttpDefaults:
    """
    Defaults for the outgoing HTTP executor.
    """
    timeout_seconds: float = 30.0
    # Error bodies are embedded in run error messages, keep them bounded
    max_error_body_chars: int = 2000
    user_agent: str = f"dashrun/{__version__}"

    @classmethod
    def from_env(cls) -> "HttpDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", 30.0)),
            max_error_body_chars=int(os.getenv("HTTP_MAX_ERROR_BODY_CHARS", 2000)),
        )


@dataclass(frozen=True)
class ValidationLimits:
    """
    Limits enforced when building Resources, Apps, Inputs and dashboard actions.
    """
    max_key_length: int = 100
    max_value_length: int = 1000
    max_text_length: int = 500
    max_action_id_length: int = 100
    max_error_message_length: int = 2000

    @classmethod
    def from_env(cls) -> "ValidationLimits":
        """Create from environment variables."""
        return cls(
            max_value_length=int(os.getenv("MAX_LAYER_VALUE_LENGTH", 1000)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    http: HttpDefaults = field(default_factory=HttpDefaults)
    limits: ValidationLimits = field(default_factory=ValidationLimits)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            http=HttpDefaults.from_env(),
            limits=ValidationLimits.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HttpDefaults",
    "ValidationLimits",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
