# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 02 FEB 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the run engine.
"""

from core.config.defaults import (
    HttpDefaults,
    ValidationLimits,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "HttpDefaults",
    "ValidationLimits",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
