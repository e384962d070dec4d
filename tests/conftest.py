# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Tests - Shared fixtures
# PURPOSE: Reset process-wide defaults between tests
# CREATED: 10 FEB 2026
# ============================================================================

import pytest

from core.config import reset_defaults


@pytest.fixture(autouse=True)
def _fresh_defaults():
    """Defaults are a process singleton; isolate env overrides per test."""
    reset_defaults()
    yield
    reset_defaults()
