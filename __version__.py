# ============================================================================
# VERSION - DASHBOARD RUNTIME
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# ============================================================================
"""
Version information for the dashboard runtime.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
# Criteria for 0.1 - prepare run feeds an action run end to end
__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-02-09"

# Runtime scope reported on unsupported dashboard features
RUNTIME_VERSION = "v1"
EPOCH = 6
CODENAME = "Dashboard Runtime"
