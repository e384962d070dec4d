# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Request composition and dashboard engine
# PURPOSE: Pure engine used by the run and dashboard services
# CREATED: 04 FEB 2026
# ============================================================================
"""
Orchestrator Module

Pure, synchronous engine pieces. Services in services/ drive them and own
all I/O.

Usage:
    from orchestrator.engine import compose_executable_request, TemplateContext
"""
