# ============================================================================
# ORCHESTRATOR ENGINE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Engine components
# PURPOSE: Conflict checks, templates, composition, dashboard bindings
# CREATED: 04 FEB 2026
# ============================================================================
"""
Orchestrator Engine Components

- conflicts: Resource/App layer key disjointness
- templates: @token substitution and {{ }} expressions
- composer: Resource + App merge into an ExecutableRequest
- jsonpath: dotted lookups into run responses
- bindings: dashboard configuration parsing and binding resolution
"""

from orchestrator.engine.conflicts import (
    find_layer_conflicts,
    check_layer_conflicts,
    check_resource_against_apps,
)
from orchestrator.engine.templates import (
    TemplateResolver,
    TemplateContext,
    ExpressionEvaluator,
    TemplateExpressionError,
    get_resolver,
    resolve_template,
)
from orchestrator.engine.composer import (
    join_url,
    compose,
    compose_executable_request,
)
from orchestrator.engine.jsonpath import resolve_json_path
from orchestrator.engine.bindings import (
    ActionDefinition,
    BindingDefinition,
    DashboardConfiguration,
    build_run_inputs,
)

__all__ = [
    # Conflicts
    "find_layer_conflicts",
    "check_layer_conflicts",
    "check_resource_against_apps",
    # Templates
    "TemplateResolver",
    "TemplateContext",
    "ExpressionEvaluator",
    "TemplateExpressionError",
    "get_resolver",
    "resolve_template",
    # Composer
    "join_url",
    "compose",
    "compose_executable_request",
    # Dashboard
    "resolve_json_path",
    "ActionDefinition",
    "BindingDefinition",
    "DashboardConfiguration",
    "build_run_inputs",
]
