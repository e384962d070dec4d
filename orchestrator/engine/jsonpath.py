# ============================================================================
# JSON PATH LOOKUP
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Dotted path lookup into a run response
# PURPOSE: Extract prepare-run output values for dashboard bindings
# CREATED: 05 FEB 2026
# ============================================================================
"""
JSON Path Lookup

Dot-separated paths traverse objects by key and arrays by index:

    resolve_json_path('{"items": [{"id": 7}]}', "items.0.id")  ->  "7"
    resolve_json_path('{"user": {"name": "A"}}', "user")        ->  '{"name":"A"}'

Strings come back raw; every other value as compact JSON text. A missing
segment, a JSON null, an out-of-range index or a non-JSON response
yields None.
"""

import json
from typing import Any, Optional

_MISSING = object()


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        value = node.get(segment)
        return _MISSING if value is None else value
    if isinstance(node, list):
        if not (segment.isascii() and segment.isdigit()):
            return _MISSING
        index = int(segment)
        if index >= len(node) or node[index] is None:
            return _MISSING
        return node[index]
    return _MISSING


def to_text(value: Any) -> str:
    """Raw text for strings, compact JSON for everything else."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def resolve_json_path(json_text: Optional[str], path: str) -> Optional[str]:
    """
    Resolve a dotted path against JSON text.

    Args:
        json_text: Response body, expected to be JSON
        path: Dot-separated keys/indexes; empty segments are ignored

    Returns:
        The value as text, or None if it cannot be resolved
    """
    if json_text is None:
        return None
    try:
        node = json.loads(json_text)
    except ValueError:
        return None
    if node is None:
        return None

    for segment in (s for s in path.split(".") if s):
        node = _step(node, segment)
        if node is _MISSING:
            return None
    return to_text(node)


__all__ = ["resolve_json_path", "to_text"]
