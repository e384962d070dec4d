# ============================================================================
# LAYER CONFLICT VALIDATION
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Pure cross-layer key checks
# PURPOSE: Keep Resource and App layers from overwriting each other
# CREATED: 04 FEB 2026
# ============================================================================
"""
Layer Conflict Validation

A Resource and every App on it each own URL parameter, header and body
layers. Merged requests simply concatenate them, so keys must be disjoint per
category. Checks run both ways:

- App create/update against its Resource
- Resource update against every App referencing it

Conflict messages are exhaustive: every overlapping key in every category.

    App cannot override existing Resource values: URL parameters: page; Headers: X-Key
"""

from typing import Iterable, List, Optional, Sequence

from core.errors import ConflictError
from core.models.layers import KeyValuePair, LayerCategory, LayeredModel

APP_OVER_RESOURCE_PREFIX = "App cannot override existing Resource values"
RESOURCE_OVER_APP_PREFIX = "Resource cannot override existing App values"


def _overlap(base_keys: Iterable[str], overlay: Optional[Sequence[KeyValuePair]]) -> List[str]:
    if not overlay:
        return []
    base = set(base_keys)
    overlapping = []
    for pair in overlay:
        if pair.key in base and pair.key not in overlapping:
            overlapping.append(pair.key)
    return overlapping


def find_layer_conflicts(
    base: LayeredModel,
    url_parameters: Optional[Sequence[KeyValuePair]] = None,
    headers: Optional[Sequence[KeyValuePair]] = None,
    body: Optional[Sequence[KeyValuePair]] = None,
) -> List[str]:
    """
    Compare overlay layers with a base model's layers.

    Returns:
        One "<category>: k1, k2" entry per overlapping category, in
        URL parameters / Headers / Body parameters order. Empty if disjoint.
    """
    overlays = (
        (LayerCategory.URL_PARAMETERS, url_parameters),
        (LayerCategory.HEADERS, headers),
        (LayerCategory.BODY, body),
    )
    conflicts = []
    for category, overlay in overlays:
        keys = _overlap(base.layer_keys(category), overlay)
        if keys:
            conflicts.append(f"{category.value}: {', '.join(keys)}")
    return conflicts


def check_layer_conflicts(
    base: LayeredModel,
    url_parameters: Optional[Sequence[KeyValuePair]] = None,
    headers: Optional[Sequence[KeyValuePair]] = None,
    body: Optional[Sequence[KeyValuePair]] = None,
) -> None:
    """
    Check App layers against its Resource.

    Raises:
        ConflictError: naming every overlapping key
    """
    conflicts = find_layer_conflicts(base, url_parameters, headers, body)
    if conflicts:
        raise ConflictError(f"{APP_OVER_RESOURCE_PREFIX}: {'; '.join(conflicts)}")


def check_resource_against_apps(
    apps: Iterable[LayeredModel],
    url_parameters: Optional[Sequence[KeyValuePair]] = None,
    headers: Optional[Sequence[KeyValuePair]] = None,
    body: Optional[Sequence[KeyValuePair]] = None,
) -> None:
    """
    Check new Resource layers against every App referencing the Resource.

    Raises:
        ConflictError: naming every overlapping key, prefixed per App
    """
    conflicts = []
    for app in apps:
        for conflict in find_layer_conflicts(app, url_parameters, headers, body):
            conflicts.append(f"App {app.id} {conflict}")
    if conflicts:
        raise ConflictError(f"{RESOURCE_OVER_APP_PREFIX}: {'; '.join(conflicts)}")


__all__ = [
    "find_layer_conflicts",
    "check_layer_conflicts",
    "check_resource_against_apps",
]
