# ============================================================================
# DASHBOARD BINDINGS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Dashboard configuration parsing and binding resolution
# PURPOSE: Turn dashboard JSON into actions/bindings and bindings into inputs
# CREATED: 05 FEB 2026
# ============================================================================
"""
Dashboard Bindings

Dashboard configuration is JSON text:

    {
      "actions":  [{"id": "approve", "appId": "<uuid>"}],
      "bindings": [{"actionId": "approve", "inputName": "OrderId",
                    "source": {"type": "prepare_output", "path": "order.id"}}]
    }

It is parsed once per operation into ActionDefinitions and
BindingDefinitions. Each binding source becomes one of a closed set of
frozen variants at the boundary:

    LoadInputSource(key)          value from the dashboard load inputs
    ActionInputSource(key)        value from the action's own inputs
    PrepareOutputSource(path)     JSON path into the prepare run response
    LiteralSource(value)          fixed value
    PreviousActionOutputSource    parsed, rejected at resolution time

Accepted field aliases (first non-blank wins):
    action id    id | actionId
    input name   inputName | appInputName | targetInput
    source type  sourceType | bindingType | source.type
    source key   sourceKey | key | sourceInput | source.key | source.input | source.path
    literal      literalValue | value | source.value
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from __version__ import RUNTIME_VERSION
from core.config import get_defaults
from core.errors import InvalidOperationError, ValidationError
from core.models.request import RunInputValue
from orchestrator.engine.jsonpath import resolve_json_path, to_text

logger = logging.getLogger(__name__)

UNSUPPORTED_PREVIOUS_OUTPUT = (
    f"previous_action_output bindings are not supported in runtime {RUNTIME_VERSION}"
)


# ============================================================================
# BINDING SOURCES
# ============================================================================

@dataclass(frozen=True)
class LoadInputSource:
    key: str


@dataclass(frozen=True)
class ActionInputSource:
    key: str


@dataclass(frozen=True)
class PrepareOutputSource:
    path: str


@dataclass(frozen=True)
class LiteralSource:
    value: str


@dataclass(frozen=True)
class PreviousActionOutputSource:
    path: str
    action_id: Optional[str] = None


BindingSource = Union[
    LoadInputSource,
    ActionInputSource,
    PrepareOutputSource,
    LiteralSource,
    PreviousActionOutputSource,
]


@dataclass(frozen=True)
class ActionDefinition:
    """One dashboard action: an id mapped to the App it runs."""
    action_id: str
    app_id: str


@dataclass(frozen=True)
class BindingDefinition:
    """Maps one App input to a value source."""
    input_name: str
    source: BindingSource
    app_id: Optional[str] = None
    action_id: Optional[str] = None

    def targets(self, app_id: str, action_id: Optional[str] = None) -> bool:
        """AppId OR ActionId match; both may be set on one binding."""
        if self.app_id is not None and self.app_id == app_id:
            return True
        return action_id is not None and self.action_id == action_id


# ============================================================================
# PARSING
# ============================================================================

def _property_text(node: Mapping[str, Any], name: str) -> Optional[str]:
    if name not in node or node[name] is None:
        return None
    text = to_text(node[name])
    return text if text.strip() else None


def _first_text(node: Optional[Mapping[str, Any]], *names: str) -> Optional[str]:
    if not isinstance(node, Mapping):
        return None
    for name in names:
        text = _property_text(node, name)
        if text is not None:
            return text
    return None


def parse_action_id(value: Optional[str]) -> str:
    """Trimmed, non-empty, bounded action id."""
    limit = get_defaults().limits.max_action_id_length
    action_id = (value or "").strip()
    if not action_id:
        raise ValidationError("Dashboard action is missing id")
    if len(action_id) > limit:
        raise ValidationError(f"Dashboard action id cannot exceed {limit} characters")
    return action_id


def _parse_app_id(value: str) -> str:
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        raise ValidationError(f"Invalid app id '{value}' in dashboard configuration")


def _parse_source(node: Mapping[str, Any]) -> BindingSource:
    nested = node.get("source") if isinstance(node.get("source"), Mapping) else None

    source_type = _first_text(node, "sourceType", "bindingType") or _first_text(nested, "type")
    key = (
        _first_text(node, "sourceKey", "key", "sourceInput")
        or _first_text(nested, "key", "input", "path")
    )
    literal = _first_text(node, "literalValue", "value") or _first_text(nested, "value")

    kind = (source_type or "").strip().lower()
    if kind == "load_input" and key:
        return LoadInputSource(key=key)
    if kind == "action_input" and key:
        return ActionInputSource(key=key)
    if kind == "prepare_output" and key:
        return PrepareOutputSource(path=key)
    if kind == "literal" and literal is not None:
        return LiteralSource(value=literal)
    if kind == "previous_action_output" and key:
        action_id = _first_text(node, "sourceActionId") or _first_text(nested, "actionId")
        return PreviousActionOutputSource(path=key, action_id=action_id)
    raise ValidationError("Invalid dashboard binding source")


def _parse_binding(node: Any) -> BindingDefinition:
    if not isinstance(node, Mapping):
        raise ValidationError("Dashboard binding must be a JSON object")

    input_name = _first_text(node, "inputName", "appInputName", "targetInput")
    if input_name is None:
        raise ValidationError("Dashboard binding inputName is required")

    app_id = _first_text(node, "appId")
    action_id = _first_text(node, "actionId")
    return BindingDefinition(
        input_name=input_name.strip(),
        source=_parse_source(node),
        app_id=_parse_app_id(app_id) if app_id else None,
        action_id=parse_action_id(action_id) if action_id else None,
    )


def _parse_action(node: Any) -> ActionDefinition:
    if not isinstance(node, Mapping):
        raise ValidationError("Dashboard action must be a JSON object")

    app_id = _first_text(node, "appId")
    if app_id is None:
        raise ValidationError("Dashboard action is missing appId")
    return ActionDefinition(
        action_id=parse_action_id(_first_text(node, "id", "actionId")),
        app_id=_parse_app_id(app_id),
    )


def _array(root: Mapping[str, Any], name: str) -> List[Any]:
    value = root.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"Dashboard configuration '{name}' must be an array")
    return value


@dataclass
class DashboardConfiguration:
    """Parsed form of a dashboard's configuration JSON."""
    actions: Dict[str, ActionDefinition] = field(default_factory=dict)
    bindings: List[BindingDefinition] = field(default_factory=list)

    @classmethod
    def parse(cls, text: Optional[str]) -> "DashboardConfiguration":
        """
        Parse configuration JSON.

        Raises:
            ValidationError: malformed JSON, bad shape, duplicate action ids
        """
        if text is None or not text.strip():
            text = "{}"
        try:
            root = json.loads(text)
        except ValueError as e:
            raise ValidationError(f"Dashboard configuration is invalid JSON: {e}")
        if not isinstance(root, dict):
            raise ValidationError("Dashboard configuration must be a JSON object")

        actions: Dict[str, ActionDefinition] = {}
        for node in _array(root, "actions"):
            action = _parse_action(node)
            if action.action_id in actions:
                raise ValidationError(f"Duplicate dashboard action id '{action.action_id}'")
            actions[action.action_id] = action

        bindings = [_parse_binding(node) for node in _array(root, "bindings")]
        return cls(actions=actions, bindings=bindings)

    def has_previous_action_output(self) -> bool:
        return any(isinstance(b.source, PreviousActionOutputSource) for b in self.bindings)


# ============================================================================
# RESOLUTION
# ============================================================================

def bindings_for_target(
    bindings: Iterable[BindingDefinition],
    app_id: str,
    action_id: Optional[str] = None,
) -> List[BindingDefinition]:
    return [b for b in bindings if b.targets(app_id, action_id)]


def resolve_binding_value(
    binding: BindingDefinition,
    load_inputs: Mapping[str, str],
    action_inputs: Mapping[str, str],
    prepare_response: Optional[str],
) -> str:
    """
    Resolve one binding's value.

    Raises:
        ValidationError: missing input or unresolvable prepare output
        InvalidOperationError: previous_action_output source
    """
    source = binding.source
    if isinstance(source, LoadInputSource):
        if source.key not in load_inputs:
            raise ValidationError(
                f"Missing load input '{source.key}' for binding '{binding.input_name}'"
            )
        return load_inputs[source.key]
    if isinstance(source, ActionInputSource):
        if source.key not in action_inputs:
            raise ValidationError(
                f"Missing action input '{source.key}' for binding '{binding.input_name}'"
            )
        return action_inputs[source.key]
    if isinstance(source, PrepareOutputSource):
        if prepare_response is None:
            raise ValidationError(
                f"Binding '{binding.input_name}' requires prepare output '{source.path}'"
            )
        value = resolve_json_path(prepare_response, source.path)
        if value is None:
            raise ValidationError(
                f"Could not resolve prepare output path '{source.path}' "
                f"for binding '{binding.input_name}'"
            )
        return value
    if isinstance(source, LiteralSource):
        return source.value
    if isinstance(source, PreviousActionOutputSource):
        raise InvalidOperationError(UNSUPPORTED_PREVIOUS_OUTPUT)
    raise TypeError(f"Unhandled binding source {source!r}")


def build_run_inputs(
    bindings: Sequence[BindingDefinition],
    app_id: str,
    action_id: Optional[str],
    load_inputs: Sequence[RunInputValue],
    action_inputs: Sequence[RunInputValue],
    prepare_response: Optional[str] = None,
) -> List[RunInputValue]:
    """
    Build the input values for one dashboard run.

    With no binding targeting (app_id, action_id), load inputs then action
    inputs are merged by Title, last write wins. Otherwise each targeting
    binding yields exactly one input value.
    """
    targeting = bindings_for_target(bindings, app_id, action_id)
    if not targeting:
        merged: Dict[str, str] = {}
        for item in [*load_inputs, *action_inputs]:
            merged[item.title] = item.value
        return RunInputValue.from_mapping(merged)

    load_map = {item.title: item.value for item in load_inputs}
    action_map = {item.title: item.value for item in action_inputs}
    resolved = []
    for binding in targeting:
        value = resolve_binding_value(binding, load_map, action_map, prepare_response)
        resolved.append(RunInputValue(title=binding.input_name, value=value))
    logger.debug(f"Resolved {len(resolved)} bound inputs for app {app_id}")
    return resolved


__all__ = [
    "LoadInputSource",
    "ActionInputSource",
    "PrepareOutputSource",
    "LiteralSource",
    "PreviousActionOutputSource",
    "BindingSource",
    "ActionDefinition",
    "BindingDefinition",
    "DashboardConfiguration",
    "UNSUPPORTED_PREVIOUS_OUTPUT",
    "parse_action_id",
    "bindings_for_target",
    "resolve_binding_value",
    "build_run_inputs",
]
