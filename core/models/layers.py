# ============================================================================
# KEY/VALUE LAYERS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - Parameter/header/body layers
# PURPOSE: Key/value pairs and the three-layer base shared by Resource and App
# CREATED: 02 FEB 2026
# EXPORTS: KeyValuePair, LayeredModel, LayerCategory, to_layer, build_model
# DEPENDENCIES: pydantic
# ============================================================================
"""
Key/Value Layers

A Resource and an App each carry three ordered layers of key/value pairs:
URL parameters, headers and body parameters. Keys are unique within a layer
and bounded in length; values are non-empty and bounded.

KeyValuePair itself is unconstrained so it can also carry template-resolved
values inside an ExecutableRequest. Limits are enforced where layers are
configured (LayeredModel).
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.config import get_defaults
from core.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


class LayerCategory(str, Enum):
    """The three layer categories, valued by their message label."""
    URL_PARAMETERS = "URL parameters"
    HEADERS = "Headers"
    BODY = "Body parameters"


class KeyValuePair(BaseModel):
    """A single key/value entry of a layer."""
    key: str
    value: str

    model_config = {"frozen": True}


LayerInput = Union[Mapping[str, str], Iterable[Union[KeyValuePair, Tuple[str, str]]], None]


def to_layer(items: LayerInput) -> List[KeyValuePair]:
    """
    Normalize a mapping, a list of (key, value) tuples or a list of pairs
    into a layer. None becomes an empty layer.
    """
    if items is None:
        return []
    if isinstance(items, Mapping):
        return [KeyValuePair(key=k, value=v) for k, v in items.items()]
    layer = []
    for item in items:
        if isinstance(item, KeyValuePair):
            layer.append(item)
        elif isinstance(item, dict):
            layer.append(KeyValuePair(**item))
        else:
            key, value = item
            layer.append(KeyValuePair(key=key, value=value))
    return layer


def _check_layer(pairs: List[KeyValuePair], category: LayerCategory) -> List[KeyValuePair]:
    limits = get_defaults().limits
    seen = set()
    checked = []
    for pair in pairs:
        key = pair.key.strip()
        if not key:
            raise ValueError(f"{category.value}: key cannot be empty")
        if len(key) > limits.max_key_length:
            raise ValueError(
                f"{category.value}: key '{key}' exceeds {limits.max_key_length} characters"
            )
        if not pair.value:
            raise ValueError(f"{category.value}: value for '{key}' cannot be empty")
        if len(pair.value) > limits.max_value_length:
            raise ValueError(
                f"{category.value}: value for '{key}' exceeds {limits.max_value_length} characters"
            )
        if key in seen:
            raise ValueError(f"{category.value}: duplicate key '{key}'")
        seen.add(key)
        checked.append(pair if key == pair.key else KeyValuePair(key=key, value=pair.value))
    return checked


class LayeredModel(BaseModel):
    """Base for models that own URL parameter, header and body layers."""

    url_parameters: List[KeyValuePair] = Field(default_factory=list)
    headers: List[KeyValuePair] = Field(default_factory=list)
    body: List[KeyValuePair] = Field(default_factory=list)

    @field_validator("url_parameters", "headers", "body", mode="before")
    @classmethod
    def _normalize_layer(cls, value: Any) -> Any:
        if value is None or isinstance(value, (Mapping, list)):
            return to_layer(value)
        return value

    @field_validator("url_parameters")
    @classmethod
    def _check_url_parameters(cls, value: List[KeyValuePair]) -> List[KeyValuePair]:
        return _check_layer(value, LayerCategory.URL_PARAMETERS)

    @field_validator("headers")
    @classmethod
    def _check_headers(cls, value: List[KeyValuePair]) -> List[KeyValuePair]:
        return _check_layer(value, LayerCategory.HEADERS)

    @field_validator("body")
    @classmethod
    def _check_body(cls, value: List[KeyValuePair]) -> List[KeyValuePair]:
        return _check_layer(value, LayerCategory.BODY)

    def layer(self, category: LayerCategory) -> List[KeyValuePair]:
        if category is LayerCategory.URL_PARAMETERS:
            return self.url_parameters
        if category is LayerCategory.HEADERS:
            return self.headers
        return self.body

    def layer_keys(self, category: LayerCategory) -> List[str]:
        return [pair.key for pair in self.layer(category)]


def build_model(model_cls: Type[M], **data: Any) -> M:
    """
    Construct a model, converting pydantic validation failures into a
    domain ValidationError with readable messages.
    """
    try:
        return model_cls(**data)
    except PydanticValidationError as e:
        messages = []
        for error in e.errors():
            ctx_error = (error.get("ctx") or {}).get("error")
            messages.append(str(ctx_error) if ctx_error is not None else error["msg"])
        raise ValidationError("; ".join(messages)) from e


def layer_as_dict(pairs: Iterable[KeyValuePair]) -> Dict[str, str]:
    return {pair.key: pair.value for pair in pairs}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LayerCategory",
    "KeyValuePair",
    "LayeredModel",
    "to_layer",
    "build_model",
    "layer_as_dict",
]
