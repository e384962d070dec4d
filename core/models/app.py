# ============================================================================
# APP MODEL
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - HTTP call definition layered on a Resource
# PURPOSE: App definition, typed input schema and per-type value checks
# CREATED: 02 FEB 2026
# EXPORTS: App, Input, InputType, InputKind
# DEPENDENCIES: pydantic
# ============================================================================
"""
App Model

An App is a named HTTP call layered on exactly one Resource. It declares the
HTTP method, an optional URL path, its own parameter/header/body layers and
a typed input schema.

Input types form a closed set:
    Text(max_length)
    Email
    Integer
    Boolean                        (always required)
    Date                           (ISO 8601 date or datetime)
    MultiText(max_length, allowed_values)
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from core.config import get_defaults
from core.contracts import HttpMethod
from core.models.layers import LayeredModel, build_model

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class InputKind(str, Enum):
    """Closed set of input types."""
    TEXT = "Text"
    EMAIL = "Email"
    INTEGER = "Integer"
    BOOLEAN = "Boolean"
    DATE = "Date"
    MULTI_TEXT = "MultiText"


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(value)
        return True
    except ValueError:
        return False


class InputType(BaseModel):
    """
    Tagged input type.

    max_length applies to Text and MultiText; allowed_values to MultiText.
    """
    kind: InputKind
    max_length: Optional[int] = None
    allowed_values: Tuple[str, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_shape(self) -> "InputType":
        if self.kind in (InputKind.TEXT, InputKind.MULTI_TEXT):
            limit = get_defaults().limits.max_text_length
            if self.max_length is None or not 1 <= self.max_length <= limit:
                raise ValueError(f"{self.kind.value} max length must be between 1 and {limit}")
        if self.kind is InputKind.MULTI_TEXT:
            if not self.allowed_values:
                raise ValueError("MultiText requires at least one allowed value")
            for allowed in self.allowed_values:
                if len(allowed) > self.max_length:
                    raise ValueError(
                        f"MultiText allowed value '{allowed}' exceeds max length {self.max_length}"
                    )
        return self

    @classmethod
    def text(cls, max_length: int) -> "InputType":
        return build_model(cls, kind=InputKind.TEXT, max_length=max_length)

    @classmethod
    def email(cls) -> "InputType":
        return cls(kind=InputKind.EMAIL)

    @classmethod
    def integer(cls) -> "InputType":
        return cls(kind=InputKind.INTEGER)

    @classmethod
    def boolean(cls) -> "InputType":
        return cls(kind=InputKind.BOOLEAN)

    @classmethod
    def date(cls) -> "InputType":
        return cls(kind=InputKind.DATE)

    @classmethod
    def multi_text(cls, max_length: int, allowed_values: List[str]) -> "InputType":
        return build_model(
            cls,
            kind=InputKind.MULTI_TEXT,
            max_length=max_length,
            allowed_values=tuple(allowed_values),
        )

    def check_value(self, title: str, value: str) -> Optional[str]:
        """
        Validate a supplied value against this type.

        Returns:
            An error message naming the input, or None if the value is valid.
        """
        if self.kind is InputKind.EMAIL:
            if not EMAIL_PATTERN.fullmatch(value):
                return f"Input '{title}' must be a valid email address"
        elif self.kind is InputKind.INTEGER:
            if not INTEGER_PATTERN.fullmatch(value.strip()):
                return f"Input '{title}' must be a valid integer"
        elif self.kind is InputKind.BOOLEAN:
            if value.strip().lower() not in ("true", "false"):
                return f"Input '{title}' must be a valid boolean (true or false)"
        elif self.kind is InputKind.DATE:
            if not _is_iso_date(value.strip()):
                return f"Input '{title}' must be a valid ISO date"
        elif self.kind is InputKind.TEXT:
            if len(value) > self.max_length:
                return f"Input '{title}' must be text of at most {self.max_length} characters"
        elif self.kind is InputKind.MULTI_TEXT:
            if len(value) > self.max_length:
                return f"Input '{title}' must be text of at most {self.max_length} characters"
            if value not in self.allowed_values:
                return f"Input '{title}' must be one of: {', '.join(self.allowed_values)}"
        return None


class Input(BaseModel):
    """
    One entry of an App's input schema.

    Boolean inputs are forced to required. A default value must itself be a
    valid value of the input type.
    """
    title: str = Field(..., min_length=1, max_length=100)
    type: InputType
    required: bool = False
    default_value: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _force_boolean_required(cls, data: Any) -> Any:
        if isinstance(data, dict):
            input_type = data.get("type")
            if isinstance(input_type, InputType):
                kind = input_type.kind
            elif isinstance(input_type, dict):
                kind = input_type.get("kind")
            else:
                kind = None
            if kind == InputKind.BOOLEAN:
                data = {**data, "required": True}
        return data

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Input title cannot be empty")
        return value

    @model_validator(mode="after")
    def _check_default(self) -> "Input":
        if self.default_value is not None:
            problem = self.type.check_value(self.title, self.default_value)
            if problem:
                raise ValueError(f"Invalid default value: {problem}")
        return self

    @classmethod
    def create(
        cls,
        title: str,
        input_type: InputType,
        required: bool = False,
        default_value: Optional[str] = None,
    ) -> "Input":
        return build_model(
            cls,
            title=title,
            type=input_type,
            required=required,
            default_value=default_value,
        )


class App(LayeredModel):
    """
    HTTP call definition layered on a Resource.

    Its layer keys must be disjoint from the Resource's; that rule spans two
    entities and is enforced by the layer service, not here.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    folder_id: Optional[str] = None
    resource_id: str
    http_method: HttpMethod = HttpMethod.GET
    url_path: Optional[str] = Field(default=None, max_length=1000)
    inputs: List[Input] = Field(default_factory=list)
    use_json_body: bool = False

    @field_validator("inputs")
    @classmethod
    def _unique_titles(cls, value: List[Input]) -> List[Input]:
        seen = set()
        for item in value:
            if item.title in seen:
                raise ValueError(f"Duplicate input title '{item.title}'")
            seen.add(item.title)
        return value

    def get_input(self, title: str) -> Optional[Input]:
        for item in self.inputs:
            if item.title == title:
                return item
        return None

    @property
    def required_titles(self) -> List[str]:
        return [item.title for item in self.inputs if item.required]

    @classmethod
    def create(cls, **data: Any) -> "App":
        """Build an App, raising ValidationError on invalid fields."""
        return build_model(cls, **data)


__all__ = [
    "App",
    "Input",
    "InputType",
    "InputKind",
    "EMAIL_PATTERN",
]
