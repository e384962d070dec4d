# ============================================================================
# REQUEST MODELS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - Composed request shape and run-time lookup values
# PURPOSE: ExecutableRequest, CurrentUser, RunInputValue, header redaction
# CREATED: 03 FEB 2026
# EXPORTS: ExecutableRequest, CurrentUser, RunInputValue, redact_headers
# DEPENDENCIES: pydantic
# ============================================================================
"""
Request Models

ExecutableRequest is the merged Resource + App request shape. RequestComposer
produces it still templated; TemplateEngine resolves it against one run's
input values and the current user.

Authorization header values are never returned to API callers. The redacted
form keeps the scheme so operators can still see which kind was configured:

    "Bearer abc.def"  ->  "Bearer ---- redacted ----"
    "secret-key"      ->  "---- redacted ----"
"""

from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from core.contracts import HttpMethod
from core.models.layers import KeyValuePair

REDACTED_VALUE = "---- redacted ----"
_REDACTED_SCHEMES = ("bearer ", "basic ")


class CurrentUser(BaseModel):
    """The user on whose behalf a run executes."""
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""

    model_config = {"frozen": True}

    def template_fields(self) -> Dict[str, str]:
        """Values exposed to templates as @current_user.<field>."""
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }


class RunInputValue(BaseModel):
    """A supplied input value, keyed by the App Input's Title."""
    title: str
    value: str

    model_config = {"frozen": True}

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> List["RunInputValue"]:
        return [cls(title=title, value=value) for title, value in values.items()]


def input_values_to_dict(values: Iterable[RunInputValue]) -> Dict[str, str]:
    """Titles to values; later entries win."""
    return {item.title: item.value for item in values}


def redact_authorization(value: str) -> str:
    lowered = value.lower()
    for scheme in _REDACTED_SCHEMES:
        if lowered.startswith(scheme):
            return value[: len(scheme)] + REDACTED_VALUE
    return REDACTED_VALUE


def redact_headers(headers: Iterable[KeyValuePair]) -> List[KeyValuePair]:
    """Headers with every Authorization value redacted (name match is case-insensitive)."""
    return [
        KeyValuePair(key=h.key, value=redact_authorization(h.value))
        if h.key.lower() == "authorization" else h
        for h in headers
    ]


class ExecutableRequest(BaseModel):
    """
    A concrete HTTP call: URL, method, parameters, headers and body.
    """
    base_url: str
    http_method: HttpMethod
    url_parameters: List[KeyValuePair] = Field(default_factory=list)
    headers: List[KeyValuePair] = Field(default_factory=list)
    body: List[KeyValuePair] = Field(default_factory=list)
    use_json_body: bool = False

    model_config = {"frozen": True}

    def redacted(self) -> "ExecutableRequest":
        """Copy with every Authorization header value redacted."""
        return self.model_copy(update={"headers": redact_headers(self.headers)})

    def header(self, name: str) -> Optional[str]:
        for pair in self.headers:
            if pair.key.lower() == name.lower():
                return pair.value
        return None


__all__ = [
    "CurrentUser",
    "RunInputValue",
    "ExecutableRequest",
    "REDACTED_VALUE",
    "redact_authorization",
    "redact_headers",
    "input_values_to_dict",
]
