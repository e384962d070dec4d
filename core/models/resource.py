# ============================================================================
# RESOURCE MODEL
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - Shared base HTTP configuration
# PURPOSE: Base URL plus default URL parameter, header and body layers
# CREATED: 02 FEB 2026
# EXPORTS: Resource
# DEPENDENCIES: pydantic
# ============================================================================
"""
Resource Model

A Resource is the shared base HTTP configuration that Apps layer on top of.
Its layers must never share a key with any App that references it.
"""

import re
from typing import Any, Optional
from uuid import uuid4

from pydantic import Field, field_validator

from core.models.layers import LayeredModel, build_model

BASE_URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


class Resource(LayeredModel):
    """
    Base HTTP configuration shared by many Apps.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    base_url: str = Field(..., description="http(s) URL, may contain @tokens")
    description: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        value = value.strip()
        if not BASE_URL_PATTERN.match(value):
            raise ValueError("Base URL must be a valid http or https URL")
        return value

    @classmethod
    def create(cls, **data: Any) -> "Resource":
        """Build a Resource, raising ValidationError on invalid fields."""
        return build_model(cls, **data)


__all__ = ["Resource", "BASE_URL_PATTERN"]
