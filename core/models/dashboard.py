# ============================================================================
# DASHBOARD MODEL
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core model - Prepare app plus action/binding configuration
# PURPOSE: Dashboard entity; configuration is stored as raw JSON text
# CREATED: 03 FEB 2026
# EXPORTS: Dashboard
# DEPENDENCIES: pydantic
# ============================================================================
"""
Dashboard Model

The configuration is opaque JSON text. It is parsed on demand by
orchestrator.engine.bindings and never stored in parsed form.
"""

from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from core.models.layers import build_model


class Dashboard(BaseModel):
    """A prepare app plus actions chained by bindings."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    folder_id: Optional[str] = None
    prepare_app_id: Optional[str] = None
    configuration: str = "{}"

    model_config = {"frozen": True}

    @field_validator("configuration", mode="before")
    @classmethod
    def _normalize_configuration(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "{}"
        return value

    @classmethod
    def create(cls, **data: Any) -> "Dashboard":
        return build_model(cls, **data)


__all__ = ["Dashboard"]
