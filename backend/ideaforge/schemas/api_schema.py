"""Pydantic schemas for the HTTP request and response bodies."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .blueprint_schema import BlueprintDocument
from .form_schema import FormDraft


class TechOption(BaseModel):
    id: str
    label: str


class OptionsResponse(BaseModel):
    """Everything the form needs to draw its fields."""

    industries: List[str]
    tech_options: List[TechOption]
    idea_description_max_length: int
    total_steps: int
    loading_messages: List[str]


class StepValidationRequest(BaseModel):
    step: int = Field(..., ge=1, le=3)
    form: FormDraft = Field(default_factory=FormDraft)


class StepValidationResponse(BaseModel):
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)


class GenerateBlueprintResponse(BaseModel):
    backend: Literal["template", "model"]
    notice: Optional[str] = Field(
        default=None, description="Shown when the blueprint came from the template engine"
    )
    blueprint: Dict[str, Any] = Field(..., description="BlueprintDocument, camelCase keys")


class ShareRequest(BaseModel):
    blueprint: BlueprintDocument
    url: str = Field(..., min_length=1, description="Link to the blueprint view")


# ── Wizard ───────────────────────────────────────────────────────────────

class FieldUpdateRequest(BaseModel):
    fields: Dict[str, Any] = Field(..., description="Field values keyed by camelCase or snake_case name")


class TechToggleRequest(BaseModel):
    id: str
    checked: bool


class WizardStateResponse(BaseModel):
    id: str
    phase: Literal["collecting", "submitting", "succeeded", "failed"]
    step: int
    total_steps: int
    progress_percent: int
    draft: Dict[str, Any]
    errors: Dict[str, str]
    loading_message: Optional[str] = None
    error_message: Optional[str] = None
    backend: Optional[str] = None
    notice: Optional[str] = None
    blueprint: Optional[Dict[str, Any]] = None
