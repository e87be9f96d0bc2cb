"""Form input contracts — the raw attributes collected by the wizard.

`FormInput` is the validated contract handed to the generators.
`FormDraft` is the partially-filled form held between wizard steps;
`validate_step()` produces the inline, per-field messages shown at each step.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..constants import (
    IDEA_DESCRIPTION_MAX_LENGTH,
    INDUSTRIES_SET,
    TECH_OPTION_IDS,
    TOTAL_STEPS,
)


def _dedupe(values: List[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class FormInput(BaseModel):
    """Validated startup idea intake. Accepts camelCase or snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    # STEP 1: Idea
    idea_description: str = Field(
        ...,
        min_length=1,
        max_length=IDEA_DESCRIPTION_MAX_LENGTH,
        description="Free-text description of the startup idea.",
    )

    # STEP 2: Project details
    industry: str = Field(..., description="One of the standardized industries.")
    target_audience: str = Field(..., min_length=1)
    team_size: str = Field(..., min_length=1)
    budget: str = Field(..., min_length=1)
    tech_preferences: List[str] = Field(..., min_length=1)

    # STEP 3: Optional
    milestones: str = ""
    risks: str = ""

    @field_validator("idea_description", "target_audience", "team_size", "budget")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("industry")
    @classmethod
    def known_industry(cls, v: str) -> str:
        if v not in INDUSTRIES_SET:
            raise ValueError(f"unknown industry: {v!r}")
        return v

    @field_validator("tech_preferences")
    @classmethod
    def known_tech(cls, v: List[str]) -> List[str]:
        unknown = [t for t in v if t not in TECH_OPTION_IDS]
        if unknown:
            raise ValueError(f"unknown technology preferences: {unknown}")
        return _dedupe(v)


class FormDraft(BaseModel):
    """Partially-filled form state. Every field is optional until submission."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    idea_description: str = ""
    industry: str = ""
    target_audience: str = ""
    team_size: str = ""
    budget: str = ""
    tech_preferences: List[str] = Field(default_factory=list)
    milestones: str = ""
    risks: str = ""

    def to_form_input(self) -> FormInput:
        """Build the validated contract. Raises pydantic.ValidationError."""
        return FormInput.model_validate(self.model_dump())


# Wire name (camelCase) -> attribute name, for partial updates.
FORM_FIELDS: Dict[str, str] = {
    to_camel(name): name for name in FormDraft.model_fields
}


def resolve_field(name: str) -> str:
    """Map a camelCase or snake_case field name to the attribute name."""
    if name in FormDraft.model_fields:
        return name
    if name in FORM_FIELDS:
        return FORM_FIELDS[name]
    raise KeyError(name)


def validate_step(step: int, draft: FormDraft) -> Dict[str, str]:
    """Return inline error messages for one wizard step, keyed by wire name.

    An empty dict means the step may be left. Step 3 holds optional
    fields only and is always valid.
    """
    if step < 1 or step > TOTAL_STEPS:
        raise ValueError(f"step must be between 1 and {TOTAL_STEPS}, got {step}")

    errors: Dict[str, str] = {}

    if step == 1:
        if not draft.idea_description.strip():
            errors["ideaDescription"] = "Please describe your idea"
        elif len(draft.idea_description) > IDEA_DESCRIPTION_MAX_LENGTH:
            errors["ideaDescription"] = (
                f"Description must be {IDEA_DESCRIPTION_MAX_LENGTH} characters or less"
            )

    elif step == 2:
        if not draft.industry:
            errors["industry"] = "Please select an industry"
        elif draft.industry not in INDUSTRIES_SET:
            errors["industry"] = "Please select an industry from the list"
        if not draft.target_audience.strip():
            errors["targetAudience"] = "Please describe your target audience"
        if not draft.team_size.strip():
            errors["teamSize"] = "Please provide your team size"
        if not draft.budget.strip():
            errors["budget"] = "Please provide your budget"
        if not draft.tech_preferences:
            errors["techPreferences"] = "Please select at least one technology preference"
        elif any(t not in TECH_OPTION_IDS for t in draft.tech_preferences):
            errors["techPreferences"] = "Please choose technology preferences from the list"

    return errors
