"""Prompt construction for the model-backed blueprint generator.

The prompt restates every form field and embeds a literal JSON example of
the exact BlueprintDocument shape. Echo fields are pre-filled with the real
form values so the model never has to invent them.
"""

from __future__ import annotations

import json
from typing import Any

from ...constants import TECH_OPTIONS
from ...schemas.form_schema import FormInput

BLUEPRINT_INSTRUCTION = """\
You are a startup advisor. Create a professional startup blueprint for the idea below.

RULES — you MUST follow all of these:
1. Output valid JSON ONLY — no markdown, no explanation, no preamble.
2. Follow the JSON structure below EXACTLY: same keys, same nesting, same types.
3. Keep the pre-filled values for industry, targetAudience, teamSize, budget,
   techPreferences, milestones and risks exactly as given.
4. Every list must contain at least one entry.
5. budgetBreakdown values are percentage strings (e.g. "40%") that sum to 100%.
6. Do NOT invent revenue, traction, funding or user numbers.
"""


def _tech_labels(form: FormInput) -> str:
    return ", ".join(TECH_OPTIONS.get(t, t) for t in form.tech_preferences)


def build_target_shape(form: FormInput) -> dict[str, Any]:
    """Literal example of the response shape, echo fields pre-filled."""
    return {
        "name": "Startup name",
        "tagline": "Catchy tagline",
        "problem": "Clear problem statement",
        "solution": "Concise solution description",
        "industry": form.industry,
        "targetAudience": form.target_audience,
        "teamSize": form.team_size,
        "budget": form.budget,
        "techPreferences": list(form.tech_preferences),
        "milestones": form.milestones,
        "risks": form.risks,
        "marketAnalysis": {
            "industryOverview": "Brief overview of the industry",
            "painPoints": ["Pain point 1", "Pain point 2", "Pain point 3"],
        },
        "product": {
            "keyFeatures": ["Feature 1", "Feature 2", "Feature 3", "Feature 4"],
            "recommendedTech": ["Tech 1", "Tech 2", "Tech 3", "Tech 4"],
        },
        "business": {
            "revenueStreams": ["Revenue stream 1", "Revenue stream 2", "Revenue stream 3"],
            "budgetBreakdown": {
                "development": "40%",
                "marketing": "30%",
                "operations": "20%",
                "contingency": "10%",
            },
        },
        "goToMarket": {
            "channels": ["Channel 1", "Channel 2", "Channel 3"],
            "plan": {
                "thirty": "First 30 days plan",
                "sixty": "60 days plan",
                "ninety": "90 days plan",
            },
        },
        "team": {
            "core": {"roles": ["Role 1", "Role 2", "Role 3"]},
            "growth": {"roles": ["Role 1", "Role 2", "Role 3"]},
        },
        "nextSteps": {
            "immediateActions": ["Action 1", "Action 2", "Action 3"],
            "tip": "Strategic advice",
        },
    }


def build_blueprint_prompt(form: FormInput) -> str:
    """Build the single natural-language request sent to the provider."""
    lines = [
        BLUEPRINT_INSTRUCTION,
        "--- Startup Details ---",
        f"Idea Description: {form.idea_description}",
        f"Industry: {form.industry}",
        f"Target Audience: {form.target_audience}",
        f"Team Size: {form.team_size}",
        f"Budget: {form.budget}",
        f"Tech Preferences: {_tech_labels(form)}",
        f"Milestones: {form.milestones or 'Not specified'}",
        f"Risks: {form.risks or 'Not specified'}",
        "",
        "--- Required JSON Structure ---",
        json.dumps(build_target_shape(form), indent=2, ensure_ascii=False),
    ]
    return "\n".join(lines)
