"""Template Blueprint Generator — deterministic, no LLM, no I/O.

Maps the form input into a fully-populated BlueprintDocument. Personalization
is limited to the derived name, the tagline, the industry overview and the
echoed form fields; every list is canned placeholder content.
"""

from __future__ import annotations

import re

from ...schemas.blueprint_schema import (
    BlueprintDocument,
    BudgetBreakdown,
    Business,
    GoToMarket,
    LaunchPlan,
    MarketAnalysis,
    NextSteps,
    Product,
    RoleGroup,
    Team,
)
from ...schemas.form_schema import FormInput
from . import templates

_NAME_TOKENS = 3
# Word characters (ASCII), whitespace and hyphens survive.
_NAME_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
# Hyphens that do not join two word characters.
_LOOSE_HYPHEN_RE = re.compile(r"(?<!\w)-|-(?!\w)", re.ASCII)


def derive_name(description: str) -> str:
    """First three whitespace tokens of the description, punctuation stripped.

    May return an empty string when nothing survives stripping.
    """
    head = " ".join(description.split()[:_NAME_TOKENS])
    head = _NAME_STRIP_RE.sub("", head)
    return _LOOSE_HYPHEN_RE.sub("", head)


def build_tagline(industry: str, target_audience: str) -> str:
    return f"Revolutionizing {industry} for {target_audience}"


def _percent(value: int) -> str:
    return f"{value}%"


def generate_fallback_blueprint(form: FormInput) -> BlueprintDocument:
    """Build a complete blueprint from canned templates. Never fails."""
    name = derive_name(form.idea_description)
    print(f"🧩 [BLUEPRINT] Template generation for name={name!r}, industry={form.industry}")

    split = templates.BUDGET_SPLIT

    return BlueprintDocument(
        name=name,
        tagline=build_tagline(form.industry, form.target_audience),
        problem=templates.PROBLEM_STATEMENT,
        solution=form.idea_description,
        industry=form.industry,
        target_audience=form.target_audience,
        team_size=form.team_size,
        budget=form.budget,
        tech_preferences=list(form.tech_preferences),
        milestones=form.milestones,
        risks=form.risks,
        market_analysis=MarketAnalysis(
            industry_overview=templates.INDUSTRY_OVERVIEW.format(industry=form.industry),
            pain_points=list(templates.PAIN_POINTS),
        ),
        product=Product(
            key_features=list(templates.KEY_FEATURES),
            recommended_tech=list(templates.RECOMMENDED_TECH),
        ),
        business=Business(
            revenue_streams=list(templates.REVENUE_STREAMS),
            budget_breakdown=BudgetBreakdown(
                development=_percent(split["development"]),
                marketing=_percent(split["marketing"]),
                operations=_percent(split["operations"]),
                contingency=_percent(split["contingency"]),
            ),
        ),
        go_to_market=GoToMarket(
            channels=list(templates.CHANNELS),
            plan=LaunchPlan(**templates.LAUNCH_PLAN),
        ),
        team=Team(
            core=RoleGroup(roles=list(templates.CORE_ROLES)),
            growth=RoleGroup(roles=list(templates.GROWTH_ROLES)),
        ),
        next_steps=NextSteps(
            immediate_actions=list(templates.IMMEDIATE_ACTIONS),
            tip=templates.STRATEGIC_TIP,
        ),
    )


class FallbackBlueprintGenerator:
    """Async adapter so the template path fits the generator interface."""

    backend = "template"

    async def generate(self, form: FormInput) -> BlueprintDocument:
        return generate_fallback_blueprint(form)
