"""Blueprint schema — the output contract shared by every generator and renderer.

Serialised with camelCase keys (the same shape the model-backed generator
asks the provider to return). All models are frozen: a document is never
mutated after a generator builds it.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _BlueprintModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class MarketAnalysis(_BlueprintModel):
    industry_overview: str
    pain_points: List[str] = Field(default_factory=list)


class Product(_BlueprintModel):
    key_features: List[str] = Field(default_factory=list)
    recommended_tech: List[str] = Field(default_factory=list)


class BudgetBreakdown(_BlueprintModel):
    """Percentage strings, e.g. "40%". Expected to sum to 100."""

    development: str
    marketing: str
    operations: str
    contingency: str

    def total_percent(self) -> float:
        """Sum the four shares. Raises ValueError on a non-percentage value."""
        total = 0.0
        for value in (self.development, self.marketing, self.operations, self.contingency):
            total += float(value.strip().rstrip("%").strip())
        return total


class Business(_BlueprintModel):
    revenue_streams: List[str] = Field(default_factory=list)
    budget_breakdown: BudgetBreakdown


class LaunchPlan(_BlueprintModel):
    thirty: str
    sixty: str
    ninety: str


class GoToMarket(_BlueprintModel):
    channels: List[str] = Field(default_factory=list)
    plan: LaunchPlan


class RoleGroup(_BlueprintModel):
    roles: List[str] = Field(default_factory=list)


class Team(_BlueprintModel):
    core: RoleGroup
    growth: RoleGroup


class NextSteps(_BlueprintModel):
    immediate_actions: List[str] = Field(default_factory=list)
    tip: str


class BlueprintDocument(_BlueprintModel):
    """Complete startup blueprint."""

    name: str
    tagline: str
    problem: str
    solution: str

    # Echoed from the form
    industry: str
    target_audience: str
    team_size: str
    budget: str
    tech_preferences: List[str] = Field(default_factory=list)
    milestones: str = ""
    risks: str = ""

    market_analysis: MarketAnalysis
    product: Product
    business: Business
    go_to_market: GoToMarket
    team: Team
    next_steps: NextSteps

    def well_formedness_errors(self) -> List[str]:
        """Return the camelCase path of every required sequence that is empty.

        Milestones and risks are optional pass-through text and are never
        reported.
        """
        required = {
            "techPreferences": self.tech_preferences,
            "marketAnalysis.painPoints": self.market_analysis.pain_points,
            "product.keyFeatures": self.product.key_features,
            "product.recommendedTech": self.product.recommended_tech,
            "business.revenueStreams": self.business.revenue_streams,
            "goToMarket.channels": self.go_to_market.channels,
            "team.core.roles": self.team.core.roles,
            "team.growth.roles": self.team.growth.roles,
            "nextSteps.immediateActions": self.next_steps.immediate_actions,
        }
        return [path for path, values in required.items() if not values]

    def is_well_formed(self) -> bool:
        return not self.well_formedness_errors()

    def to_wire(self) -> dict:
        """camelCase JSON-ready dict."""
        return self.model_dump(by_alias=True)
