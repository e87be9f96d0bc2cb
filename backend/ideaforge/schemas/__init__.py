# Schemas package
from .blueprint_schema import (
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
from .form_schema import FormDraft, FormInput, validate_step

__all__ = [
    "BlueprintDocument",
    "BudgetBreakdown",
    "Business",
    "GoToMarket",
    "LaunchPlan",
    "MarketAnalysis",
    "NextSteps",
    "Product",
    "RoleGroup",
    "Team",
    "FormDraft",
    "FormInput",
    "validate_step",
]
