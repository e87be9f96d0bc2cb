"""Centralized constants shared across generators, the wizard and routes.

This module is the SINGLE SOURCE OF TRUTH for the industry list, the
technology preference options and the wizard's UX timings. Reused by:
  - FormInput validation
  - Blueprint prompt builder
  - Wizard state machine
  - GET /blueprint/options (mirrored by the frontend form)
"""

from __future__ import annotations

# ── Industry Taxonomy ───────────────────────────────────────────────────
# Single-select. "Other" is the catch-all.

INDUSTRIES: list[str] = [
    "Technology",
    "Healthcare",
    "Finance",
    "Education",
    "E-commerce",
    "Entertainment",
    "Food & Beverage",
    "Travel",
    "Real Estate",
    "Other",
]

# Frozen set for fast membership checks
INDUSTRIES_SET: frozenset[str] = frozenset(INDUSTRIES)

# ── Technology Preferences ──────────────────────────────────────────────
# Multi-select. Keys are the ids sent by the form, values are labels.

TECH_OPTIONS: dict[str, str] = {
    "web": "Web",
    "ios": "iOS",
    "android": "Android",
    "windows": "Windows",
    "mac": "Mac",
    "not-sure": "Not sure",
}

TECH_OPTION_IDS: frozenset[str] = frozenset(TECH_OPTIONS)

# ── Form limits ─────────────────────────────────────────────────────────

IDEA_DESCRIPTION_MAX_LENGTH: int = 500
TOTAL_STEPS: int = 3

# ── Wizard loading state ────────────────────────────────────────────────
# Cosmetic only; rotation is independent of actual generation progress.

LOADING_MESSAGES: list[str] = [
    "Forging your blueprint...",
    "Calculating market-fit magic...",
    "Analyzing industry trends...",
    "Crafting your business model...",
    "Finishing touches...",
]
LOADING_MESSAGE_INTERVAL_SECONDS: float = 1.5
DEFAULT_MIN_LOADING_SECONDS: float = 3.0
# Idle wizard sessions are evicted after this long.
DEFAULT_SESSION_TTL_SECONDS: float = 1800.0

# ── User-facing messages ────────────────────────────────────────────────

GENERATION_ERROR_MESSAGE: str = "Failed to generate blueprint. Please try again."
EXPORT_ERROR_MESSAGE: str = "Failed to generate PDF. Please try again."
TEMPLATE_NOTICE: str = (
    "This blueprint was generated using our template engine. "
    "AI-powered generation will be available soon."
)

# ── Backends ────────────────────────────────────────────────────────────

BACKEND_TEMPLATE: str = "template"
BACKEND_MODEL: str = "model"
BLUEPRINT_BACKENDS: frozenset[str] = frozenset({BACKEND_TEMPLATE, BACKEND_MODEL})
