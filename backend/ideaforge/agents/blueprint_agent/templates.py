"""Canned blueprint content used by the template (fallback) generator.

Input-independent placeholder content. Only the industry overview takes a
parameter; everything else is the same for every idea.
"""

from __future__ import annotations

PROBLEM_STATEMENT = "The market lacks innovative solutions that address specific pain points."

INDUSTRY_OVERVIEW = (
    "The {industry} industry is rapidly evolving with new technologies "
    "and changing consumer preferences."
)

PAIN_POINTS = [
    "Inefficient existing solutions",
    "High costs",
    "Poor integration with workflows",
]

KEY_FEATURES = [
    "Intuitive user interface",
    "Seamless integration",
    "Advanced analytics",
    "Scalable architecture",
]

RECOMMENDED_TECH = [
    "React.js with Next.js",
    "Node.js backend",
    "PostgreSQL database",
    "Docker and Kubernetes",
]

REVENUE_STREAMS = [
    "Subscription model",
    "Premium features",
    "API access",
    "White-label solutions",
]

# development / marketing / operations / contingency
BUDGET_SPLIT = {
    "development": 40,
    "marketing": 30,
    "operations": 20,
    "contingency": 10,
}

CHANNELS = [
    "Content marketing",
    "Social media",
    "Strategic partnerships",
    "Referral program",
]

LAUNCH_PLAN = {
    "thirty": "Market validation and MVP development",
    "sixty": "Beta testing with early adopters",
    "ninety": "Official launch and marketing campaign",
}

CORE_ROLES = [
    "CEO/Founder",
    "CTO/Technical Lead",
    "Product Manager",
    "Full-stack Developer",
]

GROWTH_ROLES = [
    "Marketing Lead",
    "Sales Representative",
    "Customer Success",
    "Additional Developers",
]

IMMEDIATE_ACTIONS = [
    "Finalize business plan",
    "Secure initial funding",
    "Build MVP",
    "Identify early adopters",
]

STRATEGIC_TIP = (
    "Focus on validating your core assumptions before investing heavily in development."
)
