"""Blueprint renderer — one formatting rule set, two views.

`build_sections()` turns a BlueprintDocument into an ordered list of
SectionView objects. Both render modes are derived from that one list:

  tabbed — an "All Sections" tab holding every section, followed by one
           tab per content section (each tab reuses the same SectionView)
  flat   — a single container holding every section, for print/export

HTML is produced by Jinja2 templates that share a single section macro,
so the on-screen full view and the exported document cannot drift.

Empty lists render nothing for their subsection. Milestones and risks
render only when the user supplied them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..constants import TECH_OPTIONS
from ..schemas.blueprint_schema import BlueprintDocument

logger = logging.getLogger(__name__)

RenderMode = Literal["tabbed", "flat"]
RENDER_MODES: Tuple[str, ...] = ("tabbed", "flat")

Tone = Literal["plain", "highlight", "accent", "muted", "tip"]

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


# ── View model ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Line:
    """A paragraph, optionally led by a bold label ("Total budget:")."""

    text: str
    label: str = ""

    def as_text(self) -> str:
        return f"{self.label} {self.text}" if self.label else self.text


@dataclass(frozen=True)
class Block:
    """A titled subsection: paragraphs, then bullets, then nested groups."""

    heading: str = ""
    lines: Tuple[Line, ...] = ()
    items: Tuple[str, ...] = ()
    groups: Tuple["Block", ...] = ()
    tone: Tone = "plain"

    @property
    def is_empty(self) -> bool:
        return not (self.lines or self.items or self.groups)


@dataclass(frozen=True)
class SectionView:
    key: str
    title: str
    blocks: Tuple[Block, ...]

    @property
    def is_cover(self) -> bool:
        return self.key == "cover"


@dataclass(frozen=True)
class TabView:
    key: str
    label: str
    sections: Tuple[SectionView, ...]


@dataclass(frozen=True)
class RenderedBlueprint:
    mode: RenderMode
    title: str
    sections: Tuple[SectionView, ...]
    tabs: Tuple[TabView, ...] = ()

    def full_view(self) -> Tuple[SectionView, ...]:
        """Sections of the "all" view: the first tab, or the flat container."""
        if self.mode == "tabbed":
            return self.tabs[0].sections
        return self.sections

    def tab(self, key: str) -> TabView:
        for tab in self.tabs:
            if tab.key == key:
                return tab
        raise KeyError(key)

    def text_by_section(self) -> Dict[str, str]:
        return {s.key: section_text(s) for s in self.full_view()}

    def as_text(self) -> str:
        return "\n\n".join(section_text(s) for s in self.full_view())


# ── Block helpers ────────────────────────────────────────────────────────

def _block(
    heading: str,
    *,
    lines: Sequence[Line] = (),
    items: Sequence[str] = (),
    groups: Sequence[Block] = (),
    tone: Tone = "plain",
) -> Optional[Block]:
    block = Block(
        heading=heading,
        lines=tuple(lines),
        items=tuple(items),
        groups=tuple(g for g in groups if not g.is_empty),
        tone=tone,
    )
    return None if block.is_empty else block


def _list_block(heading: str, items: Sequence[str], tone: Tone = "plain") -> Optional[Block]:
    """Bullet list subsection; nothing to show when the list is empty."""
    if not items:
        return None
    return _block(heading, items=items, tone=tone)


def _optional_text(heading: str, text: str) -> Optional[Block]:
    if not text or not text.strip():
        return None
    return _block(heading, lines=[Line(text)])


def _section(key: str, title: str, *blocks: Optional[Block]) -> SectionView:
    return SectionView(key=key, title=title, blocks=tuple(b for b in blocks if b is not None))


def _tech_label(tech_id: str) -> str:
    return TECH_OPTIONS.get(tech_id, tech_id)


# ── Section builders (document order) ────────────────────────────────────

def _cover(doc: BlueprintDocument) -> SectionView:
    return _section("cover", doc.name, _block("", lines=[Line(doc.tagline)]))


def _executive_summary(doc: BlueprintDocument) -> SectionView:
    return _section(
        "summary",
        "Executive Summary",
        _block("Problem Statement", lines=[Line(doc.problem)], tone="highlight"),
        _block("Your Proposed Solution", lines=[Line(doc.solution)], tone="accent"),
    )


def _market_analysis(doc: BlueprintDocument) -> SectionView:
    market = doc.market_analysis
    return _section(
        "market",
        "Market Analysis",
        _block("Industry Overview", lines=[Line(market.industry_overview)]),
        _block(
            "Target Audience & Pain Points",
            lines=[Line(doc.target_audience, label="Primary audience:")],
            items=market.pain_points,
        ),
    )


def _product(doc: BlueprintDocument) -> SectionView:
    product = doc.product
    recommended = None
    if product.recommended_tech:
        if doc.tech_preferences:
            prefs = ", ".join(_tech_label(t) for t in doc.tech_preferences)
            intro = f"Based on your preferences ({prefs}), we recommend:"
        else:
            intro = "We recommend:"
        recommended = _block(
            "Recommended Technologies",
            lines=[Line(intro)],
            items=product.recommended_tech,
        )
    return _section(
        "product",
        "Product & Tech Stack",
        _list_block("Key Features", product.key_features),
        recommended,
    )


def _business(doc: BlueprintDocument) -> SectionView:
    business = doc.business
    split = business.budget_breakdown
    return _section(
        "business",
        "Business Model & Financials",
        _list_block("Revenue Streams", business.revenue_streams),
        _block(
            "Budget Breakdown",
            lines=[Line(doc.budget, label="Total budget:")],
            items=[
                f"Development: {split.development}",
                f"Marketing & Sales: {split.marketing}",
                f"Operations: {split.operations}",
                f"Contingency: {split.contingency}",
            ],
        ),
    )


def _go_to_market(doc: BlueprintDocument) -> SectionView:
    gtm = doc.go_to_market
    return _section(
        "go_to_market",
        "Go-to-Market Strategy",
        _list_block("Channels & Tactics", gtm.channels),
        _block(
            "30/60/90-Day Plan",
            lines=[
                Line(gtm.plan.thirty, label="First 30 days:"),
                Line(gtm.plan.sixty, label="60 days:"),
                Line(gtm.plan.ninety, label="90 days:"),
            ],
        ),
    )


def _team(doc: BlueprintDocument) -> SectionView:
    return _section(
        "team",
        "Team & Roles",
        _block(
            "Suggested Team Composition",
            lines=[Line(doc.team_size, label="Current team size:")],
            groups=[
                Block(heading="Core Team (Founding Stage)", items=tuple(doc.team.core.roles), tone="muted"),
                Block(heading="Growth Stage Additions", items=tuple(doc.team.growth.roles), tone="muted"),
            ],
        ),
    )


def _next_steps(doc: BlueprintDocument) -> SectionView:
    steps = doc.next_steps
    return _section(
        "next_steps",
        "Next Steps & Milestones",
        _list_block("Immediate Actions", steps.immediate_actions, tone="highlight"),
        _optional_text("Your Milestones", doc.milestones),
        _optional_text("Risk Management", doc.risks),
        _block("", lines=[Line(steps.tip, label="Tip:")], tone="tip"),
    )


_SECTION_BUILDERS = (
    _cover,
    _executive_summary,
    _market_analysis,
    _product,
    _business,
    _go_to_market,
    _team,
    _next_steps,
)

# Tabs after "All Sections", keyed by section key.
TAB_LABELS: Dict[str, str] = {
    "summary": "Executive Summary",
    "market": "Market Analysis",
    "product": "Product & Tech",
    "business": "Business Model",
    "go_to_market": "Go-to-Market",
    "team": "Team",
    "next_steps": "Next Steps",
}


def build_sections(doc: BlueprintDocument) -> List[SectionView]:
    """The single formatting rule set shared by both render modes."""
    return [build(doc) for build in _SECTION_BUILDERS]


def render_blueprint(doc: BlueprintDocument, mode: RenderMode = "tabbed") -> RenderedBlueprint:
    """Render a document in tabbed or flat mode from the same sections."""
    if mode not in RENDER_MODES:
        raise ValueError(f"unknown render mode: {mode!r}")

    sections = tuple(build_sections(doc))
    if mode == "flat":
        return RenderedBlueprint(mode="flat", title=doc.name, sections=sections)

    by_key = {s.key: s for s in sections}
    tabs = [TabView(key="all", label="All Sections", sections=sections)]
    tabs.extend(
        TabView(key=key, label=label, sections=(by_key[key],))
        for key, label in TAB_LABELS.items()
    )
    return RenderedBlueprint(mode="tabbed", title=doc.name, sections=sections, tabs=tuple(tabs))


# ── Text projection ──────────────────────────────────────────────────────

def _block_text(block: Block, depth: int = 3) -> List[str]:
    out: List[str] = []
    if block.heading:
        out.append(f"{'#' * depth} {block.heading}")
    out.extend(line.as_text() for line in block.lines)
    out.extend(f"- {item}" for item in block.items)
    for group in block.groups:
        out.extend(_block_text(group, depth + 1))
    return out


def section_text(section: SectionView) -> str:
    """Plain-text form of one section; identical wherever the section appears."""
    out = [f"{'#' if section.is_cover else '##'} {section.title}"]
    for block in section.blocks:
        out.extend(_block_text(block))
    return "\n".join(out)


# ── HTML ─────────────────────────────────────────────────────────────────

@lru_cache(maxsize=1)
def _jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html(rendered: RenderedBlueprint, *, standalone: bool = False) -> str:
    """Render the view to HTML. `standalone` wraps it in a full document."""
    template = _jinja_env().get_template(f"{rendered.mode}.html.j2")
    html = template.render(view=rendered, standalone=standalone)
    logger.debug("Rendered %s blueprint %r (%d chars)", rendered.mode, rendered.title, len(html))
    return html
