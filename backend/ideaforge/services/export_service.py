"""Export and share collaborators for a rendered blueprint.

Export always works from the flat view so the exported document matches
the on-screen "All Sections" tab. The page-image/PDF rasteriser is an
external collaborator: anything implementing DocumentExporter can be
plugged in. The default exporter ships the flat view as a standalone
HTML document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, Field

from ..constants import EXPORT_ERROR_MESSAGE
from ..schemas.blueprint_schema import BlueprintDocument
from .blueprint_renderer import render_blueprint, render_html

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when a blueprint cannot be exported. Message is user-facing."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(EXPORT_ERROR_MESSAGE)
        self.detail = detail


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    media_type: str
    content: bytes


class DocumentExporter(Protocol):
    def export(self, html: str, filename_stem: str) -> ExportedDocument: ...


class HtmlSnapshotExporter:
    """Default exporter: the flat view as a standalone HTML file."""

    media_type = "text/html; charset=utf-8"

    def export(self, html: str, filename_stem: str) -> ExportedDocument:
        return ExportedDocument(
            filename=f"{filename_stem}.html",
            media_type=self.media_type,
            content=html.encode("utf-8"),
        )


def _safe_filename_part(name: str) -> str:
    """Drop control characters, quotes and slashes; the name ends up in a header."""
    cleaned = "".join(ch for ch in name if ch.isprintable() and ch not in '"\\/')
    return " ".join(cleaned.split()) or "blueprint"


def export_filename_stem(doc: BlueprintDocument) -> str:
    """Output file name (without extension) derived from the blueprint name."""
    return f"{_safe_filename_part(doc.name)}-blueprint"


def export_blueprint(doc: BlueprintDocument, exporter: DocumentExporter) -> ExportedDocument:
    """Render the flat view and hand it to the exporter.

    Raises
    ------
    ExportError
        If rendering or the exporter fails. The document itself is untouched.
    """
    try:
        html = render_html(render_blueprint(doc, "flat"), standalone=True)
        exported = exporter.export(html, export_filename_stem(doc))
    except Exception as exc:
        logger.error("Blueprint export failed for %r: %s", doc.name, exc)
        raise ExportError(str(exc)) from exc

    logger.info("Exported blueprint %r as %s (%d bytes)", doc.name, exported.filename, len(exported.content))
    return exported


# ── Share ────────────────────────────────────────────────────────────────

class SharePayload(BaseModel):
    """Arguments for the platform share sheet; `url` doubles as the clipboard fallback."""

    title: str = Field(..., description="Share sheet title")
    text: str = Field(..., description="Share message")
    url: str = Field(..., description="Link to the blueprint view")


def build_share_payload(doc: BlueprintDocument, url: str) -> SharePayload:
    return SharePayload(
        title=doc.name,
        text=f"Check out my startup blueprint for {doc.name}",
        url=url,
    )
