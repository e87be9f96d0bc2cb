"""Blueprint routes — options, step validation, generation, rendering, export.

Endpoints:
  GET  /blueprint/options         — Industries, tech options, form limits
  POST /blueprint/validate-step   — Inline errors for one wizard step
  POST /blueprint/generate        — FormInput -> BlueprintDocument
  POST /blueprint/render          — BlueprintDocument -> HTML (tabbed | flat)
  POST /blueprint/export          — BlueprintDocument -> downloadable document
  POST /blueprint/share           — Share-sheet payload for a blueprint
"""

from __future__ import annotations

import logging
import time
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse, Response

from ..agents.blueprint_agent.errors import BlueprintGenerationError
from ..agents.blueprint_agent.facade import BlueprintService
from ..constants import (
    BACKEND_TEMPLATE,
    IDEA_DESCRIPTION_MAX_LENGTH,
    INDUSTRIES,
    LOADING_MESSAGES,
    TECH_OPTIONS,
    TEMPLATE_NOTICE,
    TOTAL_STEPS,
)
from ..dependencies import get_blueprint_service, get_exporter
from ..schemas.api_schema import (
    GenerateBlueprintResponse,
    OptionsResponse,
    ShareRequest,
    StepValidationRequest,
    StepValidationResponse,
    TechOption,
)
from ..schemas.blueprint_schema import BlueprintDocument
from ..schemas.form_schema import FormInput, validate_step
from ..services.blueprint_renderer import RenderMode, render_blueprint, render_html
from ..services.export_service import (
    DocumentExporter,
    ExportError,
    SharePayload,
    build_share_payload,
    export_blueprint,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/blueprint",
    tags=["Blueprint"],
)


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "ignore").decode() or "blueprint"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.get(
    "/options",
    response_model=OptionsResponse,
    summary="Form options",
)
async def get_options() -> OptionsResponse:
    """Closed option lists and limits used by the wizard form."""
    return OptionsResponse(
        industries=list(INDUSTRIES),
        tech_options=[TechOption(id=k, label=v) for k, v in TECH_OPTIONS.items()],
        idea_description_max_length=IDEA_DESCRIPTION_MAX_LENGTH,
        total_steps=TOTAL_STEPS,
        loading_messages=list(LOADING_MESSAGES),
    )


@router.post(
    "/validate-step",
    response_model=StepValidationResponse,
    summary="Validate one wizard step",
)
async def validate_wizard_step(request: StepValidationRequest) -> StepValidationResponse:
    errors = validate_step(request.step, request.form)
    return StepValidationResponse(valid=not errors, errors=errors)


@router.post(
    "/generate",
    response_model=GenerateBlueprintResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a startup blueprint",
    responses={502: {"description": "Blueprint generation failed"}},
)
async def generate(
    form: FormInput,
    service: BlueprintService = Depends(get_blueprint_service),
) -> GenerateBlueprintResponse:
    """Generate a blueprint with the configured backend. All-or-nothing."""
    start = time.perf_counter()
    try:
        document = await service.generate_blueprint(form)
    except BlueprintGenerationError as exc:
        logger.warning("Blueprint generation failed (%s): %s", exc.reason, exc.detail)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    duration = (time.perf_counter() - start) * 1000
    print(f"[TIMING] blueprint_generate: backend={service.backend} duration={duration:.0f}ms")

    return GenerateBlueprintResponse(
        backend=service.backend,
        notice=TEMPLATE_NOTICE if service.backend == BACKEND_TEMPLATE else None,
        blueprint=document.to_wire(),
    )


@router.post(
    "/render",
    response_class=HTMLResponse,
    summary="Render a blueprint as HTML",
)
async def render(
    document: BlueprintDocument,
    mode: RenderMode = Query("tabbed", description="tabbed (interactive) or flat (print/export)"),
    standalone: bool = Query(False, description="Wrap in a full HTML document"),
) -> HTMLResponse:
    return HTMLResponse(render_html(render_blueprint(document, mode), standalone=standalone))


@router.post(
    "/export",
    summary="Export the flat view as a document",
    responses={500: {"description": "Export failed"}},
)
async def export(
    document: BlueprintDocument,
    exporter: DocumentExporter = Depends(get_exporter),
) -> Response:
    try:
        exported = export_blueprint(document, exporter)
    except ExportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": _content_disposition(exported.filename)},
    )


@router.post(
    "/share",
    response_model=SharePayload,
    summary="Share-sheet payload",
)
async def share(request: ShareRequest) -> SharePayload:
    return build_share_payload(request.blueprint, request.url)
