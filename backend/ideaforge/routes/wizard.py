"""Wizard routes — drive one in-memory wizard session over HTTP.

Endpoints:
  POST   /wizard                 — Start a session
  GET    /wizard/{id}            — Current state
  PATCH  /wizard/{id}/fields     — Update draft fields
  POST   /wizard/{id}/tech       — Check / uncheck a tech preference
  POST   /wizard/{id}/next       — Validate step and advance
  POST   /wizard/{id}/back       — Previous step
  POST   /wizard/{id}/submit     — Generate the blueprint (waits for the result)
  POST   /wizard/{id}/retry      — Back to the last step after a failure
  POST   /wizard/{id}/restart    — Discard the draft and any result
  GET    /wizard/{id}/blueprint  — Rendered result (tabbed | flat)
  DELETE /wizard/{id}            — Abandon the session
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse, Response
from pydantic import ValidationError

from ..constants import BACKEND_TEMPLATE, TEMPLATE_NOTICE
from ..dependencies import get_wizard_store
from ..schemas.api_schema import FieldUpdateRequest, TechToggleRequest, WizardStateResponse
from ..services.blueprint_renderer import RenderMode, render_blueprint, render_html
from ..services.wizard import WizardPhase, WizardSession, WizardStateError, WizardStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/wizard",
    tags=["Wizard"],
)


# ── Helpers ──────────────────────────────────────────────────────────────

def _session(session_id: str, store: WizardStore) -> WizardSession:
    try:
        return store.get(session_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Wizard session {session_id} not found",
        )


def _to_response(session: WizardSession) -> WizardStateResponse:
    snapshot = session.snapshot()
    if session.phase == WizardPhase.SUCCEEDED and session.backend == BACKEND_TEMPLATE:
        snapshot["notice"] = TEMPLATE_NOTICE
    return WizardStateResponse(**snapshot)


def _conflict(exc: WizardStateError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


# ── Routes ───────────────────────────────────────────────────────────────

@router.post("", response_model=WizardStateResponse, status_code=status.HTTP_201_CREATED)
async def start_session(store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    session = store.create()
    logger.info("Wizard session started: %s", session.id)
    return _to_response(session)


@router.get("/{session_id}", response_model=WizardStateResponse)
async def get_session(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    return _to_response(_session(session_id, store))


@router.patch("/{session_id}/fields", response_model=WizardStateResponse)
async def update_fields(
    session_id: str,
    request: FieldUpdateRequest,
    store: WizardStore = Depends(get_wizard_store),
) -> WizardStateResponse:
    session = _session(session_id, store)
    try:
        session.update(**request.fields)
    except WizardStateError as exc:
        raise _conflict(exc)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown form field: {exc.args[0]}",
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        )
    return _to_response(session)


@router.post("/{session_id}/tech", response_model=WizardStateResponse)
async def toggle_tech(
    session_id: str,
    request: TechToggleRequest,
    store: WizardStore = Depends(get_wizard_store),
) -> WizardStateResponse:
    session = _session(session_id, store)
    try:
        session.toggle_tech(request.id, request.checked)
    except WizardStateError as exc:
        raise _conflict(exc)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return _to_response(session)


@router.post("/{session_id}/next", response_model=WizardStateResponse)
async def next_step(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    session = _session(session_id, store)
    try:
        session.next()
    except WizardStateError as exc:
        raise _conflict(exc)
    return _to_response(session)


@router.post("/{session_id}/back", response_model=WizardStateResponse)
async def previous_step(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    session = _session(session_id, store)
    try:
        session.back()
    except WizardStateError as exc:
        raise _conflict(exc)
    return _to_response(session)


@router.post("/{session_id}/submit", response_model=WizardStateResponse)
async def submit(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    """Run generation. Failures come back as phase="failed" with a message."""
    session = _session(session_id, store)
    try:
        await session.submit()
    except WizardStateError as exc:
        raise _conflict(exc)
    return _to_response(session)


@router.post("/{session_id}/retry", response_model=WizardStateResponse)
async def retry(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    session = _session(session_id, store)
    try:
        session.retry()
    except WizardStateError as exc:
        raise _conflict(exc)
    return _to_response(session)


@router.post("/{session_id}/restart", response_model=WizardStateResponse)
async def restart(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> WizardStateResponse:
    session = _session(session_id, store)
    session.restart()
    return _to_response(session)


@router.get("/{session_id}/blueprint", response_class=HTMLResponse)
async def rendered_blueprint(
    session_id: str,
    mode: RenderMode = Query("tabbed"),
    store: WizardStore = Depends(get_wizard_store),
) -> HTMLResponse:
    session = _session(session_id, store)
    if session.phase != WizardPhase.SUCCEEDED or session.document is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No blueprint available for this session",
        )
    return HTMLResponse(render_html(render_blueprint(session.document, mode)))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon(session_id: str, store: WizardStore = Depends(get_wizard_store)) -> Response:
    _session(session_id, store)
    store.discard(session_id)
    logger.info("Wizard session abandoned: %s", session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
