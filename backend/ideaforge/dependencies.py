"""FastAPI dependencies — hand out the objects composed in the app lifespan."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from .agents.blueprint_agent.facade import BlueprintService
from .services.export_service import DocumentExporter
from .services.wizard import WizardStore


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up. Please try again.",
        )
    return value


def get_blueprint_service(request: Request) -> BlueprintService:
    return _state(request, "blueprint_service")


def get_wizard_store(request: Request) -> WizardStore:
    return _state(request, "wizard_store")


def get_exporter(request: Request) -> DocumentExporter:
    return _state(request, "exporter")
