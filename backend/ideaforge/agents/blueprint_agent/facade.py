"""Generation facade — the single entry point callers use to get a blueprint.

The backing generator is injected at construction; callers never know
which backend is active. This is the seam for backend selection.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ...config import Settings
from ...constants import BACKEND_MODEL
from ...schemas.blueprint_schema import BlueprintDocument
from ...schemas.form_schema import FormInput
from ...services.openai_client import TextCompletionClient
from .fallback import FallbackBlueprintGenerator
from .generator import ModelBlueprintGenerator


class BlueprintGenerator(Protocol):
    backend: str

    async def generate(self, form: FormInput) -> BlueprintDocument: ...


class BlueprintService:
    """Returns a BlueprintDocument or raises BlueprintGenerationError."""

    def __init__(self, generator: BlueprintGenerator) -> None:
        self._generator = generator

    @property
    def backend(self) -> str:
        return self._generator.backend

    async def generate_blueprint(self, form: FormInput) -> BlueprintDocument:
        # Generation errors propagate; the caller owns user-facing messaging.
        return await self._generator.generate(form)


def build_blueprint_service(
    settings: Settings,
    client: Optional[TextCompletionClient] = None,
) -> BlueprintService:
    """Compose the facade for the configured backend.

    Raises
    ------
    EnvironmentError
        If the model backend is selected but no completion client is available.
    """
    if settings.blueprint_backend == BACKEND_MODEL:
        if client is None:
            raise EnvironmentError(
                "BLUEPRINT_BACKEND=model requires OPENAI_API_KEY to be configured"
            )
        return BlueprintService(ModelBlueprintGenerator(client))
    return BlueprintService(FallbackBlueprintGenerator())
