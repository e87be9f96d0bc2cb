from .errors import BlueprintGenerationError
from .facade import BlueprintGenerator, BlueprintService, build_blueprint_service
from .fallback import FallbackBlueprintGenerator, generate_fallback_blueprint
from .generator import ModelBlueprintGenerator, parse_blueprint_response

__all__ = [
    "BlueprintGenerationError",
    "BlueprintGenerator",
    "BlueprintService",
    "build_blueprint_service",
    "FallbackBlueprintGenerator",
    "generate_fallback_blueprint",
    "ModelBlueprintGenerator",
    "parse_blueprint_response",
]
