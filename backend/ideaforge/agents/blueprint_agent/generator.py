"""Model-backed Blueprint Generator — one completion call, parse, validate.

Strategy:
  1. Build a prompt restating the form and embedding the target JSON shape
  2. Send it through the injected TextCompletionClient (no retry)
  3. Extract and parse the JSON object from the completion text
  4. Validate against BlueprintDocument, then check every required list
  5. Fail loudly with BlueprintGenerationError — NO partial documents
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from ...schemas.blueprint_schema import BlueprintDocument
from ...schemas.form_schema import FormInput
from ...services.openai_client import OpenAIClientError, TextCompletionClient, sanitize_json
from .errors import BlueprintGenerationError
from .prompts import build_blueprint_prompt


def parse_blueprint_response(raw: str) -> BlueprintDocument:
    """Parse untrusted completion text into a well-formed BlueprintDocument.

    Raises
    ------
    BlueprintGenerationError
        reason="parse" if no JSON object can be decoded,
        reason="schema" if the object does not match the blueprint shape
        or any required list is empty.
    """
    try:
        parsed = json.loads(sanitize_json(raw))
    except ValueError as exc:
        print(f"❌ [BLUEPRINT] JSON parse failed: {exc}")
        print(f"⚠️  [BLUEPRINT] Raw (first 300 chars): {raw[:300]}")
        raise BlueprintGenerationError("parse", str(exc)) from exc

    if not isinstance(parsed, dict):
        raise BlueprintGenerationError("parse", "top-level JSON value is not an object")

    try:
        document = BlueprintDocument.model_validate(parsed)
    except ValidationError as exc:
        locations = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        print(f"❌ [BLUEPRINT] Response does not match blueprint shape: {locations}")
        raise BlueprintGenerationError("schema", f"invalid fields: {locations}") from exc

    empty = document.well_formedness_errors()
    if empty:
        print(f"❌ [BLUEPRINT] Response has empty required lists: {empty}")
        raise BlueprintGenerationError("schema", f"empty sequences: {empty}")

    return document


class ModelBlueprintGenerator:
    """Generates blueprints through an external text-completion provider."""

    backend = "model"

    def __init__(self, client: TextCompletionClient) -> None:
        self._client = client

    async def generate(self, form: FormInput) -> BlueprintDocument:
        prompt = build_blueprint_prompt(form)
        print(f"🧠 [BLUEPRINT] Model generation STARTED (industry={form.industry})")

        try:
            raw = await self._client.complete(prompt)
        except OpenAIClientError as exc:
            print(f"❌ [BLUEPRINT] Provider call failed: {exc}")
            raise BlueprintGenerationError("provider", str(exc)) from exc
        except Exception as exc:
            print(f"❌ [BLUEPRINT] Unexpected provider error: {exc}")
            raise BlueprintGenerationError("provider", repr(exc)) from exc

        document = parse_blueprint_response(raw)
        print(f"✅ [BLUEPRINT] Model generation COMPLETE — name={document.name!r}")
        return document
