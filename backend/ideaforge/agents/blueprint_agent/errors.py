"""Typed failures raised by blueprint generators."""

from __future__ import annotations

from typing import Literal

from ...constants import GENERATION_ERROR_MESSAGE

FailureStage = Literal["provider", "parse", "schema"]


class BlueprintGenerationError(Exception):
    """Raised when a generator cannot produce a complete BlueprintDocument.

    `str(exc)` is always the user-facing message; `reason` names the
    failing stage and `detail` carries the internal cause for logs.
    """

    def __init__(self, reason: FailureStage, detail: str = "") -> None:
        super().__init__(GENERATION_ERROR_MESSAGE)
        self.reason = reason
        self.detail = detail
