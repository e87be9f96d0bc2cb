"""Wizard state machine — collects the form, runs generation, holds the result.

States and transitions:

    collecting(1) --next--> collecting(2) --next--> collecting(3)
    collecting(n) --back--> collecting(n-1)
    collecting(3) --submit--> submitting --> succeeded(document)
                                         +--> failed(message)
    failed --retry--> collecting(3)            (draft kept)
    any --restart/abandon--> collecting(1)     (draft cleared)

A document is only ever exposed in `succeeded`, so a partial result is
never shown. Each submission carries a generation token; restarting or
abandoning bumps the token so a late result is dropped instead of
mutating a session that has moved on.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from ..agents.blueprint_agent.errors import BlueprintGenerationError
from ..constants import (
    DEFAULT_MIN_LOADING_SECONDS,
    DEFAULT_SESSION_TTL_SECONDS,
    GENERATION_ERROR_MESSAGE,
    LOADING_MESSAGE_INTERVAL_SECONDS,
    LOADING_MESSAGES,
    TECH_OPTION_IDS,
    TOTAL_STEPS,
)
from ..schemas.blueprint_schema import BlueprintDocument
from ..schemas.form_schema import FormDraft, FormInput, resolve_field, validate_step

if TYPE_CHECKING:
    from ..agents.blueprint_agent.facade import BlueprintService

logger = logging.getLogger(__name__)


class WizardPhase(str, Enum):
    COLLECTING = "collecting"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class WizardStateError(Exception):
    """Raised when an action is not allowed in the current state."""


class WizardSession:
    """One user's pass through the wizard. Single writer, in memory only."""

    def __init__(
        self,
        service: BlueprintService,
        *,
        min_loading_seconds: float = DEFAULT_MIN_LOADING_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        session_id: Optional[str] = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self._service = service
        self._min_loading_seconds = min_loading_seconds
        self._clock = clock
        self._sleep = sleep
        self._token = 0
        self._reset()

    def _reset(self) -> None:
        self.phase = WizardPhase.COLLECTING
        self.step = 1
        self.draft = FormDraft()
        self.errors: Dict[str, str] = {}
        self.document: Optional[BlueprintDocument] = None
        self.error_message: Optional[str] = None
        self.backend: Optional[str] = None
        self.submitted_at: Optional[float] = None

    def _require(self, *phases: WizardPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise WizardStateError(f"action not allowed while {self.phase.value} (needs {allowed})")

    # ── Collecting ────────────────────────────────────────────────────

    @property
    def progress_percent(self) -> int:
        return round(self.step / TOTAL_STEPS * 100)

    def update(self, **fields: Any) -> None:
        """Merge field values into the draft and clear their errors."""
        self._require(WizardPhase.COLLECTING)
        updates = {resolve_field(name): value for name, value in fields.items()}
        self.draft = FormDraft.model_validate({**self.draft.model_dump(), **updates})
        for attr in updates:
            self.errors.pop(to_camel(attr), None)

    def toggle_tech(self, tech_id: str, checked: bool) -> None:
        self._require(WizardPhase.COLLECTING)
        if tech_id not in TECH_OPTION_IDS:
            raise ValueError(f"unknown technology preference: {tech_id!r}")
        prefs: List[str] = [t for t in self.draft.tech_preferences if t != tech_id]
        if checked:
            prefs.append(tech_id)
        self.draft = self.draft.model_copy(update={"tech_preferences": prefs})
        self.errors.pop("techPreferences", None)

    def next(self) -> bool:
        """Validate the current step and advance. Returns False on errors."""
        self._require(WizardPhase.COLLECTING)
        self.errors = validate_step(self.step, self.draft)
        if self.errors:
            return False
        self.step = min(self.step + 1, TOTAL_STEPS)
        return True

    def back(self) -> None:
        self._require(WizardPhase.COLLECTING)
        self.errors = {}
        self.step = max(self.step - 1, 1)

    # ── Submitting ────────────────────────────────────────────────────

    def _validated_form(self) -> Optional[FormInput]:
        for step in range(1, TOTAL_STEPS):
            errors = validate_step(step, self.draft)
            if errors:
                self.step = step
                self.errors = errors
                return None
        try:
            return self.draft.to_form_input()
        except ValidationError as exc:
            # validate_step mirrors FormInput; this is a drift guard.
            self.errors = {"form": str(exc)}
            return None

    async def submit(self) -> WizardPhase:
        """Run generation from the last step.

        Success and failure both surface after max(generation time, floor).
        """
        self._require(WizardPhase.COLLECTING)
        if self.step != TOTAL_STEPS:
            raise WizardStateError(f"submit is only allowed from step {TOTAL_STEPS}")

        form = self._validated_form()
        if form is None:
            return self.phase

        self._token += 1
        token = self._token
        self.phase = WizardPhase.SUBMITTING
        self.errors = {}
        self.submitted_at = self._clock()
        logger.info("Wizard %s submitted (token=%d, backend=%s)", self.id, token, self._service.backend)

        outcome, _ = await asyncio.gather(
            self._service.generate_blueprint(form),
            self._sleep(self._min_loading_seconds),
            return_exceptions=True,
        )

        if token != self._token:
            logger.info("Wizard %s dropped stale result (token=%d, current=%d)", self.id, token, self._token)
            return self.phase

        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BlueprintGenerationError):
            logger.warning("Wizard %s generation failed (%s): %s", self.id, outcome.reason, outcome.detail)
            self._fail(str(outcome))
        elif isinstance(outcome, BaseException):
            logger.error("Wizard %s unexpected generation error", self.id, exc_info=outcome)
            self._fail(GENERATION_ERROR_MESSAGE)
        else:
            self.phase = WizardPhase.SUCCEEDED
            self.document = outcome
            self.backend = self._service.backend
            self.submitted_at = None
        return self.phase

    def _fail(self, message: str) -> None:
        self.phase = WizardPhase.FAILED
        self.error_message = message
        self.document = None
        self.submitted_at = None

    def loading_message(self, now: Optional[float] = None) -> Optional[str]:
        """Cosmetic progress message; rotates every interval while submitting."""
        if self.phase != WizardPhase.SUBMITTING or self.submitted_at is None:
            return None
        elapsed = max(0.0, (self._clock() if now is None else now) - self.submitted_at)
        index = int(elapsed // LOADING_MESSAGE_INTERVAL_SECONDS) % len(LOADING_MESSAGES)
        return LOADING_MESSAGES[index]

    # ── Leaving the result / failure ──────────────────────────────────

    def retry(self) -> None:
        """From failed, return to the last step with the draft intact."""
        self._require(WizardPhase.FAILED)
        self.phase = WizardPhase.COLLECTING
        self.step = TOTAL_STEPS
        self.error_message = None

    def restart(self) -> None:
        """Discard everything, including any in-flight generation."""
        self._token += 1
        self._reset()

    abandon = restart

    def snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "phase": self.phase.value,
            "step": self.step,
            "total_steps": TOTAL_STEPS,
            "progress_percent": self.progress_percent,
            "draft": self.draft.model_dump(by_alias=True),
            "errors": dict(self.errors),
            "loading_message": self.loading_message(),
            "error_message": self.error_message,
            "backend": self.backend,
            "blueprint": self.document.to_wire() if self.document else None,
        }


class WizardStore:
    """In-memory session registry. Sessions vanish with the process.

    Sessions idle for longer than `ttl_seconds` are evicted (and abandoned,
    so a late generation result is dropped) whenever the store is touched.
    A session that is mid-submission is never evicted.
    """

    def __init__(
        self,
        service: BlueprintService,
        *,
        min_loading_seconds: float = DEFAULT_MIN_LOADING_SECONDS,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._service = service
        self._min_loading_seconds = min_loading_seconds
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, WizardSession] = {}
        self._last_seen: Dict[str, float] = {}

    def evict_idle(self) -> int:
        """Drop sessions idle past the TTL. Returns how many were evicted."""
        now = self._clock()
        expired = []
        for sid, seen in self._last_seen.items():
            if self._sessions[sid].phase == WizardPhase.SUBMITTING:
                # In-flight generation counts as activity.
                self._last_seen[sid] = now
            elif now - seen > self._ttl_seconds:
                expired.append(sid)
        for sid in expired:
            self._drop(sid)
        if expired:
            logger.info("Evicted %d idle wizard session(s)", len(expired))
        return len(expired)

    def create(self) -> WizardSession:
        self.evict_idle()
        session = WizardSession(self._service, min_loading_seconds=self._min_loading_seconds)
        self._sessions[session.id] = session
        self._last_seen[session.id] = self._clock()
        return session

    def get(self, session_id: str) -> WizardSession:
        """Raises KeyError for unknown or evicted ids."""
        self.evict_idle()
        session = self._sessions[session_id]
        self._last_seen[session_id] = self._clock()
        return session

    def discard(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise KeyError(session_id)
        self._drop(session_id)

    def _drop(self, session_id: str) -> None:
        session = self._sessions.pop(session_id)
        self._last_seen.pop(session_id, None)
        session.abandon()

    def __len__(self) -> int:
        return len(self._sessions)
