"""Wizard state machine tests — steps, validation, submission, stale results."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import time
import warnings

import pytest

from ideaforge.agents.blueprint_agent import BlueprintGenerationError
from ideaforge.agents.blueprint_agent.facade import BlueprintService
from ideaforge.agents.blueprint_agent.fallback import FallbackBlueprintGenerator
from ideaforge.constants import GENERATION_ERROR_MESSAGE, LOADING_MESSAGES
from ideaforge.services.wizard import WizardPhase, WizardSession, WizardStateError, WizardStore


class FailingGenerator:
    backend = "model"

    def __init__(self, exc):
        self.exc = exc

    async def generate(self, form):
        raise self.exc


class GatedGenerator(FallbackBlueprintGenerator):
    """Blocks until released so a test can act while generation is in flight."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, form):
        self.started.set()
        await self.release.wait()
        return await super().generate(form)


async def _no_sleep(seconds):
    return None


def _session(generator=None, **kwargs):
    kwargs.setdefault("sleep", _no_sleep)
    kwargs.setdefault("min_loading_seconds", 0)
    return WizardSession(BlueprintService(generator or FallbackBlueprintGenerator()), **kwargs)


def _filled(session):
    session.update(ideaDescription="On-demand dog walking for apartment buildings")
    assert session.next()
    session.update(industry="Technology", targetAudience="pet owners", teamSize="2", budget="$15k")
    session.toggle_tech("ios", True)
    assert session.next()
    assert session.step == 3
    return session


class TestCollecting:
    def test_initial_state(self):
        session = _session()
        assert session.phase is WizardPhase.COLLECTING
        assert session.step == 1
        assert session.progress_percent == 33

    def test_next_blocked_by_empty_description(self):
        session = _session()
        assert session.next() is False
        assert session.step == 1
        assert session.errors == {"ideaDescription": "Please describe your idea"}

    def test_editing_a_field_clears_its_error(self):
        session = _session()
        session.next()
        session.update(idea_description="Something")
        assert session.errors == {}

    def test_step_two_errors_then_fix(self):
        session = _session()
        session.update(ideaDescription="idea")
        session.next()
        assert session.next() is False
        assert set(session.errors) == {"industry", "targetAudience", "teamSize", "budget", "techPreferences"}
        session.toggle_tech("web", True)
        assert "techPreferences" not in session.errors

    def test_progress_and_back(self):
        session = _filled(_session())
        assert session.progress_percent == 100
        session.back()
        assert session.step == 2
        session.back()
        session.back()
        assert session.step == 1

    def test_next_on_last_step_stays(self):
        session = _filled(_session())
        assert session.next() is True
        assert session.step == 3

    def test_toggle_tech(self):
        session = _session()
        session.toggle_tech("web", True)
        session.toggle_tech("android", True)
        session.toggle_tech("web", True)
        assert session.draft.tech_preferences == ["android", "web"]
        session.toggle_tech("android", False)
        assert session.draft.tech_preferences == ["web"]

    def test_toggle_unknown_tech(self):
        with pytest.raises(ValueError):
            _session().toggle_tech("blackberry", True)

    def test_update_unknown_field(self):
        with pytest.raises(KeyError):
            _session().update(favouriteColour="blue")


class TestSubmit:
    def test_success(self):
        session = _filled(_session())
        assert asyncio.run(session.submit()) is WizardPhase.SUCCEEDED
        assert session.document.is_well_formed()
        assert session.document.tech_preferences == ["ios"]
        assert session.backend == "template"
        assert session.snapshot()["blueprint"]["name"] == "On-demand dog walking"

    def test_submit_only_from_last_step(self):
        session = _session()
        session.update(ideaDescription="idea")
        with pytest.raises(WizardStateError):
            asyncio.run(session.submit())

    def test_submit_with_invalid_draft_returns_to_failing_step(self):
        session = _filled(_session())
        session.update(budget="")
        assert asyncio.run(session.submit()) is WizardPhase.COLLECTING
        assert session.step == 2
        assert session.errors == {"budget": "Please provide your budget"}

    def test_generation_error_fails_with_user_message(self):
        session = _filled(_session(FailingGenerator(BlueprintGenerationError("parse", "bad json"))))
        assert asyncio.run(session.submit()) is WizardPhase.FAILED
        assert session.error_message == GENERATION_ERROR_MESSAGE
        assert session.document is None

    def test_unexpected_error_fails_with_generic_message(self):
        session = _filled(_session(FailingGenerator(RuntimeError("boom"))))
        assert asyncio.run(session.submit()) is WizardPhase.FAILED
        assert session.error_message == GENERATION_ERROR_MESSAGE

    def test_retry_keeps_draft(self):
        session = _filled(_session(FailingGenerator(BlueprintGenerationError("provider"))))
        asyncio.run(session.submit())
        session.retry()
        assert session.phase is WizardPhase.COLLECTING
        assert session.step == 3
        assert session.draft.budget == "$15k"
        assert session.error_message is None

    def test_retry_only_from_failed(self):
        with pytest.raises(WizardStateError):
            _session().retry()

    def test_editing_blocked_after_success(self):
        session = _filled(_session())
        asyncio.run(session.submit())
        with pytest.raises(WizardStateError):
            session.update(budget="$1")
        with pytest.raises(WizardStateError):
            session.next()

    def test_restart_clears_everything(self):
        session = _filled(_session())
        asyncio.run(session.submit())
        session.restart()
        assert session.phase is WizardPhase.COLLECTING
        assert session.step == 1
        assert session.draft.idea_description == ""
        assert session.document is None


class TestLoadingFloor:
    def test_floor_is_awaited_alongside_generation(self):
        slept = []

        async def fake_sleep(seconds):
            slept.append(seconds)

        session = _filled(_session(sleep=fake_sleep, min_loading_seconds=3.0))
        asyncio.run(session.submit())
        assert slept == [3.0]

    def test_result_not_shown_before_floor(self):
        session = _filled(_session(sleep=asyncio.sleep, min_loading_seconds=0.05))
        t0 = time.monotonic()
        asyncio.run(session.submit())
        assert time.monotonic() - t0 >= 0.05
        assert session.phase is WizardPhase.SUCCEEDED

    def test_failure_also_waits_for_floor(self):
        generator = FailingGenerator(BlueprintGenerationError("provider"))
        session = _filled(_session(generator, sleep=asyncio.sleep, min_loading_seconds=0.05))
        t0 = time.monotonic()
        asyncio.run(session.submit())
        assert time.monotonic() - t0 >= 0.05
        assert session.phase is WizardPhase.FAILED

    def test_loading_message_rotates_while_submitting(self):
        generator = GatedGenerator()
        session = _filled(_session(generator, clock=lambda: 100.0))

        async def scenario():
            task = asyncio.create_task(session.submit())
            await generator.started.wait()
            assert session.phase is WizardPhase.SUBMITTING
            seen = [session.loading_message(now=100.0 + 1.5 * i) for i in range(6)]
            generator.release.set()
            await task
            return seen

        seen = asyncio.run(scenario())
        assert seen[:5] == LOADING_MESSAGES
        assert seen[5] == LOADING_MESSAGES[0]
        assert session.loading_message() is None


class TestStaleResults:
    def test_restart_during_generation_drops_result(self):
        generator = GatedGenerator()
        session = _filled(_session(generator))

        async def scenario():
            task = asyncio.create_task(session.submit())
            await generator.started.wait()
            session.restart()
            generator.release.set()
            return await task

        assert asyncio.run(scenario()) is WizardPhase.COLLECTING
        assert session.step == 1
        assert session.document is None
        assert session.draft.idea_description == ""


class TestWizardStore:
    def test_create_get_discard(self):
        store = WizardStore(BlueprintService(FallbackBlueprintGenerator()), min_loading_seconds=0)
        session = store.create()
        assert store.get(session.id) is session
        assert len(store) == 1
        store.discard(session.id)
        assert len(store) == 0
        with pytest.raises(KeyError):
            store.get(session.id)

    def test_idle_sessions_are_evicted(self):
        now = [1000.0]
        store = WizardStore(
            BlueprintService(FallbackBlueprintGenerator()),
            min_loading_seconds=0,
            ttl_seconds=60,
            clock=lambda: now[0],
        )
        stale = _filled(store.create())
        asyncio.run(stale.submit())
        token_before = stale._token

        now[0] += 30
        fresh = store.create()
        now[0] += 45
        # stale idle for 75s, fresh for 45s
        store.get(fresh.id)

        assert len(store) == 1
        with pytest.raises(KeyError):
            store.get(stale.id)
        assert stale.document is None
        assert stale._token > token_before

    def test_access_keeps_session_alive(self):
        now = [0.0]
        store = WizardStore(
            BlueprintService(FallbackBlueprintGenerator()),
            min_loading_seconds=0,
            ttl_seconds=60,
            clock=lambda: now[0],
        )
        session = store.create()
        for _ in range(5):
            now[0] += 50
            assert store.get(session.id) is session
        assert store.evict_idle() == 0

    def test_submitting_session_is_not_evicted(self):
        now = [0.0]
        generator = GatedGenerator()
        store = WizardStore(
            BlueprintService(generator),
            min_loading_seconds=0,
            ttl_seconds=10,
            clock=lambda: now[0],
        )
        session = _filled(store.create())

        async def scenario():
            task = asyncio.create_task(session.submit())
            await generator.started.wait()
            now[0] += 100
            evicted = store.evict_idle()
            generator.release.set()
            await task
            return evicted

        assert asyncio.run(scenario()) == 0
        assert session.phase is WizardPhase.SUCCEEDED
        assert store.get(session.id) is session


class TestModuleSource:
    def test_wizard_module_compiles_without_warnings(self):
        import ideaforge.services.wizard as wizard_module

        with open(wizard_module.__file__, encoding="utf-8") as fh:
            source = fh.read()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, wizard_module.__file__, "exec")
