"""Wizard route tests — a full pass through the wizard over HTTP."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from ideaforge.agents.blueprint_agent import BlueprintGenerationError
from ideaforge.agents.blueprint_agent.facade import BlueprintService
from ideaforge.agents.blueprint_agent.fallback import FallbackBlueprintGenerator
from ideaforge.constants import GENERATION_ERROR_MESSAGE, TEMPLATE_NOTICE
from ideaforge.dependencies import get_wizard_store
from ideaforge.main import app
from ideaforge.services.wizard import WizardStore

client = TestClient(app)


class FailingGenerator:
    backend = "model"

    async def generate(self, form):
        raise BlueprintGenerationError("provider", "HTTP 500")


def _use_store(generator):
    store = WizardStore(BlueprintService(generator), min_loading_seconds=0)
    app.dependency_overrides[get_wizard_store] = lambda: store
    return store


@pytest.fixture(autouse=True)
def store():
    yield _use_store(FallbackBlueprintGenerator())
    app.dependency_overrides.clear()


def _start():
    response = client.post("/wizard")
    assert response.status_code == 201
    return response.json()["id"]


def _fill(session_id):
    client.patch(f"/wizard/{session_id}/fields", json={"fields": {"ideaDescription": "Language exchange for travelers"}})
    assert client.post(f"/wizard/{session_id}/next").json()["step"] == 2
    client.patch(f"/wizard/{session_id}/fields", json={"fields": {
        "industry": "Travel",
        "targetAudience": "backpackers",
        "teamSize": "3",
        "budget": "$20k",
    }})
    client.post(f"/wizard/{session_id}/tech", json={"id": "mac", "checked": True})
    state = client.post(f"/wizard/{session_id}/next").json()
    assert state["step"] == 3
    return state


class TestWizardFlow:
    def test_new_session(self):
        session_id = _start()
        state = client.get(f"/wizard/{session_id}").json()
        assert state["phase"] == "collecting"
        assert state["step"] == 1
        assert state["total_steps"] == 3
        assert state["progress_percent"] == 33
        assert state["blueprint"] is None

    def test_next_with_errors_stays(self):
        session_id = _start()
        state = client.post(f"/wizard/{session_id}/next").json()
        assert state["step"] == 1
        assert state["errors"] == {"ideaDescription": "Please describe your idea"}

    def test_full_pass(self):
        session_id = _start()
        _fill(session_id)
        client.patch(f"/wizard/{session_id}/fields", json={"fields": {"milestones": "100 users by June"}})

        state = client.post(f"/wizard/{session_id}/submit").json()
        assert state["phase"] == "succeeded"
        assert state["backend"] == "template"
        assert state["notice"] == TEMPLATE_NOTICE
        assert state["blueprint"]["name"] == "Language exchange for"
        assert state["blueprint"]["milestones"] == "100 users by June"

        html = client.get(f"/wizard/{session_id}/blueprint?mode=flat").text
        assert 'id="blueprint-content"' in html
        assert "100 users by June" in html

    def test_back(self):
        session_id = _start()
        _fill(session_id)
        assert client.post(f"/wizard/{session_id}/back").json()["step"] == 2

    def test_failure_then_retry(self):
        _use_store(FailingGenerator())
        session_id = _start()
        _fill(session_id)

        state = client.post(f"/wizard/{session_id}/submit").json()
        assert state["phase"] == "failed"
        assert state["error_message"] == GENERATION_ERROR_MESSAGE
        assert state["blueprint"] is None

        state = client.post(f"/wizard/{session_id}/retry").json()
        assert state["phase"] == "collecting"
        assert state["step"] == 3
        assert state["draft"]["budget"] == "$20k"

    def test_restart(self):
        session_id = _start()
        _fill(session_id)
        client.post(f"/wizard/{session_id}/submit")
        state = client.post(f"/wizard/{session_id}/restart").json()
        assert state["phase"] == "collecting"
        assert state["step"] == 1
        assert state["draft"]["ideaDescription"] == ""


class TestWizardErrors:
    def test_unknown_session(self):
        assert client.get("/wizard/does-not-exist").status_code == 404

    def test_unknown_field(self):
        session_id = _start()
        response = client.patch(f"/wizard/{session_id}/fields", json={"fields": {"colour": "red"}})
        assert response.status_code == 422

    def test_unknown_tech(self):
        session_id = _start()
        response = client.post(f"/wizard/{session_id}/tech", json={"id": "amiga", "checked": True})
        assert response.status_code == 422

    def test_submit_before_last_step_conflicts(self):
        session_id = _start()
        assert client.post(f"/wizard/{session_id}/submit").status_code == 409

    def test_retry_without_failure_conflicts(self):
        session_id = _start()
        assert client.post(f"/wizard/{session_id}/retry").status_code == 409

    def test_blueprint_before_success_conflicts(self):
        session_id = _start()
        assert client.get(f"/wizard/{session_id}/blueprint").status_code == 409

    def test_edit_after_success_conflicts(self):
        session_id = _start()
        _fill(session_id)
        client.post(f"/wizard/{session_id}/submit")
        response = client.patch(f"/wizard/{session_id}/fields", json={"fields": {"budget": "$1"}})
        assert response.status_code == 409

    def test_abandon(self, store):
        session_id = _start()
        assert client.delete(f"/wizard/{session_id}").status_code == 204
        assert len(store) == 0
        assert client.get(f"/wizard/{session_id}").status_code == 404
