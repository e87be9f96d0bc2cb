"""Export and share tests — filename, flat-view snapshot, failure wrapping."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ideaforge.agents.blueprint_agent.fallback import generate_fallback_blueprint
from ideaforge.constants import EXPORT_ERROR_MESSAGE
from ideaforge.schemas.form_schema import FormInput
from ideaforge.services.blueprint_renderer import render_blueprint
from ideaforge.services.export_service import (
    ExportError,
    HtmlSnapshotExporter,
    build_share_payload,
    export_blueprint,
    export_filename_stem,
)


def _doc():
    return generate_fallback_blueprint(FormInput.model_validate({
        "ideaDescription": "Carpool matching for suburban parents",
        "industry": "Transportation",
        "targetAudience": "working parents",
        "teamSize": "3",
        "budget": "$40k",
        "techPreferences": ["ios", "android"],
        "milestones": "Launch in two school districts",
    }))


class RecordingExporter:
    def __init__(self):
        self.calls = []

    def export(self, html, filename_stem):
        self.calls.append((html, filename_stem))
        return HtmlSnapshotExporter().export(html, filename_stem)


class BrokenExporter:
    def export(self, html, filename_stem):
        raise RuntimeError("canvas rasterisation failed")


class TestExport:
    def test_filename_uses_blueprint_name(self):
        assert export_filename_stem(_doc()) == "Carpool matching for-blueprint"

    def test_html_snapshot(self):
        exported = export_blueprint(_doc(), HtmlSnapshotExporter())
        assert exported.filename == "Carpool matching for-blueprint.html"
        assert exported.media_type.startswith("text/html")
        body = exported.content.decode("utf-8")
        assert 'id="blueprint-content"' in body
        assert "Launch in two school districts" in body

    def test_exports_the_flat_view(self):
        doc = _doc()
        exporter = RecordingExporter()
        export_blueprint(doc, exporter)

        (html, stem), = exporter.calls
        assert stem == export_filename_stem(doc)
        assert 'data-mode="flat"' in html
        for section in render_blueprint(doc, "flat").sections:
            assert f'data-section="{section.key}"' in html

    def test_exporter_failure_is_wrapped(self):
        doc = _doc()
        with pytest.raises(ExportError) as excinfo:
            export_blueprint(doc, BrokenExporter())
        assert str(excinfo.value) == EXPORT_ERROR_MESSAGE
        assert "canvas rasterisation failed" in excinfo.value.detail
        # The document is unaffected and can be exported again.
        assert export_blueprint(doc, HtmlSnapshotExporter()).content


class TestShare:
    def test_share_payload(self):
        payload = build_share_payload(_doc(), "https://ideaforge.example/blueprint/42")
        assert payload.title == "Carpool matching for"
        assert payload.text == "Check out my startup blueprint for Carpool matching for"
        assert payload.url == "https://ideaforge.example/blueprint/42"


class TestFilenameSafety:
    def _named(self, name):
        return _doc().model_copy(update={"name": name})

    def test_control_characters_removed(self):
        stem = export_filename_stem(self._named("Acme\r\nX-Evil: 1"))
        assert "\r" not in stem and "\n" not in stem
        assert stem == "AcmeX-Evil: 1-blueprint"

    def test_quotes_and_slashes_removed(self):
        assert export_filename_stem(self._named('Say "Hi" Co')) == "Say Hi Co-blueprint"
        assert export_filename_stem(self._named("a/b\\c")) == "abc-blueprint"

    def test_empty_name_falls_back(self):
        assert export_filename_stem(self._named("")) == "blueprint-blueprint"
        assert export_filename_stem(self._named("  \t ")) == "blueprint-blueprint"
