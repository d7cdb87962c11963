"""Unit tests for scaffold loading, registry lookups and prompt rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from futurehealth.core.scaffold.loader import load_scaffold_directory, load_scaffold_file
from futurehealth.core.scaffold.registry import ScaffoldNotFoundError, ScaffoldRegistry
from futurehealth.core.scaffold.renderer import render_scaffold


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

class TestLoader:
    def test_packaged_scaffolds_load(self, registry: ScaffoldRegistry):
        ids = sorted(s.id for s in registry.all())
        assert ids == ["health_insight", "health_projection"]

    def test_projection_scaffold_is_structured(self, registry: ScaffoldRegistry):
        scaffold = registry.require("health_projection")
        assert scaffold.output_calibration.is_structured is True
        assert '"riskCards"' in scaffold.output_calibration.output_schema
        assert "I simulated" in scaffold.guardrails.prohibited_phrasings
        assert scaffold.version == "1.0.0"

    def test_insight_scaffold_has_no_disclaimers(self, registry: ScaffoldRegistry):
        scaffold = registry.require("health_insight")
        assert scaffold.output_calibration.is_structured is False
        assert scaffold.guardrails.disclaimers == []

    def test_missing_directory_loads_nothing(self, tmp_path: Path):
        assert load_scaffold_directory(tmp_path / "nope", ScaffoldRegistry()) == 0

    def test_underscore_files_and_bad_files_skipped(self, tmp_path: Path):
        (tmp_path / "_schema.yaml").write_text("id: ignored\n", encoding="utf-8")
        (tmp_path / "broken.yaml").write_text("version: 1\n", encoding="utf-8")
        (tmp_path / "ok.yaml").write_text(
            "id: ok\nversion: 2\ndomain: future_health\n"
            "display_name: OK\ndescription: Minimal scaffold\n",
            encoding="utf-8",
        )
        reg = ScaffoldRegistry()
        assert load_scaffold_directory(tmp_path, reg) == 1
        assert reg.require("ok").version == "2"

    def test_minimal_file_defaults(self, tmp_path: Path):
        path = tmp_path / "min.yaml"
        path.write_text(
            "id: min\nversion: '1.0'\ndomain: d\ndisplay_name: Min\ndescription: '  padded  '\n",
            encoding="utf-8",
        )
        scaffold = load_scaffold_file(path)
        assert scaffold.description == "padded"
        assert scaffold.output_calibration.format == "structured_narrative"
        assert scaffold.guardrails.prohibited_phrasings == []


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_duplicate_id_rejected(self, scaffold_factory):
        reg = ScaffoldRegistry()
        reg.register(scaffold_factory(id="a"))
        with pytest.raises(ValueError, match="Duplicate scaffold id"):
            reg.register(scaffold_factory(id="a"))

    def test_get_and_require(self, scaffold_factory):
        reg = ScaffoldRegistry()
        reg.register(scaffold_factory(id="a"))
        assert reg.get("a").id == "a"
        assert reg.get("b") is None
        with pytest.raises(ScaffoldNotFoundError):
            reg.require("b")

    def test_not_found_is_a_key_error(self):
        with pytest.raises(KeyError):
            ScaffoldRegistry().require("missing")

    def test_find_by_tool(self, registry: ScaffoldRegistry):
        found = registry.find_by_tool("generate_health_projection")
        assert [s.id for s in found] == ["health_projection"]
        assert registry.find_by_tool("unknown_tool") == []


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

class TestRenderer:
    def test_system_message_sections(self, registry: ScaffoldRegistry):
        prompt = render_scaffold(
            scaffold=registry.require("health_projection"),
            user_query="Analyze this profile.",
            data_context={"healthScoreCurrent": 72},
        )
        system = prompt.system_message
        assert system.startswith("## Your Role")
        assert "## Reasoning Steps" in system
        assert "## Response Schema" in system
        assert "## Transparency" in system
        assert '- "I accessed biobank data"' in system
        assert "## Escalation Triggers" in system
        assert prompt.metadata["output_format"] == "json"

    def test_user_message_sections(self, scaffold_factory):
        prompt = render_scaffold(
            scaffold=scaffold_factory(),
            user_query="Why?",
            data_context={"score": 50},
            instructions=["First rule.", "Second rule."],
        )
        user = prompt.user_message
        assert user.startswith("## User Request\nWhy?")
        assert '"score": 50' in user
        assert "## Instructions\n1. First rule.\n2. Second rule." in user

    def test_empty_context_and_no_instructions(self, scaffold_factory):
        prompt = render_scaffold(scaffold=scaffold_factory(), user_query="Hi", data_context={})
        assert prompt.user_message == "## User Request\nHi"
        assert "## Response Schema" not in prompt.system_message
        assert "## Required Disclaimers" in prompt.system_message
