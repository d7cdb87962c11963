"""Unit tests for guardrail checks, sanitization and JSON extraction."""

from __future__ import annotations

import json

import pytest

from futurehealth.core.llm.response import (
    REDACTION_NOTE,
    check_guardrails,
    enforce_disclaimers,
    extract_json_object,
    sanitize_content,
)


class TestCheckGuardrails:
    def test_clean_content_passes(self, scaffold_factory):
        check = check_guardrails("Your sleep is in a healthy range.", scaffold_factory())
        assert check.passed is True
        assert check.flags == []

    def test_prohibited_indicator_fails(self, scaffold_factory):
        check = check_guardrails("You have been diagnosed with diabetes.", scaffold_factory())
        assert check.passed is False
        assert any("making medical diagnoses" in f for f in check.flags)

    def test_simulation_claims_flagged(self, scaffold_factory):
        check = check_guardrails("Using biobank data, your risk is 12%.", scaffold_factory())
        assert check.passed is False

    def test_scaffold_phrasing_flagged(self, scaffold_factory):
        scaffold = scaffold_factory(prohibited_phrasings=["Our quantum engine"])
        check = check_guardrails("Our quantum engine says you are fine.", scaffold)
        assert check.passed is False
        assert "scaffold phrasing ('our quantum engine')" in check.flags[0]

    def test_duplicate_phrase_flagged_once(self, scaffold_factory):
        scaffold = scaffold_factory(prohibited_phrasings=["I simulated"])
        check = check_guardrails("I simulated everything.", scaffold)
        assert len([f for f in check.flags if "i simulated" in f]) == 1

    def test_escalation_trigger_does_not_fail(self, scaffold_factory):
        check = check_guardrails("If you feel chest pain, call a doctor.", scaffold_factory())
        assert check.passed is True
        assert check.flags == ["escalation_trigger_detected: chest pain"]


class TestSanitizeContent:
    def test_passed_check_returns_content_unchanged(self, scaffold_factory):
        content = "All good."
        assert sanitize_content(content, check_guardrails(content, scaffold_factory())) == content

    def test_redacts_offending_sentence(self, scaffold_factory):
        content = "Walk daily. You are suffering from fatigue. Sleep well."
        sanitized = sanitize_content(content, check_guardrails(content, scaffold_factory()))
        assert sanitized == f"Walk daily.{REDACTION_NOTE} Sleep well."

    def test_json_stays_parseable(self, scaffold_factory):
        content = json.dumps(
            {"summary": "My simulation shows a rise. Stay active.", "score": 70}
        )
        sanitized = sanitize_content(content, check_guardrails(content, scaffold_factory()))
        data = json.loads(sanitized)
        assert data["score"] == 70
        assert data["summary"].startswith(REDACTION_NOTE)
        assert "simulation" not in data["summary"]


    def test_escaped_quotes_stay_parseable(self, scaffold_factory):
        content = json.dumps({"summary": 'The note says "I simulated this" for you.', "x": 1})
        sanitized = sanitize_content(content, check_guardrails(content, scaffold_factory()))
        data = extract_json_object(sanitized)
        assert data == {"summary": f'The note says "{REDACTION_NOTE}" for you.', "x": 1}


class TestEnforceDisclaimers:
    def test_appends_missing_disclaimer(self, scaffold_factory):
        content, flags = enforce_disclaimers("Some text.", scaffold_factory())
        assert content.endswith("Disclaimers:\n- Not medical advice.")
        assert flags == ["disclaimer_appended: Not medical advice."]

    def test_present_disclaimer_not_duplicated(self, scaffold_factory):
        content, flags = enforce_disclaimers("Text. Not   medical advice.", scaffold_factory())
        assert content == "Text. Not   medical advice."
        assert flags == []

    def test_structured_output_untouched(self, scaffold_factory):
        scaffold = scaffold_factory(format="json")
        content, flags = enforce_disclaimers('{"a": 1}', scaffold)
        assert content == '{"a": 1}'
        assert flags == []

    def test_no_disclaimers_configured(self, scaffold_factory):
        content, flags = enforce_disclaimers("Text.", scaffold_factory(disclaimers=[]))
        assert content == "Text."
        assert flags == []


class TestExtractJsonObject:
    def test_plain_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_fenced_object(self):
        assert extract_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_object_inside_prose(self):
        assert extract_json_object('Sure! {"a": {"b": 2}} Done.') == {"a": {"b": 2}}

    def test_array_rejected(self):
        with pytest.raises(ValueError, match="Expected a JSON object"):
            extract_json_object("[1, 2]")

    def test_no_object(self):
        with pytest.raises(ValueError, match="No JSON object"):
            extract_json_object("nothing here")

    def test_malformed_object(self):
        with pytest.raises(ValueError, match="Malformed JSON"):
            extract_json_object('{"a": 1,, }')
