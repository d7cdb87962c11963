"""Unit tests for the narrative request builders."""

from __future__ import annotations

from futurehealth.domains.health.domain_logic.metrics_engine import compute_derived_metrics
from futurehealth.domains.health.domain_logic.scenarios import compare_scenario
from futurehealth.domains.health.prompts.projection_prompts import (
    RISK_CARD_CATEGORIES,
    build_insight_request,
    build_projection_request,
    precomputed_metrics,
    profile_summary,
)


class TestProjectionRequest:
    def test_data_context_carries_engine_payload(self, healthy_profile):
        metrics = compute_derived_metrics(healthy_profile)
        request = build_projection_request(healthy_profile, metrics)
        context = request.data_context
        assert set(context) == {
            "profile",
            "profileSummary",
            "precomputedMetrics",
            "healthScoreCurrent",
            "additionalMetrics",
            "debugCalculations",
        }
        assert context["healthScoreCurrent"] == 93
        assert context["additionalMetrics"] == metrics.additional_metrics()
        assert context["profile"]["dailySteps"] == 8000

    def test_instructions_forbid_recalculation(self, healthy_profile):
        request = build_projection_request(healthy_profile, compute_derived_metrics(healthy_profile))
        text = "\n".join(request.instructions)
        assert "Do NOT recalculate" in text
        assert "Copy additionalMetrics and debugCalculations verbatim" in text
        assert request.instructions[-1] == "Return ONLY the JSON object."
        for category in RISK_CARD_CATEGORIES:
            assert f'"{category}"' in text

    def test_scenario_adds_context_and_instruction(self, high_risk_profile):
        metrics = compute_derived_metrics(high_risk_profile)
        scenario = compare_scenario(high_risk_profile, scenario_id="quit_smoking")
        request = build_projection_request(high_risk_profile, metrics, scenario)
        assert request.data_context["scenario"]["id"] == "quit_smoking"
        assert any("'Quit Smoking' scenario" in line for line in request.instructions)

    def test_profile_summary(self, high_risk_profile):
        metrics = compute_derived_metrics(high_risk_profile)
        summary = profile_summary(high_risk_profile, metrics)
        assert summary["bmi"] == 34.3
        assert summary["habits"] == ["Smoker", "sedentary", "3000 steps/day", "5.5 h sleep"]
        assert summary["existingConditions"] == ["Hypertension"]

    def test_precomputed_metrics_text(self, healthy_profile):
        text = precomputed_metrics(compute_derived_metrics(healthy_profile))
        assert text["findrisc"] == "0/26 (approx. probability 1%)"
        assert text["cvdRiskProxy10Year"] == "1.0%"
        assert text["lifeEssential8Score"] == "93/100 (low confidence)"
        assert text["bioVitalityScore"] == "94/100"


class TestInsightRequest:
    def test_question_and_context(self, healthy_profile):
        request = build_insight_request(healthy_profile, "Score 93", "What drives my score?")
        assert request.user_query == "What drives my score?"
        assert request.data_context["currentPrediction"] == "Score 93"
        assert request.data_context["profileSummary"]["weightKg"] == 60
        assert request.instructions[0] == "Answer in at most 3 sentences."
