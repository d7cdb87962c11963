"""Unit tests for the deterministic metrics engine entry point."""

from __future__ import annotations

import itertools
import json

import pytest

from futurehealth.domains.health.domain_logic.life_essential8 import composite_total
from futurehealth.domains.health.domain_logic.metrics_engine import compute_derived_metrics


class TestDerivedMetrics:
    def test_healthy_profile_values(self, healthy_profile):
        metrics = compute_derived_metrics(healthy_profile)
        assert metrics.bmi == 22.0
        assert metrics.whr == 0.79
        assert metrics.diabetes.score == 0
        assert metrics.diabetes.probability_pct == 1
        assert metrics.cardiovascular.proxy_pct == 1.0
        assert metrics.bio_vitality_score == 94
        assert metrics.steps.category == "somewhat_active"
        assert metrics.sedentary.risk_level == "moderate"
        assert metrics.alcohol.risk_level == "elevated"
        assert metrics.smoking.risk_level == "low"
        assert metrics.diet.score == 100

    def test_current_score_is_life_essential8_total(self, healthy_profile):
        metrics = compute_derived_metrics(healthy_profile)
        assert metrics.health_score_current == metrics.life_essential8.total == 93

    def test_deterministic(self, high_risk_profile):
        first = compute_derived_metrics(high_risk_profile)
        second = compute_derived_metrics(high_risk_profile)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_diet_component_reuses_diet_score(self, profile_factory):
        metrics = compute_derived_metrics(
            profile_factory(dietQuality="average", fastFoodFrequency="weekly")
        )
        assert metrics.life_essential8.component("diet").score == metrics.diet.score == 45

    def test_payload_shape(self, healthy_profile):
        payload = compute_derived_metrics(healthy_profile).to_dict()
        assert set(payload) == {"healthScoreCurrent", "debugCalculations", "additionalMetrics"}
        assert set(payload["additionalMetrics"]) == {
            "steps",
            "activityGuideline",
            "sedentaryBehavior",
            "alcoholUse",
            "tobaccoExposure",
            "dietQuality",
            "lifeEssential8",
        }
        debug = payload["debugCalculations"]
        assert debug["findriscScore"] == 0
        assert debug["findriscMax"] == 26
        assert debug["diabetesProbabilityPct"] == 1
        assert debug["cvdRiskProxyPct"] == 1.0
        assert debug["bioVitalityScore"] == 94

    def test_payload_is_json_safe(self, high_risk_profile):
        payload = compute_derived_metrics(high_risk_profile).to_dict()
        assert json.loads(json.dumps(payload)) == payload

    def test_high_risk_profile_scores_worse(self, healthy_profile, high_risk_profile):
        healthy = compute_derived_metrics(healthy_profile)
        risky = compute_derived_metrics(high_risk_profile)
        assert risky.health_score_current < healthy.health_score_current
        assert risky.diabetes.probability_pct > healthy.diabetes.probability_pct
        assert risky.cardiovascular.proxy_pct > healthy.cardiovascular.proxy_pct
        assert risky.smoking.risk_level == "high"
        assert risky.alcohol.risk_level == "high"


class TestMonotonicity:
    def test_more_steps_never_lower_the_score(self, profile_factory):
        scores = [
            compute_derived_metrics(profile_factory(dailySteps=steps)).health_score_current
            for steps in (0, 500, 1000, 2000, 5000, 10000, 15000)
        ]
        assert scores == sorted(scores)

    def test_smoking_lowers_the_score(self, profile_factory):
        never = compute_derived_metrics(profile_factory())
        smoker = compute_derived_metrics(profile_factory(smoker=True))
        assert smoker.health_score_current < never.health_score_current
        assert smoker.cardiovascular.proxy_pct == never.cardiovascular.proxy_pct * 2

    def test_weight_gain_never_improves_diabetes_risk(self, profile_factory):
        probabilities = [
            compute_derived_metrics(profile_factory(weightKg=w)).diabetes.probability_pct
            for w in (55, 70, 80, 95, 120)
        ]
        assert probabilities == sorted(probabilities)


CONDITION_SETS = (
    [],
    ["Hypertension"],
    ["Type 2 Diabetes", "High Cholesterol"],
    ["Hypertension", "Type 2 Diabetes", "High Cholesterol"],
)

SWEEP = list(
    itertools.product(
        (25, 75),           # age
        (False, True),      # smoker
        (3.0, 8.0),         # sleepHours
        (0, 20000),         # dailySteps
        (45, 150),          # weightKg
        CONDITION_SETS,
    )
)


class TestBounds:
    @pytest.mark.parametrize("age, smoker, sleep, steps, weight, conditions", SWEEP)
    def test_scores_stay_in_range(self, profile_factory, age, smoker, sleep, steps, weight, conditions):
        metrics = compute_derived_metrics(
            profile_factory(
                age=age,
                smoker=smoker,
                sleepHours=sleep,
                dailySteps=steps,
                weightKg=weight,
                existingConditions=conditions,
            )
        )
        le8 = metrics.life_essential8
        assert all(0 <= c.score <= 100 for c in le8.components)
        assert le8.total == composite_total(le8.components)
        assert metrics.health_score_current == le8.total
        assert 10 <= metrics.bio_vitality_score <= 100
        assert 0 <= metrics.cardiovascular.proxy_pct <= 99
        assert 0 <= metrics.diabetes.probability_pct <= 99
