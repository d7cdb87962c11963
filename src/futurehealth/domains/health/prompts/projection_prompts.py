"""Request builders for the narrative service.

The engine's numbers travel to the model as data, never as something to
recompute. These builders decide exactly what the model sees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from futurehealth.domains.health.domain_logic.metrics_engine import DerivedMetrics
from futurehealth.domains.health.domain_logic.profile import UserProfile, profile_to_dict
from futurehealth.domains.health.domain_logic.scenarios import ScenarioComparison

# Fixed risk-card keys, in display order.
RISK_CARD_CATEGORIES = (
    "diabetes",
    "physical_activity",
    "sedentary_behavior",
    "alcohol_use",
    "tobacco_exposure",
    "diet_quality",
)
FREEFORM_CARD_CATEGORIES = ("cardiovascular", "other")

EXPLAIN_MAX_SENTENCES = 3


@dataclass
class NarrativeRequest:
    user_query: str
    data_context: dict[str, Any]
    instructions: list[str] = field(default_factory=list)


def profile_summary(profile: UserProfile, metrics: DerivedMetrics) -> dict[str, Any]:
    """Short human-readable snapshot the model can quote back."""
    return {
        "age": profile.age,
        "sex": profile.gender.value,
        "bmi": metrics.bmi,
        "waistToHipRatio": metrics.whr,
        "habits": [
            "Smoker" if profile.smoker else "Non-smoker",
            profile.activity_level.value,
            f"{profile.daily_steps} steps/day",
            f"{profile.sleep_hours:g} h sleep",
        ],
        "existingConditions": list(profile.existing_conditions),
    }


def precomputed_metrics(metrics: DerivedMetrics) -> dict[str, Any]:
    debug = metrics.debug_calculations()
    return {
        "findrisc": f"{debug['findriscScore']}/{debug['findriscMax']} "
        f"(approx. probability {debug['diabetesProbabilityPct']}%)",
        "cvdRiskProxy10Year": f"{debug['cvdRiskProxyPct']}%",
        "lifeEssential8Score": f"{metrics.health_score_current}/100 "
        f"({metrics.life_essential8.confidence} confidence)",
        "bioVitalityScore": f"{debug['bioVitalityScore']}/100",
    }


def build_projection_request(
    profile: UserProfile,
    metrics: DerivedMetrics,
    scenario: ScenarioComparison | None = None,
) -> NarrativeRequest:
    """Assemble the projection request around the engine's metrics."""
    payload = metrics.to_dict()
    data_context: dict[str, Any] = {
        "profile": profile_to_dict(profile),
        "profileSummary": profile_summary(profile, metrics),
        "precomputedMetrics": precomputed_metrics(metrics),
        "healthScoreCurrent": payload["healthScoreCurrent"],
        "additionalMetrics": payload["additionalMetrics"],
        "debugCalculations": payload["debugCalculations"],
    }
    if scenario is not None:
        data_context["scenario"] = scenario.to_dict()

    categories = ", ".join(f'"{c}"' for c in RISK_CARD_CATEGORIES)
    freeform = " and ".join(f'"{c}"' for c in FREEFORM_CARD_CATEGORIES)
    instructions = [
        "Use the PROVIDED CALCULATED METRICS exactly as given. Do NOT recalculate any score.",
        f"Produce one risk card per category, using these ids: {categories}.",
        f"You may add {freeform} cards; map the CVD risk proxy to the cardiovascular card.",
        "Use healthScoreCurrent as given. Project healthScoreFuture (10 years from now) "
        "and the trajectory from the risk factors present.",
        "Project weightTrajectory from the current BMI trend.",
        "Copy additionalMetrics and debugCalculations verbatim into your response.",
        "If a value is missing from the data, say that it is missing.",
        "Return ONLY the JSON object.",
    ]
    if scenario is not None:
        instructions.insert(
            4,
            f"Describe the '{scenario.label}' scenario in scenarios.items using the "
            "projected metrics and modifiedInputs given under scenario.",
        )

    return NarrativeRequest(
        user_query="Analyze this profile using the provided calculated metrics.",
        data_context=data_context,
        instructions=instructions,
    )


def build_insight_request(
    profile: UserProfile,
    context: str,
    question: str,
) -> NarrativeRequest:
    """Follow-up question about an existing projection."""
    return NarrativeRequest(
        user_query=question,
        data_context={
            "profileSummary": {
                "age": profile.age,
                "sex": profile.gender.value,
                "weightKg": profile.weight_kg,
            },
            "currentPrediction": context,
        },
        instructions=[
            f"Answer in at most {EXPLAIN_MAX_SENTENCES} sentences.",
            'Start from "Based on standard risk models..." rather than claiming to run simulations.',
            "Do not invent numbers.",
        ],
    )
