"""Deterministic metrics engine: UserProfile -> DerivedMetrics.

This is the main entry point for scoring. It runs every calculator exactly
once over a single profile and bundles the results. All computation is
deterministic: no LLM, no randomness, no I/O, no shared state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from futurehealth.domains.health.domain_logic.life_essential8 import compute_life_essential8
from futurehealth.domains.health.domain_logic.lifestyle_classifiers import (
    assess_activity_guideline,
    assess_alcohol,
    assess_smoking,
    classify_sedentary,
    classify_steps,
    compute_diet_score,
)
from futurehealth.domains.health.domain_logic.metrics_models import (
    ActivityGuideline,
    AlcoholRisk,
    CardiovascularRisk,
    DiabetesRisk,
    DietScore,
    LifeEssential8,
    SedentaryRisk,
    SmokingRisk,
    StepsCategory,
)
from futurehealth.domains.health.domain_logic.profile import UserProfile
from futurehealth.domains.health.domain_logic.risk_scores import (
    compute_bio_vitality_score,
    compute_bmi,
    compute_cardiovascular_risk,
    compute_diabetes_risk,
    compute_whr,
)


@dataclass(frozen=True)
class DerivedMetrics:
    """Every deterministic score for one profile. Recomputed on every call."""

    bmi: float
    whr: float
    diabetes: DiabetesRisk
    cardiovascular: CardiovascularRisk
    bio_vitality_score: int
    steps: StepsCategory
    activity: ActivityGuideline
    sedentary: SedentaryRisk
    alcohol: AlcoholRisk
    smoking: SmokingRisk
    diet: DietScore
    life_essential8: LifeEssential8

    @property
    def health_score_current(self) -> int:
        """Canonical current score (Life's Essential 8 total)."""
        return self.life_essential8.total

    def debug_calculations(self) -> dict[str, Any]:
        return {
            "bmi": self.bmi,
            "whr": self.whr,
            "findriscScore": self.diabetes.score,
            "findriscMax": self.diabetes.max_score,
            "diabetesProbabilityPct": self.diabetes.probability_pct,
            "diabetesRiskCategory": self.diabetes.category,
            "cvdRiskProxyPct": self.cardiovascular.proxy_pct,
            "cvdBasis": self.cardiovascular.basis,
            "bioVitalityScore": self.bio_vitality_score,
        }

    def additional_metrics(self) -> dict[str, Any]:
        return {
            "steps": self.steps.to_dict(),
            "activityGuideline": self.activity.to_dict(),
            "sedentaryBehavior": self.sedentary.to_dict(),
            "alcoholUse": self.alcohol.to_dict(),
            "tobaccoExposure": self.smoking.to_dict(),
            "dietQuality": self.diet.to_dict(),
            "lifeEssential8": self.life_essential8.to_dict(),
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe payload in the shape echoed back by the narrative service."""
        return {
            "healthScoreCurrent": self.health_score_current,
            "debugCalculations": self.debug_calculations(),
            "additionalMetrics": self.additional_metrics(),
        }


def compute_derived_metrics(profile: UserProfile) -> DerivedMetrics:
    bmi = compute_bmi(profile.height_cm, profile.weight_kg)
    diet = compute_diet_score(profile)

    return DerivedMetrics(
        bmi=bmi,
        whr=compute_whr(profile.waist_cm, profile.hip_cm),
        diabetes=compute_diabetes_risk(profile, bmi),
        cardiovascular=compute_cardiovascular_risk(profile, bmi),
        bio_vitality_score=compute_bio_vitality_score(profile, bmi),
        steps=classify_steps(profile.daily_steps),
        activity=assess_activity_guideline(profile.daily_steps),
        sedentary=classify_sedentary(profile.sitting_hours),
        alcohol=assess_alcohol(profile),
        smoking=assess_smoking(profile),
        diet=diet,
        life_essential8=compute_life_essential8(profile, bmi, diet),
    )
