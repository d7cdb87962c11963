"""Preliminary body-composition analysis shown before any projection is run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from futurehealth.domains.health.domain_logic.metrics_models import round_half_up, safe_ratio
from futurehealth.domains.health.domain_logic.profile import ActivityLevel, Gender, UserProfile
from futurehealth.domains.health.domain_logic.risk_scores import compute_bmi, compute_whr

# (BMI strictly below, category)
BMI_CATEGORIES = ((18.5, "Underweight"), (25, "Normal Weight"), (30, "Overweight"))
BMI_TOP_CATEGORY = "Obese"

# Mifflin-St Jeor sex constant
BMR_SEX_OFFSET = {Gender.MALE: 5, None: -161}

TDEE_ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
}

# (WHR strictly above, status), WHO cut-offs
WHR_RISK_BANDS = {
    Gender.MALE: ((0.9, "High Risk"), (0.85, "Moderate Risk")),
    None: ((0.85, "High Risk"), (0.80, "Moderate Risk")),
}
WHR_LOW_STATUS = "Low Risk"


@dataclass(frozen=True)
class BaselineAnalysis:
    bmi: float
    bmi_category: str
    bmr_kcal: int
    tdee_kcal: int
    whr: float
    whr_status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "bmi": self.bmi,
            "bmiCategory": self.bmi_category,
            "bmrKcal": self.bmr_kcal,
            "tdeeKcal": self.tdee_kcal,
            "whr": self.whr,
            "whrStatus": self.whr_status,
        }


def bmi_category(bmi: float) -> str:
    for upper, category in BMI_CATEGORIES:
        if bmi < upper:
            return category
    return BMI_TOP_CATEGORY


def _raw_bmr(profile: UserProfile) -> float:
    offset = BMR_SEX_OFFSET[Gender.MALE if profile.gender == Gender.MALE else None]
    return 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age + offset


def compute_bmr(profile: UserProfile) -> int:
    """Basal metabolic rate (kcal/day), Mifflin-St Jeor."""
    return int(round_half_up(_raw_bmr(profile)))


def compute_tdee(profile: UserProfile) -> int:
    """Total daily energy expenditure from BMR and the activity multiplier."""
    multiplier = TDEE_ACTIVITY_MULTIPLIERS[profile.activity_level]
    return int(round_half_up(_raw_bmr(profile) * multiplier))


def whr_status(whr: float, gender: Gender) -> str:
    bands = WHR_RISK_BANDS[Gender.MALE if gender == Gender.MALE else None]
    for threshold, status in bands:
        if whr > threshold:
            return status
    return WHR_LOW_STATUS


def compute_baseline(profile: UserProfile) -> BaselineAnalysis:
    bmi = compute_bmi(profile.height_cm, profile.weight_kg)
    # WHO cut-offs are applied to the unrounded ratio
    raw_whr = safe_ratio(profile.waist_cm, profile.hip_cm)
    return BaselineAnalysis(
        bmi=bmi,
        bmi_category=bmi_category(bmi),
        bmr_kcal=compute_bmr(profile),
        tdee_kcal=compute_tdee(profile),
        whr=compute_whr(profile.waist_cm, profile.hip_cm),
        whr_status=whr_status(raw_whr, profile.gender),
    )
