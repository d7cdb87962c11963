"""Behavioural risk classifiers: steps, activity, sitting, alcohol, smoking, diet.

Each classifier is independent of the others and returns a small frozen
result with a categorical level plus the numbers that produced it.
"""

from __future__ import annotations

from futurehealth.domains.health.domain_logic.metrics_models import (
    ADDITIONAL_BENEFIT_MIN_MINUTES,
    ADDITIONAL_BENEFIT_MIN_STEPS,
    BINGE_THRESHOLDS,
    CIGARETTES_PER_PACK,
    DIET_BASE_MULTIPLIER,
    DIET_BOTTOM_LEVEL,
    DIET_LEVEL_BANDS,
    DIET_QUALITY_ORDINAL,
    FAST_FOOD_ORDINAL,
    FAST_FOOD_PENALTY,
    GUIDELINE_MIN_MINUTES,
    GUIDELINE_MIN_STEPS,
    HEAVY_DRINKING_THRESHOLDS,
    HIGH_RISK_PACK_YEARS,
    MVPA_MINUTES_PER_100_STEPS,
    SCREENING_MAX_AGE,
    SCREENING_MAX_YEARS_SINCE_QUIT,
    SCREENING_MIN_AGE,
    SCREENING_MIN_PACK_YEARS,
    SEDENTARY_BANDS,
    SEDENTARY_TOP_LEVEL,
    STEPS_CATEGORIES,
    STEPS_TOP_CATEGORY,
    ActivityGuideline,
    AlcoholRisk,
    DietScore,
    SedentaryRisk,
    SmokingRisk,
    StepsCategory,
    clamp,
    round_half_up,
)
from futurehealth.domains.health.domain_logic.profile import Gender, UserProfile


def _sex_key(gender: Gender) -> Gender | None:
    """Thresholds are keyed by male vs everyone else."""
    return Gender.MALE if gender == Gender.MALE else None


# ---------------------------------------------------------------------------
# Steps and activity
# ---------------------------------------------------------------------------

def classify_steps(daily_steps: int) -> StepsCategory:
    for upper, category in STEPS_CATEGORIES:
        if daily_steps < upper:
            return StepsCategory(daily_steps=daily_steps, category=category)
    return StepsCategory(daily_steps=daily_steps, category=STEPS_TOP_CATEGORY)


def mvpa_proxy_minutes(daily_steps: int) -> int:
    """Moderate-to-vigorous activity minutes estimated from daily steps."""
    return int(round_half_up(daily_steps / 100 * MVPA_MINUTES_PER_100_STEPS))


def assess_activity_guideline(daily_steps: int) -> ActivityGuideline:
    minutes = mvpa_proxy_minutes(daily_steps)
    meets = daily_steps >= GUIDELINE_MIN_STEPS or minutes >= GUIDELINE_MIN_MINUTES
    additional = (
        minutes >= ADDITIONAL_BENEFIT_MIN_MINUTES
        or daily_steps >= ADDITIONAL_BENEFIT_MIN_STEPS
    )

    if meets:
        risk_level = "low"
    elif daily_steps < STEPS_CATEGORIES[0][0]:
        risk_level = "high"
    else:
        risk_level = "moderate"

    return ActivityGuideline(
        mvpa_proxy_minutes=minutes,
        meets_guideline=meets,
        additional_benefits=additional,
        risk_level=risk_level,
    )


# ---------------------------------------------------------------------------
# Sitting time
# ---------------------------------------------------------------------------

def classify_sedentary(sitting_hours: float) -> SedentaryRisk:
    for upper, level in SEDENTARY_BANDS:
        if sitting_hours < upper:
            return SedentaryRisk(sitting_hours=sitting_hours, risk_level=level)
    return SedentaryRisk(sitting_hours=sitting_hours, risk_level=SEDENTARY_TOP_LEVEL)


# ---------------------------------------------------------------------------
# Alcohol
# ---------------------------------------------------------------------------

def assess_alcohol(profile: UserProfile) -> AlcoholRisk:
    """Weekly-volume level, escalated to "high" by any binge occasion."""
    sex = _sex_key(profile.gender)
    heavy_threshold = HEAVY_DRINKING_THRESHOLDS[sex]
    binge_threshold = BINGE_THRESHOLDS[sex]
    drinks = profile.alcohol_drinks_per_week

    heavy = drinks >= heavy_threshold
    if heavy:
        level = "high"
    elif drinks > 0:
        level = "elevated"
    else:
        level = "none"

    binge = (
        profile.max_drinks_per_occasion is not None
        and profile.max_drinks_per_occasion >= binge_threshold
    )
    if binge:
        level = "high"

    return AlcoholRisk(
        drinks_per_week=drinks,
        heavy_threshold=heavy_threshold,
        heavy_drinking=heavy,
        binge_threshold=binge_threshold,
        binge_flag=binge,
        risk_level=level,
    )


# ---------------------------------------------------------------------------
# Smoking
# ---------------------------------------------------------------------------

def _raw_pack_years(cigarettes_per_day: float | None, years_smoked: float | None) -> float:
    return ((cigarettes_per_day or 0) / CIGARETTES_PER_PACK) * (years_smoked or 0)


def _screening_age(age: int) -> bool:
    return SCREENING_MIN_AGE <= age <= SCREENING_MAX_AGE


def assess_smoking(profile: UserProfile) -> SmokingRisk:
    if not profile.smoker:
        # Former smokers can still qualify for lung screening.
        implied = _raw_pack_years(profile.cigarettes_per_day, profile.years_smoked)
        eligible = (
            _screening_age(profile.age)
            and profile.years_since_quit is not None
            and profile.years_since_quit <= SCREENING_MAX_YEARS_SINCE_QUIT
            and implied >= SCREENING_MIN_PACK_YEARS
        )
        return SmokingRisk(pack_years=0.0, risk_level="low", screening_eligible=eligible)

    pack_years = round_half_up(
        _raw_pack_years(profile.cigarettes_per_day, profile.years_smoked), 1
    )
    return SmokingRisk(
        pack_years=pack_years,
        risk_level="high" if pack_years >= HIGH_RISK_PACK_YEARS else "moderate",
        screening_eligible=_screening_age(profile.age) and pack_years >= SCREENING_MIN_PACK_YEARS,
    )


# ---------------------------------------------------------------------------
# Diet
# ---------------------------------------------------------------------------

def compute_diet_score(profile: UserProfile) -> DietScore:
    quality = DIET_QUALITY_ORDINAL[profile.diet_quality]
    fast_food = FAST_FOOD_ORDINAL[profile.fast_food_frequency]
    penalty = FAST_FOOD_PENALTY[fast_food]
    score = int(clamp(quality * DIET_BASE_MULTIPLIER - penalty, 0, 100))

    level = DIET_BOTTOM_LEVEL
    for floor, band_level in DIET_LEVEL_BANDS:
        if score >= floor:
            level = band_level
            break

    return DietScore(
        score=score,
        level=level,
        quality_ordinal=quality,
        fast_food_ordinal=fast_food,
        penalty=penalty,
    )
