"""Body composition primitives and point/multiplier risk scores.

Every function here is pure: explicit inputs in, number out. No validation is
performed; the boundary parser guarantees well-typed input.
"""

from __future__ import annotations

from futurehealth.domains.health.domain_logic.metrics_models import (
    CVD_AGE_PIVOT,
    CVD_AGE_SLOPE,
    CVD_BASE,
    CVD_BMI_MULTIPLIERS,
    CVD_CEILING,
    CVD_CONDITION_MULTIPLIERS,
    CVD_MALE_MULTIPLIER,
    CVD_SEDENTARY_MULTIPLIER,
    CVD_SMOKER_MULTIPLIER,
    DIABETES_PROBABILITY_BANDS,
    DIABETES_PROBABILITY_CEILING,
    DIABETES_PROBABILITY_TOP,
    DIABETES_RISK_CATEGORIES,
    DIABETES_RISK_TOP_CATEGORY,
    FINDRISC_AGE_ABOVE,
    FINDRISC_AGE_BANDS,
    FINDRISC_BMI_ABOVE,
    FINDRISC_BMI_BANDS,
    FINDRISC_HYPERTENSION_POINTS,
    FINDRISC_LOW_ACTIVITY_LEVELS,
    FINDRISC_LOW_ACTIVITY_POINTS,
    FINDRISC_POOR_DIET_POINTS,
    FINDRISC_WAIST_BANDS,
    VITALITY_ACTIVE_BONUS,
    VITALITY_AGE_DECAY,
    VITALITY_AGE_PIVOT,
    VITALITY_BMI_PENALTIES,
    VITALITY_CEILING,
    VITALITY_CONDITION_PENALTY,
    VITALITY_FLOOR,
    VITALITY_SEDENTARY_PENALTY,
    VITALITY_SHORT_SLEEP_HOURS,
    VITALITY_SHORT_SLEEP_PENALTY,
    VITALITY_SMOKER_PENALTY,
    VITALITY_START,
    CardiovascularRisk,
    DiabetesRisk,
    clamp,
    round_half_up,
    safe_ratio,
)
from futurehealth.domains.health.domain_logic.profile import (
    ActivityLevel,
    Condition,
    DietQuality,
    Gender,
    UserProfile,
)


# ---------------------------------------------------------------------------
# Body composition
# ---------------------------------------------------------------------------

def compute_bmi(height_cm: float, weight_kg: float) -> float:
    """Body mass index in kg/m², one decimal."""
    height_m = height_cm / 100
    return round_half_up(safe_ratio(weight_kg, height_m * height_m), 1)


def compute_whr(waist_cm: float, hip_cm: float) -> float:
    """Waist-to-hip ratio, two decimals."""
    return round_half_up(safe_ratio(waist_cm, hip_cm), 2)


# ---------------------------------------------------------------------------
# Diabetes (FINDRISC-style)
# ---------------------------------------------------------------------------

def _banded_points(
    value: float,
    bands: tuple[tuple[float, float, int], ...],
    above: tuple[float, int],
) -> int:
    for low, high, points in bands:
        if low <= value <= high:
            return points
    threshold, points = above
    if value > threshold:
        return points
    return 0


def compute_findrisc_score(profile: UserProfile, bmi: float) -> int:
    """Additive diabetes risk points (nominal ceiling 26, not clamped)."""
    score = 0
    score += _banded_points(profile.age, FINDRISC_AGE_BANDS, FINDRISC_AGE_ABOVE)
    score += _banded_points(bmi, FINDRISC_BMI_BANDS, FINDRISC_BMI_ABOVE)

    waist_key = Gender.MALE if profile.gender == Gender.MALE else None
    waist_bands, waist_above = FINDRISC_WAIST_BANDS[waist_key]
    score += _banded_points(profile.waist_cm, waist_bands, waist_above)

    if profile.activity_level in FINDRISC_LOW_ACTIVITY_LEVELS:
        score += FINDRISC_LOW_ACTIVITY_POINTS
    if profile.diet_quality == DietQuality.POOR:
        score += FINDRISC_POOR_DIET_POINTS
    if profile.has_condition(Condition.HYPERTENSION):
        score += FINDRISC_HYPERTENSION_POINTS
    return score


def diabetes_probability(findrisc_score: int) -> int:
    """Map a FINDRISC score to an approximate 10-year probability (%)."""
    probability = DIABETES_PROBABILITY_TOP
    for highest, pct in DIABETES_PROBABILITY_BANDS:
        if findrisc_score <= highest:
            probability = pct
            break
    return int(clamp(probability, 0, DIABETES_PROBABILITY_CEILING))


def diabetes_risk_category(findrisc_score: int) -> str:
    for highest, category in DIABETES_RISK_CATEGORIES:
        if findrisc_score <= highest:
            return category
    return DIABETES_RISK_TOP_CATEGORY


def compute_diabetes_risk(profile: UserProfile, bmi: float) -> DiabetesRisk:
    score = compute_findrisc_score(profile, bmi)
    return DiabetesRisk(
        score=score,
        probability_pct=diabetes_probability(score),
        category=diabetes_risk_category(score),
    )


# ---------------------------------------------------------------------------
# Cardiovascular proxy
# ---------------------------------------------------------------------------

def compute_cvd_risk_proxy(profile: UserProfile, bmi: float) -> float:
    """Multiplicative risk-factor accumulator, capped at 99.

    The additive age term is folded into the base before any multiplier is
    applied; the rounded output depends on that order.
    """
    risk = CVD_BASE
    if profile.age > CVD_AGE_PIVOT:
        risk += (profile.age - CVD_AGE_PIVOT) * CVD_AGE_SLOPE

    if profile.gender == Gender.MALE:
        risk *= CVD_MALE_MULTIPLIER
    if profile.smoker:
        risk *= CVD_SMOKER_MULTIPLIER

    for threshold, multiplier in CVD_BMI_MULTIPLIERS:
        if bmi > threshold:
            risk *= multiplier
            break

    for condition, multiplier in CVD_CONDITION_MULTIPLIERS:
        if profile.has_condition(condition):
            risk *= multiplier

    if profile.activity_level == ActivityLevel.SEDENTARY:
        risk *= CVD_SEDENTARY_MULTIPLIER

    return clamp(round_half_up(risk, 1), 0, CVD_CEILING)


def compute_cardiovascular_risk(profile: UserProfile, bmi: float) -> CardiovascularRisk:
    return CardiovascularRisk(proxy_pct=compute_cvd_risk_proxy(profile, bmi))


# ---------------------------------------------------------------------------
# Legacy bio-vitality score
# ---------------------------------------------------------------------------

def compute_bio_vitality_score(profile: UserProfile, bmi: float) -> int:
    """Single-number 10..100 health score kept for older response shapes."""
    score = float(VITALITY_START)
    score -= (profile.age - VITALITY_AGE_PIVOT) * VITALITY_AGE_DECAY

    for threshold, penalty in VITALITY_BMI_PENALTIES:
        if bmi > threshold:
            score -= penalty
            break

    if profile.smoker:
        score -= VITALITY_SMOKER_PENALTY

    if profile.activity_level == ActivityLevel.SEDENTARY:
        score -= VITALITY_SEDENTARY_PENALTY
    elif profile.activity_level == ActivityLevel.ACTIVE:
        score += VITALITY_ACTIVE_BONUS

    score -= len(profile.existing_conditions) * VITALITY_CONDITION_PENALTY

    if profile.sleep_hours < VITALITY_SHORT_SLEEP_HOURS:
        score -= VITALITY_SHORT_SLEEP_PENALTY

    return int(clamp(round_half_up(score), VITALITY_FLOOR, VITALITY_CEILING))
