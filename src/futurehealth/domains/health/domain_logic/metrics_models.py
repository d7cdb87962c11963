"""Threshold tables and result types for the deterministic metrics engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from futurehealth.domains.health.domain_logic.profile import (
    ActivityLevel,
    Condition,
    DietQuality,
    FastFoodFrequency,
    Gender,
)


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero on the exact binary value.

    Matches the browser's ``toFixed``/``Math.round`` for the non-negative
    values the engine produces; ``round()`` would apply banker's rounding.
    """
    if math.isnan(value) or math.isinf(value):
        return value
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def safe_ratio(numerator: float, denominator: float) -> float:
    """IEEE-style division: a zero divisor yields inf/nan instead of raising."""
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


# ---------------------------------------------------------------------------
# Diabetes risk (FINDRISC-style)
# ---------------------------------------------------------------------------

FINDRISC_MAX_SCORE = 26

# (low inclusive, high inclusive, points); values above the last high use *_ABOVE
FINDRISC_AGE_BANDS = ((45, 54, 2), (55, 64, 3))
FINDRISC_AGE_ABOVE = (64, 4)
FINDRISC_BMI_BANDS = ((25, 30, 1),)
FINDRISC_BMI_ABOVE = (30, 3)
FINDRISC_WAIST_BANDS = {
    Gender.MALE: (((94, 102, 3),), (102, 4)),
    # female thresholds also apply to "other"
    None: (((80, 88, 3),), (88, 4)),
}
FINDRISC_LOW_ACTIVITY_LEVELS = frozenset({ActivityLevel.SEDENTARY, ActivityLevel.LIGHT})
FINDRISC_LOW_ACTIVITY_POINTS = 2
FINDRISC_POOR_DIET_POINTS = 1
FINDRISC_HYPERTENSION_POINTS = 2

# (highest score inclusive, probability %); evaluated lowest first
DIABETES_PROBABILITY_BANDS = ((6, 1), (11, 4), (14, 17), (20, 33))
DIABETES_PROBABILITY_TOP = 50
DIABETES_PROBABILITY_CEILING = 99

DIABETES_RISK_CATEGORIES = (
    (6, "low"),
    (11, "slightly_elevated"),
    (14, "moderate"),
    (20, "high"),
)
DIABETES_RISK_TOP_CATEGORY = "very_high"


# ---------------------------------------------------------------------------
# Cardiovascular risk proxy
# ---------------------------------------------------------------------------

CVD_BASE = 1.0
CVD_AGE_PIVOT = 40
CVD_AGE_SLOPE = 0.2
CVD_MALE_MULTIPLIER = 1.3
CVD_SMOKER_MULTIPLIER = 2.0
# (BMI strictly above, multiplier); first match wins
CVD_BMI_MULTIPLIERS = ((30, 1.5), (25, 1.2))
CVD_CONDITION_MULTIPLIERS = (
    (Condition.HYPERTENSION, 1.5),
    (Condition.TYPE_2_DIABETES, 2.0),
    (Condition.HIGH_CHOLESTEROL, 1.3),
)
CVD_SEDENTARY_MULTIPLIER = 1.2
CVD_CEILING = 99
CVD_BASIS_LABEL = "Simplified risk-factor proxy; not a validated clinical score"


# ---------------------------------------------------------------------------
# Legacy bio-vitality score
# ---------------------------------------------------------------------------

VITALITY_START = 100
VITALITY_AGE_PIVOT = 20
VITALITY_AGE_DECAY = 0.3
VITALITY_BMI_PENALTIES = ((30, 15), (25, 5))
VITALITY_SMOKER_PENALTY = 20
VITALITY_SEDENTARY_PENALTY = 10
VITALITY_ACTIVE_BONUS = 5
VITALITY_CONDITION_PENALTY = 10
VITALITY_SHORT_SLEEP_HOURS = 6
VITALITY_SHORT_SLEEP_PENALTY = 5
VITALITY_FLOOR = 10
VITALITY_CEILING = 100


# ---------------------------------------------------------------------------
# Behavioural classifiers
# ---------------------------------------------------------------------------

# (steps strictly below, category)
STEPS_CATEGORIES = (
    (5000, "sedentary"),
    (7500, "low_active"),
    (10000, "somewhat_active"),
    (12500, "active"),
)
STEPS_TOP_CATEGORY = "highly_active"

MVPA_MINUTES_PER_100_STEPS = 7
GUIDELINE_MIN_STEPS = 8000
GUIDELINE_MIN_MINUTES = 150
ADDITIONAL_BENEFIT_MIN_MINUTES = 300
ADDITIONAL_BENEFIT_MIN_STEPS = 11000

# (sitting hours strictly below, level)
SEDENTARY_BANDS = ((6, "low"), (8, "moderate"), (10, "high"))
SEDENTARY_TOP_LEVEL = "very_high"

# weekly drinks at or above which drinking is "heavy"; None = any non-male
HEAVY_DRINKING_THRESHOLDS = {Gender.MALE: 15, None: 8}
BINGE_THRESHOLDS = {Gender.MALE: 5, None: 4}

CIGARETTES_PER_PACK = 20
HIGH_RISK_PACK_YEARS = 20
SCREENING_MIN_AGE = 50
SCREENING_MAX_AGE = 80
SCREENING_MIN_PACK_YEARS = 20
SCREENING_MAX_YEARS_SINCE_QUIT = 15

DIET_QUALITY_ORDINAL = {
    DietQuality.POOR: 1,
    DietQuality.AVERAGE: 3,
    DietQuality.GOOD: 5,
}
FAST_FOOD_ORDINAL = {
    FastFoodFrequency.NEVER: 1,
    FastFoodFrequency.RARELY: 2,
    FastFoodFrequency.WEEKLY: 3,
    FastFoodFrequency.FREQUENT: 5,
}
DIET_BASE_MULTIPLIER = 20
# indexed by fast-food ordinal 0..5
FAST_FOOD_PENALTY = (0, 0, 5, 15, 25, 35)
# (score at or above, level)
DIET_LEVEL_BANDS = ((80, "low"), (60, "moderate"), (40, "high"))
DIET_BOTTOM_LEVEL = "very_high"


# ---------------------------------------------------------------------------
# Life's Essential 8
# ---------------------------------------------------------------------------

BASIS_MEASURED = "measured"
BASIS_SELF_REPORT = "self_report"
BASIS_UNKNOWN = "unknown"
BASIS_PROXY = "proxy"

LE8_COMPONENT_NAMES = (
    "diet",
    "physical_activity",
    "nicotine",
    "sleep",
    "bmi",
    "blood_lipids",
    "blood_glucose",
    "blood_pressure",
)

# (MVPA minutes at or above, score)
LE8_ACTIVITY_BANDS = ((150, 100), (90, 80), (60, 60), (30, 40), (1, 20))

LE8_NICOTINE_CURRENT = 0
LE8_NICOTINE_NEVER = 100
# (years since quit at or above, score)
LE8_NICOTINE_QUIT_BANDS = ((5, 100), (1, 75))
LE8_NICOTINE_RECENT_QUIT = 50
LE8_NICOTINE_QUIT_UNKNOWN = 50

# (low, high, closed-low, closed-high, score)
LE8_SLEEP_BANDS = (
    (7, 9, True, True, 100),
    (6, 7, True, False, 70),
    (9, 10, False, False, 70),
    (5, 6, True, False, 40),
    (10, 11, True, False, 40),
)

# (BMI strictly below, score)
LE8_BMI_BANDS = ((25, 100), (30, 70), (35, 40), (40, 20))

# (systolic at or above, diastolic at or above, score); either reading qualifies
LE8_BP_BANDS = ((140, 90, 20), (130, 80, 50))
LE8_BP_ELEVATED_SYSTOLIC = 120
LE8_BP_ELEVATED_SCORE = 80
LE8_BP_OPTIMAL_SCORE = 100

CHOLESTEROL_MMOL_TO_MG_DL = 38.67
GLUCOSE_MMOL_TO_MG_DL = 18

# (mg/dL at or above, score)
LE8_LDL_BANDS = ((190, 10), (160, 30), (130, 50), (100, 80))
LE8_TOTAL_CHOL_BANDS = ((240, 20), (200, 60))
LE8_A1C_BANDS = ((6.5, 20), (5.7, 60))
LE8_FASTING_GLUCOSE_BANDS = ((126, 20), (100, 60))
LE8_LAB_OPTIMAL_SCORE = 100

LE8_MEDICATION_CAP = 80
LE8_STALE_AFTER_MONTHS = 12
LE8_STALE_PENALTY = 10

LE8_SELF_REPORT_SCORES = {
    "blood_pressure": 30,
    "blood_lipids": 30,
    "blood_glucose": 10,
}
LE8_UNKNOWN_DEFAULT = 80

LE8_HIGH_CONFIDENCE_MIN_MEASURED = 2
LE8_MEDIUM_CONFIDENCE_MIN_KNOWN = 6


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiabetesRisk:
    score: int
    probability_pct: int
    category: str
    max_score: int = FINDRISC_MAX_SCORE

    def to_dict(self) -> dict[str, Any]:
        return {
            "findriscScore": self.score,
            "findriscMax": self.max_score,
            "probabilityPct": self.probability_pct,
            "category": self.category,
        }


@dataclass(frozen=True)
class CardiovascularRisk:
    proxy_pct: float
    basis: str = CVD_BASIS_LABEL

    def to_dict(self) -> dict[str, Any]:
        return {"riskProxyPct": self.proxy_pct, "basis": self.basis}


@dataclass(frozen=True)
class StepsCategory:
    daily_steps: int
    category: str

    def to_dict(self) -> dict[str, Any]:
        return {"dailySteps": self.daily_steps, "category": self.category}


@dataclass(frozen=True)
class ActivityGuideline:
    mvpa_proxy_minutes: int
    meets_guideline: bool
    additional_benefits: bool
    risk_level: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "mvpaProxyMinutes": self.mvpa_proxy_minutes,
            "meetsGuideline": self.meets_guideline,
            "additionalBenefits": self.additional_benefits,
            "riskLevel": self.risk_level,
        }


@dataclass(frozen=True)
class SedentaryRisk:
    sitting_hours: float
    risk_level: str

    def to_dict(self) -> dict[str, Any]:
        return {"sittingHours": self.sitting_hours, "riskLevel": self.risk_level}


@dataclass(frozen=True)
class AlcoholRisk:
    drinks_per_week: float
    heavy_threshold: int
    heavy_drinking: bool
    binge_threshold: int
    binge_flag: bool
    risk_level: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "drinksPerWeek": self.drinks_per_week,
            "heavyThreshold": self.heavy_threshold,
            "heavyDrinking": self.heavy_drinking,
            "bingeThreshold": self.binge_threshold,
            "bingeFlag": self.binge_flag,
            "riskLevel": self.risk_level,
        }


@dataclass(frozen=True)
class SmokingRisk:
    pack_years: float
    risk_level: str
    screening_eligible: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "packYears": self.pack_years,
            "riskLevel": self.risk_level,
            "lungScreeningEligible": self.screening_eligible,
        }


@dataclass(frozen=True)
class DietScore:
    score: int
    level: str
    quality_ordinal: int
    fast_food_ordinal: int
    penalty: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "qualityOrdinal": self.quality_ordinal,
            "fastFoodOrdinal": self.fast_food_ordinal,
            "penalty": self.penalty,
        }


@dataclass(frozen=True)
class LE8Component:
    name: str
    score: int
    basis: str
    value_label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "basis": self.basis,
            "valueLabel": self.value_label,
        }


@dataclass(frozen=True)
class DataCompleteness:
    measured_or_self_report_count: int
    proxy_or_unknown_count: int
    total: int = len(LE8_COMPONENT_NAMES)

    def to_dict(self) -> dict[str, Any]:
        return {
            "measuredOrSelfReportCount": self.measured_or_self_report_count,
            "proxyOrUnknownCount": self.proxy_or_unknown_count,
            "total": self.total,
        }


@dataclass(frozen=True)
class LifeEssential8:
    components: tuple[LE8Component, ...]
    total: int
    confidence: str
    completeness: DataCompleteness

    def component(self, name: str) -> LE8Component:
        for comp in self.components:
            if comp.name == name:
                return comp
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "confidence": self.confidence,
            "dataCompleteness": self.completeness.to_dict(),
            "components": {c.name: c.to_dict() for c in self.components},
        }
