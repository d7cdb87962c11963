"""Life's Essential 8 composite: eight 0-100 components plus a confidence grade.

Component provenance ("basis"):
    measured     a clinical reading was supplied
    self_report  the user answered the question or reported a diagnosis
    proxy        estimated from a lifestyle answer (diet, steps)
    unknown      nothing known; an optimistic population default is used

Blood pressure, lipids and glucose follow the same precedence: a measurement
wins, then a self-reported diagnosis, then the unknown default.
"""

from __future__ import annotations

from typing import Callable

from futurehealth.domains.health.domain_logic.lifestyle_classifiers import (
    compute_diet_score,
    mvpa_proxy_minutes,
)
from futurehealth.domains.health.domain_logic.metrics_models import (
    BASIS_MEASURED,
    BASIS_PROXY,
    BASIS_SELF_REPORT,
    BASIS_UNKNOWN,
    CHOLESTEROL_MMOL_TO_MG_DL,
    GLUCOSE_MMOL_TO_MG_DL,
    LE8_A1C_BANDS,
    LE8_ACTIVITY_BANDS,
    LE8_BMI_BANDS,
    LE8_BP_BANDS,
    LE8_BP_ELEVATED_SCORE,
    LE8_BP_ELEVATED_SYSTOLIC,
    LE8_BP_OPTIMAL_SCORE,
    LE8_FASTING_GLUCOSE_BANDS,
    LE8_HIGH_CONFIDENCE_MIN_MEASURED,
    LE8_LAB_OPTIMAL_SCORE,
    LE8_LDL_BANDS,
    LE8_MEDICATION_CAP,
    LE8_MEDIUM_CONFIDENCE_MIN_KNOWN,
    LE8_NICOTINE_CURRENT,
    LE8_NICOTINE_NEVER,
    LE8_NICOTINE_QUIT_BANDS,
    LE8_NICOTINE_QUIT_UNKNOWN,
    LE8_NICOTINE_RECENT_QUIT,
    LE8_SELF_REPORT_SCORES,
    LE8_SLEEP_BANDS,
    LE8_STALE_AFTER_MONTHS,
    LE8_STALE_PENALTY,
    LE8_TOTAL_CHOL_BANDS,
    LE8_UNKNOWN_DEFAULT,
    DataCompleteness,
    DietScore,
    LE8Component,
    LifeEssential8,
    clamp,
    round_half_up,
)
from futurehealth.domains.health.domain_logic.profile import (
    BloodPressureReading,
    GlucoseReading,
    GlucoseUnit,
    LipidPanel,
    LipidUnit,
    Measured,
    SelfReported,
    Unmeasured,
    UserProfile,
    VitalStatus,
)


def _component(name: str, score: float, basis: str, value_label: str) -> LE8Component:
    return LE8Component(
        name=name,
        score=int(clamp(score, 0, 100)),
        basis=basis,
        value_label=value_label,
    )


def _first_at_or_above(value: float, bands: tuple[tuple[float, int], ...], default: int) -> int:
    for threshold, score in bands:
        if value >= threshold:
            return score
    return default


# ---------------------------------------------------------------------------
# Lifestyle components
# ---------------------------------------------------------------------------

def score_diet(diet: DietScore) -> LE8Component:
    return _component("diet", diet.score, BASIS_PROXY, f"Diet score {diet.score}/100")


def score_physical_activity(daily_steps: int) -> LE8Component:
    minutes = mvpa_proxy_minutes(daily_steps)
    score = _first_at_or_above(minutes, LE8_ACTIVITY_BANDS, 0)
    return _component(
        "physical_activity", score, BASIS_PROXY, f"~{minutes} MVPA min/week (from steps)"
    )


def score_nicotine(profile: UserProfile) -> LE8Component:
    if profile.smoker:
        return _component("nicotine", LE8_NICOTINE_CURRENT, BASIS_SELF_REPORT, "Current smoker")

    quit_years = profile.years_since_quit
    if quit_years is not None:
        score = _first_at_or_above(quit_years, LE8_NICOTINE_QUIT_BANDS, LE8_NICOTINE_RECENT_QUIT)
        return _component(
            "nicotine", score, BASIS_SELF_REPORT, f"Former smoker, quit {quit_years:g} years ago"
        )

    smoked_before = (profile.years_smoked or 0) > 0 or (profile.cigarettes_per_day or 0) > 0
    if smoked_before:
        return _component(
            "nicotine",
            LE8_NICOTINE_QUIT_UNKNOWN,
            BASIS_SELF_REPORT,
            "Former smoker, quit time not recorded",
        )
    return _component("nicotine", LE8_NICOTINE_NEVER, BASIS_SELF_REPORT, "Never smoked")


def sleep_band_score(sleep_hours: float) -> int:
    for low, high, closed_low, closed_high, score in LE8_SLEEP_BANDS:
        above = sleep_hours >= low if closed_low else sleep_hours > low
        below = sleep_hours <= high if closed_high else sleep_hours < high
        if above and below:
            return score
    return 0


def score_sleep(sleep_hours: float) -> LE8Component:
    return _component(
        "sleep", sleep_band_score(sleep_hours), BASIS_SELF_REPORT, f"{sleep_hours:g} h/night"
    )


def score_bmi(bmi: float) -> LE8Component:
    score = 0
    for upper, band_score in LE8_BMI_BANDS:
        if bmi < upper:
            score = band_score
            break
    return _component("bmi", score, BASIS_SELF_REPORT, f"BMI {bmi:g}")


# ---------------------------------------------------------------------------
# Clinical components
# ---------------------------------------------------------------------------

def apply_measurement_modifiers(raw_score: int, on_meds: bool, measured_within_months: float) -> int:
    """Medication cap (only lowers scores above 80) then the staleness penalty."""
    score = raw_score
    if on_meds and score > LE8_MEDICATION_CAP:
        score = LE8_MEDICATION_CAP
    if measured_within_months > LE8_STALE_AFTER_MONTHS:
        score = max(0, score - LE8_STALE_PENALTY)
    return score


def blood_pressure_band(systolic: float, diastolic: float) -> int:
    for sys_floor, dia_floor, score in LE8_BP_BANDS:
        if systolic >= sys_floor or diastolic >= dia_floor:
            return score
    if systolic >= LE8_BP_ELEVATED_SYSTOLIC:
        return LE8_BP_ELEVATED_SCORE
    return LE8_BP_OPTIMAL_SCORE


def cholesterol_to_mg_dl(value: float, unit: LipidUnit) -> float:
    if unit == LipidUnit.MMOL_L:
        return value * CHOLESTEROL_MMOL_TO_MG_DL
    return value


def glucose_to_mg_dl(value: float, unit: GlucoseUnit) -> float:
    if unit == GlucoseUnit.MMOL_L:
        return value * GLUCOSE_MMOL_TO_MG_DL
    return value


def _lab_label(name: str, value: float, unit_value: str, mg_dl: float) -> str:
    if unit_value == "mg/dL":
        return f"{name} {value:g} mg/dL"
    return f"{name} {value:g} {unit_value} ({round_half_up(mg_dl):g} mg/dL)"


def _bp_band(reading: BloodPressureReading) -> tuple[int, str]:
    label = f"{reading.systolic:g}/{reading.diastolic:g} mmHg"
    return blood_pressure_band(reading.systolic, reading.diastolic), label


def lipid_band(panel: LipidPanel) -> tuple[int, str]:
    if panel.ldl is not None:
        mg_dl = cholesterol_to_mg_dl(panel.ldl, panel.unit)
        score = _first_at_or_above(mg_dl, LE8_LDL_BANDS, LE8_LAB_OPTIMAL_SCORE)
        return score, _lab_label("LDL", panel.ldl, panel.unit.value, mg_dl)
    assert panel.total_chol is not None  # guaranteed by the boundary parser
    mg_dl = cholesterol_to_mg_dl(panel.total_chol, panel.unit)
    score = _first_at_or_above(mg_dl, LE8_TOTAL_CHOL_BANDS, LE8_LAB_OPTIMAL_SCORE)
    return score, _lab_label("Total cholesterol", panel.total_chol, panel.unit.value, mg_dl)


def glucose_band(reading: GlucoseReading) -> tuple[int, str]:
    if reading.a1c is not None:
        score = _first_at_or_above(reading.a1c, LE8_A1C_BANDS, LE8_LAB_OPTIMAL_SCORE)
        return score, f"A1c {reading.a1c:g}%"
    assert reading.fasting is not None  # guaranteed by the boundary parser
    mg_dl = glucose_to_mg_dl(reading.fasting, reading.unit)
    score = _first_at_or_above(mg_dl, LE8_FASTING_GLUCOSE_BANDS, LE8_LAB_OPTIMAL_SCORE)
    return score, _lab_label("Fasting glucose", reading.fasting, reading.unit.value, mg_dl)


def _score_vital(
    name: str,
    status: VitalStatus,
    band: Callable[..., tuple[int, str]],
) -> LE8Component:
    if isinstance(status, Measured):
        reading = status.reading
        raw, label = band(reading)
        score = apply_measurement_modifiers(raw, reading.on_meds, reading.measured_within_months)
        return _component(name, score, BASIS_MEASURED, label)
    if isinstance(status, SelfReported):
        return _component(
            name,
            LE8_SELF_REPORT_SCORES[name],
            BASIS_SELF_REPORT,
            f"{status.condition.value} (self-reported)",
        )
    if isinstance(status, Unmeasured):
        return _component(name, LE8_UNKNOWN_DEFAULT, BASIS_UNKNOWN, "Not measured")
    raise TypeError(f"Unsupported vital status for {name}: {status!r}")


def score_blood_pressure(profile: UserProfile) -> LE8Component:
    return _score_vital("blood_pressure", profile.blood_pressure_status, _bp_band)


def score_blood_lipids(profile: UserProfile) -> LE8Component:
    return _score_vital("blood_lipids", profile.lipid_status, lipid_band)


def score_blood_glucose(profile: UserProfile) -> LE8Component:
    return _score_vital("blood_glucose", profile.glucose_status, glucose_band)


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------

def grade_confidence(components: tuple[LE8Component, ...]) -> tuple[str, DataCompleteness]:
    measured = sum(1 for c in components if c.basis == BASIS_MEASURED)
    known = sum(1 for c in components if c.basis in (BASIS_MEASURED, BASIS_SELF_REPORT))

    if measured >= LE8_HIGH_CONFIDENCE_MIN_MEASURED:
        confidence = "high"
    elif known >= LE8_MEDIUM_CONFIDENCE_MIN_KNOWN:
        confidence = "medium"
    else:
        confidence = "low"

    completeness = DataCompleteness(
        measured_or_self_report_count=known,
        proxy_or_unknown_count=len(components) - known,
        total=len(components),
    )
    return confidence, completeness


def composite_total(components: tuple[LE8Component, ...]) -> int:
    """Unweighted mean of the component scores, rounded half-up."""
    return int(round_half_up(sum(c.score for c in components) / len(components)))


def compute_life_essential8(
    profile: UserProfile, bmi: float, diet: DietScore | None = None
) -> LifeEssential8:
    if diet is None:
        diet = compute_diet_score(profile)

    components = (
        score_diet(diet),
        score_physical_activity(profile.daily_steps),
        score_nicotine(profile),
        score_sleep(profile.sleep_hours),
        score_bmi(bmi),
        score_blood_lipids(profile),
        score_blood_glucose(profile),
        score_blood_pressure(profile),
    )

    confidence, completeness = grade_confidence(components)
    return LifeEssential8(
        components=components,
        total=int(clamp(composite_total(components), 0, 100)),
        confidence=confidence,
        completeness=completeness,
    )
