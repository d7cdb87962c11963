"""What-if scenarios: re-score a modified copy of a profile.

A scenario is a set of partial profile modifications. Modifications are
merged in order (later wins), re-validated through the boundary parser and
scored with the same engine as the baseline, so comparisons are exact.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from futurehealth.domains.health.domain_logic.metrics_engine import (
    DerivedMetrics,
    compute_derived_metrics,
)
from futurehealth.domains.health.domain_logic.profile import (
    ActivityLevel,
    DietQuality,
    FastFoodFrequency,
    UserProfile,
    normalize_field_name,
    profile_from_dict,
    profile_to_dict,
)

# Single-habit toggles offered on the dashboard.
LIFESTYLE_TOGGLES: dict[str, dict[str, Any]] = {
    "quit_smoking": {"smoker": False, "cigarettes_per_day": 0},
    "daily_exercise": {"activity_level": ActivityLevel.ACTIVE.value},
    "clean_diet": {
        "fast_food_frequency": FastFoodFrequency.NEVER.value,
        "diet_quality": DietQuality.GOOD.value,
    },
}

_FAST_FOOD_ORDER = [
    FastFoodFrequency.NEVER,
    FastFoodFrequency.RARELY,
    FastFoodFrequency.WEEKLY,
    FastFoodFrequency.FREQUENT,
]


def _one_step_less_fast_food(current: FastFoodFrequency) -> str:
    idx = _FAST_FOOD_ORDER.index(current)
    return _FAST_FOOD_ORDER[max(0, idx - 1)].value


def _status_quo(profile: UserProfile) -> dict[str, Any]:
    return {}


def _small_changes(profile: UserProfile) -> dict[str, Any]:
    return {
        "daily_steps": profile.daily_steps + 2000,
        "sitting_hours": max(0.0, profile.sitting_hours - 1),
        "fast_food_frequency": _one_step_less_fast_food(profile.fast_food_frequency),
    }


def _big_changes(profile: UserProfile) -> dict[str, Any]:
    mods: dict[str, Any] = {
        "daily_steps": max(profile.daily_steps, 10000),
        "sitting_hours": min(profile.sitting_hours, 6),
        "activity_level": ActivityLevel.ACTIVE.value,
        "alcohol_drinks_per_week": min(profile.alcohol_drinks_per_week, 3),
    }
    mods.update(LIFESTYLE_TOGGLES["clean_diet"])
    if profile.smoker:
        mods.update(LIFESTYLE_TOGGLES["quit_smoking"])
    return mods


SCENARIO_PRESETS: dict[str, tuple[str, Callable[[UserProfile], dict[str, Any]]]] = {
    "status_quo": ("Status Quo", _status_quo),
    "small_changes": ("Small Changes", _small_changes),
    "big_changes": ("Big Changes", _big_changes),
}


@dataclass(frozen=True)
class ScenarioComparison:
    scenario_id: str
    label: str
    profile: UserProfile
    baseline: DerivedMetrics
    projected: DerivedMetrics
    modified_inputs: list[dict[str, Any]] = field(default_factory=list)

    def deltas(self) -> dict[str, float]:
        b, p = self.baseline, self.projected
        return {
            "healthScore": p.health_score_current - b.health_score_current,
            "bioVitalityScore": p.bio_vitality_score - b.bio_vitality_score,
            "diabetesProbabilityPct": p.diabetes.probability_pct - b.diabetes.probability_pct,
            "cvdRiskProxyPct": round(p.cardiovascular.proxy_pct - b.cardiovascular.proxy_pct, 1),
            "dietScore": p.diet.score - b.diet.score,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.scenario_id,
            "label": self.label,
            "modifiedInputs": self.modified_inputs,
            "baseline": self.baseline.to_dict(),
            "projected": self.projected.to_dict(),
            "deltas": self.deltas(),
        }


def apply_modifications(profile: UserProfile, *modifications: dict[str, Any]) -> UserProfile:
    """Return a new, re-validated profile with the modifications merged in.

    Raises ProfileValidationError for unknown fields or invalid values.
    """
    merged = {normalize_field_name(k): v for k, v in profile_to_dict(profile).items()}
    for mods in modifications:
        for key, value in (mods or {}).items():
            merged[normalize_field_name(key)] = value
    return profile_from_dict(merged)


def scenario_modifications(profile: UserProfile, scenario_id: str) -> dict[str, Any]:
    if scenario_id in SCENARIO_PRESETS:
        return SCENARIO_PRESETS[scenario_id][1](profile)
    if scenario_id in LIFESTYLE_TOGGLES:
        return dict(LIFESTYLE_TOGGLES[scenario_id])
    known = ", ".join([*SCENARIO_PRESETS, *LIFESTYLE_TOGGLES])
    raise ValueError(f"Unknown scenario {scenario_id!r}; expected one of: {known}")


def _diff_inputs(before: UserProfile, after: UserProfile) -> list[dict[str, Any]]:
    old = profile_to_dict(before)
    new = profile_to_dict(after)
    changes = []
    for key in sorted(set(old) | set(new)):
        if old.get(key) != new.get(key):
            changes.append({"field": key, "from": old.get(key), "to": new.get(key)})
    return changes


def compare_scenario(
    profile: UserProfile,
    modifications: dict[str, Any] | None = None,
    scenario_id: str | None = None,
) -> ScenarioComparison:
    """Score a profile and its modified copy side by side.

    ``scenario_id`` selects a preset or toggle; explicit ``modifications``
    are applied on top of it.
    """
    preset: dict[str, Any] = {}
    if scenario_id:
        preset = scenario_modifications(profile, scenario_id)
        label = SCENARIO_PRESETS.get(scenario_id, (scenario_id.replace("_", " ").title(),))[0]
    else:
        label = "Custom"
        scenario_id = "custom"

    modified = apply_modifications(profile, preset, modifications or {})
    return ScenarioComparison(
        scenario_id=scenario_id,
        label=label,
        profile=modified,
        baseline=compute_derived_metrics(profile),
        projected=compute_derived_metrics(modified),
        modified_inputs=_diff_inputs(profile, modified),
    )
