"""User profile model and the validating boundary parser.

The metrics engine assumes a fully-populated, well-typed ``UserProfile``.
All validation happens here, in ``profile_from_dict``, before any score is
computed.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Generic, TypeVar, Union


class ProfileValidationError(ValueError):
    """Raised when an inbound profile payload is missing or malformed."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"


class DietQuality(str, Enum):
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"


class FastFoodFrequency(str, Enum):
    NEVER = "never"
    RARELY = "rarely"
    WEEKLY = "weekly"
    FREQUENT = "frequent"


class LipidUnit(str, Enum):
    MG_DL = "mg/dL"
    MMOL_L = "mmol/L"


class GlucoseUnit(str, Enum):
    MG_DL = "mg/dL"
    MMOL_L = "mmol/L"


class Condition(str, Enum):
    """Condition labels recognised by the scoring logic (exact match)."""

    HYPERTENSION = "Hypertension"
    TYPE_2_DIABETES = "Type 2 Diabetes"
    HIGH_CHOLESTEROL = "High Cholesterol"


# Long-form option labels used by the web wizard.
_WIZARD_LABELS: dict[type[Enum], dict[str, Enum]] = {
    ActivityLevel: {
        "sedentary (office job, little exercise)": ActivityLevel.SEDENTARY,
        "light (1-2 days/week)": ActivityLevel.LIGHT,
        "moderate (3-5 days/week)": ActivityLevel.MODERATE,
        "active (6-7 days/week)": ActivityLevel.ACTIVE,
    },
    DietQuality: {
        "heavy processed foods/sugar": DietQuality.POOR,
        "balanced but occasional junk": DietQuality.AVERAGE,
        "whole foods, fruits, vegetables": DietQuality.GOOD,
    },
    FastFoodFrequency: {
        "1-2x per month": FastFoodFrequency.RARELY,
        "1-2x per week": FastFoodFrequency.WEEKLY,
        "3+ times per week": FastFoodFrequency.FREQUENT,
    },
    LipidUnit: {"mg/dl": LipidUnit.MG_DL, "mmol/l": LipidUnit.MMOL_L},
    GlucoseUnit: {"mg/dl": GlucoseUnit.MG_DL, "mmol/l": GlucoseUnit.MMOL_L},
}


# ---------------------------------------------------------------------------
# Clinical measurements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BloodPressureReading:
    systolic: float
    diastolic: float
    on_meds: bool = False
    measured_within_months: float = 0


@dataclass(frozen=True)
class LipidPanel:
    total_chol: float | None = None
    ldl: float | None = None
    unit: LipidUnit = LipidUnit.MG_DL
    on_meds: bool = False
    measured_within_months: float = 0


@dataclass(frozen=True)
class GlucoseReading:
    a1c: float | None = None          # percent, never unit-converted
    fasting: float | None = None
    unit: GlucoseUnit = GlucoseUnit.MG_DL
    on_meds: bool = False
    measured_within_months: float = 0


R = TypeVar("R")


@dataclass(frozen=True)
class Measured(Generic[R]):
    """A real measurement is available for this vital sign."""

    reading: R


@dataclass(frozen=True)
class SelfReported:
    """No measurement, but the related condition is self-reported."""

    condition: Condition


@dataclass(frozen=True)
class Unmeasured:
    """Neither a measurement nor a related diagnosis is known."""


VitalStatus = Union[Measured, SelfReported, Unmeasured]


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UserProfile:
    """Demographic and lifestyle snapshot scored by the metrics engine."""

    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    waist_cm: float
    hip_cm: float
    daily_steps: int
    sitting_hours: float
    sleep_hours: float
    activity_level: ActivityLevel
    smoker: bool
    alcohol_drinks_per_week: float
    diet_quality: DietQuality
    fast_food_frequency: FastFoodFrequency
    existing_conditions: tuple[str, ...] = ()
    cigarettes_per_day: float | None = None
    years_smoked: float | None = None
    years_since_quit: float | None = None
    max_drinks_per_occasion: float | None = None
    blood_pressure: BloodPressureReading | None = None
    lipids: LipidPanel | None = None
    glucose: GlucoseReading | None = None

    def has_condition(self, condition: Condition) -> bool:
        return condition.value in self.existing_conditions

    @property
    def blood_pressure_status(self) -> VitalStatus:
        return resolve_vital_status(self.blood_pressure, self, Condition.HYPERTENSION)

    @property
    def lipid_status(self) -> VitalStatus:
        return resolve_vital_status(self.lipids, self, Condition.HIGH_CHOLESTEROL)

    @property
    def glucose_status(self) -> VitalStatus:
        return resolve_vital_status(self.glucose, self, Condition.TYPE_2_DIABETES)


def resolve_vital_status(
    reading: Any, profile: UserProfile, condition: Condition
) -> VitalStatus:
    """Resolve the three-tier precedence: measurement, then diagnosis, then unknown."""
    if reading is not None:
        return Measured(reading)
    if profile.has_condition(condition):
        return SelfReported(condition)
    return Unmeasured()


# ---------------------------------------------------------------------------
# Boundary parsing
# ---------------------------------------------------------------------------

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_MISSING = object()


def _snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _lookup(data: dict[str, Any], key: str) -> Any:
    """Find ``key`` in camelCase or snake_case form."""
    if key in data:
        return data[key]
    snake = _snake(key)
    if snake in data:
        return data[snake]
    return _MISSING


def _number(
    data: dict[str, Any],
    key: str,
    *,
    required: bool = True,
    minimum: float | None = 0,
    maximum: float | None = None,
    exclusive_minimum: bool = False,
    integer: bool = False,
) -> Any:
    raw = _lookup(data, key)
    if raw is _MISSING or raw is None:
        if required:
            raise ProfileValidationError(f"{key} is required")
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ProfileValidationError(f"{key} must be a number, got {raw!r}")
    if isinstance(raw, float) and math.isnan(raw):
        raise ProfileValidationError(f"{key} must not be NaN")
    if integer:
        if isinstance(raw, float) and not raw.is_integer():
            raise ProfileValidationError(f"{key} must be a whole number, got {raw!r}")
        raw = int(raw)
    if minimum is not None:
        if exclusive_minimum and raw <= minimum:
            raise ProfileValidationError(f"{key} must be greater than {minimum:g}")
        if not exclusive_minimum and raw < minimum:
            raise ProfileValidationError(f"{key} must be at least {minimum:g}")
    if maximum is not None and raw > maximum:
        raise ProfileValidationError(f"{key} must be at most {maximum:g}")
    return raw


def _flag(data: dict[str, Any], key: str, default: bool | None = None) -> bool:
    raw = _lookup(data, key)
    if raw is _MISSING or raw is None:
        if default is None:
            raise ProfileValidationError(f"{key} is required")
        return default
    if not isinstance(raw, bool):
        raise ProfileValidationError(f"{key} must be true or false, got {raw!r}")
    return raw


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], raw: Any, key: str) -> E:
    """Parse an enum from its value, its member name or a wizard label."""
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        raise ProfileValidationError(f"{key} must be a string, got {raw!r}")
    text = raw.strip()
    for member in enum_cls:
        if text == member.value or text.lower() == str(member.value).lower():
            return member
        if text.upper().replace(" ", "_") == member.name:
            return member
    alias = _WIZARD_LABELS.get(enum_cls, {}).get(text.lower())
    if alias is not None:
        return alias  # type: ignore[return-value]
    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise ProfileValidationError(f"{key} must be one of: {allowed} (got {raw!r})")


def _enum(data: dict[str, Any], key: str, enum_cls: type[E], default: E | None = None) -> E:
    raw = _lookup(data, key)
    if raw is _MISSING or raw is None:
        if default is None:
            raise ProfileValidationError(f"{key} is required")
        return default
    return parse_enum(enum_cls, raw, key)


def _section(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    raw = _lookup(data, key)
    if raw is _MISSING or raw is None:
        return None
    if not isinstance(raw, dict):
        raise ProfileValidationError(f"{key} must be an object, got {raw!r}")
    return raw


def _parse_blood_pressure(raw: dict[str, Any]) -> BloodPressureReading:
    return BloodPressureReading(
        systolic=_number(raw, "systolic", exclusive_minimum=True),
        diastolic=_number(raw, "diastolic", exclusive_minimum=True),
        on_meds=_flag(raw, "onMeds", default=False),
        measured_within_months=_number(raw, "measuredWithinMonths", required=False) or 0,
    )


def _parse_lipids(raw: dict[str, Any]) -> LipidPanel:
    panel = LipidPanel(
        total_chol=_number(raw, "totalChol", required=False, exclusive_minimum=True),
        ldl=_number(raw, "ldl", required=False, exclusive_minimum=True),
        unit=_enum(raw, "unit", LipidUnit, default=LipidUnit.MG_DL),
        on_meds=_flag(raw, "onMeds", default=False),
        measured_within_months=_number(raw, "measuredWithinMonths", required=False) or 0,
    )
    if panel.ldl is None and panel.total_chol is None:
        raise ProfileValidationError("lipids requires ldl or totalChol")
    return panel


def _parse_glucose(raw: dict[str, Any]) -> GlucoseReading:
    reading = GlucoseReading(
        a1c=_number(raw, "a1c", required=False, exclusive_minimum=True),
        fasting=_number(raw, "fasting", required=False, exclusive_minimum=True),
        unit=_enum(raw, "unit", GlucoseUnit, default=GlucoseUnit.MG_DL),
        on_meds=_flag(raw, "onMeds", default=False),
        measured_within_months=_number(raw, "measuredWithinMonths", required=False) or 0,
    )
    if reading.a1c is None and reading.fasting is None:
        raise ProfileValidationError("glucose requires a1c or fasting")
    return reading


def _conditions(data: dict[str, Any]) -> tuple[str, ...]:
    raw = _lookup(data, "existingConditions")
    if raw is _MISSING or raw is None:
        return ()
    if isinstance(raw, str) or not isinstance(raw, (list, tuple, set, frozenset)):
        raise ProfileValidationError("existingConditions must be a list of strings")
    labels: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise ProfileValidationError(f"existingConditions entries must be strings, got {item!r}")
        if item not in labels:
            labels.append(item)
    return tuple(labels)


def profile_from_dict(data: dict[str, Any]) -> UserProfile:
    """Validate an inbound payload and build a ``UserProfile``.

    Keys may be camelCase (web wizard) or snake_case. Raises
    ``ProfileValidationError`` naming the first offending field.
    """
    if not isinstance(data, dict):
        raise ProfileValidationError("profile must be an object")

    bp = _section(data, "bp")
    if bp is None:
        bp = _section(data, "bloodPressure")
    lipids = _section(data, "lipids")
    glucose = _section(data, "glucose")

    return UserProfile(
        age=_number(data, "age", integer=True),
        gender=_enum(data, "gender", Gender),
        height_cm=_number(data, "heightCm", exclusive_minimum=True),
        weight_kg=_number(data, "weightKg", exclusive_minimum=True),
        waist_cm=_number(data, "waistCm", exclusive_minimum=True),
        hip_cm=_number(data, "hipCm", exclusive_minimum=True),
        daily_steps=_number(data, "dailySteps", integer=True),
        sitting_hours=_number(data, "sittingHours", maximum=24),
        sleep_hours=_number(data, "sleepHours", maximum=24),
        activity_level=_enum(data, "activityLevel", ActivityLevel),
        smoker=_flag(data, "smoker"),
        alcohol_drinks_per_week=_number(data, "alcoholDrinksPerWeek"),
        diet_quality=_enum(data, "dietQuality", DietQuality),
        fast_food_frequency=_enum(data, "fastFoodFrequency", FastFoodFrequency),
        existing_conditions=_conditions(data),
        cigarettes_per_day=_number(data, "cigarettesPerDay", required=False),
        years_smoked=_number(data, "yearsSmoked", required=False),
        years_since_quit=_number(data, "yearsSinceQuit", required=False),
        max_drinks_per_occasion=_number(data, "maxDrinksPerOccasion", required=False),
        blood_pressure=_parse_blood_pressure(bp) if bp is not None else None,
        lipids=_parse_lipids(lipids) if lipids is not None else None,
        glucose=_parse_glucose(glucose) if glucose is not None else None,
    )


def _record_to_dict(record: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, Enum):
            value = value.value
        out[_camel(f.name)] = value
    return out


def profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    """Serialize a profile back to the camelCase wire shape."""
    out: dict[str, Any] = {}
    for f in fields(profile):
        value = getattr(profile, f.name)
        if value is None:
            continue
        if f.name == "blood_pressure":
            out["bp"] = _record_to_dict(value)
            continue
        if isinstance(value, (LipidPanel, GlucoseReading)):
            value = _record_to_dict(value)
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        out[_camel(f.name)] = value
    return out


PROFILE_FIELD_NAMES = frozenset(f.name for f in fields(UserProfile))


def normalize_field_name(key: str) -> str:
    """Map a camelCase or snake_case key to its ``UserProfile`` attribute name."""
    name = _snake(key)
    if name == "bp":
        name = "blood_pressure"
    if name not in PROFILE_FIELD_NAMES:
        raise ProfileValidationError(f"Unknown profile field: {key!r}")
    return name
