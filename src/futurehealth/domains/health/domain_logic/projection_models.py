"""Structured projection returned by the narrative service.

The model writes the prose (risk cards, trajectories, scenarios, chart specs)
but never the numbers the engine owns: after parsing, the current score and
the echoed ``additionalMetrics``/``debugCalculations`` payloads are replaced
with the engine's own values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from futurehealth.core.llm.response import extract_json_object
from futurehealth.domains.health.domain_logic.metrics_engine import DerivedMetrics
from futurehealth.domains.health.domain_logic.metrics_models import clamp

REQUIRED_RESPONSE_KEYS = ("riskCards", "suggestedAction", "healthScoreFuture", "trajectory")

CHART_TYPES = frozenset({"bullet_target", "stacked_contribution_bar", "timeline_milestones"})

FALLBACK_CARD_TITLE = "CONNECTION ERROR"
FALLBACK_ACTION = "Retry Simulation"


class ProjectionParseError(ValueError):
    """The narrative reply is not one JSON object of the expected shape."""


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _float(data: dict[str, Any], key: str, default: float = 0.0) -> float:
    value = data.get(key, default)
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ProjectionParseError(f"Field {key!r} must be numeric, got {value!r}") from None


def _str(data: dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    return default if value is None else str(value)


def _str_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ProjectionParseError(f"Field {key!r} must be a list")
    return [str(v) for v in value]


def _dicts(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ProjectionParseError(f"Field {key!r} must be a list of objects")
    return value


def _number_out(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


# ---------------------------------------------------------------------------
# Parts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceLink:
    title: str
    url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceLink:
        return cls(title=_str(data, "title"), url=_str(data, "url"))

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "url": self.url}


@dataclass(frozen=True)
class RiskCard:
    title: str
    probability: float
    probability_label: str
    summary: str
    id: str | None = None
    organ: str | None = None
    risk_level: str | None = None
    facts: list[str] = field(default_factory=list)
    recommended_actions: list[str] = field(default_factory=list)
    sources: list[SourceLink] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RiskCard:
        return cls(
            id=data.get("id"),
            title=_str(data, "title"),
            organ=data.get("organ"),
            risk_level=data.get("riskLevel"),
            probability=clamp(_float(data, "probability"), 0, 100),
            probability_label=_str(data, "probabilityLabel"),
            summary=_str(data, "summary"),
            facts=_str_list(data, "facts"),
            recommended_actions=_str_list(data, "recommendedActions"),
            sources=[SourceLink.from_dict(s) for s in _dicts(data, "sources")],
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "title": self.title,
            "probability": _number_out(self.probability),
            "probabilityLabel": self.probability_label,
            "summary": self.summary,
            "facts": list(self.facts),
            "sources": [s.to_dict() for s in self.sources],
        }
        if self.id is not None:
            out["id"] = self.id
        if self.organ is not None:
            out["organ"] = self.organ
        if self.risk_level is not None:
            out["riskLevel"] = self.risk_level
        if self.recommended_actions:
            out["recommendedActions"] = list(self.recommended_actions)
        return out


@dataclass(frozen=True)
class TrajectoryPoint:
    age: float
    score: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrajectoryPoint:
        return cls(age=_float(data, "age"), score=clamp(_float(data, "score"), 0, 100))

    def to_dict(self) -> dict[str, Any]:
        return {"age": _number_out(self.age), "score": _number_out(self.score)}


@dataclass(frozen=True)
class WeightPoint:
    age: float
    weight: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WeightPoint:
        return cls(age=_float(data, "age"), weight=_float(data, "weight"))

    def to_dict(self) -> dict[str, Any]:
        return {"age": _number_out(self.age), "weight": _number_out(self.weight)}


@dataclass(frozen=True)
class DiseasePrediction:
    condition: str
    onset_age: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiseasePrediction:
        return cls(condition=_str(data, "condition"), onset_age=_float(data, "onsetAge"))

    def to_dict(self) -> dict[str, Any]:
        return {"condition": self.condition, "onsetAge": _number_out(self.onset_age)}


@dataclass(frozen=True)
class ScenarioItem:
    """One what-if branch of the projection (status quo, small or big changes)."""

    id: str
    label: str
    health_score_trajectory: list[dict[str, Any]] = field(default_factory=list)
    weight_trajectory: list[dict[str, Any]] = field(default_factory=list)
    uncertainty_level: str = ""
    top_drivers: list[dict[str, Any]] = field(default_factory=list)
    modified_inputs: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScenarioItem:
        projected = data.get("projected") or {}
        uncertainty = data.get("uncertainty") or {}
        return cls(
            id=_str(data, "id"),
            label=_str(data, "label"),
            health_score_trajectory=_dicts(projected, "healthScoreTrajectory"),
            weight_trajectory=_dicts(projected, "weightTrajectory"),
            uncertainty_level=_str(uncertainty, "level"),
            top_drivers=_dicts(data, "topDrivers"),
            modified_inputs=_dicts(data, "modifiedInputs"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "projected": {
                "healthScoreTrajectory": self.health_score_trajectory,
                "weightTrajectory": self.weight_trajectory,
            },
            "uncertainty": {"level": self.uncertainty_level},
            "topDrivers": self.top_drivers,
            "modifiedInputs": self.modified_inputs,
        }


@dataclass(frozen=True)
class ChartSpec:
    id: str
    type: str
    title: str
    subtitle: str = ""
    description: str = ""
    data: Any = None
    axes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChartSpec:
        chart_type = _str(data, "type")
        if chart_type not in CHART_TYPES:
            raise ProjectionParseError(f"Unsupported chart type: {chart_type!r}")
        return cls(
            id=_str(data, "id"),
            type=chart_type,
            title=_str(data, "title"),
            subtitle=_str(data, "subtitle"),
            description=_str(data, "description"),
            data=data.get("data"),
            axes=data.get("axes") or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "data": self.data,
            "axes": self.axes,
        }


# ---------------------------------------------------------------------------
# Full response
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationResponse:
    risk_cards: list[RiskCard]
    suggested_action: str
    health_score_current: float
    health_score_future: float
    life_expectancy: float
    predicted_conditions: list[DiseasePrediction] = field(default_factory=list)
    organ_highlights: list[str] = field(default_factory=list)
    trajectory: list[TrajectoryPoint] = field(default_factory=list)
    weight_trajectory: list[WeightPoint] = field(default_factory=list)
    bmi_trajectory: list[TrajectoryPoint] = field(default_factory=list)
    scenarios: list[ScenarioItem] = field(default_factory=list)
    chart_specs: list[ChartSpec] = field(default_factory=list)
    additional_metrics: dict[str, Any] = field(default_factory=dict)
    debug_calculations: dict[str, Any] = field(default_factory=dict)
    disclaimers: list[str] = field(default_factory=list)
    is_fallback: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationResponse:
        missing = [k for k in REQUIRED_RESPONSE_KEYS if k not in data]
        if missing:
            raise ProjectionParseError(f"Projection is missing required keys: {missing}")

        scenarios = data.get("scenarios") or {}
        scenario_items = scenarios.get("items", []) if isinstance(scenarios, dict) else scenarios
        return cls(
            risk_cards=[RiskCard.from_dict(c) for c in _dicts(data, "riskCards")],
            suggested_action=_str(data, "suggestedAction"),
            health_score_current=clamp(_float(data, "healthScoreCurrent"), 0, 100),
            health_score_future=clamp(_float(data, "healthScoreFuture"), 0, 100),
            life_expectancy=max(0.0, _float(data, "lifeExpectancy")),
            predicted_conditions=[
                DiseasePrediction.from_dict(p) for p in _dicts(data, "predictedConditions")
            ],
            organ_highlights=_str_list(data, "organHighlights"),
            trajectory=[TrajectoryPoint.from_dict(p) for p in _dicts(data, "trajectory")],
            weight_trajectory=[WeightPoint.from_dict(p) for p in _dicts(data, "weightTrajectory")],
            bmi_trajectory=[TrajectoryPoint.from_dict(p) for p in _dicts(data, "bmiTrajectory")],
            scenarios=[ScenarioItem.from_dict(s) for s in _dicts({"items": scenario_items}, "items")],
            chart_specs=[
                ChartSpec.from_dict(c)
                for c in _dicts(data, "chartSpecs")
                if _str(c, "type") in CHART_TYPES
            ],
            additional_metrics=data.get("additionalMetrics") or {},
            debug_calculations=data.get("debugCalculations") or {},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "riskCards": [c.to_dict() for c in self.risk_cards],
            "suggestedAction": self.suggested_action,
            "healthScoreCurrent": _number_out(self.health_score_current),
            "healthScoreFuture": _number_out(self.health_score_future),
            "lifeExpectancy": _number_out(self.life_expectancy),
            "predictedConditions": [p.to_dict() for p in self.predicted_conditions],
            "organHighlights": list(self.organ_highlights),
            "trajectory": [p.to_dict() for p in self.trajectory],
            "weightTrajectory": [p.to_dict() for p in self.weight_trajectory],
            "bmiTrajectory": [p.to_dict() for p in self.bmi_trajectory],
        }
        if self.scenarios:
            out["scenarios"] = {"items": [s.to_dict() for s in self.scenarios]}
        if self.chart_specs:
            out["chartSpecs"] = [c.to_dict() for c in self.chart_specs]
        if self.additional_metrics:
            out["additionalMetrics"] = self.additional_metrics
        if self.debug_calculations:
            out["debugCalculations"] = self.debug_calculations
        if self.disclaimers:
            out["disclaimers"] = list(self.disclaimers)
        if self.is_fallback:
            out["isFallback"] = True
        return out


def with_engine_metrics(response: SimulationResponse, metrics: DerivedMetrics) -> SimulationResponse:
    """Overwrite every engine-owned number with the engine's value."""
    return replace(
        response,
        health_score_current=metrics.health_score_current,
        additional_metrics=metrics.additional_metrics(),
        debug_calculations=metrics.debug_calculations(),
    )


def parse_simulation_response(text: str, metrics: DerivedMetrics) -> SimulationResponse:
    """Parse an LLM reply into a SimulationResponse anchored to ``metrics``.

    Raises ProjectionParseError on anything that is not one JSON object
    with the required keys.
    """
    try:
        data = extract_json_object(text)
    except ValueError as exc:
        raise ProjectionParseError(str(exc)) from exc
    return with_engine_metrics(SimulationResponse.from_dict(data), metrics)


def fallback_simulation_response() -> SimulationResponse:
    """Fixed degraded result used whenever the narrative service fails."""
    return SimulationResponse(
        risk_cards=[
            RiskCard(
                title=FALLBACK_CARD_TITLE,
                organ="network",
                probability=0,
                probability_label="Error",
                summary="Could not retrieve health data. Please try again.",
                facts=["Check your internet connection."],
                sources=[],
            )
        ],
        suggested_action=FALLBACK_ACTION,
        health_score_current=0,
        health_score_future=0,
        life_expectancy=0,
        is_fallback=True,
    )
