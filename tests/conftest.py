"""Shared test fixtures for Future Health tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from futurehealth.core.scaffold.loader import load_scaffold_directory  # noqa: E402
from futurehealth.core.scaffold.models import (  # noqa: E402
    Scaffold,
    ScaffoldApplicability,
    ScaffoldFraming,
    ScaffoldGuardrails,
    ScaffoldOutputCalibration,
)
from futurehealth.core.scaffold.registry import ScaffoldRegistry  # noqa: E402
from futurehealth.domains.health.domain_logic.profile import (  # noqa: E402
    UserProfile,
    profile_from_dict,
)

SCAFFOLD_DIR = _SRC_DIR / "futurehealth" / "domains" / "health" / "scaffolds"


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

# Healthy 40-year-old woman; every optional field left out.
BASE_PROFILE: dict[str, Any] = {
    "age": 40,
    "gender": "female",
    "heightCm": 165,
    "weightKg": 60,
    "waistCm": 75,
    "hipCm": 95,
    "dailySteps": 8000,
    "sittingHours": 6,
    "sleepHours": 7.5,
    "activityLevel": "moderate",
    "smoker": False,
    "alcoholDrinksPerWeek": 2,
    "dietQuality": "good",
    "fastFoodFrequency": "never",
    "existingConditions": [],
}


def make_profile_dict(**overrides: Any) -> dict[str, Any]:
    """Wire-shaped profile with camelCase overrides applied."""
    data = dict(BASE_PROFILE)
    data.update(overrides)
    return data


def make_profile(**overrides: Any) -> UserProfile:
    return profile_from_dict(make_profile_dict(**overrides))


@pytest.fixture
def profile_factory():
    """Build a validated UserProfile from camelCase overrides."""
    return make_profile


@pytest.fixture
def profile_dict() -> dict[str, Any]:
    return make_profile_dict()


@pytest.fixture
def healthy_profile() -> UserProfile:
    return make_profile()


@pytest.fixture
def high_risk_profile() -> UserProfile:
    """Older male smoker with obesity, hypertension and a sedentary job."""
    return make_profile(
        age=62,
        gender="male",
        heightCm=175,
        weightKg=105,
        waistCm=110,
        hipCm=105,
        dailySteps=3000,
        sittingHours=11,
        sleepHours=5.5,
        activityLevel="sedentary",
        smoker=True,
        cigarettesPerDay=20,
        yearsSmoked=30,
        alcoholDrinksPerWeek=18,
        dietQuality="poor",
        fastFoodFrequency="frequent",
        existingConditions=["Hypertension"],
    )


# ---------------------------------------------------------------------------
# Scaffolds
# ---------------------------------------------------------------------------

def make_test_scaffold(
    id: str = "test_scaffold",
    tools: list[str] | None = None,
    format: str = "structured_narrative",
    disclaimers: list[str] | None = None,
    prohibited_phrasings: list[str] | None = None,
) -> Scaffold:
    """Create a test scaffold with sensible defaults."""
    return Scaffold(
        id=id,
        version="1.0.0",
        domain="future_health",
        display_name=f"Test: {id}",
        description=f"Test scaffold {id}",
        applicability=ScaffoldApplicability(
            tools=tools or ["default_tool"],
            keywords=["default"],
        ),
        framing=ScaffoldFraming(
            role="Test analyst",
            perspective="Test perspective",
            tone="neutral",
        ),
        reasoning_framework={"steps": ["Analyze data", "Draw conclusions"]},
        domain_knowledge_activation=["General health knowledge"],
        output_calibration=ScaffoldOutputCalibration(
            format=format,
            max_length_guidance="200-400 words",
            must_include=["health summary"],
            never_include=["medical diagnoses"],
        ),
        guardrails=ScaffoldGuardrails(
            disclaimers=["Not medical advice."] if disclaimers is None else disclaimers,
            escalation_triggers=["chest pain"],
            prohibited_actions=["diagnose conditions"],
            prohibited_phrasings=prohibited_phrasings or [],
        ),
        tags=["test"],
    )


@pytest.fixture
def scaffold_factory():
    return make_test_scaffold


@pytest.fixture
def registry() -> ScaffoldRegistry:
    """Registry loaded from the packaged scaffold YAML files."""
    reg = ScaffoldRegistry()
    load_scaffold_directory(SCAFFOLD_DIR, reg)
    return reg


# ---------------------------------------------------------------------------
# Canned narrative replies
# ---------------------------------------------------------------------------

_PROJECTION_REPLY: dict[str, Any] = {
    "riskCards": [
        {
            "id": "diabetes",
            "title": "Type 2 Diabetes",
            "organ": "pancreas",
            "riskLevel": "low",
            "probability": 1,
            "probabilityLabel": "Low",
            "summary": "Your FINDRISC-style score is low.",
            "facts": ["Regular activity lowers insulin resistance."],
            "recommendedActions": ["Keep walking daily."],
            "sources": [{"title": "FINDRISC", "url": "https://example.org/findrisc"}],
        },
        {
            "id": "cardiovascular",
            "title": "Heart Health",
            "organ": "heart",
            "probability": 1,
            "probabilityLabel": "Low",
            "summary": "The simplified risk proxy is low.",
            "facts": [],
            "sources": [],
        },
    ],
    "suggestedAction": "Aim for 150 mins/week of moderate activity",
    # Deliberately wrong: the engine value must win.
    "healthScoreCurrent": 12,
    "healthScoreFuture": 88,
    "lifeExpectancy": 84,
    "predictedConditions": [],
    "organHighlights": ["heart"],
    "trajectory": [{"age": 40, "score": 93}, {"age": 50, "score": 88}],
    "weightTrajectory": [{"age": 40, "weight": 60}, {"age": 50, "weight": 61}],
    "bmiTrajectory": [{"age": 40, "score": 22}],
    "scenarios": {
        "items": [
            {
                "id": "status_quo",
                "label": "Status Quo",
                "projected": {
                    "healthScoreTrajectory": [{"age": 50, "score": 88}],
                    "weightTrajectory": [{"age": 50, "weight": 61}],
                },
                "uncertainty": {"level": "medium"},
                "topDrivers": [{"factor": "sleep", "impact": "positive"}],
                "modifiedInputs": [],
            }
        ]
    },
    "chartSpecs": [
        {
            "id": "score_target",
            "type": "bullet_target",
            "title": "Health score",
            "data": {"current": 93, "target": 95},
            "axes": {},
        }
    ],
    "additionalMetrics": {"steps": {"dailySteps": 1}},
    "debugCalculations": {"bmi": 99.9},
}


@pytest.fixture
def projection_reply() -> str:
    """A valid narrative projection as the LLM would return it."""
    return json.dumps(_PROJECTION_REPLY)


@pytest.fixture
def projection_reply_data() -> dict[str, Any]:
    return json.loads(json.dumps(_PROJECTION_REPLY))
