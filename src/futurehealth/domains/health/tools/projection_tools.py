"""MCP tools for deterministic health metrics, scenarios and narrative projections."""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from futurehealth.domains.health.domain_logic.baseline import compute_baseline
from futurehealth.domains.health.domain_logic.metrics_engine import compute_derived_metrics
from futurehealth.domains.health.domain_logic.profile import profile_from_dict
from futurehealth.domains.health.domain_logic.scenarios import compare_scenario

if TYPE_CHECKING:
    from futurehealth.domains.health.domain_logic.projector import HealthProjector

logger = logging.getLogger(__name__)


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


def register_health_projection_tools(mcp: FastMCP, projector: HealthProjector) -> None:
    """Register the future-health tools on the MCP server.

    Profiles arrive as plain objects in the web wizard's camelCase shape;
    validation errors propagate as tool errors naming the offending field.
    """

    @mcp.tool
    def compute_health_metrics(profile: dict[str, Any]) -> str:
        """Compute every deterministic risk score for a lifestyle profile.

        Returns healthScoreCurrent (Life's Essential 8 total), debugCalculations
        (BMI, WHR, FINDRISC, CVD proxy, bio-vitality) and additionalMetrics
        (steps, activity guideline, sitting, alcohol, tobacco, diet, LE8 detail).
        No LLM is involved.

        Args:
            profile: UserProfile object (camelCase or snake_case keys).
        """
        metrics = compute_derived_metrics(profile_from_dict(profile))
        return _dump(metrics.to_dict())

    @mcp.tool
    def baseline_analysis(profile: dict[str, Any]) -> str:
        """Preliminary body-composition analysis: BMI category, BMR, TDEE and WHR status.

        Args:
            profile: UserProfile object (camelCase or snake_case keys).
        """
        return _dump(compute_baseline(profile_from_dict(profile)).to_dict())

    @mcp.tool
    def simulate_scenario(
        profile: dict[str, Any],
        modifications: dict[str, Any] | None = None,
        scenario_id: str | None = None,
    ) -> str:
        """Re-score a profile under lifestyle changes and report the deltas.

        Args:
            profile: UserProfile object.
            modifications: Partial profile fields to change, e.g. {"smoker": false}.
            scenario_id: Optional preset ('status_quo', 'small_changes', 'big_changes')
                or toggle ('quit_smoking', 'daily_exercise', 'clean_diet'); explicit
                modifications are applied on top.
        """
        comparison = compare_scenario(
            profile_from_dict(profile),
            modifications=modifications,
            scenario_id=scenario_id,
        )
        return _dump(comparison.to_dict())

    @mcp.tool
    async def generate_health_projection(
        profile: dict[str, Any],
        scenario_id: str | None = None,
    ) -> str:
        """Ten-year narrative projection built on the deterministic metrics.

        The narrative service writes risk cards, trajectories and chart specs;
        all scores it reports are overwritten with the engine's own values.
        If the service is unreachable the response is a visible
        "CONNECTION ERROR" placeholder with zeroed scores.

        Args:
            profile: UserProfile object.
            scenario_id: Optional scenario preset to describe alongside the projection.
        """
        start_time = time.monotonic()
        parsed = profile_from_dict(profile)
        projection = await projector.generate_projection(parsed, scenario_id=scenario_id)
        logger.info(
            "generate_health_projection finished in %.0fms (fallback=%s)",
            (time.monotonic() - start_time) * 1000,
            projection.is_fallback,
        )
        return _dump(projection.to_dict())

    @mcp.tool
    async def explain_health_insight(
        profile: dict[str, Any],
        context: str,
        question: str,
    ) -> str:
        """Answer a short follow-up question about a projection (max 3 sentences).

        Args:
            profile: UserProfile object.
            context: The projection text the question refers to.
            question: The user's question.
        """
        return await projector.explain_insight(profile_from_dict(profile), context, question)
