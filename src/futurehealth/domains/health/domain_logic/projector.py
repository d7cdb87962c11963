"""Health projector: engine metrics in, narrative projection out.

The engine runs first and always succeeds for a valid profile. The narrative
call is the only fallible step; any failure there degrades to the fixed
fallback response instead of propagating.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from futurehealth.core.scaffold.renderer import render_scaffold
from futurehealth.domains.health.domain_logic.metrics_engine import (
    DerivedMetrics,
    compute_derived_metrics,
)
from futurehealth.domains.health.domain_logic.profile import UserProfile
from futurehealth.domains.health.domain_logic.projection_models import (
    SimulationResponse,
    fallback_simulation_response,
    parse_simulation_response,
)
from futurehealth.domains.health.domain_logic.scenarios import compare_scenario
from futurehealth.domains.health.prompts.projection_prompts import (
    build_insight_request,
    build_projection_request,
)

if TYPE_CHECKING:
    from futurehealth.core.llm.client import InnerLLMClient
    from futurehealth.core.scaffold.registry import ScaffoldRegistry

logger = logging.getLogger(__name__)

PROJECTION_SCAFFOLD_ID = "health_projection"
INSIGHT_SCAFFOLD_ID = "health_insight"

INSIGHT_FALLBACK = "Connection error. Please try again."
INSIGHT_EMPTY = "I couldn't generate an explanation at this time."


class HealthProjector:
    """Runs the engine and asks the narrative LLM to explain the results."""

    def __init__(self, llm_client: InnerLLMClient, registry: ScaffoldRegistry) -> None:
        self.llm_client = llm_client
        self.registry = registry

    async def generate_projection(
        self,
        profile: UserProfile,
        scenario_id: str | None = None,
    ) -> SimulationResponse:
        """Score ``profile`` and return the narrative projection.

        An unknown ``scenario_id`` raises ValueError before any LLM call.
        Provider, timeout and parse failures return the fallback response.
        """
        metrics: DerivedMetrics = compute_derived_metrics(profile)
        scenario = compare_scenario(profile, scenario_id=scenario_id) if scenario_id else None

        scaffold = self.registry.require(PROJECTION_SCAFFOLD_ID)
        request = build_projection_request(profile, metrics, scenario)
        assembled = render_scaffold(
            scaffold=scaffold,
            user_query=request.user_query,
            data_context=request.data_context,
            instructions=request.instructions,
        )

        try:
            response = await self.llm_client.invoke(assembled_prompt=assembled, scaffold=scaffold)
            projection = parse_simulation_response(response.content, metrics)
        except Exception:
            logger.exception("Health projection failed; returning fallback response")
            return fallback_simulation_response()

        if response.guardrail_flags:
            logger.warning("Guardrail flags on health projection: %s", response.guardrail_flags)

        return _with_disclaimers(projection, scaffold.guardrails.disclaimers)

    async def explain_insight(self, profile: UserProfile, context: str, question: str) -> str:
        """Answer a follow-up question in a few sentences; never raises on LLM failure."""
        scaffold = self.registry.require(INSIGHT_SCAFFOLD_ID)
        request = build_insight_request(profile, context, question)
        assembled = render_scaffold(
            scaffold=scaffold,
            user_query=request.user_query,
            data_context=request.data_context,
            instructions=request.instructions,
        )

        try:
            response = await self.llm_client.invoke(assembled_prompt=assembled, scaffold=scaffold)
        except Exception:
            logger.exception("Health insight failed; returning fallback text")
            return INSIGHT_FALLBACK

        return response.content.strip() or INSIGHT_EMPTY


def _with_disclaimers(projection: SimulationResponse, disclaimers: list[str]) -> SimulationResponse:
    return replace(projection, disclaimers=[d.strip() for d in disclaimers if d.strip()])
