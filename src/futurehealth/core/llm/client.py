"""Narrative LLM client: the bridge between scaffolds and LLM calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from futurehealth.core.llm.provider import LLMProvider, ProviderResponse
from futurehealth.core.llm.response import (
    check_guardrails,
    enforce_disclaimers,
    sanitize_content,
)
from futurehealth.core.llm.system_prompt import build_full_system_prompt
from futurehealth.core.scaffold.models import AssembledPrompt, Scaffold

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Structured response from the narrative LLM."""

    content: str
    scaffold_id: str
    scaffold_version: str
    model: str = ""
    guardrail_flags: list[str] = field(default_factory=list)
    usage: dict[str, int] = field(default_factory=dict)


class InnerLLMClient:
    """Invokes the narrative LLM with scaffold-assembled prompts."""

    def __init__(
        self,
        provider: LLMProvider,
        provider_name: str = "mock",
        max_tokens: int = 4096,
        temperature: float = 0.4,
        timeout_seconds: float | None = None,
    ) -> None:
        self.provider = provider
        self.provider_name = provider_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    async def invoke(
        self,
        assembled_prompt: AssembledPrompt,
        scaffold: Scaffold,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Call the narrative LLM with an assembled scaffold prompt.

        Provider errors and timeouts propagate; callers own the fallback.
        """
        full_system = build_full_system_prompt(assembled_prompt.system_message)

        call = self.provider.generate(
            system_message=full_system,
            user_message=assembled_prompt.user_message,
            max_tokens=max_tokens or self.max_tokens,
            temperature=self.temperature if temperature is None else temperature,
            json_mode=scaffold.output_calibration.is_structured,
        )
        provider_response: ProviderResponse = await asyncio.wait_for(
            call, timeout=self.timeout_seconds
        )

        logger.info(
            "Narrative LLM call: scaffold=%s, model=%s, tokens=%d+%d, latency=%.0fms",
            scaffold.id,
            provider_response.model,
            provider_response.input_tokens,
            provider_response.output_tokens,
            provider_response.latency_ms,
        )

        guardrail_check = check_guardrails(provider_response.content, scaffold)

        content = sanitize_content(provider_response.content, guardrail_check)
        if not guardrail_check.passed:
            logger.warning(
                "Guardrails enforced on scaffold %s: %d prohibited patterns redacted",
                scaffold.id,
                len([f for f in guardrail_check.flags if "prohibited" in f]),
            )

        content, disclaimer_flags = enforce_disclaimers(content, scaffold)

        return LLMResponse(
            content=content,
            scaffold_id=scaffold.id,
            scaffold_version=scaffold.version,
            model=provider_response.model,
            guardrail_flags=guardrail_check.flags + disclaimer_flags,
            usage={
                "input_tokens": provider_response.input_tokens,
                "output_tokens": provider_response.output_tokens,
            },
        )
