"""Anthropic messages-API provider."""

from __future__ import annotations

import time

from futurehealth.core.llm.provider import JSON_ONLY_INSTRUCTION, ProviderResponse


class AnthropicProvider:
    """Narrative calls through ``anthropic.AsyncAnthropic``.

    The messages API has no JSON response switch, so structured requests
    carry an extra system instruction instead.
    """

    def __init__(self, api_key: str, model: str) -> None:
        import anthropic

        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> ProviderResponse:
        if json_mode:
            system_message = f"{system_message}\n\n{JSON_ONLY_INSTRUCTION}"

        started = time.monotonic()
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_message,
            messages=[{"role": "user", "content": user_message}],
        )
        latency_ms = (time.monotonic() - started) * 1000

        return ProviderResponse(
            content="".join(
                block.text for block in message.content if getattr(block, "type", "") == "text"
            ),
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
            model=message.model or self.model,
            latency_ms=latency_ms,
        )
