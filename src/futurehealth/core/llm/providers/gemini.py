"""Google Gemini provider (google-genai SDK)."""

from __future__ import annotations

import time

from futurehealth.core.llm.provider import ProviderResponse


class GeminiProvider:
    """Narrative calls through ``genai.Client(...).aio``.

    Structured requests set ``response_mime_type`` so the model replies
    with bare JSON.
    """

    def __init__(self, api_key: str, model: str) -> None:
        from google import genai

        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> ProviderResponse:
        from google.genai import types

        config = types.GenerateContentConfig(
            system_instruction=system_message,
            max_output_tokens=max_tokens,
            temperature=temperature,
            response_mime_type="application/json" if json_mode else None,
        )

        started = time.monotonic()
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=user_message,
            config=config,
        )
        latency_ms = (time.monotonic() - started) * 1000

        usage = response.usage_metadata
        return ProviderResponse(
            content=response.text or "",
            input_tokens=(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=(usage.candidates_token_count or 0) if usage else 0,
            model=self.model,
            latency_ms=latency_ms,
        )
