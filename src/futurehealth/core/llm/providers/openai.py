"""OpenAI chat-completions provider."""

from __future__ import annotations

import time

from futurehealth.core.llm.provider import ProviderResponse


class OpenAIProvider:
    """Narrative calls through ``openai.AsyncOpenAI``.

    Structured requests use the API's ``json_object`` response format, which
    requires the word JSON to appear in the prompt; the projection scaffold
    satisfies that through its response schema section.
    """

    def __init__(self, api_key: str, model: str) -> None:
        import openai

        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> ProviderResponse:
        extra = {"response_format": {"type": "json_object"}} if json_mode else {}

        started = time.monotonic()
        completion = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_message},
            ],
            **extra,
        )
        latency_ms = (time.monotonic() - started) * 1000

        text = completion.choices[0].message.content if completion.choices else None
        usage = completion.usage
        return ProviderResponse(
            content=text or "",
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            model=completion.model or self.model,
            latency_ms=latency_ms,
        )
