"""LLM provider protocol and factory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

PROVIDER_NAMES = ("gemini", "anthropic", "openai", "mock")

DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "anthropic": "claude-sonnet-4-5-20250929",
    "openai": "gpt-4o",
}

# Appended to the system message for providers without a native JSON switch.
JSON_ONLY_INSTRUCTION = (
    "Reply with exactly one JSON object and nothing else: no prose, no markdown fences."
)


@dataclass
class ProviderResponse:
    """Raw text returned by a provider plus usage accounting."""

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    latency_ms: float


@runtime_checkable
class LLMProvider(Protocol):
    """Anything that can turn a system and user message into narrative text.

    ``json_mode`` asks the provider to constrain the reply to a single JSON
    object where its API supports that.
    """

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> ProviderResponse: ...


def create_provider(
    provider_name: str,
    api_key: str = "",
    model: str = "",
) -> LLMProvider:
    """Build a provider by name.

    Args:
        provider_name: One of ``PROVIDER_NAMES``.
        api_key: API key for hosted providers; ignored by ``mock``.
        model: Model identifier; empty selects the provider default.

    Raises:
        ValueError: for an unknown provider name.
    """
    if provider_name == "mock":
        from futurehealth.core.llm.providers.mock import MockProvider

        return MockProvider()
    if provider_name not in DEFAULT_MODELS:
        raise ValueError(f"Unknown LLM provider: {provider_name}")

    model = model or DEFAULT_MODELS[provider_name]
    if provider_name == "gemini":
        from futurehealth.core.llm.providers.gemini import GeminiProvider

        return GeminiProvider(api_key=api_key, model=model)
    if provider_name == "anthropic":
        from futurehealth.core.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=api_key, model=model)

    from futurehealth.core.llm.providers.openai import OpenAIProvider

    return OpenAIProvider(api_key=api_key, model=model)
