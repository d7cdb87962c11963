"""LLM provider implementations."""

from futurehealth.core.llm.providers.anthropic import AnthropicProvider
from futurehealth.core.llm.providers.gemini import GeminiProvider
from futurehealth.core.llm.providers.mock import MockProvider
from futurehealth.core.llm.providers.openai import OpenAIProvider

__all__ = ["AnthropicProvider", "GeminiProvider", "MockProvider", "OpenAIProvider"]
