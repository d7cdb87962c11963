"""Offline providers: a canned-reply mock and an always-failing stand-in."""

from __future__ import annotations

from futurehealth.core.llm.provider import ProviderResponse


class MockProvider:
    """Returns ``response_content`` verbatim and remembers the last request."""

    def __init__(self, response_content: str = "Mock LLM response.") -> None:
        self.response_content = response_content
        self.last_system_message: str = ""
        self.last_user_message: str = ""
        self.last_json_mode: bool = False
        self.call_count: int = 0

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> ProviderResponse:
        self.last_system_message = system_message
        self.last_user_message = user_message
        self.last_json_mode = json_mode
        self.call_count += 1
        # Whitespace word counts stand in for tokens.
        return ProviderResponse(
            content=self.response_content,
            input_tokens=len(system_message.split()) + len(user_message.split()),
            output_tokens=len(self.response_content.split()),
            model="mock",
            latency_ms=0.0,
        )


class FailingProvider:
    """Raises ``error`` on every call."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or ConnectionError("LLM service unreachable")
        self.call_count: int = 0

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> ProviderResponse:
        self.call_count += 1
        raise self.error
