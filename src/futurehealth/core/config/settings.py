"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Future Health server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; profiles carry personal health data and there is no auth layer.
    fh_host: str = "127.0.0.1"
    fh_port: int = 8011
    fh_log_level: str = "info"
    fh_allow_insecure_bind: bool = False

    # Narrative LLM
    llm_provider: Literal["gemini", "anthropic", "openai", "mock"] = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"

    llm_max_tokens: int = 4096
    llm_temperature: float = 0.4
    llm_timeout_seconds: float = 60.0


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
