"""Future Health MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastmcp import FastMCP

from futurehealth.core.config.settings import Settings, get_settings
from futurehealth.core.llm.client import InnerLLMClient
from futurehealth.core.llm.provider import LLMProvider, create_provider
from futurehealth.core.scaffold.loader import load_scaffold_directory
from futurehealth.core.scaffold.registry import ScaffoldRegistry
from futurehealth.domains.health.domain_logic.projector import HealthProjector
from futurehealth.domains.health.prompts.health_prompts import register_health_prompts
from futurehealth.domains.health.resources.scaffolds import register_health_scaffold_resources
from futurehealth.domains.health.tools.projection_tools import register_health_projection_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "See Your Future Health"
SERVER_VERSION = "0.1.0"

# Scaffold YAML definitions live under src/futurehealth/domains/health/scaffolds/
_SCAFFOLD_DIR = Path(__file__).resolve().parent.parent.parent / "domains" / "health" / "scaffolds"


def resolve_provider(settings: Settings) -> tuple[str, str, str]:
    """Pick (provider_name, api_key, model); a provider without a key degrades to mock."""
    if settings.llm_provider == "mock":
        return "mock", "", ""

    keys = {
        "gemini": (settings.gemini_api_key, settings.gemini_model),
        "anthropic": (settings.anthropic_api_key, settings.anthropic_model),
        "openai": (settings.openai_api_key, settings.openai_model),
    }
    if settings.llm_provider not in keys:  # pragma: no cover
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

    api_key, model = keys[settings.llm_provider]
    if not api_key:
        logger.warning(
            "No API key configured for provider '%s'; falling back to mock provider",
            settings.llm_provider,
        )
        return "mock", "", ""
    return settings.llm_provider, api_key, model


def create_app(*, provider_override: LLMProvider | None = None) -> FastMCP:
    """Create and configure the Future Health MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Loads the scaffold registry
    3. Creates the narrative LLM client and the projector
    4. Registers all tools, resources, and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Educational health projection server. Computes deterministic lifestyle "
            "risk metrics (BMI, WHR, FINDRISC-style diabetes risk, a cardiovascular "
            "risk proxy and a Life's Essential 8 composite) and asks a narrative LLM "
            "to explain them. Not a diagnostic tool."
        ),
    )

    # --- Initialize scaffold system ---
    registry = ScaffoldRegistry()
    scaffold_count = load_scaffold_directory(_SCAFFOLD_DIR, registry)
    logger.info("Loaded %d scaffolds from %s", scaffold_count, _SCAFFOLD_DIR)

    # --- Initialize narrative LLM ---
    if provider_override is not None:
        provider = provider_override
        provider_name = type(provider_override).__name__
    else:
        provider_name, api_key, model = resolve_provider(settings)
        provider = create_provider(provider_name=provider_name, api_key=api_key, model=model)

    llm_client = InnerLLMClient(
        provider=provider,
        provider_name=provider_name,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        timeout_seconds=settings.llm_timeout_seconds,
    )
    projector = HealthProjector(llm_client, registry)

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "scaffolds_loaded": scaffold_count,
            "llm_provider": provider_name,
        }

    register_health_projection_tools(server, projector)
    logger.info("Health projection tools registered (provider=%s)", provider_name)

    # --- Register resources ---
    register_health_scaffold_resources(server, registry)

    # --- Register prompts ---
    register_health_prompts(server)

    return server


# Module-level instance for FastMCP discovery ("...app.py:mcp").
# Lazy: only created when accessed (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
