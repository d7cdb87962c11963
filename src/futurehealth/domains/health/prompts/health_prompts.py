"""MCP Prompts: pre-built interaction templates for the projection journey."""

from __future__ import annotations

from fastmcp import FastMCP


def register_health_prompts(mcp: FastMCP) -> None:
    """Register future-health MCP prompts."""

    @mcp.prompt()
    def health_projection_prompt(focus: str = "overall health") -> str:
        """Prompt template for a ten-year health projection."""
        return f"""I'd like to see where my current lifestyle is taking my {focus}. Please:

1. Compute my health metrics from my profile with compute_health_metrics
2. Generate my ten-year projection with generate_health_projection
3. Compare the "small_changes" and "big_changes" scenarios with simulate_scenario
4. Tell me the single change that would help me most

Please explain the scores in plain language and remind me these are estimates, not a diagnosis."""
