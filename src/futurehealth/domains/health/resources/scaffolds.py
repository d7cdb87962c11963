"""MCP Resources for health scaffold discovery."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

if TYPE_CHECKING:
    from futurehealth.core.scaffold.registry import ScaffoldRegistry

SCAFFOLD_DOMAIN = "future_health"


def register_health_scaffold_resources(mcp: FastMCP, registry: ScaffoldRegistry) -> None:
    """Register health scaffold discovery resources on the MCP server."""

    @mcp.resource("scaffold://health/registry")
    def health_scaffold_registry_resource() -> str:
        """Discover the scaffolds that shape projection and insight requests."""
        scaffolds = [s for s in registry.all() if s.domain == SCAFFOLD_DOMAIN]
        return json.dumps(
            {
                "domain": SCAFFOLD_DOMAIN,
                "scaffold_count": len(scaffolds),
                "scaffolds": [
                    {
                        "id": s.id,
                        "version": s.version,
                        "display_name": s.display_name,
                        "description": s.description,
                        "applicability": {
                            "tools": s.applicability.tools,
                            "keywords": s.applicability.keywords,
                        },
                        "output_format": s.output_calibration.format,
                        "disclaimers": s.guardrails.disclaimers,
                        "tags": s.tags,
                    }
                    for s in scaffolds
                ],
            },
            indent=2,
        )
