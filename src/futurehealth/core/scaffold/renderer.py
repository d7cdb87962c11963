"""Scaffold renderer: assembles scaffolds into LLM prompts."""

from __future__ import annotations

import json
from typing import Any

from futurehealth.core.scaffold.models import AssembledPrompt, Scaffold


def render_scaffold(
    scaffold: Scaffold,
    user_query: str,
    data_context: dict[str, Any],
    instructions: list[str] | None = None,
) -> AssembledPrompt:
    """Combine scaffold + user query + data into a complete LLM prompt."""
    system_message = _build_system_message(scaffold)
    user_message = _build_user_message(user_query, data_context, instructions)

    return AssembledPrompt(
        system_message=system_message,
        user_message=user_message,
        metadata={
            "scaffold_id": scaffold.id,
            "scaffold_version": scaffold.version,
            "tone": scaffold.framing.tone,
            "output_format": scaffold.output_calibration.format,
        },
    )


def _build_system_message(scaffold: Scaffold) -> str:
    """Assemble the system message from scaffold components."""
    parts: list[str] = []

    parts.append(f"## Your Role\n{scaffold.framing.role}")
    if scaffold.framing.perspective:
        parts.append(f"## Your Perspective\n{scaffold.framing.perspective}")
    parts.append(f"## Communication Tone\n{scaffold.framing.tone}")

    steps = scaffold.reasoning_framework.get("steps", [])
    if steps:
        steps_text = "\n".join(f"{i+1}. {step}" for i, step in enumerate(steps))
        parts.append(f"## Reasoning Steps\nFollow these steps in order:\n{steps_text}")

    if scaffold.domain_knowledge_activation:
        knowledge = "\n".join(f"- {k}" for k in scaffold.domain_knowledge_activation)
        parts.append(f"## Domain Knowledge to Apply\n{knowledge}")

    calibration = scaffold.output_calibration
    parts.append(f"## Output Format\nFormat: {calibration.format}")
    if calibration.max_length_guidance:
        parts.append(f"Length guidance: {calibration.max_length_guidance}")

    if calibration.output_schema:
        parts.append(
            "## Response Schema\n"
            "Return ONLY one JSON object (no prose, no markdown fences) matching:\n"
            f"{calibration.output_schema}"
        )

    if calibration.must_include:
        includes = "\n".join(f"- {item}" for item in calibration.must_include)
        parts.append(f"## Required Elements\nYour response MUST include:\n{includes}")

    if calibration.never_include:
        excludes = "\n".join(f"- {item}" for item in calibration.never_include)
        parts.append(f"## Prohibited Elements\nYour response must NEVER include:\n{excludes}")

    guardrails = scaffold.guardrails
    if guardrails.disclaimers:
        disclaimers = "\n".join(f"- {d}" for d in guardrails.disclaimers)
        parts.append(f"## Required Disclaimers\nInclude these where appropriate:\n{disclaimers}")

    if guardrails.prohibited_actions:
        prohibited = "\n".join(f"- {a}" for a in guardrails.prohibited_actions)
        parts.append(f"## Prohibited Actions\nYou must NEVER:\n{prohibited}")

    if guardrails.prohibited_phrasings:
        phrasings = "\n".join(f'- "{p}"' for p in guardrails.prohibited_phrasings)
        parts.append(f"## Transparency\nNever use phrasings such as:\n{phrasings}")

    if guardrails.escalation_triggers:
        triggers = "\n".join(f"- {t}" for t in guardrails.escalation_triggers)
        parts.append(
            f"## Escalation Triggers\n"
            f"If any of these conditions are detected, "
            f"recommend the user seek professional help:\n{triggers}"
        )

    return "\n\n".join(parts)


def _build_user_message(
    user_query: str,
    data_context: dict[str, Any],
    instructions: list[str] | None,
) -> str:
    """Assemble the user message with query, data and per-request instructions."""
    parts: list[str] = []

    parts.append(f"## User Request\n{user_query}")

    if data_context:
        parts.append(
            f"## Health Data\n```json\n{json.dumps(data_context, indent=2, default=str)}\n```"
        )

    if instructions:
        numbered = "\n".join(f"{i+1}. {line}" for i, line in enumerate(instructions))
        parts.append(f"## Instructions\n{numbered}")

    return "\n\n".join(parts)
