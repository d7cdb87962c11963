"""Data models for narrative scaffolds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ScaffoldApplicability:
    """Which tools a scaffold serves."""

    tools: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)


@dataclass
class ScaffoldFraming:
    """The framing the narrative LLM adopts."""

    role: str = ""
    perspective: str = ""
    tone: str = ""


@dataclass
class ScaffoldOutputCalibration:
    """Controls the shape and content of LLM output."""

    format: str = "structured_narrative"
    max_length_guidance: str = ""
    must_include: list[str] = field(default_factory=list)
    never_include: list[str] = field(default_factory=list)
    # Verbatim schema text for structured (json) replies.
    output_schema: str = ""

    @property
    def is_structured(self) -> bool:
        return self.format == "json"


@dataclass
class ScaffoldGuardrails:
    """Safety and transparency boundaries for the narrative LLM."""

    disclaimers: list[str] = field(default_factory=list)
    escalation_triggers: list[str] = field(default_factory=list)
    prohibited_actions: list[str] = field(default_factory=list)
    prohibited_phrasings: list[str] = field(default_factory=list)


@dataclass
class Scaffold:
    """A complete scaffold: the instructions wrapped around one kind of LLM request."""

    id: str
    version: str
    domain: str
    display_name: str
    description: str
    applicability: ScaffoldApplicability
    framing: ScaffoldFraming
    reasoning_framework: dict[str, Any]
    domain_knowledge_activation: list[str]
    output_calibration: ScaffoldOutputCalibration
    guardrails: ScaffoldGuardrails
    tags: list[str] = field(default_factory=list)


@dataclass
class AssembledPrompt:
    """The final prompt sent to the narrative LLM after scaffold application."""

    system_message: str
    user_message: str
    metadata: dict[str, Any] = field(default_factory=dict)
