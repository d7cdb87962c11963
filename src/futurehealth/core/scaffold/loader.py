"""Scaffold loader: turns the YAML files under ``scaffolds/`` into registry entries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from futurehealth.core.scaffold.models import (
    Scaffold,
    ScaffoldApplicability,
    ScaffoldFraming,
    ScaffoldGuardrails,
    ScaffoldOutputCalibration,
)
from futurehealth.core.scaffold.registry import ScaffoldRegistry

logger = logging.getLogger(__name__)


def load_scaffold_directory(directory: str | Path, registry: ScaffoldRegistry) -> int:
    """Register every ``*.yaml`` scaffold found below ``directory``.

    Files whose name starts with an underscore are skipped. A file that
    fails to parse is logged and skipped so one bad definition does not
    keep the server from starting. Returns how many scaffolds were added.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning("Scaffold directory does not exist: %s", root)
        return 0

    loaded = 0
    for path in sorted(p for p in root.rglob("*.yaml") if not p.name.startswith("_")):
        try:
            scaffold = load_scaffold_file(path)
            registry.register(scaffold)
        except Exception:
            logger.exception("Skipping scaffold file %s", path)
            continue
        loaded += 1
        logger.info("Registered scaffold %s v%s from %s", scaffold.id, scaffold.version, path.name)
    return loaded


def load_scaffold_file(path: Path) -> Scaffold:
    """Parse one YAML file into a :class:`Scaffold`.

    Only the identity keys are mandatory; every other section falls back
    to empty defaults.
    """
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    return Scaffold(
        id=data["id"],
        version=str(data["version"]),
        domain=data["domain"],
        display_name=data["display_name"],
        description=data["description"].strip(),
        applicability=_applicability(_section(data, "applicability")),
        framing=_framing(_section(data, "framing")),
        reasoning_framework=_section(data, "reasoning_framework"),
        domain_knowledge_activation=list(data.get("domain_knowledge_activation", [])),
        output_calibration=_output_calibration(_section(data, "output_calibration")),
        guardrails=_guardrails(_section(data, "guardrails")),
        tags=list(data.get("tags", [])),
    )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Scaffold section '{key}' must be a mapping")
    return value


def _text(section: dict[str, Any], key: str) -> str:
    return str(section.get(key, "")).strip()


def _applicability(section: dict[str, Any]) -> ScaffoldApplicability:
    return ScaffoldApplicability(
        tools=list(section.get("tools", [])),
        keywords=list(section.get("keywords", [])),
    )


def _framing(section: dict[str, Any]) -> ScaffoldFraming:
    return ScaffoldFraming(
        role=_text(section, "role"),
        perspective=_text(section, "perspective"),
        tone=_text(section, "tone"),
    )


def _output_calibration(section: dict[str, Any]) -> ScaffoldOutputCalibration:
    return ScaffoldOutputCalibration(
        format=section.get("format", "structured_narrative"),
        max_length_guidance=_text(section, "max_length_guidance"),
        must_include=list(section.get("must_include", [])),
        never_include=list(section.get("never_include", [])),
        output_schema=_text(section, "output_schema"),
    )


def _guardrails(section: dict[str, Any]) -> ScaffoldGuardrails:
    return ScaffoldGuardrails(
        disclaimers=list(section.get("disclaimers", [])),
        escalation_triggers=list(section.get("escalation_triggers", [])),
        prohibited_actions=list(section.get("prohibited_actions", [])),
        prohibited_phrasings=list(section.get("prohibited_phrasings", [])),
    )
