"""Response parsing and guardrail enforcement for narrative LLM output."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from futurehealth.core.scaffold.models import Scaffold

logger = logging.getLogger(__name__)

REDACTION_NOTE = "[Removed: contains prohibited health guidance]"

# Heuristic detection of the scaffold's "prohibited_actions". Actions are
# natural language, so common unsafe patterns are matched instead.
PROHIBITED_INDICATORS: dict[str, tuple[str, ...]] = {
    "making medical diagnoses": (
        "you have been diagnosed",
        "you are suffering from",
        "you have a condition",
    ),
    "prescribing treatments": (
        "take this medication",
        "stop taking your medication",
        "i prescribe",
    ),
    "misrepresenting where the numbers come from": (
        "i simulated",
        "my simulation shows",
        "biobank data",
        "my ai model predicted",
        "my model predicted",
        "i calculated your",
    ),
}

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass
class GuardrailCheck:
    """Result of checking a response against scaffold guardrails."""

    passed: bool
    flags: list[str] = field(default_factory=list)


def check_guardrails(content: str, scaffold: Scaffold) -> GuardrailCheck:
    """Check LLM response content against scaffold guardrails."""
    flags: list[str] = []
    content_lower = content.lower()

    for trigger in scaffold.guardrails.escalation_triggers:
        trigger_keywords = trigger.lower().split()
        matches = sum(1 for word in trigger_keywords if word in content_lower)
        if trigger_keywords and matches >= len(trigger_keywords) * 0.6:
            flags.append(f"escalation_trigger_detected: {trigger}")

    for action, patterns in PROHIBITED_INDICATORS.items():
        for pattern in patterns:
            if pattern in content_lower:
                flags.append(f"prohibited_pattern_detected: {action} ('{pattern}')")

    for phrase in scaffold.guardrails.prohibited_phrasings:
        pattern = phrase.lower()
        if pattern in content_lower and not any(f"('{pattern}')" in f for f in flags):
            flags.append(f"prohibited_pattern_detected: scaffold phrasing ('{pattern}')")

    passed = not any(f.startswith("prohibited_pattern") for f in flags)

    if flags:
        logger.warning("Guardrail flags for scaffold %s: %s", scaffold.id, flags)

    return GuardrailCheck(passed=passed, flags=flags)


def sanitize_content(content: str, guardrail_check: GuardrailCheck) -> str:
    """Redact sentences containing prohibited phrases.

    Matches never cross a double quote or a backslash, so redaction inside a
    JSON string value, escaped quotes included, leaves the document parseable.
    """
    if guardrail_check.passed:
        return content

    prohibited_phrases: list[str] = []
    for flag in guardrail_check.flags:
        if flag.startswith("prohibited_pattern_detected:"):
            match = re.search(r"\('([^']+)'\)", flag)
            if match:
                prohibited_phrases.append(match.group(1))

    sanitized = content
    for phrase in prohibited_phrases:
        pattern = re.compile(
            r'[^.!?\n"\\]*' + re.escape(phrase) + r'[^.!?\n"\\]*[.!?]?',
            re.IGNORECASE,
        )
        sanitized = pattern.sub(REDACTION_NOTE, sanitized)

    return sanitized


def enforce_disclaimers(content: str, scaffold: Scaffold) -> tuple[str, list[str]]:
    """Ensure scaffold-required disclaimers appear in the final response.

    Structured (json) replies are left untouched; callers attach the
    disclaimers to their own payload.

    Returns: (possibly modified content, flags)
    """
    disclaimers = [d.strip() for d in scaffold.guardrails.disclaimers if d.strip()]
    if not disclaimers or scaffold.output_calibration.is_structured:
        return content, []

    def _norm(s: str) -> str:
        return " ".join(s.lower().split())

    content_norm = _norm(content)
    missing = [d for d in disclaimers if _norm(d) not in content_norm]
    if not missing:
        return content, []

    footer = "\n\n---\nDisclaimers:\n" + "\n".join(f"- {d}" for d in missing)
    return content + footer, [f"disclaimer_appended: {d}" for d in missing]


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the single JSON object in an LLM reply.

    Tolerates markdown fences and stray prose around the object.
    Raises ValueError when no JSON object can be parsed.
    """
    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object found in LLM response") from None
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed JSON in LLM response: {exc.msg}") from exc

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed
