"""
Prompt registry for completion-service scenarios and version tracking.

Every completion call is tagged with its scenario and the prompt version in
force, so latency and failures can be attributed to a prompt revision.
"""

from __future__ import annotations

from enum import Enum


class PromptScenario(str, Enum):
    """Completion scenarios for telemetry and prompt versioning."""

    NOTE_EXTRACTION = "note_extraction"
    CDI_IMPROVEMENT = "cdi_improvement"


_DEFAULT_VERSIONS: dict[PromptScenario, str] = {
    PromptScenario.NOTE_EXTRACTION: "NOTE_EXTRACTION_V1_2025-06-01",
    PromptScenario.CDI_IMPROVEMENT: "CDI_IMPROVEMENT_V1_2025-06-01",
}

# Bumped whenever the system prompt in the matching contract module changes
PROMPT_VERSIONS: dict[PromptScenario, str] = _DEFAULT_VERSIONS.copy()


__all__ = ["PromptScenario", "PROMPT_VERSIONS"]
