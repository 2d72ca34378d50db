"""Flatten/unflatten codec between StructuredNote and chart text columns.

Nested sections are stored as label-prefixed text blobs:

    history      "Past Medical History: ...\\n\\nSocial History: ..."
    vital_signs  "Height: 170 cm, Blood Pressure: 120/80"
    diagnosis    "1. Hypertension\\n   Treatment: Lisinopril 10mg\\n\\n2. ..."

Parsing is label-anchored. A label string that appears inside free text
truncates the preceding value; stored charts depend on this behaviour so it
is kept as-is.
"""

import re
from typing import Dict, List, Optional

from ..entities.chart import ChartRecord, null_if_empty
from ..entities.structured_note import (
    VITALS_PLACEHOLDER,
    DiagnosisEntry,
    History,
    StructuredNote,
    Vitals,
)

HISTORY_LABELS = [
    ("past_medical_history", "Past Medical History"),
    ("surgical_history", "Surgical History"),
    ("family_history", "Family History"),
    ("social_history", "Social History"),
]

VITALS_LABELS = [
    ("height", "Height"),
    ("weight", "Weight"),
    ("bmi", "BMI"),
    ("bp", "Blood Pressure"),
]

_HISTORY_STOP = "|".join(re.escape(f"{label}:") for _, label in HISTORY_LABELS)
_DIAGNOSIS_SPLIT = re.compile(r"\d+\.\s+")
_TREATMENT_SPLIT = re.compile(r"\n\s*Treatment:\s*", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Flatten
# ---------------------------------------------------------------------------


def flatten_history(history: History) -> str:
    lines = []
    for attr, label in HISTORY_LABELS:
        value = getattr(history, attr)
        if value:
            lines.append(f"{label}: {value}")
    return "\n\n".join(lines)


def flatten_vitals(vitals: Vitals) -> str:
    parts = []
    for attr, label in VITALS_LABELS:
        value = getattr(vitals, attr)
        if value and value != VITALS_PLACEHOLDER:
            parts.append(f"{label}: {value}")
    return ", ".join(parts)


def flatten_diagnosis(entries: List[DiagnosisEntry]) -> str:
    """Number the named entries; unnamed rows are dropped before numbering."""
    blocks = []
    named = [entry for entry in entries if entry.diagnosis_name]
    for index, entry in enumerate(named):
        text = f"{index + 1}. {entry.diagnosis_name}"
        if entry.treatment:
            text += f"\n   Treatment: {entry.treatment}"
        blocks.append(text)
    return "\n\n".join(blocks)


def flatten_note(
    note: StructuredNote, raw_transcription: Optional[str] = None
) -> Dict[str, Optional[str]]:
    """Chart column values for a note; empty columns come back as None.

    `extra_info` has no chart column and is not persisted.
    """
    columns: Dict[str, Optional[str]] = {
        "chief_complaint": null_if_empty(note.chief_complaint),
        "history_of_illness": null_if_empty(note.history_of_present_illness),
        "history": null_if_empty(flatten_history(note.history)),
        "ros": null_if_empty(note.review_of_systems),
        "physical_exam": null_if_empty(note.physical_exam),
        "vital_signs": null_if_empty(flatten_vitals(note.vitals)),
        "diagnosis": null_if_empty(flatten_diagnosis(note.diagnosis)),
        "plan": null_if_empty(note.plan),
    }
    if raw_transcription is not None:
        columns["raw_transcription"] = raw_transcription
    return columns


# ---------------------------------------------------------------------------
# Unflatten
# ---------------------------------------------------------------------------


def _history_field(text: str, label: str) -> str:
    pattern = re.compile(
        rf"{re.escape(label)}:\s*([\s\S]*?)(?=(?:{_HISTORY_STOP}|\Z))",
        re.IGNORECASE,
    )
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def _vital_field(text: str, label: str) -> str:
    match = re.search(rf"{re.escape(label)}:\s*([^,]+)", text, re.IGNORECASE)
    return match.group(1).strip() if match else VITALS_PLACEHOLDER


def unflatten_history(text: Optional[str]) -> History:
    text = text or ""
    return History(**{attr: _history_field(text, label) for attr, label in HISTORY_LABELS})


def unflatten_vitals(text: Optional[str]) -> Vitals:
    text = text or ""
    return Vitals(**{attr: _vital_field(text, label) for attr, label in VITALS_LABELS})


def unflatten_diagnosis(text: Optional[str]) -> List[DiagnosisEntry]:
    entries = []
    for chunk in _DIAGNOSIS_SPLIT.split(text or ""):
        if not chunk:
            continue
        name, *treatment_parts = _TREATMENT_SPLIT.split(chunk)
        entries.append(
            DiagnosisEntry(
                diagnosis_name=name.strip(),
                treatment=" ".join(treatment_parts).strip(),
            )
        )
    return entries or [DiagnosisEntry()]


def unflatten_chart(chart: ChartRecord) -> StructuredNote:
    """Load a stored chart back into the editor form."""
    return StructuredNote(
        chief_complaint=chart.chief_complaint or "",
        history_of_present_illness=chart.history_of_illness or "",
        history=unflatten_history(chart.history),
        review_of_systems=chart.ros or "",
        physical_exam=chart.physical_exam or "",
        vitals=unflatten_vitals(chart.vital_signs),
        diagnosis=unflatten_diagnosis(chart.diagnosis),
        plan=chart.plan or "",
        extra_info="",
    )
