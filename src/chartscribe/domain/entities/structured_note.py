"""StructuredNote: the in-memory physician note produced by extraction.

Every leaf is a string and always present. Unset values are empty strings,
never None, so the reveal sequencer and form renderer never branch on
missing fields.
"""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

VITALS_PLACEHOLDER = "-"


def _text(value: Any, default: str = "") -> str:
    """Coerce an untrusted completion value to a string leaf."""
    if value is None or value is False:
        return default
    if isinstance(value, str):
        return value if value else default
    if isinstance(value, (int, float)):
        return str(value) if value else default
    return default


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


@dataclass
class History:
    past_medical_history: str = ""
    surgical_history: str = ""
    family_history: str = ""
    social_history: str = ""


@dataclass
class Vitals:
    height: str = ""
    weight: str = ""
    bmi: str = ""
    bp: str = ""

    @classmethod
    def unknown(cls) -> "Vitals":
        """All four measurements set to the "-" placeholder."""
        return cls(
            height=VITALS_PLACEHOLDER,
            weight=VITALS_PLACEHOLDER,
            bmi=VITALS_PLACEHOLDER,
            bp=VITALS_PLACEHOLDER,
        )


@dataclass
class DiagnosisEntry:
    diagnosis_name: str = ""
    treatment: str = ""

    def is_empty(self) -> bool:
        return not self.diagnosis_name and not self.treatment


def _placeholder_diagnosis() -> List[DiagnosisEntry]:
    return [DiagnosisEntry()]


@dataclass
class StructuredNote:
    """Structured physician note.

    `diagnosis` always holds at least one entry; an empty placeholder row is
    used when nothing was diagnosed.
    """

    chief_complaint: str = ""
    history_of_present_illness: str = ""
    history: History = field(default_factory=History)
    review_of_systems: str = ""
    physical_exam: str = ""
    vitals: Vitals = field(default_factory=Vitals)
    diagnosis: List[DiagnosisEntry] = field(default_factory=_placeholder_diagnosis)
    plan: str = ""
    extra_info: str = ""

    def __post_init__(self) -> None:
        if not self.diagnosis:
            self.diagnosis = _placeholder_diagnosis()

    @classmethod
    def empty(cls) -> "StructuredNote":
        """Blank form: empty strings everywhere and one empty diagnosis row."""
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StructuredNote":
        """Normalize an extraction response into a complete note.

        Missing or null keys become empty strings, missing vitals become "-",
        and a missing or empty diagnosis list becomes one placeholder entry.
        """
        data = _mapping(data)
        history = _mapping(data.get("history"))
        vitals = _mapping(data.get("vitals"))

        raw_diagnosis = data.get("diagnosis")
        diagnosis: List[DiagnosisEntry] = []
        if isinstance(raw_diagnosis, list):
            for entry in raw_diagnosis:
                if isinstance(entry, Mapping):
                    diagnosis.append(
                        DiagnosisEntry(
                            diagnosis_name=_text(entry.get("diagnosis_name")),
                            treatment=_text(entry.get("treatment")),
                        )
                    )
                else:
                    diagnosis.append(DiagnosisEntry(diagnosis_name=_text(entry)))

        return cls(
            chief_complaint=_text(data.get("chief_complaint")),
            history_of_present_illness=_text(data.get("history_of_present_illness")),
            history=History(
                past_medical_history=_text(history.get("past_medical_history")),
                surgical_history=_text(history.get("surgical_history")),
                family_history=_text(history.get("family_history")),
                social_history=_text(history.get("social_history")),
            ),
            review_of_systems=_text(data.get("review_of_systems")),
            physical_exam=_text(data.get("physical_exam")),
            vitals=Vitals(
                height=_text(vitals.get("height"), VITALS_PLACEHOLDER),
                weight=_text(vitals.get("weight"), VITALS_PLACEHOLDER),
                bmi=_text(vitals.get("bmi"), VITALS_PLACEHOLDER),
                bp=_text(vitals.get("bp"), VITALS_PLACEHOLDER),
            ),
            diagnosis=diagnosis or _placeholder_diagnosis(),
            plan=_text(data.get("plan")),
            extra_info=_text(data.get("extra_info")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def copy(self) -> "StructuredNote":
        return copy.deepcopy(self)

    def leaf_values(self) -> List[str]:
        """All leaf strings in declaration order (diagnosis rows flattened)."""
        values = [self.chief_complaint, self.history_of_present_illness]
        values.extend(asdict(self.history).values())
        values.extend([self.review_of_systems, self.physical_exam])
        values.extend(asdict(self.vitals).values())
        for entry in self.diagnosis:
            values.extend([entry.diagnosis_name, entry.treatment])
        values.extend([self.plan, self.extra_info])
        return values
