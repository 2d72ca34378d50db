"""Persisted chart and CDI record entities.

Both records hold flattened text columns keyed by appointment. Stored text
is Optional: an empty value is persisted as None. Core logic reads them
through `normalize_field_map`, which collapses None and missing to "".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..enums.workflow import CdiStatus
from ..errors import UnknownFieldError

# (storage key, display label) in display order
CDI_FIELDS: List[Tuple[str, str]] = [
    ("chief_complaint", "Chief Complaint"),
    ("history_of_illness", "History of Present Illness"),
    ("history", "Medical History"),
    ("ros", "Review of Systems"),
    ("physical_exam", "Physical Exam"),
    ("vital_signs", "Vital Signs"),
    ("diagnosis", "Diagnosis"),
    ("plan", "Plan"),
    ("assessment", "Assessment"),
    ("clinical_impression", "Clinical Impression"),
]

CDI_FIELD_KEYS: List[str] = [key for key, _ in CDI_FIELDS]
CDI_FIELD_LABELS: Dict[str, str] = dict(CDI_FIELDS)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def null_if_empty(value: Optional[str]) -> Optional[str]:
    """Storage form of a text column: "" becomes None."""
    return value if value else None


def normalize_field_map(mapping: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Map every CDI field to a string, defaulting absent/None/non-str to ""."""
    mapping = mapping or {}
    result: Dict[str, str] = {}
    for key in CDI_FIELD_KEYS:
        value = mapping.get(key)
        result[key] = value if isinstance(value, str) else ""
    return result


def ensure_cdi_field(key: str) -> str:
    if key not in CDI_FIELD_LABELS:
        raise UnknownFieldError(key)
    return key


@dataclass
class _ChartFields:
    appointment_id: str
    patient_id: Optional[str] = None
    raw_transcription: Optional[str] = None
    chief_complaint: Optional[str] = None
    history_of_illness: Optional[str] = None
    history: Optional[str] = None
    ros: Optional[str] = None
    physical_exam: Optional[str] = None
    vital_signs: Optional[str] = None
    diagnosis: Optional[str] = None
    plan: Optional[str] = None
    assessment: Optional[str] = None
    clinical_impression: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def field_map(self) -> Dict[str, str]:
        """The ten CDI fields as plain strings."""
        return normalize_field_map({key: getattr(self, key) for key in CDI_FIELD_KEYS})

    def apply_fields(self, fields: Mapping[str, Optional[str]]) -> None:
        """Overwrite the given CDI fields, storing empty values as None."""
        for key, value in fields.items():
            setattr(self, ensure_cdi_field(key), null_if_empty(value))
        self.updated_at = utcnow()


@dataclass
class ChartRecord(_ChartFields):
    """Base chart record created by the extraction pipeline."""


@dataclass
class CdiRecord(_ChartFields):
    """CDI-improved chart record; supersedes the base chart when present."""

    cdi_notes: Optional[str] = None
    cdi_status: CdiStatus = CdiStatus.PENDING
    cdi_reviewed_at: Optional[datetime] = None
    cdi_reviewed_by: Optional[str] = None

    def set_status(
        self,
        status: CdiStatus,
        reviewed_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.cdi_status = status
        self.cdi_reviewed_by = reviewed_by or None
        self.cdi_reviewed_at = now or utcnow()
        self.updated_at = self.cdi_reviewed_at


def resolve_active_note(
    chart: Optional[ChartRecord], cdi: Optional[CdiRecord]
) -> Dict[str, Optional[str]]:
    """Resolve "the active note" for an appointment.

    CDI values win for every field the CDI record has non-null; otherwise the
    base chart value is used.
    """
    active: Dict[str, Optional[str]] = {}
    for key in CDI_FIELD_KEYS:
        cdi_value = getattr(cdi, key) if cdi is not None else None
        if cdi_value is not None:
            active[key] = cdi_value
        else:
            active[key] = getattr(chart, key) if chart is not None else None
    return active
