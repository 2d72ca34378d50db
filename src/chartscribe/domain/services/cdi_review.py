"""Diff and merge review for the CDI improvement pass.

The original field map is read-only; the reviewer edits the improved map in
place. Confirm turns the improved map into a CdiRecord, cancel discards
both maps.
"""

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from ..entities.chart import (
    CDI_FIELD_KEYS,
    CDI_FIELD_LABELS,
    CdiRecord,
    ensure_cdi_field,
    normalize_field_map,
    utcnow,
)
from ..enums.workflow import CdiStatus, ReviewStatus
from ..errors import ReviewClosedError


def changed_fields(original: Mapping[str, str], improved: Mapping[str, str]) -> List[str]:
    """Fields whose original and improved strings differ exactly."""
    original = normalize_field_map(original)
    improved = normalize_field_map(improved)
    return [key for key in CDI_FIELD_KEYS if original[key] != improved[key]]


def visible_fields(original: Mapping[str, str], improved: Mapping[str, str]) -> List[str]:
    """Fields where either side is non-empty; both-empty fields are hidden."""
    original = normalize_field_map(original)
    improved = normalize_field_map(improved)
    return [key for key in CDI_FIELD_KEYS if original[key] or improved[key]]


@dataclass(frozen=True)
class FieldDiff:
    key: str
    label: str
    original: str
    improved: str
    changed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "original": self.original,
            "improved": self.improved,
            "changed": self.changed,
        }


class CdiReviewSession:
    """In-memory review of one improvement result."""

    def __init__(
        self,
        appointment_id: str,
        original_data: Mapping[str, Any],
        improved_data: Mapping[str, Any],
        cdi_notes: str = "",
        patient_id: Optional[str] = None,
        raw_transcription: Optional[str] = None,
    ) -> None:
        self.appointment_id = appointment_id
        self.patient_id = patient_id
        self.raw_transcription = raw_transcription
        self._original = MappingProxyType(normalize_field_map(original_data))
        self._improved: Dict[str, str] = normalize_field_map(improved_data)
        self.cdi_notes = cdi_notes or ""
        self.status = ReviewStatus.OPEN
        self.opened_at = utcnow()

    @property
    def original_data(self) -> Mapping[str, str]:
        return self._original

    @property
    def improved_data(self) -> Dict[str, str]:
        return dict(self._improved)

    def _require_open(self) -> None:
        if self.status is not ReviewStatus.OPEN:
            raise ReviewClosedError(self.status.value)

    def changed_fields(self) -> List[str]:
        return changed_fields(self._original, self._improved)

    def visible_fields(self) -> List[str]:
        return visible_fields(self._original, self._improved)

    def field_diffs(self) -> List[FieldDiff]:
        changed = set(self.changed_fields())
        return [
            FieldDiff(
                key=key,
                label=CDI_FIELD_LABELS[key],
                original=self._original[key],
                improved=self._improved[key],
                changed=key in changed,
            )
            for key in self.visible_fields()
        ]

    def summary(self) -> str:
        return f"{len(self.changed_fields())} of {len(self.visible_fields())} fields improved"

    def edit(self, field: str, value: Optional[str]) -> None:
        self._require_open()
        self._improved[ensure_cdi_field(field)] = value or ""

    def edit_many(self, values: Mapping[str, Optional[str]]) -> None:
        self._require_open()
        for field in values:
            ensure_cdi_field(field)
        for field, value in values.items():
            self._improved[field] = value or ""

    def set_notes(self, notes: Optional[str]) -> None:
        self._require_open()
        self.cdi_notes = notes or ""

    def build_record(self, now: Optional[datetime] = None) -> CdiRecord:
        """CDI record from the edited values; the review stays open."""
        self._require_open()
        reviewed_at = now or utcnow()
        record = CdiRecord(
            appointment_id=self.appointment_id,
            patient_id=self.patient_id,
            raw_transcription=self.raw_transcription or None,
            cdi_notes=self.cdi_notes or None,
            cdi_status=CdiStatus.REVIEWED,
            cdi_reviewed_at=reviewed_at,
            created_at=reviewed_at,
            updated_at=reviewed_at,
        )
        record.apply_fields(self._improved)
        record.updated_at = reviewed_at
        return record

    def mark_confirmed(self) -> None:
        self._require_open()
        self.status = ReviewStatus.CONFIRMED

    def confirm(self, now: Optional[datetime] = None) -> CdiRecord:
        """Close the review and build the CDI record from the edited values."""
        record = self.build_record(now)
        self.mark_confirmed()
        return record

    def cancel(self) -> None:
        self._require_open()
        self._improved = {}
        self._original = MappingProxyType({})
        self.cdi_notes = ""
        self.status = ReviewStatus.CANCELLED
