"""
Schemas for the CDI improvement pass and review.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ...domain.entities.chart import CdiRecord
from ...domain.enums.workflow import CdiStatus
from ...domain.services.cdi_review import CdiReviewSession
from .notes import ChartSchema


class FieldDiffSchema(BaseModel):
    key: str
    label: str
    original: str
    improved: str
    changed: bool


class CdiReviewSchema(BaseModel):
    """Open review: original and improved values side by side."""

    appointment_id: str
    status: str
    original_data: Dict[str, str]
    improved_data: Dict[str, str]
    cdi_notes: str
    changed_fields: List[str]
    diff: List[FieldDiffSchema]
    summary: str

    @classmethod
    def from_domain(cls, session: CdiReviewSession) -> "CdiReviewSchema":
        return cls(
            appointment_id=session.appointment_id,
            status=session.status.value,
            original_data=dict(session.original_data),
            improved_data=session.improved_data,
            cdi_notes=session.cdi_notes,
            changed_fields=session.changed_fields(),
            diff=[FieldDiffSchema(**d.to_dict()) for d in session.field_diffs()],
            summary=session.summary(),
        )


class EditReviewRequest(BaseModel):
    fields: Dict[str, Optional[str]] = Field(default_factory=dict, description="Improved values keyed by chart field")
    cdi_notes: Optional[str] = None


class CdiRecordSchema(ChartSchema):
    cdi_notes: Optional[str] = None
    cdi_status: CdiStatus
    cdi_reviewed_at: Optional[datetime] = None
    cdi_reviewed_by: Optional[str] = None

    @classmethod
    def from_domain(cls, record: CdiRecord) -> "CdiRecordSchema":
        base = ChartSchema.from_domain(record).model_dump()
        return cls(
            **base,
            cdi_notes=record.cdi_notes,
            cdi_status=record.cdi_status,
            cdi_reviewed_at=record.cdi_reviewed_at,
            cdi_reviewed_by=record.cdi_reviewed_by,
        )


class UpdateStatusRequest(BaseModel):
    status: CdiStatus
    reviewed_by: Optional[str] = None


class CdiReportSchema(BaseModel):
    fields: Dict[str, Any]
