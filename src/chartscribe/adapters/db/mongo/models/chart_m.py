"""
MongoDB Beanie models for chart and CDI records.

Both collections are keyed by appointment id; the unique index backs the
one-record-per-appointment upsert.
"""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel

from chartscribe.domain.entities.chart import utcnow


class ChartInfoMongo(Document):
    """Base chart produced by the extraction pipeline."""

    appointment_id: str = Field(..., description="Appointment the chart belongs to")
    patient_id: Optional[str] = Field(None, description="Patient reference")
    raw_transcription: Optional[str] = Field(None, description="Transcript the chart was built from")
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
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "chart_info"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            "patient_id",
        ]


class CdiChartInfoMongo(Document):
    """CDI-improved chart; supersedes the base chart field by field."""

    appointment_id: str = Field(..., description="Appointment the record belongs to")
    patient_id: Optional[str] = Field(None, description="Patient reference")
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
    cdi_notes: Optional[str] = Field(None, description="Summary of improvements and clarifications")
    cdi_status: str = Field(default="pending", description="Status: pending, reviewed, approved")
    cdi_reviewed_at: Optional[datetime] = None
    cdi_reviewed_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "cdi_chart_info"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            "patient_id",
            "cdi_status",
        ]
