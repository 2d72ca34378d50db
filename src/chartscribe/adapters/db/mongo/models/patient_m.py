"""
MongoDB Beanie models for patients and appointments.
"""

from datetime import date, datetime
from typing import Optional

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel

from chartscribe.domain.entities.chart import utcnow


class PatientMongo(Document):
    """MongoDB model for patient demographics."""

    patient_id: str = Field(..., description="Patient ID")
    full_name: str = Field(..., description="Patient full name")
    # BSON has no date type; stored as midnight datetime
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "patients"
        indexes = [
            IndexModel([("patient_id", ASCENDING)], unique=True),
            "full_name",
        ]


class AppointmentMongo(Document):
    """MongoDB model for appointments."""

    appointment_id: str = Field(..., description="Appointment ID")
    patient_id: str = Field(..., description="Patient reference")
    appointment_date: datetime = Field(..., description="Scheduled date and time")
    provider_id: Optional[str] = None
    duration_min: int = Field(default=30)
    reason: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "appointments"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            "patient_id",
            [("patient_id", 1), ("appointment_date", -1)],
        ]


def date_to_datetime(value: Optional[date]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime(value.year, value.month, value.day)
