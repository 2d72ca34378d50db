"""Patient and appointment entities.

Only the fields the note pipeline needs are modelled: the appointment links
a chart to a patient, and the patient supplies age and gender for the CDI
pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..errors import InvalidPatientDataError
from ..value_objects.record_id import AppointmentId, PatientId
from .chart import utcnow


@dataclass(frozen=True)
class PatientInfo:
    """De-identified demographics injected into the CDI prompt."""

    age: Optional[Union[int, str]] = None
    gender: Optional[str] = None


def age_on(date_of_birth: date, today: date) -> int:
    """Whole years between date_of_birth and today."""
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


@dataclass
class Patient:
    """Patient domain entity."""

    patient_id: PatientId
    full_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.full_name or len(self.full_name.strip()) < 2:
            raise InvalidPatientDataError("full_name", self.full_name)
        self.full_name = self.full_name.strip()
        if self.date_of_birth is not None and self.date_of_birth > utcnow().date():
            raise InvalidPatientDataError("date_of_birth", self.date_of_birth.isoformat())

    def age(self, today: Optional[date] = None) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return age_on(self.date_of_birth, today or utcnow().date())

    def demographics(self, today: Optional[date] = None) -> PatientInfo:
        return PatientInfo(age=self.age(today), gender=self.gender or None)


@dataclass
class Appointment:
    """Appointment linking a chart to a patient."""

    appointment_id: AppointmentId
    patient_id: PatientId
    appointment_date: datetime
    provider_id: Optional[str] = None
    duration_min: int = 30
    reason: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if self.duration_min <= 0:
            raise InvalidPatientDataError("duration_min", self.duration_min)
