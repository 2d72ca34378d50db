"""Patient and appointment DTOs."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class RegisterPatientRequest:
    full_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None


@dataclass
class ScheduleAppointmentRequest:
    patient_id: str
    appointment_date: datetime
    provider_id: Optional[str] = None
    duration_min: int = 30
    reason: Optional[str] = None
