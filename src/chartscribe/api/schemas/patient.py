"""
Schemas for patients and appointments.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...domain.entities.patient import Appointment, Patient


class RegisterPatientSchema(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=120)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class PatientSchema(BaseModel):
    patient_id: str
    full_name: str
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientSchema":
        return cls(
            patient_id=str(patient.patient_id),
            full_name=patient.full_name,
            date_of_birth=patient.date_of_birth,
            age=patient.age(),
            gender=patient.gender,
            phone=patient.phone,
            email=patient.email,
            address=patient.address,
            insurance_provider=patient.insurance_provider,
            policy_number=patient.policy_number,
            created_at=patient.created_at,
        )


class ScheduleAppointmentSchema(BaseModel):
    patient_id: str
    appointment_date: datetime
    provider_id: Optional[str] = None
    duration_min: int = Field(30, gt=0, le=480)
    reason: Optional[str] = None


class AppointmentSchema(BaseModel):
    appointment_id: str
    patient_id: str
    appointment_date: datetime
    provider_id: Optional[str] = None
    duration_min: int
    reason: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            appointment_id=str(appointment.appointment_id),
            patient_id=str(appointment.patient_id),
            appointment_date=appointment.appointment_date,
            provider_id=appointment.provider_id,
            duration_min=appointment.duration_min,
            reason=appointment.reason,
            created_at=appointment.created_at,
        )
