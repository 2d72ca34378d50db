"""
MongoDB implementations of PatientRepository and AppointmentRepository.
"""

from typing import Optional

from pymongo.errors import PyMongoError

from chartscribe.application.ports.repositories.patient_repo import (
    AppointmentRepository,
    PatientRepository,
)
from chartscribe.domain.entities.chart import utcnow
from chartscribe.domain.entities.patient import Appointment, Patient, PatientInfo
from chartscribe.domain.errors import PersistenceError
from chartscribe.domain.value_objects.record_id import AppointmentId, PatientId

from ..models.patient_m import AppointmentMongo, PatientMongo, date_to_datetime


class MongoPatientRepository(PatientRepository):
    """MongoDB implementation of PatientRepository."""

    async def save(self, patient: Patient) -> Patient:
        try:
            patient_mongo = await PatientMongo.find_one(
                PatientMongo.patient_id == str(patient.patient_id)
            )
            if patient_mongo is None:
                patient_mongo = PatientMongo(
                    patient_id=str(patient.patient_id),
                    full_name=patient.full_name,
                    created_at=patient.created_at,
                )
            self._domain_to_mongo(patient, patient_mongo)
            await patient_mongo.save()
        except PyMongoError as e:
            raise PersistenceError("patient save", str(e)) from e
        return self._mongo_to_domain(patient_mongo)

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        try:
            patient_mongo = await PatientMongo.find_one(PatientMongo.patient_id == patient_id)
        except PyMongoError as e:
            raise PersistenceError("patient lookup", str(e)) from e
        if not patient_mongo:
            return None
        return self._mongo_to_domain(patient_mongo)

    def _domain_to_mongo(self, patient: Patient, patient_mongo: PatientMongo) -> None:
        patient_mongo.full_name = patient.full_name
        patient_mongo.date_of_birth = date_to_datetime(patient.date_of_birth)
        patient_mongo.gender = patient.gender
        patient_mongo.phone = patient.phone
        patient_mongo.email = patient.email
        patient_mongo.address = patient.address
        patient_mongo.insurance_provider = patient.insurance_provider
        patient_mongo.policy_number = patient.policy_number
        patient_mongo.updated_at = utcnow()

    def _mongo_to_domain(self, patient_mongo: PatientMongo) -> Patient:
        dob = patient_mongo.date_of_birth
        return Patient(
            patient_id=PatientId(patient_mongo.patient_id),
            full_name=patient_mongo.full_name,
            date_of_birth=dob.date() if dob else None,
            gender=patient_mongo.gender,
            phone=patient_mongo.phone,
            email=patient_mongo.email,
            address=patient_mongo.address,
            insurance_provider=patient_mongo.insurance_provider,
            policy_number=patient_mongo.policy_number,
            created_at=patient_mongo.created_at,
            updated_at=patient_mongo.updated_at,
        )


class MongoAppointmentRepository(AppointmentRepository):
    """MongoDB implementation of AppointmentRepository."""

    def __init__(self, patient_repository: PatientRepository):
        self.patient_repository = patient_repository

    async def save(self, appointment: Appointment) -> Appointment:
        try:
            appointment_mongo = await AppointmentMongo.find_one(
                AppointmentMongo.appointment_id == str(appointment.appointment_id)
            )
            if appointment_mongo is None:
                appointment_mongo = AppointmentMongo(
                    appointment_id=str(appointment.appointment_id),
                    patient_id=str(appointment.patient_id),
                    appointment_date=appointment.appointment_date,
                    created_at=appointment.created_at,
                )
            appointment_mongo.patient_id = str(appointment.patient_id)
            appointment_mongo.appointment_date = appointment.appointment_date
            appointment_mongo.provider_id = appointment.provider_id
            appointment_mongo.duration_min = appointment.duration_min
            appointment_mongo.reason = appointment.reason
            await appointment_mongo.save()
        except PyMongoError as e:
            raise PersistenceError("appointment save", str(e)) from e
        return self._mongo_to_domain(appointment_mongo)

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        try:
            appointment_mongo = await AppointmentMongo.find_one(
                AppointmentMongo.appointment_id == appointment_id
            )
        except PyMongoError as e:
            raise PersistenceError("appointment lookup", str(e)) from e
        if not appointment_mongo:
            return None
        return self._mongo_to_domain(appointment_mongo)

    async def get_patient_demographics(self, appointment_id: str) -> Optional[PatientInfo]:
        appointment = await self.find_by_id(appointment_id)
        if appointment is None:
            return None
        patient = await self.patient_repository.find_by_id(str(appointment.patient_id))
        if patient is None:
            return None
        return patient.demographics()

    def _mongo_to_domain(self, appointment_mongo: AppointmentMongo) -> Appointment:
        return Appointment(
            appointment_id=AppointmentId(appointment_mongo.appointment_id),
            patient_id=PatientId(appointment_mongo.patient_id),
            appointment_date=appointment_mongo.appointment_date,
            provider_id=appointment_mongo.provider_id,
            duration_min=appointment_mongo.duration_min,
            reason=appointment_mongo.reason,
            created_at=appointment_mongo.created_at,
        )
