"""Patient registration and appointment scheduling."""

import logging

from ...domain.entities.patient import Appointment, Patient
from ...domain.errors import AppointmentNotFoundError, PatientNotFoundError
from ...domain.value_objects.record_id import AppointmentId, PatientId
from ..dto.patient_dto import RegisterPatientRequest, ScheduleAppointmentRequest
from ..ports.repositories.patient_repo import AppointmentRepository, PatientRepository

logger = logging.getLogger("chartscribe")


class RegisterPatientUseCase:
    """Use case for registering a new patient."""

    def __init__(self, patient_repository: PatientRepository):
        self._patient_repository = patient_repository

    async def execute(self, request: RegisterPatientRequest) -> Patient:
        patient = Patient(
            patient_id=PatientId.generate(),
            full_name=request.full_name,
            date_of_birth=request.date_of_birth,
            gender=(request.gender or "").strip() or None,
            phone=request.phone,
            email=request.email,
            address=request.address,
            insurance_provider=request.insurance_provider,
            policy_number=request.policy_number,
        )
        saved = await self._patient_repository.save(patient)
        logger.info(f"[RegisterPatient] Registered patient_id={saved.patient_id}")
        return saved


class GetPatientUseCase:
    def __init__(self, patient_repository: PatientRepository):
        self._patient_repository = patient_repository

    async def execute(self, patient_id: str) -> Patient:
        patient = await self._patient_repository.find_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient


class ScheduleAppointmentUseCase:
    """Create an appointment for an existing patient."""

    def __init__(
        self,
        patient_repository: PatientRepository,
        appointment_repository: AppointmentRepository,
    ):
        self._patient_repository = patient_repository
        self._appointment_repository = appointment_repository

    async def execute(self, request: ScheduleAppointmentRequest) -> Appointment:
        patient = await self._patient_repository.find_by_id(request.patient_id)
        if patient is None:
            raise PatientNotFoundError(request.patient_id)

        appointment = Appointment(
            appointment_id=AppointmentId.generate(),
            patient_id=patient.patient_id,
            appointment_date=request.appointment_date,
            provider_id=request.provider_id,
            duration_min=request.duration_min,
            reason=request.reason,
        )
        saved = await self._appointment_repository.save(appointment)
        logger.info(
            f"[ScheduleAppointment] appointment_id={saved.appointment_id} "
            f"patient_id={saved.patient_id}"
        )
        return saved


class GetAppointmentUseCase:
    def __init__(self, appointment_repository: AppointmentRepository):
        self._appointment_repository = appointment_repository

    async def execute(self, appointment_id: str) -> Appointment:
        appointment = await self._appointment_repository.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)
        return appointment
