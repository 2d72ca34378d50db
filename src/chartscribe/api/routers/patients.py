"""
Patient and appointment endpoints.
"""

from fastapi import APIRouter, Request, status

from ...application.dto.patient_dto import RegisterPatientRequest, ScheduleAppointmentRequest
from ...application.use_cases.patients import (
    GetAppointmentUseCase,
    GetPatientUseCase,
    RegisterPatientUseCase,
    ScheduleAppointmentUseCase,
)
from ..deps import AppointmentRepositoryDep, PatientRepositoryDep
from ..schemas.common import ApiResponse
from ..schemas.patient import (
    AppointmentSchema,
    PatientSchema,
    RegisterPatientSchema,
    ScheduleAppointmentSchema,
)
from ..utils.responses import ok

router = APIRouter(tags=["patients"])


@router.post(
    "/patients/",
    response_model=ApiResponse[PatientSchema],
    status_code=status.HTTP_201_CREATED,
)
async def register_patient(
    request: Request, body: RegisterPatientSchema, patient_repo: PatientRepositoryDep
):
    use_case = RegisterPatientUseCase(patient_repo)
    patient = await use_case.execute(RegisterPatientRequest(**body.model_dump()))
    return ok(request, data=PatientSchema.from_domain(patient), message="Patient registered")


@router.get("/patients/{patient_id}", response_model=ApiResponse[PatientSchema])
async def get_patient(request: Request, patient_id: str, patient_repo: PatientRepositoryDep):
    patient = await GetPatientUseCase(patient_repo).execute(patient_id)
    return ok(request, data=PatientSchema.from_domain(patient))


@router.post(
    "/appointments/",
    response_model=ApiResponse[AppointmentSchema],
    status_code=status.HTTP_201_CREATED,
)
async def schedule_appointment(
    request: Request,
    body: ScheduleAppointmentSchema,
    patient_repo: PatientRepositoryDep,
    appointment_repo: AppointmentRepositoryDep,
):
    use_case = ScheduleAppointmentUseCase(patient_repo, appointment_repo)
    appointment = await use_case.execute(ScheduleAppointmentRequest(**body.model_dump()))
    return ok(request, data=AppointmentSchema.from_domain(appointment), message="Appointment scheduled")


@router.get("/appointments/{appointment_id}", response_model=ApiResponse[AppointmentSchema])
async def get_appointment(
    request: Request, appointment_id: str, appointment_repo: AppointmentRepositoryDep
):
    appointment = await GetAppointmentUseCase(appointment_repo).execute(appointment_id)
    return ok(request, data=AppointmentSchema.from_domain(appointment))
