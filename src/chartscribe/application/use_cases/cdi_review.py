"""CDI improvement pass and review use cases (Stage D)."""

import logging
from typing import Any, Dict

from ...domain.entities.chart import CdiRecord
from ...domain.errors import CdiRecordNotFoundError, ChartNotFoundError
from ...domain.services.cdi_review import CdiReviewSession
from ...domain.services.report_fields import build_report_fields
from ..dto.cdi_dto import EditCdiReviewRequest, UpdateCdiStatusRequest
from ..ports.repositories.chart_repo import CdiRepository, ChartRepository
from ..ports.repositories.patient_repo import AppointmentRepository, PatientRepository
from ..ports.services.cdi_service import CdiService
from ..sessions import CdiReviewRegistry
from .transcribe_chart import _require_appointment

logger = logging.getLogger("chartscribe")


class GenerateCdiReviewUseCase:
    """Run the improvement pass on a saved chart and open a review session."""

    def __init__(
        self,
        chart_repository: ChartRepository,
        appointment_repository: AppointmentRepository,
        cdi_service: CdiService,
        reviews: CdiReviewRegistry,
    ):
        self._chart_repository = chart_repository
        self._appointment_repository = appointment_repository
        self._cdi_service = cdi_service
        self._reviews = reviews

    async def execute(self, appointment_id: str) -> CdiReviewSession:
        chart = await self._chart_repository.find_by_appointment_id(appointment_id)
        if chart is None:
            raise ChartNotFoundError(appointment_id)
        appointment = await _require_appointment(self._appointment_repository, appointment_id)

        patient_info = await self._appointment_repository.get_patient_demographics(appointment_id)
        logger.info(
            f"[GenerateCdi] Improvement pass for appointment={appointment_id}, "
            f"demographics={'yes' if patient_info else 'no'}"
        )
        improvement = await self._cdi_service.improve(chart.field_map(), patient_info)

        session = CdiReviewSession(
            appointment_id=appointment_id,
            original_data=chart.field_map(),
            improved_data=improvement.improved_data,
            cdi_notes=improvement.cdi_notes,
            patient_id=chart.patient_id or str(appointment.patient_id),
            raw_transcription=chart.raw_transcription,
        )
        self._reviews.open(session)
        logger.info(f"[GenerateCdi] Review opened for appointment={appointment_id}: {session.summary()}")
        return session


class EditCdiReviewUseCase:
    def __init__(self, reviews: CdiReviewRegistry):
        self._reviews = reviews

    async def execute(self, request: EditCdiReviewRequest) -> CdiReviewSession:
        session = self._reviews.get(request.appointment_id)
        if request.fields:
            session.edit_many(request.fields)
        if request.cdi_notes is not None:
            session.set_notes(request.cdi_notes)
        return session


class ConfirmCdiReviewUseCase:
    """Persist the reviewed values as the appointment's CDI record."""

    def __init__(self, cdi_repository: CdiRepository, reviews: CdiReviewRegistry):
        self._cdi_repository = cdi_repository
        self._reviews = reviews

    async def execute(self, appointment_id: str) -> CdiRecord:
        session = self._reviews.get(appointment_id)
        # Review stays open until the record is stored
        record = session.build_record()
        saved = await self._cdi_repository.upsert(record)
        session.mark_confirmed()
        self._reviews.close(appointment_id)
        logger.info(
            f"[ConfirmCdi] CDI record saved for appointment={appointment_id}, "
            f"status={saved.cdi_status.value}"
        )
        return saved


class CancelCdiReviewUseCase:
    def __init__(self, reviews: CdiReviewRegistry):
        self._reviews = reviews

    async def execute(self, appointment_id: str) -> None:
        session = self._reviews.get(appointment_id)
        session.cancel()
        self._reviews.close(appointment_id)
        logger.info(f"[CancelCdi] Review discarded for appointment={appointment_id}")


class GetCdiRecordUseCase:
    def __init__(self, cdi_repository: CdiRepository):
        self._cdi_repository = cdi_repository

    async def execute(self, appointment_id: str) -> CdiRecord:
        record = await self._cdi_repository.find_by_appointment_id(appointment_id)
        if record is None:
            raise CdiRecordNotFoundError(appointment_id)
        return record


class UpdateCdiStatusUseCase:
    """Move a saved CDI record between pending, reviewed and approved."""

    def __init__(self, cdi_repository: CdiRepository):
        self._cdi_repository = cdi_repository

    async def execute(self, request: UpdateCdiStatusRequest) -> CdiRecord:
        record = await self._cdi_repository.update_status(
            request.appointment_id, request.status, reviewed_by=request.reviewed_by
        )
        if record is None:
            raise CdiRecordNotFoundError(request.appointment_id)
        logger.info(
            f"[UpdateCdiStatus] appointment={request.appointment_id} -> {request.status.value}"
        )
        return record


class GetCdiReportUseCase:
    """Report fields for an appointment's CDI record."""

    def __init__(
        self,
        chart_repository: ChartRepository,
        cdi_repository: CdiRepository,
        appointment_repository: AppointmentRepository,
        patient_repository: PatientRepository,
    ):
        self._chart_repository = chart_repository
        self._cdi_repository = cdi_repository
        self._appointment_repository = appointment_repository
        self._patient_repository = patient_repository

    async def execute(self, appointment_id: str) -> Dict[str, Any]:
        cdi = await self._cdi_repository.find_by_appointment_id(appointment_id)
        if cdi is None:
            raise CdiRecordNotFoundError(appointment_id)
        appointment = await _require_appointment(self._appointment_repository, appointment_id)
        chart = await self._chart_repository.find_by_appointment_id(appointment_id)
        patient = await self._patient_repository.find_by_id(str(appointment.patient_id))
        return build_report_fields(chart, cdi, patient, appointment)
