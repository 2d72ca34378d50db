"""Save and load chart use cases."""

import logging

from ...domain.entities.chart import CDI_FIELD_KEYS, ChartRecord, resolve_active_note
from ...domain.errors import ChartNotFoundError
from ...domain.services.note_codec import flatten_note, unflatten_chart
from ..dto.note_dto import ActiveNote, LoadedNote, SaveStructuredNoteRequest
from ..ports.repositories.chart_repo import CdiRepository, ChartRepository
from ..ports.repositories.patient_repo import AppointmentRepository
from .transcribe_chart import _require_appointment

logger = logging.getLogger("chartscribe")


class SaveStructuredNoteUseCase:
    """Flatten an edited note and upsert it as the appointment's chart."""

    def __init__(
        self,
        chart_repository: ChartRepository,
        appointment_repository: AppointmentRepository,
    ):
        self._chart_repository = chart_repository
        self._appointment_repository = appointment_repository

    async def execute(self, request: SaveStructuredNoteRequest) -> ChartRecord:
        appointment = await _require_appointment(
            self._appointment_repository, request.appointment_id
        )
        chart = await self._chart_repository.find_by_appointment_id(request.appointment_id)
        if chart is None:
            chart = ChartRecord(
                appointment_id=request.appointment_id,
                patient_id=str(appointment.patient_id),
            )

        columns = flatten_note(request.note, raw_transcription=request.raw_transcription)
        if "raw_transcription" in columns:
            chart.raw_transcription = columns.pop("raw_transcription")
        chart.apply_fields(columns)

        saved = await self._chart_repository.upsert(chart)
        logger.info(f"[SaveNote] Chart saved for appointment={request.appointment_id}")
        return saved


class SaveRawTranscriptionUseCase:
    def __init__(
        self,
        chart_repository: ChartRepository,
        appointment_repository: AppointmentRepository,
    ):
        self._chart_repository = chart_repository
        self._appointment_repository = appointment_repository

    async def execute(self, appointment_id: str, raw_transcription: str) -> ChartRecord:
        appointment = await _require_appointment(self._appointment_repository, appointment_id)
        saved = await self._chart_repository.save_raw_transcription(
            appointment_id, raw_transcription, patient_id=str(appointment.patient_id)
        )
        logger.info(
            f"[SaveTranscription] Raw transcription saved for appointment={appointment_id}, "
            f"chars={len(raw_transcription)}"
        )
        return saved


class LoadStructuredNoteUseCase:
    """Load a stored chart back into StructuredNote form for editing."""

    def __init__(self, chart_repository: ChartRepository):
        self._chart_repository = chart_repository

    async def execute(self, appointment_id: str) -> LoadedNote:
        chart = await self._chart_repository.find_by_appointment_id(appointment_id)
        if chart is None:
            raise ChartNotFoundError(appointment_id)
        return LoadedNote(chart=chart, note=unflatten_chart(chart))


class GetActiveNoteUseCase:
    """Resolve the note consumers should display: CDI values over base values."""

    def __init__(self, chart_repository: ChartRepository, cdi_repository: CdiRepository):
        self._chart_repository = chart_repository
        self._cdi_repository = cdi_repository

    async def execute(self, appointment_id: str) -> ActiveNote:
        chart = await self._chart_repository.find_by_appointment_id(appointment_id)
        cdi = await self._cdi_repository.find_by_appointment_id(appointment_id)
        if chart is None and cdi is None:
            raise ChartNotFoundError(appointment_id)

        fields = resolve_active_note(chart, cdi)
        source = {}
        for key in CDI_FIELD_KEYS:
            if cdi is not None and getattr(cdi, key) is not None:
                source[key] = "cdi"
            elif chart is not None and getattr(chart, key) is not None:
                source[key] = "chart"
            else:
                source[key] = "none"
        return ActiveNote(
            appointment_id=appointment_id,
            fields=fields,
            source=source,
            has_cdi=cdi is not None,
        )
