"""Transcript-to-chart use cases (Stages B and C plus persistence)."""

import logging
from typing import Callable, List, Optional

from ...domain.entities.chart import ChartRecord
from ...domain.entities.patient import Appointment
from ...domain.entities.structured_note import StructuredNote
from ...domain.errors import AppointmentNotFoundError, DomainError
from ...domain.services.extraction_contract import require_transcript
from ...domain.services.note_codec import flatten_note
from ...domain.services.note_pipeline import NotePipeline
from ...domain.services.reveal_sequencer import RevealFrame, RevealSequencer
from ..dto.note_dto import TranscribeChartRequest, TranscribeChartResponse
from ..ports.repositories.chart_repo import ChartRepository
from ..ports.repositories.patient_repo import AppointmentRepository
from ..ports.services.extraction_service import NoteExtractionService
from ..sessions import PipelineRegistry

logger = logging.getLogger("chartscribe")

SequencerFactory = Callable[[bool], RevealSequencer]


async def _require_appointment(
    appointment_repository: AppointmentRepository, appointment_id: str
) -> Appointment:
    appointment = await appointment_repository.find_by_id(appointment_id)
    if appointment is None:
        raise AppointmentNotFoundError(appointment_id)
    return appointment


class ExtractStructuredNoteUseCase:
    """Stage B only: transcript in, normalized StructuredNote out."""

    def __init__(self, extraction_service: NoteExtractionService):
        self._extraction_service = extraction_service

    async def execute(self, transcription: str) -> StructuredNote:
        require_transcript(transcription)
        logger.info(f"[ExtractNote] Extracting note, transcript_chars={len(transcription)}")
        return await self._extraction_service.extract(transcription)


class TranscribeChartUseCase:
    """Extract, reveal and persist a chart for one appointment."""

    def __init__(
        self,
        chart_repository: ChartRepository,
        appointment_repository: AppointmentRepository,
        extraction_service: NoteExtractionService,
        pipelines: PipelineRegistry,
        sequencer_factory: SequencerFactory,
    ):
        self._chart_repository = chart_repository
        self._appointment_repository = appointment_repository
        self._extraction_service = extraction_service
        self._pipelines = pipelines
        self._sequencer_factory = sequencer_factory

    async def execute(self, request: TranscribeChartRequest) -> TranscribeChartResponse:
        require_transcript(request.transcription)
        appointment = await _require_appointment(
            self._appointment_repository, request.appointment_id
        )

        pipeline = self._pipelines.get(request.appointment_id)
        pipeline.start_extraction()
        logger.info(
            f"[TranscribeChart] Extraction started for appointment={request.appointment_id}, "
            f"transcript_chars={len(request.transcription)}"
        )
        try:
            return await self._run(request, appointment, pipeline)
        finally:
            self._pipelines.release(request.appointment_id)

    async def _run(
        self,
        request: TranscribeChartRequest,
        appointment: Appointment,
        pipeline: NotePipeline,
    ) -> TranscribeChartResponse:
        try:
            extracted = await self._extraction_service.extract(request.transcription)
        except DomainError as e:
            pipeline.abort()
            logger.warning(
                f"[TranscribeChart] Extraction failed for appointment={request.appointment_id}: "
                f"{e.error_code}"
            )
            raise
        except BaseException:
            pipeline.abort()
            raise

        frames: List[RevealFrame] = []
        sequencer = self._sequencer_factory(request.animate)
        try:
            note = await sequencer.run(extracted, on_step=frames.append, pipeline=pipeline)
        except BaseException:
            # Abandoned reveal: nothing is persisted, the note may be retried
            pipeline.reset()
            raise

        chart = await self._chart_repository.find_by_appointment_id(request.appointment_id)
        if chart is None:
            chart = ChartRecord(
                appointment_id=request.appointment_id,
                patient_id=str(appointment.patient_id),
            )
        columns = flatten_note(note, raw_transcription=request.transcription)
        chart.raw_transcription = columns.pop("raw_transcription")
        chart.apply_fields(columns)
        saved = await self._chart_repository.upsert(chart)

        logger.info(
            f"[TranscribeChart] Chart saved for appointment={request.appointment_id}, "
            f"diagnoses={len([d for d in note.diagnosis if d.diagnosis_name])}"
        )
        return TranscribeChartResponse(
            appointment_id=request.appointment_id,
            note=note,
            chart=saved,
            frames=frames,
            pipeline=pipeline.snapshot(),
        )


def build_sequencer_factory(
    settle_delay_ms: int, reveal_delay_ms: int, animate_by_default: bool = False
) -> SequencerFactory:
    """Sequencers with configured delays when animating, zero delays otherwise."""

    def factory(animate: Optional[bool] = None) -> RevealSequencer:
        if animate or animate_by_default:
            return RevealSequencer(settle_delay_ms / 1000.0, reveal_delay_ms / 1000.0)
        return RevealSequencer(0.0, 0.0)

    return factory
