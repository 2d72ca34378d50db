"""
Chart endpoints: transcribe-and-reveal, save, load and active note.
"""

from fastapi import APIRouter, Request

from ...application.dto.note_dto import SaveStructuredNoteRequest, TranscribeChartRequest
from ...application.use_cases.chart_notes import (
    GetActiveNoteUseCase,
    LoadStructuredNoteUseCase,
    SaveRawTranscriptionUseCase,
    SaveStructuredNoteUseCase,
)
from ...application.use_cases.transcribe_chart import TranscribeChartUseCase
from ..deps import (
    AppointmentRepositoryDep,
    CdiRepositoryDep,
    ChartRepositoryDep,
    ExtractionServiceDep,
    PipelineRegistryDep,
    SequencerFactoryDep,
)
from ..schemas.common import ApiResponse
from ..schemas.notes import (
    ActiveNoteSchema,
    ChartSchema,
    LoadedNoteSchema,
    PipelineSnapshot,
    RevealFrameSchema,
    SaveNoteRequest,
    SaveTranscriptionRequest,
    StructuredNoteSchema,
    TranscribeChartRequestSchema,
    TranscribeChartResponseSchema,
)
from ..utils.responses import ok

router = APIRouter(prefix="/charts", tags=["charts"])


@router.post("/{appointment_id}/transcribe", response_model=ApiResponse[TranscribeChartResponseSchema])
async def transcribe_chart(
    request: Request,
    appointment_id: str,
    body: TranscribeChartRequestSchema,
    chart_repo: ChartRepositoryDep,
    appointment_repo: AppointmentRepositoryDep,
    extraction_service: ExtractionServiceDep,
    pipelines: PipelineRegistryDep,
    sequencer_factory: SequencerFactoryDep,
):
    """
    Extract a structured note, reveal it field by field and save the chart.

    The response carries one frame per reveal step.
    """
    use_case = TranscribeChartUseCase(
        chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory
    )
    result = await use_case.execute(
        TranscribeChartRequest(
            appointment_id=appointment_id,
            transcription=body.transcription,
            animate=body.animate,
        )
    )
    return ok(request, data=TranscribeChartResponseSchema(
        appointment_id=result.appointment_id,
        note=StructuredNoteSchema.from_domain(result.note),
        chart=ChartSchema.from_domain(result.chart),
        frames=[RevealFrameSchema.from_domain(frame) for frame in result.frames],
        pipeline=PipelineSnapshot(**result.pipeline),
    ), message="Chart generated")


@router.put("/{appointment_id}/note", response_model=ApiResponse[ChartSchema])
async def save_note(
    request: Request,
    appointment_id: str,
    body: SaveNoteRequest,
    chart_repo: ChartRepositoryDep,
    appointment_repo: AppointmentRepositoryDep,
):
    chart = await SaveStructuredNoteUseCase(chart_repo, appointment_repo).execute(
        SaveStructuredNoteRequest(
            appointment_id=appointment_id,
            note=body.note.to_domain(),
            raw_transcription=body.raw_transcription,
        )
    )
    return ok(request, data=ChartSchema.from_domain(chart), message="Chart saved")


@router.put("/{appointment_id}/transcription", response_model=ApiResponse[ChartSchema])
async def save_transcription(
    request: Request,
    appointment_id: str,
    body: SaveTranscriptionRequest,
    chart_repo: ChartRepositoryDep,
    appointment_repo: AppointmentRepositoryDep,
):
    chart = await SaveRawTranscriptionUseCase(chart_repo, appointment_repo).execute(
        appointment_id, body.raw_transcription
    )
    return ok(request, data=ChartSchema.from_domain(chart), message="Transcription saved")


@router.get("/{appointment_id}", response_model=ApiResponse[LoadedNoteSchema])
async def get_chart(request: Request, appointment_id: str, chart_repo: ChartRepositoryDep):
    loaded = await LoadStructuredNoteUseCase(chart_repo).execute(appointment_id)
    return ok(request, data=LoadedNoteSchema(
        chart=ChartSchema.from_domain(loaded.chart),
        note=StructuredNoteSchema.from_domain(loaded.note),
    ))


@router.get("/{appointment_id}/active", response_model=ApiResponse[ActiveNoteSchema])
async def get_active_note(
    request: Request,
    appointment_id: str,
    chart_repo: ChartRepositoryDep,
    cdi_repo: CdiRepositoryDep,
):
    """The note to display: CDI values take precedence over the base chart."""
    active = await GetActiveNoteUseCase(chart_repo, cdi_repo).execute(appointment_id)
    return ok(request, data=ActiveNoteSchema(
        appointment_id=active.appointment_id,
        fields=active.fields,
        source=active.source,
        has_cdi=active.has_cdi,
    ))
