"""
Transcript extraction and live capture endpoints.
"""

from fastapi import APIRouter, Request

from ...application.use_cases.capture import (
    AppendCaptureUseCase,
    StartCaptureUseCase,
    StopCaptureUseCase,
)
from ...application.use_cases.transcribe_chart import ExtractStructuredNoteUseCase
from ..deps import CaptureRegistryDep, ExtractionServiceDep
from ..schemas.common import ApiResponse
from ..schemas.notes import (
    CaptureAppendRequest,
    CaptureStateSchema,
    ProcessTranscriptionRequest,
    StructuredNoteSchema,
)
from ..utils.responses import ok

router = APIRouter(prefix="/transcription", tags=["transcription"])


@router.post("/process", response_model=ApiResponse[StructuredNoteSchema])
async def process_transcription(
    request: Request, body: ProcessTranscriptionRequest, extraction_service: ExtractionServiceDep
):
    """Extract a normalized structured note from a transcript without saving it."""
    note = await ExtractStructuredNoteUseCase(extraction_service).execute(body.transcription)
    return ok(request, data=StructuredNoteSchema.from_domain(note), message="Note extracted")


@router.post("/{appointment_id}/capture/start", response_model=ApiResponse[CaptureStateSchema])
async def start_capture(request: Request, appointment_id: str, sessions: CaptureRegistryDep):
    session = await StartCaptureUseCase(sessions).execute(appointment_id)
    return ok(request, data=CaptureStateSchema(
        appointment_id=appointment_id, recording=session.recording, transcript=session.transcript
    ), message="Recording started")


@router.post("/{appointment_id}/capture/append", response_model=ApiResponse[CaptureStateSchema])
async def append_capture(
    request: Request, appointment_id: str, body: CaptureAppendRequest, sessions: CaptureRegistryDep
):
    session = await AppendCaptureUseCase(sessions).execute(
        appointment_id, body.results, start_index=body.start_index
    )
    return ok(request, data=CaptureStateSchema(
        appointment_id=appointment_id, recording=session.recording, transcript=session.transcript
    ))


@router.post("/{appointment_id}/capture/stop", response_model=ApiResponse[CaptureStateSchema])
async def stop_capture(request: Request, appointment_id: str, sessions: CaptureRegistryDep):
    transcript = await StopCaptureUseCase(sessions).execute(appointment_id)
    return ok(request, data=CaptureStateSchema(
        appointment_id=appointment_id, recording=False, transcript=transcript
    ), message="Recording stopped")
