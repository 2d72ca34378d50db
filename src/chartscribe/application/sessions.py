"""In-process registries for per-appointment pipeline state.

Review sessions, capture sessions and pipeline state machines live only in
memory between HTTP calls; nothing here is persisted.
"""

from typing import Dict, Optional

from ..domain.errors import CaptureSessionNotFoundError, ReviewNotFoundError
from ..domain.services.capture_session import TranscriptCaptureSession
from ..domain.services.cdi_review import CdiReviewSession
from ..domain.services.note_pipeline import NotePipeline


class PipelineRegistry:
    """One NotePipeline per appointment."""

    def __init__(self) -> None:
        self._pipelines: Dict[str, NotePipeline] = {}

    def get(self, appointment_id: str) -> NotePipeline:
        pipeline = self._pipelines.get(appointment_id)
        if pipeline is None:
            pipeline = NotePipeline(appointment_id=appointment_id)
            self._pipelines[appointment_id] = pipeline
        return pipeline

    def release(self, appointment_id: str) -> None:
        """Drop an idle or complete pipeline; a busy one stays registered."""
        pipeline = self._pipelines.get(appointment_id)
        if pipeline is not None and not pipeline.busy:
            del self._pipelines[appointment_id]

    def __len__(self) -> int:
        return len(self._pipelines)


class CdiReviewRegistry:
    """Open CDI review per appointment; a new review replaces the previous one."""

    def __init__(self) -> None:
        self._reviews: Dict[str, CdiReviewSession] = {}

    def open(self, session: CdiReviewSession) -> CdiReviewSession:
        self._reviews[session.appointment_id] = session
        return session

    def get(self, appointment_id: str) -> CdiReviewSession:
        session = self._reviews.get(appointment_id)
        if session is None:
            raise ReviewNotFoundError(appointment_id)
        return session

    def close(self, appointment_id: str) -> Optional[CdiReviewSession]:
        return self._reviews.pop(appointment_id, None)


class CaptureSessionRegistry:
    """Active transcript capture session per appointment."""

    def __init__(self) -> None:
        self._sessions: Dict[str, TranscriptCaptureSession] = {}

    def start(self, appointment_id: str) -> TranscriptCaptureSession:
        session = TranscriptCaptureSession()
        session.start()
        self._sessions[appointment_id] = session
        return session

    def get(self, appointment_id: str) -> TranscriptCaptureSession:
        session = self._sessions.get(appointment_id)
        if session is None:
            raise CaptureSessionNotFoundError(appointment_id)
        return session

    def stop(self, appointment_id: str) -> str:
        session = self.get(appointment_id)
        transcript = session.stop()
        del self._sessions[appointment_id]
        return transcript
