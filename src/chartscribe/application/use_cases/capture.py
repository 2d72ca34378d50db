"""Live transcript capture use cases."""

import logging
from typing import List

from ...domain.services.capture_session import TranscriptCaptureSession
from ..sessions import CaptureSessionRegistry

logger = logging.getLogger("chartscribe")


class StartCaptureUseCase:
    def __init__(self, sessions: CaptureSessionRegistry):
        self._sessions = sessions

    async def execute(self, appointment_id: str) -> TranscriptCaptureSession:
        session = self._sessions.start(appointment_id)
        logger.info(f"[Capture] Recording started for appointment={appointment_id}")
        return session


class AppendCaptureUseCase:
    """Push recognizer segments; segments from start_index on are replaced."""

    def __init__(self, sessions: CaptureSessionRegistry):
        self._sessions = sessions

    async def execute(
        self, appointment_id: str, results: List[str], start_index: int = 0
    ) -> TranscriptCaptureSession:
        session = self._sessions.get(appointment_id)
        session.push_results(results, start_index=start_index)
        return session


class StopCaptureUseCase:
    def __init__(self, sessions: CaptureSessionRegistry):
        self._sessions = sessions

    async def execute(self, appointment_id: str) -> str:
        transcript = self._sessions.stop(appointment_id)
        logger.info(
            f"[Capture] Recording stopped for appointment={appointment_id}, chars={len(transcript)}"
        )
        return transcript
