"""
Transcript capture session and its per-appointment registry.
"""

import pytest

from chartscribe.application.sessions import CaptureSessionRegistry
from chartscribe.domain.errors import CaptureSessionClosedError, CaptureSessionNotFoundError
from chartscribe.domain.services.capture_session import TranscriptCaptureSession


def test_transcript_is_concatenation_of_segments():
    updates = []
    session = TranscriptCaptureSession(on_update=updates.append)
    session.start()

    session.push_results(["Patient reports "])
    session.push_results(["Patient reports chest pain. "], start_index=0)
    session.push_results(["Started two days ago."], start_index=1)

    assert session.transcript == "Patient reports chest pain. Started two days ago."
    assert updates[-1] == session.transcript
    assert len(updates) == 3


def test_push_after_stop_is_refused():
    session = TranscriptCaptureSession()
    session.start()
    session.push_results(["Hello"])

    assert session.stop() == "Hello"
    assert not session.recording
    with pytest.raises(CaptureSessionClosedError):
        session.push_results(["late"])
    with pytest.raises(CaptureSessionClosedError):
        session.start()


def test_push_before_start_is_refused():
    with pytest.raises(CaptureSessionClosedError):
        TranscriptCaptureSession().push_results(["x"])


def test_start_index_out_of_range():
    session = TranscriptCaptureSession()
    session.start()

    with pytest.raises(ValueError):
        session.push_results(["x"], start_index=2)


def test_registry_hands_back_final_transcript():
    registry = CaptureSessionRegistry()
    registry.start("APT-1").push_results(["One. ", "Two."])

    assert registry.stop("APT-1") == "One. Two."
    with pytest.raises(CaptureSessionNotFoundError):
        registry.get("APT-1")
