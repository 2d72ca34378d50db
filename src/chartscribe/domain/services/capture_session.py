"""Transcript capture session.

Wraps a continuous speech recognizer's output. The recognizer reports the
current text of every segment on each update; the transcript is those
segments concatenated. One session per recording start.
"""

from typing import Callable, List, Optional, Sequence

from ..errors import CaptureSessionClosedError

TranscriptCallback = Callable[[str], None]


class TranscriptCaptureSession:
    def __init__(self, on_update: Optional[TranscriptCallback] = None) -> None:
        self._on_update = on_update
        self._segments: List[str] = []
        self._recording = False
        self._stopped = False

    @property
    def recording(self) -> bool:
        return self._recording

    @property
    def transcript(self) -> str:
        return "".join(self._segments)

    def start(self) -> None:
        if self._stopped:
            raise CaptureSessionClosedError()
        self._recording = True

    def push_results(self, results: Sequence[str], start_index: int = 0) -> str:
        """Replace segments from start_index onward with the recognizer's latest results."""
        if not self._recording:
            raise CaptureSessionClosedError()
        if start_index < 0 or start_index > len(self._segments):
            raise ValueError(
                f"start_index must be between 0 and {len(self._segments)}, got {start_index}"
            )
        self._segments[start_index:] = [segment or "" for segment in results]
        text = self.transcript
        if self._on_update is not None:
            self._on_update(text)
        return text

    def stop(self) -> str:
        self._recording = False
        self._stopped = True
        return self.transcript
