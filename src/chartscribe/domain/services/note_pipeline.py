"""Explicit state machine for one note's extract-and-reveal run.

    idle -> extracting -> revealing(step 0..11) -> complete

A failed extraction returns to idle. Starting a new run while extracting or
revealing is refused, which keeps the pipeline single-flight per note.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..enums.workflow import PipelineState
from ..errors import InvalidPipelineTransitionError, RevealInProgressError


@dataclass
class NotePipeline:
    appointment_id: Optional[str] = None
    state: PipelineState = PipelineState.IDLE
    step: Optional[int] = None
    animating_field: Optional[str] = None
    progress: int = 0

    @property
    def busy(self) -> bool:
        return self.state in (PipelineState.EXTRACTING, PipelineState.REVEALING)

    def _require(self, requested: PipelineState, *allowed: PipelineState) -> None:
        if self.state not in allowed:
            raise InvalidPipelineTransitionError(self.state.value, requested.value)

    def start_extraction(self) -> None:
        if self.busy:
            raise RevealInProgressError(self.appointment_id, self.state.value)
        self.state = PipelineState.EXTRACTING
        self.step = None
        self.animating_field = None
        self.progress = 0

    def start_reveal(self) -> None:
        self._require(PipelineState.REVEALING, PipelineState.EXTRACTING)
        self.state = PipelineState.REVEALING
        self.step = 0
        self.progress = 0

    def advance(self, step: int, field: str, progress: int) -> None:
        self._require(PipelineState.REVEALING, PipelineState.REVEALING)
        self.step = step
        self.animating_field = field
        self.progress = progress

    def complete(self) -> None:
        self._require(PipelineState.COMPLETE, PipelineState.REVEALING)
        self.state = PipelineState.COMPLETE
        self.animating_field = None
        self.progress = 100

    def abort(self) -> None:
        """Return to idle after a Stage B failure."""
        self._require(PipelineState.IDLE, PipelineState.EXTRACTING)
        self.state = PipelineState.IDLE
        self.step = None
        self.animating_field = None
        self.progress = 0

    def reset(self) -> None:
        """Release an abandoned run so the note can be processed again."""
        self.state = PipelineState.IDLE
        self.step = None
        self.animating_field = None
        self.progress = 0

    def snapshot(self) -> Dict[str, Any]:
        return {
            "appointment_id": self.appointment_id,
            "state": self.state.value,
            "step": self.step,
            "animating_field": self.animating_field,
            "progress": self.progress,
        }
