"""Field reveal sequencer.

Reveals an extracted StructuredNote into a blank form one step at a time in
a fixed order. At every point the working note is a complete StructuredNote:
unrevealed fields keep their blank defaults and revealed fields hold their
final values.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional, Union

from ..entities.structured_note import StructuredNote
from ..errors import RevealInProgressError
from .note_pipeline import NotePipeline

REVEAL_ORDER = [
    "chief_complaint",
    "history_of_present_illness",
    "history.past_medical_history",
    "history.surgical_history",
    "history.family_history",
    "history.social_history",
    "review_of_systems",
    "physical_exam",
    "vitals",
    "diagnosis",
    "plan",
    "extra_info",
]

TOTAL_STEPS = len(REVEAL_ORDER)


def reveal_progress(completed_steps: int) -> int:
    return round(100 * completed_steps / TOTAL_STEPS)


def apply_step(working: StructuredNote, extracted: StructuredNote, field: str) -> None:
    """Copy one step's field(s) from the extracted note into the working note."""
    if field.startswith("history."):
        attr = field.split(".", 1)[1]
        setattr(working.history, attr, getattr(extracted.history, attr))
    elif field in ("vitals", "diagnosis"):
        setattr(working, field, getattr(extracted.copy(), field))
    elif field in REVEAL_ORDER:
        setattr(working, field, getattr(extracted, field))
    else:
        raise ValueError(f"Unknown reveal step: {field}")


@dataclass(frozen=True)
class RevealFrame:
    step: int
    field: str
    progress: int
    note: StructuredNote

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "field": self.field,
            "progress": self.progress,
            "note": self.note.to_dict(),
        }


def reveal_frames(extracted: StructuredNote) -> Iterator[RevealFrame]:
    """Delay-free reveal: one frame per step with a snapshot of the working note."""
    working = StructuredNote.empty()
    for index, field in enumerate(REVEAL_ORDER):
        apply_step(working, extracted, field)
        yield RevealFrame(index, field, reveal_progress(index + 1), working.copy())


StepCallback = Callable[[RevealFrame], Union[None, Awaitable[None]]]


class RevealSequencer:
    """Cooperative, single-flight reveal of one note.

    For each step: mark the field animating, wait the settle delay, copy the
    field, emit a frame, wait the reveal delay.
    """

    def __init__(
        self,
        settle_delay: float = 0.15,
        reveal_delay: float = 0.35,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        self._settle_delay = settle_delay
        self._reveal_delay = reveal_delay
        self._sleep = sleep or asyncio.sleep
        self._running = False
        self.animating_field: Optional[str] = None
        self.progress = 0
        self.working_note = StructuredNote.empty()

    @property
    def running(self) -> bool:
        return self._running

    async def run(
        self,
        extracted: StructuredNote,
        on_step: Optional[StepCallback] = None,
        pipeline: Optional[NotePipeline] = None,
    ) -> StructuredNote:
        if self._running:
            raise RevealInProgressError()
        self._running = True
        self.working_note = StructuredNote.empty()
        self.progress = 0
        if pipeline is not None:
            pipeline.start_reveal()
        try:
            for index, field in enumerate(REVEAL_ORDER):
                self.animating_field = field
                self.progress = reveal_progress(index + 1)
                if pipeline is not None:
                    pipeline.advance(index, field, self.progress)

                await self._sleep(self._settle_delay)
                apply_step(self.working_note, extracted, field)

                if on_step is not None:
                    result = on_step(
                        RevealFrame(index, field, self.progress, self.working_note.copy())
                    )
                    if inspect.isawaitable(result):
                        await result

                await self._sleep(self._reveal_delay)

            self.animating_field = None
            if pipeline is not None:
                pipeline.complete()
            return self.working_note.copy()
        finally:
            self._running = False
