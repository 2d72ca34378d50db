"""
Pipeline state machine transitions.
"""

import pytest

from chartscribe.application.sessions import PipelineRegistry
from chartscribe.domain.enums.workflow import PipelineState
from chartscribe.domain.errors import InvalidPipelineTransitionError, RevealInProgressError
from chartscribe.domain.services.note_pipeline import NotePipeline


def test_happy_path():
    pipeline = NotePipeline(appointment_id="APT-1")
    pipeline.start_extraction()
    assert pipeline.state is PipelineState.EXTRACTING
    assert pipeline.busy

    pipeline.start_reveal()
    pipeline.advance(3, "history.surgical_history", 33)
    assert pipeline.snapshot() == {
        "appointment_id": "APT-1",
        "state": "revealing",
        "step": 3,
        "animating_field": "history.surgical_history",
        "progress": 33,
    }

    pipeline.complete()
    assert pipeline.state is PipelineState.COMPLETE
    assert not pipeline.busy


def test_new_run_refused_while_busy():
    pipeline = NotePipeline(appointment_id="APT-1")
    pipeline.start_extraction()

    with pytest.raises(RevealInProgressError) as exc_info:
        pipeline.start_extraction()
    assert exc_info.value.details["state"] == "extracting"


def test_completed_note_can_be_reprocessed():
    pipeline = NotePipeline()
    pipeline.start_extraction()
    pipeline.start_reveal()
    pipeline.complete()

    pipeline.start_extraction()
    assert pipeline.state is PipelineState.EXTRACTING
    assert pipeline.progress == 0


def test_extraction_failure_returns_to_idle():
    pipeline = NotePipeline()
    pipeline.start_extraction()
    pipeline.abort()

    assert pipeline.state is PipelineState.IDLE
    assert pipeline.step is None


@pytest.mark.parametrize(
    "action",
    [
        lambda p: p.start_reveal(),
        lambda p: p.advance(0, "chief_complaint", 8),
        lambda p: p.complete(),
        lambda p: p.abort(),
    ],
)
def test_illegal_transitions_from_idle(action):
    with pytest.raises(InvalidPipelineTransitionError):
        action(NotePipeline())


def test_registry_releases_only_finished_pipelines():
    registry = PipelineRegistry()
    registry.get("APT-1").start_extraction()
    registry.get("APT-2")

    registry.release("APT-1")
    registry.release("APT-2")
    registry.release("APT-3")

    assert len(registry) == 1
    assert registry.get("APT-1").state is PipelineState.EXTRACTING
