"""
Application use cases against in-memory repositories and fake services.
"""

import asyncio

import pytest

from chartscribe.application.dto.cdi_dto import EditCdiReviewRequest, UpdateCdiStatusRequest
from chartscribe.application.dto.note_dto import SaveStructuredNoteRequest, TranscribeChartRequest
from chartscribe.application.use_cases.cdi_review import (
    CancelCdiReviewUseCase,
    ConfirmCdiReviewUseCase,
    EditCdiReviewUseCase,
    GenerateCdiReviewUseCase,
    GetCdiReportUseCase,
    UpdateCdiStatusUseCase,
)
from chartscribe.application.use_cases.chart_notes import (
    GetActiveNoteUseCase,
    LoadStructuredNoteUseCase,
    SaveRawTranscriptionUseCase,
    SaveStructuredNoteUseCase,
)
from chartscribe.application.use_cases.transcribe_chart import TranscribeChartUseCase
from chartscribe.domain.entities.chart import ChartRecord
from chartscribe.domain.entities.structured_note import StructuredNote
from chartscribe.domain.enums.workflow import CdiStatus, PipelineState, ReviewStatus
from chartscribe.domain.errors import (
    AppointmentNotFoundError,
    CdiRecordNotFoundError,
    ChartNotFoundError,
    EmptyTranscriptError,
    ExtractionServiceError,
    PersistenceError,
    ReviewNotFoundError,
    UnknownFieldError,
)

from conftest import (
    APPOINTMENT_ID,
    EXTRACTED_PAYLOAD,
    PATIENT_ID,
    FakeExtractionService,
    InMemoryCdiRepository,
)

TRANSCRIPT = "Doctor: What brings you in?\nPatient: Chest pain for two days."


def _transcribe(chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory):
    use_case = TranscribeChartUseCase(
        chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory
    )
    return asyncio.run(
        use_case.execute(TranscribeChartRequest(appointment_id=APPOINTMENT_ID, transcription=TRANSCRIPT))
    )


# ---------------------------------------------------------------------------
# Transcribe and save
# ---------------------------------------------------------------------------


def test_transcribe_persists_flattened_chart(
    chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory
):
    result = _transcribe(chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory)

    assert len(result.frames) == 12
    assert result.frames[-1].progress == 100
    assert result.pipeline["state"] == PipelineState.COMPLETE.value
    assert result.note == StructuredNote.from_dict(EXTRACTED_PAYLOAD)

    stored = chart_repo.charts[APPOINTMENT_ID]
    assert stored.patient_id == PATIENT_ID
    assert stored.raw_transcription == TRANSCRIPT
    assert stored.chief_complaint == "Chest pain for two days"
    assert stored.vital_signs == "Height: 170 cm, Weight: 80 kg, BMI: 27.7, Blood Pressure: 150/95"
    assert stored.diagnosis == (
        "1. Stable angina\n   Treatment: Nitroglycerin as needed\n\n"
        "2. Hypertension\n   Treatment: Lisinopril 10mg daily"
    )
    assert "Surgical History" not in stored.history
    assert stored.assessment is None
    assert extraction_service.calls == [TRANSCRIPT]
    assert len(pipelines) == 0


def test_transcribe_again_updates_same_chart(
    chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory
):
    first = _transcribe(chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory)
    second = _transcribe(chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory)

    assert len(chart_repo.charts) == 1
    assert second.chart.created_at == first.chart.created_at


def test_extraction_failure_persists_nothing(chart_repo, appointment_repo, pipelines, sequencer_factory):
    failing = FakeExtractionService(error=ExtractionServiceError("timeout"))

    with pytest.raises(ExtractionServiceError):
        _transcribe(chart_repo, appointment_repo, failing, pipelines, sequencer_factory)

    assert chart_repo.upserts == 0
    assert len(pipelines) == 0
    assert pipelines.get(APPOINTMENT_ID).state is PipelineState.IDLE


def test_transcribe_requires_transcript_and_appointment(
    chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory
):
    use_case = TranscribeChartUseCase(
        chart_repo, appointment_repo, extraction_service, pipelines, sequencer_factory
    )
    with pytest.raises(EmptyTranscriptError):
        asyncio.run(use_case.execute(TranscribeChartRequest(APPOINTMENT_ID, "  \n")))
    with pytest.raises(AppointmentNotFoundError):
        asyncio.run(use_case.execute(TranscribeChartRequest("APT-MISSING", TRANSCRIPT)))
    assert extraction_service.calls == []


def test_save_and_load_edited_note(chart_repo, appointment_repo):
    note = StructuredNote.from_dict(EXTRACTED_PAYLOAD)
    note.plan = "Refer to cardiology."
    asyncio.run(
        SaveStructuredNoteUseCase(chart_repo, appointment_repo).execute(
            SaveStructuredNoteRequest(appointment_id=APPOINTMENT_ID, note=note)
        )
    )

    loaded = asyncio.run(LoadStructuredNoteUseCase(chart_repo).execute(APPOINTMENT_ID))

    assert loaded.chart.raw_transcription is None
    assert loaded.note.plan == "Refer to cardiology."
    assert loaded.note.diagnosis[0].treatment == "Nitroglycerin as needed"
    # extra_info has no chart column
    assert loaded.note.extra_info == ""


def test_save_raw_transcription_keeps_note_columns(chart_repo, appointment_repo):
    chart_repo.charts[APPOINTMENT_ID] = ChartRecord(
        appointment_id=APPOINTMENT_ID, patient_id=PATIENT_ID, plan="Follow up"
    )
    saved = asyncio.run(
        SaveRawTranscriptionUseCase(chart_repo, appointment_repo).execute(APPOINTMENT_ID, TRANSCRIPT)
    )
    assert saved.raw_transcription == TRANSCRIPT
    assert saved.plan == "Follow up"


def test_load_missing_chart(chart_repo):
    with pytest.raises(ChartNotFoundError):
        asyncio.run(LoadStructuredNoteUseCase(chart_repo).execute(APPOINTMENT_ID))


# ---------------------------------------------------------------------------
# CDI review
# ---------------------------------------------------------------------------


@pytest.fixture
def saved_chart(chart_repo):
    chart = ChartRecord(
        appointment_id=APPOINTMENT_ID,
        patient_id=PATIENT_ID,
        raw_transcription=TRANSCRIPT,
        chief_complaint="Chest pain",
        diagnosis="1. Stable angina",
        plan="Stress test",
    )
    chart_repo.charts[APPOINTMENT_ID] = chart
    return chart


def _generate(chart_repo, appointment_repo, cdi_service, reviews):
    use_case = GenerateCdiReviewUseCase(chart_repo, appointment_repo, cdi_service, reviews)
    return asyncio.run(use_case.execute(APPOINTMENT_ID))


def test_generate_opens_review_with_demographics(
    saved_chart, chart_repo, appointment_repo, cdi_service, reviews
):
    session = _generate(chart_repo, appointment_repo, cdi_service, reviews)

    assert reviews.get(APPOINTMENT_ID) is session
    assert session.changed_fields() == ["diagnosis", "assessment"]
    assert session.original_data["plan"] == "Stress test"
    assert session.patient_id == PATIENT_ID

    call = cdi_service.calls[0]
    assert call["original"]["chief_complaint"] == "Chest pain"
    assert call["patient_info"].age == 45
    assert call["patient_info"].gender == "female"


def test_generate_without_chart(chart_repo, appointment_repo, cdi_service, reviews):
    with pytest.raises(ChartNotFoundError):
        _generate(chart_repo, appointment_repo, cdi_service, reviews)
    assert cdi_service.calls == []


def test_edit_then_confirm_persists_edited_values(
    saved_chart, chart_repo, cdi_repo, appointment_repo, cdi_service, reviews
):
    _generate(chart_repo, appointment_repo, cdi_service, reviews)
    asyncio.run(
        EditCdiReviewUseCase(reviews).execute(
            EditCdiReviewRequest(
                appointment_id=APPOINTMENT_ID,
                fields={"plan": "Exercise stress test within 7 days"},
                cdi_notes="Reviewed by coder",
            )
        )
    )

    record = asyncio.run(ConfirmCdiReviewUseCase(cdi_repo, reviews).execute(APPOINTMENT_ID))

    assert record.cdi_status is CdiStatus.REVIEWED
    assert record.plan == "Exercise stress test within 7 days"
    assert record.assessment == "Chest pain consistent with stable angina."
    assert record.cdi_notes == "Reviewed by coder"
    assert record.raw_transcription == TRANSCRIPT
    assert APPOINTMENT_ID in cdi_repo.records
    # the base chart is untouched
    assert chart_repo.charts[APPOINTMENT_ID].plan == "Stress test"
    with pytest.raises(ReviewNotFoundError):
        reviews.get(APPOINTMENT_ID)


def test_edit_rejects_unknown_field(saved_chart, chart_repo, appointment_repo, cdi_service, reviews):
    session = _generate(chart_repo, appointment_repo, cdi_service, reviews)
    with pytest.raises(UnknownFieldError):
        asyncio.run(
            EditCdiReviewUseCase(reviews).execute(
                EditCdiReviewRequest(APPOINTMENT_ID, {"plan": "x", "billing_code": "99213"})
            )
        )
    assert session.improved_data["plan"] == "Stress test"


def test_cancel_discards_review(saved_chart, chart_repo, cdi_repo, appointment_repo, cdi_service, reviews):
    session = _generate(chart_repo, appointment_repo, cdi_service, reviews)

    asyncio.run(CancelCdiReviewUseCase(reviews).execute(APPOINTMENT_ID))

    assert session.status is ReviewStatus.CANCELLED
    assert cdi_repo.records == {}
    with pytest.raises(ReviewNotFoundError):
        asyncio.run(ConfirmCdiReviewUseCase(cdi_repo, reviews).execute(APPOINTMENT_ID))


def test_active_note_prefers_cdi_values(
    saved_chart, chart_repo, cdi_repo, appointment_repo, cdi_service, reviews
):
    _generate(chart_repo, appointment_repo, cdi_service, reviews)
    asyncio.run(ConfirmCdiReviewUseCase(cdi_repo, reviews).execute(APPOINTMENT_ID))

    active = asyncio.run(GetActiveNoteUseCase(chart_repo, cdi_repo).execute(APPOINTMENT_ID))

    assert active.has_cdi is True
    assert active.fields["diagnosis"].startswith("Stable angina pectoris")
    assert active.source["diagnosis"] == "cdi"
    assert active.source["ros"] == "none"


def test_active_note_missing_everything(chart_repo, cdi_repo):
    with pytest.raises(ChartNotFoundError):
        asyncio.run(GetActiveNoteUseCase(chart_repo, cdi_repo).execute(APPOINTMENT_ID))


def test_update_status_and_report(
    saved_chart, chart_repo, cdi_repo, appointment_repo, patient_repo, cdi_service, reviews
):
    with pytest.raises(CdiRecordNotFoundError):
        asyncio.run(
            UpdateCdiStatusUseCase(cdi_repo).execute(
                UpdateCdiStatusRequest(APPOINTMENT_ID, CdiStatus.APPROVED)
            )
        )

    _generate(chart_repo, appointment_repo, cdi_service, reviews)
    asyncio.run(ConfirmCdiReviewUseCase(cdi_repo, reviews).execute(APPOINTMENT_ID))
    record = asyncio.run(
        UpdateCdiStatusUseCase(cdi_repo).execute(
            UpdateCdiStatusRequest(APPOINTMENT_ID, CdiStatus.APPROVED, reviewed_by="coder-1")
        )
    )
    assert record.cdi_status is CdiStatus.APPROVED
    assert record.cdi_reviewed_by == "coder-1"

    fields = asyncio.run(
        GetCdiReportUseCase(chart_repo, cdi_repo, appointment_repo, patient_repo).execute(APPOINTMENT_ID)
    )
    assert fields["patient_name"] == "Jane Doe"
    assert fields["cdi_status"] == "approved"


class FlakyCdiRepository(InMemoryCdiRepository):
    """Fails the first upsert, then stores normally."""

    def __init__(self):
        super().__init__()
        self.failures = 1

    async def upsert(self, record):
        if self.failures:
            self.failures -= 1
            raise PersistenceError("cdi upsert", "connection reset")
        return await super().upsert(record)


def test_failed_confirm_keeps_review_open_for_retry(
    saved_chart, chart_repo, appointment_repo, cdi_service, reviews
):
    cdi_repo = FlakyCdiRepository()
    session = _generate(chart_repo, appointment_repo, cdi_service, reviews)
    asyncio.run(
        EditCdiReviewUseCase(reviews).execute(EditCdiReviewRequest(APPOINTMENT_ID, {"plan": "edited"}))
    )
    confirm = ConfirmCdiReviewUseCase(cdi_repo, reviews)

    with pytest.raises(PersistenceError):
        asyncio.run(confirm.execute(APPOINTMENT_ID))
    assert session.status is ReviewStatus.OPEN
    assert reviews.get(APPOINTMENT_ID) is session
    assert cdi_repo.records == {}

    record = asyncio.run(confirm.execute(APPOINTMENT_ID))

    assert record.plan == "edited"
    assert cdi_repo.records[APPOINTMENT_ID].plan == "edited"
    assert session.status is ReviewStatus.CONFIRMED
