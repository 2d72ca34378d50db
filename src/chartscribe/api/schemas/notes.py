"""
Schemas for transcription, structured notes and charts.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...domain.entities.chart import ChartRecord
from ...domain.entities.structured_note import StructuredNote
from ...domain.services.reveal_sequencer import RevealFrame


class HistorySchema(BaseModel):
    past_medical_history: str = ""
    surgical_history: str = ""
    family_history: str = ""
    social_history: str = ""


class VitalsSchema(BaseModel):
    height: str = "-"
    weight: str = "-"
    bmi: str = "-"
    bp: str = "-"


class DiagnosisEntrySchema(BaseModel):
    diagnosis_name: str = ""
    treatment: str = ""


class StructuredNoteSchema(BaseModel):
    """Structured physician note as exchanged with the form editor."""

    chief_complaint: str = ""
    history_of_present_illness: str = ""
    history: HistorySchema = Field(default_factory=HistorySchema)
    review_of_systems: str = ""
    physical_exam: str = ""
    vitals: VitalsSchema = Field(default_factory=VitalsSchema)
    diagnosis: List[DiagnosisEntrySchema] = Field(default_factory=lambda: [DiagnosisEntrySchema()])
    plan: str = ""
    extra_info: str = ""

    @classmethod
    def from_domain(cls, note: StructuredNote) -> "StructuredNoteSchema":
        return cls.model_validate(note.to_dict())

    def to_domain(self) -> StructuredNote:
        return StructuredNote.from_dict(self.model_dump())


class ChartSchema(BaseModel):
    """Stored chart columns; empty columns are null."""

    appointment_id: str
    patient_id: Optional[str] = None
    raw_transcription: Optional[str] = None
    chief_complaint: Optional[str] = None
    history_of_illness: Optional[str] = None
    history: Optional[str] = None
    ros: Optional[str] = None
    physical_exam: Optional[str] = None
    vital_signs: Optional[str] = None
    diagnosis: Optional[str] = None
    plan: Optional[str] = None
    assessment: Optional[str] = None
    clinical_impression: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, chart: ChartRecord) -> "ChartSchema":
        return cls(
            appointment_id=chart.appointment_id,
            patient_id=chart.patient_id,
            raw_transcription=chart.raw_transcription,
            created_at=chart.created_at,
            updated_at=chart.updated_at,
            **{key: getattr(chart, key) for key in chart.field_map()},
        )


class RevealFrameSchema(BaseModel):
    step: int
    field: str
    progress: int
    note: StructuredNoteSchema

    @classmethod
    def from_domain(cls, frame: RevealFrame) -> "RevealFrameSchema":
        return cls.model_validate(frame.to_dict())


class PipelineSnapshot(BaseModel):
    state: str
    step: Optional[int] = None
    animating_field: Optional[str] = None
    progress: int = 0


class ProcessTranscriptionRequest(BaseModel):
    transcription: str = Field(..., description="Raw dictation or conversation text")


class TranscribeChartRequestSchema(BaseModel):
    transcription: str = Field(..., description="Raw dictation or conversation text")
    animate: bool = Field(False, description="Apply reveal delays while sequencing")


class TranscribeChartResponseSchema(BaseModel):
    appointment_id: str
    note: StructuredNoteSchema
    chart: ChartSchema
    frames: List[RevealFrameSchema]
    pipeline: PipelineSnapshot


class SaveNoteRequest(BaseModel):
    note: StructuredNoteSchema
    raw_transcription: Optional[str] = None


class SaveTranscriptionRequest(BaseModel):
    raw_transcription: str


class LoadedNoteSchema(BaseModel):
    chart: ChartSchema
    note: StructuredNoteSchema


class ActiveNoteSchema(BaseModel):
    appointment_id: str
    fields: Dict[str, Optional[str]]
    source: Dict[str, str]
    has_cdi: bool


class CaptureAppendRequest(BaseModel):
    results: List[str] = Field(default_factory=list, description="Current text of each recognizer segment")
    start_index: int = Field(0, ge=0, description="First segment index the results replace")


class CaptureStateSchema(BaseModel):
    appointment_id: str
    recording: bool
    transcript: str
