"""
Shared fixtures: in-memory repositories, fake completion services and a
TestClient wired to them through dependency overrides.
"""

import copy
from datetime import date, datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Mapping, Optional

import pytest
from fastapi.testclient import TestClient

from chartscribe.app import app
from chartscribe.api import deps
from chartscribe.application.ports.repositories.chart_repo import CdiRepository, ChartRepository
from chartscribe.application.ports.repositories.patient_repo import (
    AppointmentRepository,
    PatientRepository,
)
from chartscribe.application.ports.services.cdi_service import CdiService
from chartscribe.application.ports.services.extraction_service import NoteExtractionService
from chartscribe.application.sessions import (
    CaptureSessionRegistry,
    CdiReviewRegistry,
    PipelineRegistry,
)
from chartscribe.application.use_cases.transcribe_chart import build_sequencer_factory
from chartscribe.domain.entities.chart import CdiRecord, ChartRecord, normalize_field_map
from chartscribe.domain.entities.patient import Appointment, Patient, PatientInfo
from chartscribe.domain.entities.structured_note import StructuredNote
from chartscribe.domain.enums.workflow import CdiStatus
from chartscribe.domain.services.cdi_contract import CdiImprovement
from chartscribe.domain.value_objects.record_id import AppointmentId, PatientId

APPOINTMENT_ID = "APT-0001"
PATIENT_ID = "PAT-0001"

EXTRACTED_PAYLOAD: Dict[str, Any] = {
    "chief_complaint": "Chest pain for two days",
    "history_of_present_illness": "Intermittent substernal pain, worse on exertion.",
    "history": {
        "past_medical_history": "Hypertension",
        "surgical_history": "",
        "family_history": "Father had MI at 60",
        "social_history": "Former smoker",
    },
    "review_of_systems": "Denies fever or cough.",
    "physical_exam": "Lungs clear, regular rhythm.",
    "vitals": {"height": "170 cm", "weight": "80 kg", "bmi": "27.7", "bp": "150/95"},
    "diagnosis": [
        {"diagnosis_name": "Stable angina", "treatment": "Nitroglycerin as needed"},
        {"diagnosis_name": "Hypertension", "treatment": "Lisinopril 10mg daily"},
    ],
    "plan": "Stress test next week.",
    "extra_info": "Patient prefers morning appointments.",
}


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


class InMemoryChartRepository(ChartRepository):
    def __init__(self):
        self.charts: Dict[str, ChartRecord] = {}
        self.upserts = 0

    async def find_by_appointment_id(self, appointment_id: str) -> Optional[ChartRecord]:
        chart = self.charts.get(appointment_id)
        return copy.deepcopy(chart) if chart else None

    async def upsert(self, chart: ChartRecord) -> ChartRecord:
        self.upserts += 1
        self.charts[chart.appointment_id] = copy.deepcopy(chart)
        return copy.deepcopy(chart)

    async def save_raw_transcription(
        self, appointment_id: str, raw_transcription: str, patient_id: Optional[str] = None
    ) -> ChartRecord:
        chart = await self.find_by_appointment_id(appointment_id)
        if chart is None:
            chart = ChartRecord(appointment_id=appointment_id, patient_id=patient_id)
        chart.raw_transcription = raw_transcription or None
        return await self.upsert(chart)


class InMemoryCdiRepository(CdiRepository):
    def __init__(self):
        self.records: Dict[str, CdiRecord] = {}

    async def find_by_appointment_id(self, appointment_id: str) -> Optional[CdiRecord]:
        record = self.records.get(appointment_id)
        return copy.deepcopy(record) if record else None

    async def upsert(self, record: CdiRecord) -> CdiRecord:
        self.records[record.appointment_id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def update_status(
        self, appointment_id: str, status: CdiStatus, reviewed_by: Optional[str] = None
    ) -> Optional[CdiRecord]:
        record = self.records.get(appointment_id)
        if record is None:
            return None
        record.set_status(status, reviewed_by=reviewed_by)
        return copy.deepcopy(record)


class InMemoryPatientRepository(PatientRepository):
    def __init__(self):
        self.patients: Dict[str, Patient] = {}

    def add(self, patient: Patient) -> Patient:
        self.patients[str(patient.patient_id)] = patient
        return patient

    async def save(self, patient: Patient) -> Patient:
        return self.add(patient)

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        return self.patients.get(patient_id)


class InMemoryAppointmentRepository(AppointmentRepository):
    def __init__(self, patients: InMemoryPatientRepository):
        self.patients = patients
        self.appointments: Dict[str, Appointment] = {}

    def add(self, appointment: Appointment) -> Appointment:
        self.appointments[str(appointment.appointment_id)] = appointment
        return appointment

    async def save(self, appointment: Appointment) -> Appointment:
        return self.add(appointment)

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        return self.appointments.get(appointment_id)

    async def get_patient_demographics(self, appointment_id: str) -> Optional[PatientInfo]:
        appointment = self.appointments.get(appointment_id)
        if appointment is None:
            return None
        patient = self.patients.patients.get(str(appointment.patient_id))
        return patient.demographics(date(2025, 6, 1)) if patient else None


# ---------------------------------------------------------------------------
# Fake completion services
# ---------------------------------------------------------------------------


class FakeExtractionService(NoteExtractionService):
    def __init__(self, payload: Optional[Mapping[str, Any]] = None, error: Optional[Exception] = None):
        self.payload = payload if payload is not None else EXTRACTED_PAYLOAD
        self.error = error
        self.calls: List[str] = []

    async def extract(self, transcript: str) -> StructuredNote:
        self.calls.append(transcript)
        if self.error is not None:
            raise self.error
        return StructuredNote.from_dict(self.payload)


class FakeCdiService(CdiService):
    def __init__(
        self,
        improved: Optional[Mapping[str, str]] = None,
        notes: str = "Added specificity to diagnosis.",
        error: Optional[Exception] = None,
    ):
        self.improved = improved
        self.notes = notes
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def improve(self, original, patient_info=None) -> CdiImprovement:
        self.calls.append({"original": dict(original), "patient_info": patient_info})
        if self.error is not None:
            raise self.error
        original_data = normalize_field_map(original)
        improved = dict(original_data)
        if self.improved is None:
            improved["diagnosis"] = "Stable angina pectoris (I20.8); essential hypertension (I10)"
            improved["assessment"] = "Chest pain consistent with stable angina."
        else:
            improved.update(self.improved)
        return CdiImprovement(
            original_data=original_data, improved_data=improved, cdi_notes=self.notes
        )


class FakeAIClient:
    """Stands in for AzureAIClient; returns canned chat completions."""

    deployment_name = "test-deployment"

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def chat(self, messages, *, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append(
            {
                "messages": list(messages),
                "model": model,
                "temperature": temperature,
                "max_tokens": max_tokens,
                **kwargs,
            }
        )
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=message)],
            usage=SimpleNamespace(total_tokens=42),
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def make_patient(patient_id: str = PATIENT_ID) -> Patient:
    return Patient(
        patient_id=PatientId(patient_id),
        full_name="Jane Doe",
        date_of_birth=date(1980, 3, 15),
        gender="female",
    )


def make_appointment(
    appointment_id: str = APPOINTMENT_ID, patient_id: str = PATIENT_ID
) -> Appointment:
    return Appointment(
        appointment_id=AppointmentId(appointment_id),
        patient_id=PatientId(patient_id),
        appointment_date=datetime(2025, 6, 1, 9, 30),
        provider_id="DR-7",
        reason="Chest pain",
    )


@pytest.fixture
def patient_repo():
    repo = InMemoryPatientRepository()
    repo.add(make_patient())
    return repo


@pytest.fixture
def appointment_repo(patient_repo):
    repo = InMemoryAppointmentRepository(patient_repo)
    repo.add(make_appointment())
    return repo


@pytest.fixture
def chart_repo():
    return InMemoryChartRepository()


@pytest.fixture
def cdi_repo():
    return InMemoryCdiRepository()


@pytest.fixture
def extraction_service():
    return FakeExtractionService()


@pytest.fixture
def cdi_service():
    return FakeCdiService()


@pytest.fixture
def pipelines():
    return PipelineRegistry()


@pytest.fixture
def reviews():
    return CdiReviewRegistry()


@pytest.fixture
def captures():
    return CaptureSessionRegistry()


@pytest.fixture
def sequencer_factory():
    return build_sequencer_factory(0, 0)


@pytest.fixture
def client(
    chart_repo,
    cdi_repo,
    patient_repo,
    appointment_repo,
    extraction_service,
    cdi_service,
    pipelines,
    reviews,
    captures,
    sequencer_factory,
):
    """TestClient with every repository and service replaced by an in-memory fake."""
    app.dependency_overrides.update(
        {
            deps.get_chart_repository: lambda: chart_repo,
            deps.get_cdi_repository: lambda: cdi_repo,
            deps.get_patient_repository: lambda: patient_repo,
            deps.get_appointment_repository: lambda: appointment_repo,
            deps.get_extraction_service: lambda: extraction_service,
            deps.get_cdi_service: lambda: cdi_service,
            deps.get_pipeline_registry: lambda: pipelines,
            deps.get_review_registry: lambda: reviews,
            deps.get_capture_registry: lambda: captures,
            deps.get_sequencer_factory: lambda: sequencer_factory,
        }
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
