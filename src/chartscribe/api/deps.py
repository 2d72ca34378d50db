"""FastAPI dependency providers."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ..adapters.db.mongo.repositories.chart_repository import (
    MongoCdiRepository,
    MongoChartRepository,
)
from ..adapters.db.mongo.repositories.patient_repository import (
    MongoAppointmentRepository,
    MongoPatientRepository,
)
from ..adapters.external.cdi_service_openai import OpenAICdiService
from ..adapters.external.note_extraction_service_openai import OpenAINoteExtractionService
from ..application.ports.repositories.chart_repo import CdiRepository, ChartRepository
from ..application.ports.repositories.patient_repo import (
    AppointmentRepository,
    PatientRepository,
)
from ..application.ports.services.cdi_service import CdiService
from ..application.ports.services.extraction_service import NoteExtractionService
from ..application.sessions import CaptureSessionRegistry, CdiReviewRegistry, PipelineRegistry
from ..application.use_cases.transcribe_chart import SequencerFactory, build_sequencer_factory
from ..core.config import get_settings


@lru_cache()
def get_chart_repository() -> ChartRepository:
    """Get chart repository instance."""
    return MongoChartRepository()


@lru_cache()
def get_cdi_repository() -> CdiRepository:
    """Get CDI record repository instance."""
    return MongoCdiRepository()


@lru_cache()
def get_patient_repository() -> PatientRepository:
    return MongoPatientRepository()


@lru_cache()
def get_appointment_repository() -> AppointmentRepository:
    return MongoAppointmentRepository(get_patient_repository())


@lru_cache()
def get_extraction_service() -> NoteExtractionService:
    """Get structured note extraction service instance."""
    return OpenAINoteExtractionService()


@lru_cache()
def get_cdi_service() -> CdiService:
    """Get CDI improvement service instance."""
    return OpenAICdiService()


@lru_cache()
def get_pipeline_registry() -> PipelineRegistry:
    return PipelineRegistry()


@lru_cache()
def get_review_registry() -> CdiReviewRegistry:
    return CdiReviewRegistry()


@lru_cache()
def get_capture_registry() -> CaptureSessionRegistry:
    return CaptureSessionRegistry()


@lru_cache()
def get_sequencer_factory() -> SequencerFactory:
    """Reveal sequencers; delays apply only when animating over HTTP."""
    reveal = get_settings().reveal
    return build_sequencer_factory(
        reveal.settle_delay_ms,
        reveal.reveal_delay_ms,
        animate_by_default=reveal.animate_over_http,
    )


# Dependency annotations for FastAPI
ChartRepositoryDep = Annotated[ChartRepository, Depends(get_chart_repository)]
CdiRepositoryDep = Annotated[CdiRepository, Depends(get_cdi_repository)]
PatientRepositoryDep = Annotated[PatientRepository, Depends(get_patient_repository)]
AppointmentRepositoryDep = Annotated[AppointmentRepository, Depends(get_appointment_repository)]
ExtractionServiceDep = Annotated[NoteExtractionService, Depends(get_extraction_service)]
CdiServiceDep = Annotated[CdiService, Depends(get_cdi_service)]
PipelineRegistryDep = Annotated[PipelineRegistry, Depends(get_pipeline_registry)]
ReviewRegistryDep = Annotated[CdiReviewRegistry, Depends(get_review_registry)]
CaptureRegistryDep = Annotated[CaptureSessionRegistry, Depends(get_capture_registry)]
SequencerFactoryDep = Annotated[SequencerFactory, Depends(get_sequencer_factory)]
