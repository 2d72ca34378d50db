"""Note pipeline DTOs."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...domain.entities.chart import ChartRecord
from ...domain.entities.structured_note import StructuredNote
from ...domain.services.reveal_sequencer import RevealFrame


@dataclass
class TranscribeChartRequest:
    """Run extraction and reveal for an appointment, then persist the chart."""

    appointment_id: str
    transcription: str
    animate: bool = False


@dataclass
class TranscribeChartResponse:
    appointment_id: str
    note: StructuredNote
    chart: ChartRecord
    frames: List[RevealFrame] = field(default_factory=list)
    pipeline: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SaveStructuredNoteRequest:
    appointment_id: str
    note: StructuredNote
    raw_transcription: Optional[str] = None


@dataclass
class LoadedNote:
    """A stored chart together with its editor form."""

    chart: ChartRecord
    note: StructuredNote


@dataclass
class ActiveNote:
    appointment_id: str
    fields: Dict[str, Optional[str]]
    source: Dict[str, str]
    has_cdi: bool
