"""
Chart and CDI record repository interfaces.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.chart import CdiRecord, ChartRecord
from ....domain.enums.workflow import CdiStatus


class ChartRepository(ABC):
    """Base chart records, one per appointment."""

    @abstractmethod
    async def find_by_appointment_id(self, appointment_id: str) -> Optional[ChartRecord]:
        """Return the chart for an appointment, or None."""
        pass

    @abstractmethod
    async def upsert(self, chart: ChartRecord) -> ChartRecord:
        """Insert or replace the chart keyed on its appointment id."""
        pass

    @abstractmethod
    async def save_raw_transcription(
        self, appointment_id: str, raw_transcription: str, patient_id: Optional[str] = None
    ) -> ChartRecord:
        """Store only the raw transcription, creating the chart if needed."""
        pass


class CdiRepository(ABC):
    """CDI records, zero or one per appointment."""

    @abstractmethod
    async def find_by_appointment_id(self, appointment_id: str) -> Optional[CdiRecord]:
        """Return the CDI record for an appointment, or None."""
        pass

    @abstractmethod
    async def upsert(self, record: CdiRecord) -> CdiRecord:
        """Insert or replace the CDI record keyed on its appointment id."""
        pass

    @abstractmethod
    async def update_status(
        self, appointment_id: str, status: CdiStatus, reviewed_by: Optional[str] = None
    ) -> Optional[CdiRecord]:
        """
        Update review status, reviewer and review time.

        Returns:
            The updated record, or None when no CDI record exists.
        """
        pass
