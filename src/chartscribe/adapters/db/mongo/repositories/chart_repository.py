"""
MongoDB implementations of ChartRepository and CdiRepository.
"""

from typing import Any, Dict, Optional

from pymongo.errors import PyMongoError

from chartscribe.application.ports.repositories.chart_repo import CdiRepository, ChartRepository
from chartscribe.domain.entities.chart import CDI_FIELD_KEYS, CdiRecord, ChartRecord, utcnow
from chartscribe.domain.enums.workflow import CdiStatus
from chartscribe.domain.errors import PersistenceError

from ..models.chart_m import CdiChartInfoMongo, ChartInfoMongo

_CHART_COLUMNS = ["patient_id", "raw_transcription", *CDI_FIELD_KEYS, "created_at", "updated_at"]
_CDI_COLUMNS = [*_CHART_COLUMNS, "cdi_notes", "cdi_reviewed_at", "cdi_reviewed_by"]


def _columns(source: Any, names) -> Dict[str, Any]:
    return {name: getattr(source, name) for name in names}


class MongoChartRepository(ChartRepository):
    """MongoDB implementation of ChartRepository."""

    async def find_by_appointment_id(self, appointment_id: str) -> Optional[ChartRecord]:
        try:
            chart_mongo = await ChartInfoMongo.find_one(
                ChartInfoMongo.appointment_id == appointment_id
            )
        except PyMongoError as e:
            raise PersistenceError("chart lookup", str(e)) from e
        if not chart_mongo:
            return None
        return self._mongo_to_domain(chart_mongo)

    async def upsert(self, chart: ChartRecord) -> ChartRecord:
        try:
            chart_mongo = await ChartInfoMongo.find_one(
                ChartInfoMongo.appointment_id == chart.appointment_id
            )
            if chart_mongo is None:
                chart_mongo = ChartInfoMongo(appointment_id=chart.appointment_id)
            else:
                # Keep the first creation time across upserts
                chart.created_at = chart_mongo.created_at
            for name, value in _columns(chart, _CHART_COLUMNS).items():
                setattr(chart_mongo, name, value)
            await chart_mongo.save()
        except PyMongoError as e:
            raise PersistenceError("chart upsert", str(e)) from e
        return self._mongo_to_domain(chart_mongo)

    async def save_raw_transcription(
        self, appointment_id: str, raw_transcription: str, patient_id: Optional[str] = None
    ) -> ChartRecord:
        chart = await self.find_by_appointment_id(appointment_id)
        if chart is None:
            chart = ChartRecord(appointment_id=appointment_id, patient_id=patient_id)
        chart.raw_transcription = raw_transcription or None
        if patient_id and not chart.patient_id:
            chart.patient_id = patient_id
        chart.updated_at = utcnow()
        return await self.upsert(chart)

    def _mongo_to_domain(self, chart_mongo: ChartInfoMongo) -> ChartRecord:
        return ChartRecord(
            appointment_id=chart_mongo.appointment_id,
            **_columns(chart_mongo, _CHART_COLUMNS),
        )


class MongoCdiRepository(CdiRepository):
    """MongoDB implementation of CdiRepository."""

    async def find_by_appointment_id(self, appointment_id: str) -> Optional[CdiRecord]:
        try:
            cdi_mongo = await CdiChartInfoMongo.find_one(
                CdiChartInfoMongo.appointment_id == appointment_id
            )
        except PyMongoError as e:
            raise PersistenceError("CDI record lookup", str(e)) from e
        if not cdi_mongo:
            return None
        return self._mongo_to_domain(cdi_mongo)

    async def upsert(self, record: CdiRecord) -> CdiRecord:
        try:
            cdi_mongo = await CdiChartInfoMongo.find_one(
                CdiChartInfoMongo.appointment_id == record.appointment_id
            )
            if cdi_mongo is None:
                cdi_mongo = CdiChartInfoMongo(appointment_id=record.appointment_id)
            else:
                record.created_at = cdi_mongo.created_at
            self._apply(cdi_mongo, record)
            await cdi_mongo.save()
        except PyMongoError as e:
            raise PersistenceError("CDI record upsert", str(e)) from e
        return self._mongo_to_domain(cdi_mongo)

    async def update_status(
        self, appointment_id: str, status: CdiStatus, reviewed_by: Optional[str] = None
    ) -> Optional[CdiRecord]:
        record = await self.find_by_appointment_id(appointment_id)
        if record is None:
            return None
        record.set_status(status, reviewed_by=reviewed_by)
        return await self.upsert(record)

    def _apply(self, cdi_mongo: CdiChartInfoMongo, record: CdiRecord) -> None:
        for name, value in _columns(record, _CDI_COLUMNS).items():
            setattr(cdi_mongo, name, value)
        cdi_mongo.cdi_status = record.cdi_status.value

    def _mongo_to_domain(self, cdi_mongo: CdiChartInfoMongo) -> CdiRecord:
        return CdiRecord(
            appointment_id=cdi_mongo.appointment_id,
            cdi_status=CdiStatus(cdi_mongo.cdi_status),
            **_columns(cdi_mongo, _CDI_COLUMNS),
        )
