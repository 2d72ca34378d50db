"""Flat field set handed to the CDI report renderer."""

import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..entities.chart import CdiRecord, ChartRecord, resolve_active_note
from ..entities.patient import Appointment, Patient

NOT_AVAILABLE = "N/A"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


def _format_date(value: Optional[date]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return value.strftime("%B %d, %Y").replace(" 0", " ")


def _format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return value.strftime("%b %d, %Y %I:%M %p").replace(" 0", " ")


def report_filename(patient_name: str, appointment_id: str) -> str:
    name = _UNSAFE_FILENAME_CHARS.sub("_", patient_name.strip()).strip("_") or "patient"
    return f"CDI_Report_{name}_{appointment_id}.pdf"


def build_report_fields(
    chart: Optional[ChartRecord],
    cdi: Optional[CdiRecord],
    patient: Optional[Patient],
    appointment: Appointment,
) -> Dict[str, Any]:
    """Resolve report fields, CDI values taking precedence over the base chart."""
    active = resolve_active_note(chart, cdi)
    patient_name = patient.full_name if patient else NOT_AVAILABLE
    return {
        "patient_name": patient_name,
        "patient_id": str(appointment.patient_id),
        "date_of_birth": _format_date(patient.date_of_birth if patient else None),
        "gender": (patient.gender if patient else None) or NOT_AVAILABLE,
        "appointment_date": _format_date(appointment.appointment_date.date()),
        "appointment_id": str(appointment.appointment_id),
        "chief_complaint": active["chief_complaint"],
        "history_of_present_illness": active["history_of_illness"],
        "history": active["history"],
        "review_of_systems": active["ros"],
        "physical_exam": active["physical_exam"],
        "vital_signs": active["vital_signs"],
        "diagnosis": active["diagnosis"],
        "plan": active["plan"],
        "assessment": active["assessment"],
        "clinical_impression": active["clinical_impression"],
        "cdi_status": cdi.cdi_status.value if cdi else None,
        "cdi_reviewed_at": _format_datetime(cdi.cdi_reviewed_at if cdi else None),
        "cdi_notes": cdi.cdi_notes if cdi else None,
        "filename": report_filename(patient_name, str(appointment.appointment_id)),
    }
