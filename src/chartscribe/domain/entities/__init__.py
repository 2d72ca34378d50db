"""
Domain entities package.
"""

from .chart import CDI_FIELDS, CdiRecord, ChartRecord, resolve_active_note
from .patient import Appointment, Patient, PatientInfo
from .structured_note import DiagnosisEntry, History, StructuredNote, Vitals

__all__ = [
    "StructuredNote",
    "History",
    "Vitals",
    "DiagnosisEntry",
    "ChartRecord",
    "CdiRecord",
    "CDI_FIELDS",
    "resolve_active_note",
    "Patient",
    "PatientInfo",
    "Appointment",
]
