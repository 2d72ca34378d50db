from .chart_repo import CdiRepository, ChartRepository
from .patient_repo import AppointmentRepository, PatientRepository

__all__ = [
    "ChartRepository",
    "CdiRepository",
    "PatientRepository",
    "AppointmentRepository",
]
