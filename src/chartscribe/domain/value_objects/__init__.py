"""
Value objects package for domain layer.
"""

from .record_id import AppointmentId, PatientId

__all__ = [
    "AppointmentId",
    "PatientId",
]
