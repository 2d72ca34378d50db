"""
Patient and appointment repository interfaces.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.patient import Appointment, Patient, PatientInfo


class PatientRepository(ABC):

    @abstractmethod
    async def save(self, patient: Patient) -> Patient:
        pass

    @abstractmethod
    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        pass


class AppointmentRepository(ABC):

    @abstractmethod
    async def save(self, appointment: Appointment) -> Appointment:
        pass

    @abstractmethod
    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        pass

    @abstractmethod
    async def get_patient_demographics(self, appointment_id: str) -> Optional[PatientInfo]:
        """
        Age and gender of the appointment's patient.

        Returns:
            PatientInfo, or None when the appointment or patient is unknown
        """
        pass
