"""
Identifier value objects for patients and appointments.
Format: letters, digits, '-' or '_', up to 64 characters.
"""

import re
import uuid
from dataclasses import dataclass

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def _validate(kind: str, value: str) -> None:
    if not value:
        raise ValueError(f"{kind} cannot be empty")
    if not isinstance(value, str):
        raise ValueError(f"{kind} must be a string")
    if not _ID_PATTERN.match(value):
        raise ValueError(
            f"{kind} may only contain letters, digits, '-' or '_' (max 64 characters)"
        )


@dataclass(frozen=True)
class AppointmentId:
    """Immutable appointment identifier; the key for chart and CDI records."""

    value: str

    def __post_init__(self) -> None:
        _validate("Appointment ID", self.value)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "AppointmentId":
        return cls(f"APT-{uuid.uuid4().hex[:12].upper()}")


@dataclass(frozen=True)
class PatientId:
    """Immutable patient identifier."""

    value: str

    def __post_init__(self) -> None:
        _validate("Patient ID", self.value)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "PatientId":
        return cls(f"PAT-{uuid.uuid4().hex[:12].upper()}")
