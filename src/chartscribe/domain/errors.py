"""
Domain-specific error types for the note pipeline.

Every error carries a stable `error_code` which the API layer maps to an
HTTP status. None of them are retried by the core.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Stage B: structured extraction
# ---------------------------------------------------------------------------


class EmptyTranscriptError(DomainError):
    """Transcript is empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("Transcription text is required", "EMPTY_TRANSCRIPT")


class ExtractionServiceError(DomainError):
    """Completion service unreachable or returned an error during extraction."""

    def __init__(self, reason: str) -> None:
        message = f"Structured note extraction failed: {reason}"
        super().__init__(message, "EXTRACTION_SERVICE_ERROR", {"reason": reason})


class ExtractionParseError(DomainError):
    """Extraction response is not the expected JSON object."""

    def __init__(self, reason: str) -> None:
        message = f"Failed to parse extraction response: {reason}"
        super().__init__(message, "EXTRACTION_PARSE_ERROR", {"reason": reason})


# ---------------------------------------------------------------------------
# Stage C: reveal sequencing
# ---------------------------------------------------------------------------


class RevealInProgressError(DomainError):
    """A pipeline run is already extracting or revealing for this note."""

    def __init__(self, appointment_id: Optional[str] = None, state: Optional[str] = None) -> None:
        message = "A note pipeline run is already in progress"
        if appointment_id:
            message = f"{message} for appointment '{appointment_id}'"
        super().__init__(
            message,
            "PIPELINE_IN_PROGRESS",
            {"appointment_id": appointment_id, "state": state},
        )


class InvalidPipelineTransitionError(DomainError):
    """Illegal state machine transition."""

    def __init__(self, current: str, requested: str) -> None:
        message = f"Cannot move note pipeline from '{current}' to '{requested}'"
        super().__init__(
            message,
            "INVALID_PIPELINE_TRANSITION",
            {"current": current, "requested": requested},
        )


# ---------------------------------------------------------------------------
# Stage D: CDI improvement pass and review
# ---------------------------------------------------------------------------


class ImprovementServiceError(DomainError):
    """Completion service unreachable or returned an error during the CDI pass."""

    def __init__(self, reason: str) -> None:
        message = f"CDI improvement failed: {reason}"
        super().__init__(message, "IMPROVEMENT_SERVICE_ERROR", {"reason": reason})


class ImprovementParseError(DomainError):
    """CDI response is not the expected JSON object."""

    def __init__(self, reason: str) -> None:
        message = f"Failed to parse CDI response: {reason}"
        super().__init__(message, "IMPROVEMENT_PARSE_ERROR", {"reason": reason})


class ReviewNotFoundError(DomainError):
    """No open CDI review for the appointment."""

    def __init__(self, appointment_id: str) -> None:
        message = f"No open CDI review for appointment '{appointment_id}'"
        super().__init__(message, "REVIEW_NOT_FOUND", {"appointment_id": appointment_id})


class ReviewClosedError(DomainError):
    """CDI review was already confirmed or cancelled."""

    def __init__(self, status: str) -> None:
        message = f"CDI review is already {status}"
        super().__init__(message, "REVIEW_CLOSED", {"status": status})


class UnknownFieldError(DomainError):
    """Field name is not one of the CDI chart fields."""

    def __init__(self, field: str) -> None:
        message = f"Unknown chart field: {field}"
        super().__init__(message, "UNKNOWN_FIELD", {"field": field})


# ---------------------------------------------------------------------------
# Transcript capture
# ---------------------------------------------------------------------------


class CaptureSessionClosedError(DomainError):
    """Results pushed after the capture session stopped."""

    def __init__(self) -> None:
        super().__init__("Capture session is not recording", "CAPTURE_SESSION_CLOSED")


class CaptureSessionNotFoundError(DomainError):
    """No capture session for the appointment."""

    def __init__(self, appointment_id: str) -> None:
        message = f"No capture session for appointment '{appointment_id}'"
        super().__init__(message, "CAPTURE_SESSION_NOT_FOUND", {"appointment_id": appointment_id})


# ---------------------------------------------------------------------------
# Persistence and records
# ---------------------------------------------------------------------------


class PersistenceError(DomainError):
    """Upsert or read failure from the store."""

    def __init__(self, operation: str, reason: str) -> None:
        message = f"Persistence failure during {operation}: {reason}"
        super().__init__(
            message, "PERSISTENCE_ERROR", {"operation": operation, "reason": reason}
        )


class ChartNotFoundError(DomainError):
    """No chart record for the appointment."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Chart for appointment '{appointment_id}' not found"
        super().__init__(message, "CHART_NOT_FOUND", {"appointment_id": appointment_id})


class CdiRecordNotFoundError(DomainError):
    """No CDI record for the appointment."""

    def __init__(self, appointment_id: str) -> None:
        message = f"CDI record for appointment '{appointment_id}' not found"
        super().__init__(message, "CDI_RECORD_NOT_FOUND", {"appointment_id": appointment_id})


class AppointmentNotFoundError(DomainError):
    """Appointment not found."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Appointment with ID '{appointment_id}' not found"
        super().__init__(message, "APPOINTMENT_NOT_FOUND", {"appointment_id": appointment_id})


class PatientNotFoundError(DomainError):
    """Patient not found."""

    def __init__(self, patient_id: str) -> None:
        message = f"Patient with ID '{patient_id}' not found"
        super().__init__(message, "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class InvalidPatientDataError(DomainError):
    """Invalid patient or appointment data."""

    def __init__(self, field: str, value: Any) -> None:
        message = f"Invalid patient data. Field: {field}, Value: {value}"
        super().__init__(
            message, "INVALID_PATIENT_DATA", {"field": field, "value": value}
        )
