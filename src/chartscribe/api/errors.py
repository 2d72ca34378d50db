from typing import Dict

from ..domain.errors import DomainError


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_INPUT", message, 422, details)


class NotFoundError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("NOT_FOUND", message, 404, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("CONFLICT", message, 409, details)


class DownstreamError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("DOWNSTREAM_ERROR", message, 502, details)


# Domain error code -> HTTP status
DOMAIN_ERROR_STATUS: Dict[str, int] = {
    "EMPTY_TRANSCRIPT": 400,
    "INVALID_PATIENT_DATA": 400,
    "UNKNOWN_FIELD": 422,
    "CHART_NOT_FOUND": 404,
    "CDI_RECORD_NOT_FOUND": 404,
    "APPOINTMENT_NOT_FOUND": 404,
    "PATIENT_NOT_FOUND": 404,
    "REVIEW_NOT_FOUND": 404,
    "CAPTURE_SESSION_NOT_FOUND": 404,
    "PIPELINE_IN_PROGRESS": 409,
    "INVALID_PIPELINE_TRANSITION": 409,
    "REVIEW_CLOSED": 409,
    "CAPTURE_SESSION_CLOSED": 409,
    "EXTRACTION_SERVICE_ERROR": 502,
    "EXTRACTION_PARSE_ERROR": 502,
    "IMPROVEMENT_SERVICE_ERROR": 502,
    "IMPROVEMENT_PARSE_ERROR": 502,
    "PERSISTENCE_ERROR": 503,
}


def domain_error_status(exc: DomainError) -> int:
    return DOMAIN_ERROR_STATUS.get(exc.error_code or "", 400)
