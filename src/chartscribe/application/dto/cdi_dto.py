"""CDI review DTOs."""

from dataclasses import dataclass
from typing import Dict, Optional

from ...domain.enums.workflow import CdiStatus


@dataclass
class EditCdiReviewRequest:
    appointment_id: str
    fields: Dict[str, Optional[str]]
    cdi_notes: Optional[str] = None


@dataclass
class UpdateCdiStatusRequest:
    appointment_id: str
    status: CdiStatus
    reviewed_by: Optional[str] = None
