"""
Pipeline state and CDI status enums.
"""

from enum import Enum


class PipelineState(str, Enum):
    """States of the transcript-to-note pipeline for one note."""
    IDLE = "idle"
    EXTRACTING = "extracting"    # Stage B request outstanding
    REVEALING = "revealing"      # Stage C stepping through fields
    COMPLETE = "complete"        # Note revealed and editable


class CdiStatus(str, Enum):
    """Lifecycle of a CDI record."""
    PENDING = "pending"
    REVIEWED = "reviewed"
    APPROVED = "approved"


class ReviewStatus(str, Enum):
    """In-memory CDI review session status."""
    OPEN = "open"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
