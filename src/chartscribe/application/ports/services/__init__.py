from .cdi_service import CdiService
from .extraction_service import NoteExtractionService

__all__ = ["NoteExtractionService", "CdiService"]
