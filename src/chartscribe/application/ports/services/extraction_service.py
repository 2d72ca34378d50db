"""
Structured note extraction service interface.
"""

from abc import ABC, abstractmethod

from ....domain.entities.structured_note import StructuredNote


class NoteExtractionService(ABC):
    """Turns a transcript into a normalized StructuredNote."""

    @abstractmethod
    async def extract(self, transcript: str) -> StructuredNote:
        """
        Extract a structured physician note from a transcript.

        Args:
            transcript: Non-empty raw dictation / conversation text

        Returns:
            A StructuredNote with every leaf present

        Raises:
            ExtractionServiceError: completion service unreachable or failed
            ExtractionParseError: response was not the expected JSON object
        """
        pass
