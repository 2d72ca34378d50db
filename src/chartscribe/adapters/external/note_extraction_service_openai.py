"""
Azure OpenAI implementation of NoteExtractionService.
"""

import logging
from typing import Optional

from chartscribe.adapters.external.llm_gateway import call_llm_with_telemetry, completion_text
from chartscribe.adapters.external.prompt_registry import PromptScenario
from chartscribe.application.ports.services.extraction_service import NoteExtractionService
from chartscribe.core.ai_client import AzureAIClient
from chartscribe.core.ai_factory import get_ai_client
from chartscribe.core.config import Settings, get_settings
from chartscribe.domain.entities.structured_note import StructuredNote
from chartscribe.domain.errors import ExtractionParseError, ExtractionServiceError
from chartscribe.domain.services.completion_json import parse_completion_json
from chartscribe.domain.services.extraction_contract import (
    build_extraction_messages,
    require_transcript,
)

logger = logging.getLogger("chartscribe")


class OpenAINoteExtractionService(NoteExtractionService):
    """Stage B over Azure OpenAI: one JSON-mode completion per transcript."""

    def __init__(
        self,
        ai_client: Optional[AzureAIClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        # Created on first call, inside the service-error guard
        self._client = ai_client
        logger.info(
            "[NoteExtraction] Initialized with Azure OpenAI",
            extra={"extra_data": {"temperature": self._settings.extraction.temperature}},
        )

    def _ai_client(self) -> AzureAIClient:
        if self._client is None:
            self._client = get_ai_client()
        return self._client

    async def extract(self, transcript: str) -> StructuredNote:
        require_transcript(transcript)
        try:
            response = await call_llm_with_telemetry(
                ai_client=self._ai_client(),
                scenario=PromptScenario.NOTE_EXTRACTION,
                messages=build_extraction_messages(transcript),
                temperature=self._settings.extraction.temperature,
                max_tokens=self._settings.extraction.max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise ExtractionServiceError(f"{type(e).__name__}: {e}") from e

        content = completion_text(response)
        if not content:
            raise ExtractionServiceError("empty response from completion service")

        try:
            payload = parse_completion_json(content)
        except ValueError as e:
            raise ExtractionParseError(str(e)) from e

        note = StructuredNote.from_dict(payload)
        logger.info(
            f"[NoteExtraction] Note extracted, diagnoses="
            f"{len([d for d in note.diagnosis if not d.is_empty()])}"
        )
        return note
