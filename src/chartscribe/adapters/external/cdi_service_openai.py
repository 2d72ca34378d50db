"""
Azure OpenAI implementation of CdiService.
"""

import logging
from typing import Any, Mapping, Optional

from chartscribe.adapters.external.llm_gateway import call_llm_with_telemetry, completion_text
from chartscribe.adapters.external.prompt_registry import PROMPT_VERSIONS, PromptScenario
from chartscribe.application.ports.services.cdi_service import CdiService
from chartscribe.core.ai_client import AzureAIClient
from chartscribe.core.ai_factory import get_ai_client
from chartscribe.core.config import Settings, get_settings
from chartscribe.domain.entities.chart import normalize_field_map
from chartscribe.domain.entities.patient import PatientInfo
from chartscribe.domain.errors import ImprovementParseError, ImprovementServiceError
from chartscribe.domain.services.cdi_contract import (
    CdiImprovement,
    build_cdi_messages,
    map_cdi_response,
)
from chartscribe.domain.services.completion_json import parse_completion_json

logger = logging.getLogger("chartscribe")


class OpenAICdiService(CdiService):
    """Stage D over Azure OpenAI."""

    def __init__(
        self,
        ai_client: Optional[AzureAIClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        # Created on first call, inside the service-error guard
        self._client = ai_client

    def _ai_client(self) -> AzureAIClient:
        if self._client is None:
            self._client = get_ai_client()
        return self._client

    async def improve(
        self,
        original: Mapping[str, Any],
        patient_info: Optional[PatientInfo] = None,
    ) -> CdiImprovement:
        original_data = normalize_field_map(original)
        try:
            response = await call_llm_with_telemetry(
                ai_client=self._ai_client(),
                scenario=PromptScenario.CDI_IMPROVEMENT,
                messages=build_cdi_messages(original_data, patient_info),
                temperature=self._settings.cdi.temperature,
                max_tokens=self._settings.cdi.max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise ImprovementServiceError(f"{type(e).__name__}: {e}") from e

        content = completion_text(response)
        if not content:
            raise ImprovementServiceError("empty response from completion service")

        try:
            payload = parse_completion_json(content)
        except ValueError as e:
            raise ImprovementParseError(str(e)) from e

        improved, notes = map_cdi_response(payload)
        return CdiImprovement(
            original_data=original_data,
            improved_data=improved,
            cdi_notes=notes,
            metadata={
                "prompt_version": PROMPT_VERSIONS[PromptScenario.CDI_IMPROVEMENT],
                "model": getattr(self._client, "deployment_name", None),
            },
        )
