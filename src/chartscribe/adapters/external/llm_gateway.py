"""
Gateway for completion-service calls with telemetry and prompt version tracking.

Each call runs inside an OpenTelemetry span tagged with the scenario,
prompt version, latency and token usage. Message content is never logged.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from chartscribe.adapters.external.prompt_registry import PROMPT_VERSIONS, PromptScenario
from chartscribe.core.ai_client import AzureAIClient
from chartscribe.observability.tracing import (
    add_span_attribute,
    set_span_status,
    trace_operation,
)

logger = logging.getLogger("chartscribe")


async def call_llm_with_telemetry(
    ai_client: AzureAIClient,
    scenario: PromptScenario,
    messages: List[Dict[str, str]],
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: Optional[int] = None,
    **kwargs: Any,
) -> Any:
    """
    Central gateway for completion calls.

    Args:
        ai_client: AzureAIClient instance (or anything with the same `chat` method)
        scenario: PromptScenario for this call
        messages: Chat messages
        model: Optional deployment name override
        temperature: Sampling temperature
        max_tokens: Optional max tokens for the response
        **kwargs: Passed through to the chat completion (e.g. response_format)

    Returns:
        The raw chat completion response
    """
    prompt_version = PROMPT_VERSIONS.get(scenario, "UNKNOWN")
    start_time = time.perf_counter()

    with trace_operation(
        "llm_call",
        {
            "llm.scenario": scenario.value,
            "llm.prompt_version": prompt_version,
            "llm.model": model or "default",
        },
    ) as span:
        try:
            response = await ai_client.chat(
                messages=messages,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start_time) * 1000.0
            add_span_attribute(span, "llm.latency_ms", latency_ms)
            add_span_attribute(span, "llm.error", str(e)[:200])
            set_span_status(span, success=False, error_message=str(e))
            logger.error(
                f"LLM call failed: scenario={scenario.value} "
                f"version={prompt_version} error={type(e).__name__}"
            )
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000.0
        add_span_attribute(span, "llm.latency_ms", latency_ms)
        usage = getattr(response, "usage", None)
        if usage:
            add_span_attribute(span, "llm.tokens", getattr(usage, "total_tokens", 0))
        set_span_status(span, success=True)

        logger.info(
            f"LLM call completed: scenario={scenario.value} "
            f"version={prompt_version} latency_ms={latency_ms:.2f}"
        )
        return response


def completion_text(response: Any) -> Optional[str]:
    """Text of the first choice, or None when the response carries none."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)
