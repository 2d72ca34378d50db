"""
AI client factory.

Centralizes creation of the Azure OpenAI client used by the extraction
and CDI services.
"""

from __future__ import annotations

from .ai_client import AzureAIClient


def get_ai_client() -> AzureAIClient:
    """
    Get the default AI client for the application.

    Configured via `Settings.azure_openai`.
    """
    return AzureAIClient()


__all__ = ["get_ai_client", "AzureAIClient"]
