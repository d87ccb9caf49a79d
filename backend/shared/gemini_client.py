"""Builder for creating Gemini API clients.

Drivers share one factory so the API key is resolved the same way everywhere.
"""

from __future__ import annotations

from google import genai

from shared.config import config
from shared.exceptions import MissingCredentialError


def create_gemini_client(api_key: str | None = None) -> genai.Client:
    """
    Create a Gemini API client.

    Args:
        api_key: Gemini API key (read from configuration if None)

    Returns:
        Configured ``genai.Client``; use ``client.aio`` for async calls

    Raises:
        MissingCredentialError: If no API key is configured
    """
    api_key = api_key or config.get("gemini_api_key")

    if not api_key:
        raise MissingCredentialError(
            "Gemini API key not configured. Set GEMINI_API_KEY environment variable."
        )

    return genai.Client(api_key=api_key)
