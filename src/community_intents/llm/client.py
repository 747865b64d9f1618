"""Shared Gemini client for the intent detector and the event enhancer.

Each HTTP attempt is capped at the longer of the detection and enrichment
budgets, so a single slow call cannot outlive the ``asyncio.timeout`` its
caller already runs under. Retries stay in tenacity (``llm.structured``);
the SDK's own retry options are left off.
"""

from google import genai
from google.genai import types

from community_intents.config import Settings, get_settings

_client: genai.Client | None = None


def http_timeout_ms(settings: Settings) -> int:
    budget = max(settings.detector_timeout_seconds, settings.enrichment_timeout_seconds)
    return max(int(budget * 1000), 1_000)


def get_gemini_client() -> genai.Client:
    """Return the process-wide Gemini client, creating it on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = genai.Client(
            api_key=settings.gemini_api_key,
            http_options=types.HttpOptions(timeout=http_timeout_ms(settings)),
        )
    return _client


def reset_client() -> None:
    global _client
    _client = None
