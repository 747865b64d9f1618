"""Optional AI enhancement of event details.

The enhancer proposes a better title, description, tags, duration and
capacity. ``apply_enrichment`` overwrites the extracted values with every
non-empty proposal and keeps the full proposal under
``ai_generated_details``. ``enrich_event`` never raises.
"""

import asyncio
import logging

from google import genai
from google.genai.errors import APIError
from pydantic import ValidationError

from community_intents.errors import EnrichmentFailed
from community_intents.llm.base import EventEnhancer
from community_intents.llm.client import get_gemini_client
from community_intents.llm.prompts import build_enrichment_content, build_enrichment_prompt
from community_intents.llm.schemas import LLMEnrichmentResponse
from community_intents.llm.structured import _call_gemini
from community_intents.llm.usage import extract_usage, log_usage
from community_intents.models.intent import AIGeneratedDetails, EventDetails

logger = logging.getLogger(__name__)


class GeminiEventEnhancer:
    """Event enhancer using Gemini structured output."""

    def __init__(self, client: genai.Client | None = None):
        self._client = client

    async def enhance(self, details: EventDetails, original_text: str) -> AIGeneratedDetails:
        """Ask Gemini for improved event details.

        Raises:
            EnrichmentFailed: On API errors or unusable output.
        """
        client = self._client or get_gemini_client()
        try:
            response = await _call_gemini(
                client,
                build_enrichment_prompt(),
                build_enrichment_content(details, original_text),
                LLMEnrichmentResponse,
                temperature=0.7,
            )
        except (APIError, ValidationError) as exc:
            raise EnrichmentFailed(f"Gemini enrichment call failed: {exc}") from exc

        log_usage("event_enrichment", None, extract_usage(response))

        parsed = response.parsed
        if parsed is None:
            raise EnrichmentFailed("Gemini returned no structured output")
        try:
            if isinstance(parsed, dict):
                parsed = LLMEnrichmentResponse.model_validate(parsed)
        except ValidationError as exc:
            raise EnrichmentFailed("Gemini enrichment output failed validation") from exc

        return AIGeneratedDetails(
            title=parsed.title,
            description=parsed.description,
            suggested_tags=[tag.strip().lower() for tag in parsed.suggested_tags if tag.strip()],
            recommended_duration=parsed.recommended_duration,
            recommended_capacity=parsed.recommended_capacity,
            location_suggestions=parsed.location_suggestions[:3],
        )


def apply_enrichment(details: EventDetails, enrichment: AIGeneratedDetails) -> EventDetails:
    """Overlay non-empty enrichment values onto the event details."""
    updates: dict = {"ai_generated_details": enrichment}
    if enrichment.title:
        updates["title"] = enrichment.title
    if enrichment.description:
        updates["description"] = enrichment.description
    if enrichment.suggested_tags:
        updates["tags"] = enrichment.suggested_tags
    if enrichment.recommended_duration:
        updates["suggested_duration"] = enrichment.recommended_duration
    if enrichment.recommended_capacity:
        updates["suggested_capacity"] = enrichment.recommended_capacity
    # Re-validate so tag dedupe still applies
    return EventDetails.model_validate({**details.model_dump(), **updates})


async def enrich_event(
    details: EventDetails,
    original_text: str,
    enhancer: EventEnhancer | None,
    timeout_seconds: float,
) -> EventDetails:
    """Run the enhancer with a timeout. Returns the input unchanged on any failure."""
    if enhancer is None:
        return details
    try:
        async with asyncio.timeout(timeout_seconds):
            enrichment = await enhancer.enhance(details, original_text)
    except TimeoutError:
        logger.warning("Event enrichment timed out after %.1fs", timeout_seconds)
        return details
    except Exception as exc:
        failure = exc if isinstance(exc, EnrichmentFailed) else EnrichmentFailed(str(exc))
        logger.warning("Event enrichment failed: %s", failure, exc_info=exc)
        return details
    return apply_enrichment(details, enrichment)
