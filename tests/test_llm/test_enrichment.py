"""Tests for AI event enrichment: overwrite semantics and failure absorption."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai.errors import ServerError

from community_intents.errors import EnrichmentFailed
from community_intents.llm.enrichment import GeminiEventEnhancer, apply_enrichment, enrich_event
from community_intents.llm.schemas import LLMEnrichmentResponse
from community_intents.models.intent import AIGeneratedDetails, EventDetails


def _make_details(**kwargs) -> EventDetails:
    """Return base event details, override via kwargs."""
    defaults = {
        "title": "A",
        "description": "yoga in the park",
        "date": "2026-10-20",
        "time": "09:00",
        "tags": ["x"],
        "suggested_duration": 45,
    }
    defaults.update(kwargs)
    return EventDetails(**defaults)


class _SlowEnhancer:
    async def enhance(self, details, original_text):
        await asyncio.sleep(5)


def test_apply_enrichment_full_overwrite():
    """Enrichment replaces title and tags outright, no union."""
    enrichment = AIGeneratedDetails(title="B", suggested_tags=["y", "z"])
    merged = apply_enrichment(_make_details(), enrichment)

    assert merged.title == "B"
    assert merged.tags == ["y", "z"]
    assert merged.ai_generated_details == enrichment


def test_apply_enrichment_keeps_values_when_empty():
    """Empty enrichment values never erase extracted ones."""
    enrichment = AIGeneratedDetails(title="", description=None, suggested_tags=[])
    merged = apply_enrichment(_make_details(), enrichment)

    assert merged.title == "A"
    assert merged.description == "yoga in the park"
    assert merged.tags == ["x"]
    assert merged.suggested_duration == 45


def test_apply_enrichment_never_touches_date_or_time():
    """Scheduling fields are outside the enrichment's reach."""
    enrichment = AIGeneratedDetails(title="B", recommended_duration=90, recommended_capacity=12)
    merged = apply_enrichment(_make_details(), enrichment)

    assert merged.date == "2026-10-20"
    assert merged.time == "09:00"
    assert merged.suggested_duration == 90
    assert merged.suggested_capacity == 12


async def test_enrich_event_applies_result():
    """A successful enhancer call is applied."""
    enhancer = AsyncMock()
    enhancer.enhance.return_value = AIGeneratedDetails(title="Sunrise Yoga")

    result = await enrich_event(_make_details(), "yoga tomorrow", enhancer, 1.0)

    assert result.title == "Sunrise Yoga"


async def test_enrich_event_failure_keeps_details():
    """An enhancer failure returns the details unchanged."""
    details = _make_details()
    enhancer = AsyncMock()
    enhancer.enhance.side_effect = EnrichmentFailed("quota")

    result = await enrich_event(details, "yoga tomorrow", enhancer, 1.0)

    assert result == details


async def test_enrich_event_timeout_keeps_details():
    """A slow enhancer is abandoned after the timeout."""
    details = _make_details()
    result = await enrich_event(details, "yoga tomorrow", _SlowEnhancer(), 0.01)
    assert result == details


async def test_enrich_event_without_enhancer():
    """No enhancer configured is a no-op."""
    details = _make_details()
    assert await enrich_event(details, "yoga", None, 1.0) is details


async def test_gemini_enhancer_maps_response():
    """Structured enrichment output maps onto AIGeneratedDetails."""
    parsed = LLMEnrichmentResponse(
        title="Sunrise Yoga",
        description="Start the day with an easy flow for every level.",
        suggested_tags=["Yoga", "wellness"],
        recommended_duration=60,
        recommended_capacity=15,
        location_suggestions=["Park lawn", "Studio A", "Rooftop", "Gym"],
    )
    response = SimpleNamespace(parsed=parsed, usage_metadata=None)

    with (
        patch(
            "community_intents.llm.enrichment._call_gemini",
            new_callable=AsyncMock,
            return_value=response,
        ),
        patch("community_intents.llm.enrichment.log_usage") as mock_log,
    ):
        enrichment = await GeminiEventEnhancer(client=MagicMock()).enhance(
            _make_details(), "yoga tomorrow"
        )

    assert enrichment.title == "Sunrise Yoga"
    assert enrichment.suggested_tags == ["yoga", "wellness"]
    assert enrichment.location_suggestions == ["Park lawn", "Studio A", "Rooftop"]
    assert mock_log.call_args.args[0] == "event_enrichment"


async def test_gemini_enhancer_api_error_raises_enrichment_failed():
    """API errors surface as EnrichmentFailed."""
    error = ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})

    with patch(
        "community_intents.llm.enrichment._call_gemini",
        new_callable=AsyncMock,
        side_effect=error,
    ):
        with pytest.raises(EnrichmentFailed):
            await GeminiEventEnhancer(client=MagicMock()).enhance(_make_details(), "yoga")
