"""External AI: intent detection and event enrichment via Gemini.

Public API:
    GeminiIntentDetector.detect(text, context) -> DetectedIntent
    GeminiEventEnhancer.enhance(details, original_text) -> AIGeneratedDetails
    enrich_event(details, text, enhancer, timeout_seconds) -> EventDetails
        Never raises; falls back to the unenriched details.
"""

from community_intents.llm.base import DetectionContext, EventEnhancer, IntentDetector
from community_intents.llm.client import get_gemini_client, reset_client
from community_intents.llm.detector import GeminiIntentDetector, build_detected_intent
from community_intents.llm.enrichment import GeminiEventEnhancer, apply_enrichment, enrich_event

__all__ = [
    "DetectionContext",
    "IntentDetector",
    "EventEnhancer",
    "get_gemini_client",
    "reset_client",
    "GeminiIntentDetector",
    "GeminiEventEnhancer",
    "build_detected_intent",
    "apply_enrichment",
    "enrich_event",
]
