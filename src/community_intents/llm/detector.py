"""Gemini-backed intent detector: chat text -> DetectedIntent.

Wires together the schema, client, and prompt modules. Every failure mode
(API error after retries, unparsable output, a payload that does not fit the
domain models) surfaces as ``DetectorUnavailable`` so the caller can fall
back to the regex classifier.
"""

import logging
from datetime import datetime

from google import genai
from google.genai.errors import APIError
from pydantic import ValidationError

from community_intents.classification.classifier import DEFAULT_EVENT_TITLE
from community_intents.errors import DetectorUnavailable
from community_intents.llm.base import DetectionContext
from community_intents.llm.client import get_gemini_client
from community_intents.llm.prompts import build_detection_content, build_detection_prompt
from community_intents.llm.schemas import LLMIntentResponse
from community_intents.llm.structured import _call_gemini
from community_intents.llm.usage import extract_usage, log_usage
from community_intents.models.intent import (
    AnnouncementDetails,
    DetectedIntent,
    EventDetails,
    FeedbackDetails,
    IntentType,
    OtherDetails,
    QuestionDetails,
)

logger = logging.getLogger(__name__)

_SENTIMENTS = {"positive", "negative", "neutral"}
_URGENCIES = {"high", "medium", "low"}


def build_detected_intent(llm_result: LLMIntentResponse, text: str) -> DetectedIntent:
    """Map the flat LLM response onto the typed details payload.

    Confidence is clamped into [0, 1]. Unknown sentiment/urgency values fall
    back to the model defaults. Malformed dates or times raise ValidationError.
    """
    confidence = min(max(llm_result.confidence, 0.0), 1.0)
    intent_type = llm_result.intent_type

    if intent_type == IntentType.EVENT:
        details = EventDetails(
            title=(llm_result.title or "").strip() or DEFAULT_EVENT_TITLE,
            description=llm_result.description or text,
            date=llm_result.date or None,
            time=llm_result.time or None,
            location=llm_result.location or None,
            suggested_duration=llm_result.suggested_duration,
            suggested_capacity=llm_result.suggested_capacity,
            tags=[tag.strip().lower() for tag in llm_result.tags if tag.strip()],
            is_online=llm_result.is_online,
            meeting_url=llm_result.meeting_url or None,
        )
    elif intent_type == IntentType.FEEDBACK:
        sentiment = (llm_result.sentiment or "").lower()
        details = FeedbackDetails(
            sentiment=sentiment if sentiment in _SENTIMENTS else "neutral",
            topic=llm_result.topic or text,
        )
    elif intent_type == IntentType.QUESTION:
        urgency = (llm_result.urgency or "").lower()
        details = QuestionDetails(
            topic=llm_result.topic or text,
            urgency=urgency if urgency in _URGENCIES else "medium",
        )
    elif intent_type == IntentType.ANNOUNCEMENT:
        details = AnnouncementDetails(summary=llm_result.summary or text)
    else:
        details = OtherDetails(description=llm_result.description or text)

    return DetectedIntent(intent_type=intent_type, confidence=confidence, details=details)


class GeminiIntentDetector:
    """Intent detector using Gemini structured output."""

    def __init__(self, client: genai.Client | None = None):
        self._client = client

    async def detect(
        self,
        text: str,
        context: DetectionContext,
        now: datetime | None = None,
    ) -> DetectedIntent:
        """Detect the intent of one chat message.

        Raises:
            DetectorUnavailable: On API errors, missing output or invalid output.
        """
        client = self._client or get_gemini_client()
        system_prompt = build_detection_prompt(now or datetime.now())
        user_content = build_detection_content(text, context.community_id)

        try:
            response = await _call_gemini(client, system_prompt, user_content, LLMIntentResponse)
        except APIError as exc:
            logger.warning(
                "Gemini API error detecting intent for message %s",
                context.message_id,
                exc_info=True,
            )
            raise DetectorUnavailable(f"Gemini API error: {exc}") from exc
        except ValidationError as exc:
            raise DetectorUnavailable("Gemini response failed schema validation") from exc

        log_usage("intent_detection", context.message_id, extract_usage(response))

        parsed = response.parsed
        if parsed is None:
            raise DetectorUnavailable("Gemini returned no structured output")

        try:
            if isinstance(parsed, dict):
                parsed = LLMIntentResponse.model_validate(parsed)
            return build_detected_intent(parsed, text)
        except ValidationError as exc:
            raise DetectorUnavailable("Gemini output does not fit the intent model") from exc
