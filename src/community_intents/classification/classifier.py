"""Keyword/pattern heuristics deciding what a chat message is trying to do.

This is the deterministic path: it runs when the external detector is
unavailable, and its output is tagged ``detected_by = regex``.
"""

import re
from datetime import datetime

from pydantic import BaseModel

from community_intents.extraction import (
    extract_capacity,
    extract_date,
    extract_duration,
    extract_location,
    extract_meeting_url,
    extract_tags,
    extract_time,
    extract_title,
    is_online_message,
)
from community_intents.models.intent import (
    AnnouncementDetails,
    DetectedIntent,
    EventDetails,
    FeedbackDetails,
    IntentType,
    OtherDetails,
    QuestionDetails,
)

EVENT_CONFIDENCE = 0.8
HEURISTIC_CONFIDENCE = 0.6
OTHER_CONFIDENCE = 0.5

DEFAULT_EVENT_TITLE = "Community Event"

# Action verbs and social nouns; any one of these plus a date or time makes an event
EVENT_PATTERNS = (
    re.compile(r"\b(?:schedule|plan|organi[sz]e|create|host|arrange|set\s+up|put\s+together)\b", re.IGNORECASE),
    re.compile(
        r"\b(?:event|meet|meetup|meet-up|meeting|session|workshop|class|gathering|get\s+together|hangout)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:yoga|fitness|workout|exercise|training|coaching|mentoring|study)\b", re.IGNORECASE),
    re.compile(r"\b(?:party|celebration|birthday|anniversary|holiday|festival)\b", re.IGNORECASE),
)

QUESTION_PATTERN = re.compile(
    r"^\s*(?:who|what|when|where|why|how|is|are|can|could|does|do|should|will|would)\b",
    re.IGNORECASE,
)
URGENT_PATTERN = re.compile(r"\b(?:urgent|urgently|asap|emergency|right now)\b", re.IGNORECASE)
ANNOUNCEMENT_PATTERN = re.compile(
    r"^\s*(?:announcement|reminder|heads[\s-]up|fyi|psa|important|update)\b"
    r"|\b(?:excited to announce|please note)\b",
    re.IGNORECASE,
)
FEEDBACK_PATTERN = re.compile(
    r"\b(?:feedback|suggestion|suggest|loved|love|great job|thank you|thanks|"
    r"disappointed|complain|complaint|issue with|not happy)\b",
    re.IGNORECASE,
)
_POSITIVE = re.compile(r"\b(?:love|loved|great|awesome|amazing|thanks|thank you|enjoyed)\b", re.IGNORECASE)
_NEGATIVE = re.compile(r"\b(?:disappointed|complain|complaint|bad|terrible|not happy|issue)\b", re.IGNORECASE)
_SENTENCE_SPLIT = re.compile(r"[.!?]")
_TOPIC_LIMIT = 80


class ClassificationResult(BaseModel):
    """Heuristic verdict for one message."""

    intent_type: IntentType
    confidence: float


def has_event_signal(text: str) -> bool:
    """True when an action verb or social noun appears in the text."""
    return any(pattern.search(text) for pattern in EVENT_PATTERNS)


def classify(text: str, now: datetime | None = None) -> ClassificationResult:
    """Classify a message with keyword/pattern heuristics.

    ``event`` needs both an event signal and a date or time; one without the
    other is not enough. Question, announcement and feedback are checked
    next, and anything else is ``other``.
    """
    has_when = extract_date(text, now=now) is not None or extract_time(text) is not None
    if has_event_signal(text) and has_when:
        return ClassificationResult(intent_type=IntentType.EVENT, confidence=EVENT_CONFIDENCE)

    stripped = text.strip()
    if stripped.endswith("?") or QUESTION_PATTERN.search(stripped):
        return ClassificationResult(intent_type=IntentType.QUESTION, confidence=HEURISTIC_CONFIDENCE)
    if ANNOUNCEMENT_PATTERN.search(stripped):
        return ClassificationResult(intent_type=IntentType.ANNOUNCEMENT, confidence=HEURISTIC_CONFIDENCE)
    if FEEDBACK_PATTERN.search(stripped):
        return ClassificationResult(intent_type=IntentType.FEEDBACK, confidence=HEURISTIC_CONFIDENCE)

    return ClassificationResult(intent_type=IntentType.OTHER, confidence=OTHER_CONFIDENCE)


def _topic(text: str) -> str:
    first = _SENTENCE_SPLIT.split(text.strip(), maxsplit=1)[0].strip() or text.strip()
    return first[:_TOPIC_LIMIT]


def _sentiment(text: str) -> str:
    positive = len(_POSITIVE.findall(text))
    negative = len(_NEGATIVE.findall(text))
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def build_event_details(text: str, now: datetime | None = None) -> EventDetails:
    """Run every field extractor over the text."""
    return EventDetails(
        title=extract_title(text) or DEFAULT_EVENT_TITLE,
        description=text,
        date=extract_date(text, now=now),
        time=extract_time(text),
        location=extract_location(text),
        suggested_duration=extract_duration(text),
        suggested_capacity=extract_capacity(text),
        tags=extract_tags(text),
        is_online=is_online_message(text),
        meeting_url=extract_meeting_url(text),
    )


def extract_intent(text: str, now: datetime | None = None) -> DetectedIntent:
    """Classify a message and build its typed details payload."""
    result = classify(text, now=now)

    if result.intent_type == IntentType.EVENT:
        details = build_event_details(text, now=now)
    elif result.intent_type == IntentType.QUESTION:
        urgency = "high" if URGENT_PATTERN.search(text) else "medium"
        details = QuestionDetails(topic=_topic(text), urgency=urgency)
    elif result.intent_type == IntentType.ANNOUNCEMENT:
        details = AnnouncementDetails(summary=_topic(text))
    elif result.intent_type == IntentType.FEEDBACK:
        details = FeedbackDetails(sentiment=_sentiment(text), topic=_topic(text))
    else:
        details = OtherDetails(description=text)

    return DetectedIntent(
        intent_type=result.intent_type,
        confidence=result.confidence,
        details=details,
    )
