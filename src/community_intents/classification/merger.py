"""Pick between the external detector's result and the regex classifier's.

Strict either/or: whenever the detector produced a result it wins wholesale,
otherwise the regex result is used. Fields are never blended.
"""

import asyncio
import logging
from datetime import datetime

from pydantic import BaseModel

from community_intents.classification.classifier import extract_intent
from community_intents.errors import DetectorUnavailable
from community_intents.llm.base import DetectionContext, IntentDetector
from community_intents.models.intent import DetectedBy, DetectedIntent

logger = logging.getLogger(__name__)


class MergedIntent(BaseModel):
    intent: DetectedIntent
    detected_by: DetectedBy


def merge_intent(
    ai_result: DetectedIntent | None, regex_result: DetectedIntent | None
) -> MergedIntent:
    if ai_result is not None:
        return MergedIntent(intent=ai_result, detected_by=DetectedBy.AI)
    if regex_result is None:
        raise ValueError("merge_intent needs at least one result")
    return MergedIntent(intent=regex_result, detected_by=DetectedBy.REGEX)


async def run_detector(
    detector: IntentDetector | None,
    text: str,
    context: DetectionContext,
    timeout_seconds: float,
) -> DetectedIntent:
    """Call the detector under a wall-clock timeout.

    Raises:
        DetectorUnavailable: No detector configured, timeout, or any detector failure.
    """
    if detector is None:
        raise DetectorUnavailable("No intent detector configured")
    try:
        async with asyncio.timeout(timeout_seconds):
            return await detector.detect(text, context)
    except TimeoutError as exc:
        raise DetectorUnavailable(f"Detector timed out after {timeout_seconds:.1f}s") from exc
    except DetectorUnavailable:
        raise
    except Exception as exc:
        raise DetectorUnavailable(f"Detector failed: {exc}") from exc


async def detect_intent(
    text: str,
    context: DetectionContext,
    detector: IntentDetector | None,
    timeout_seconds: float,
    now: datetime | None = None,
) -> MergedIntent:
    """Detect with the external detector, falling back to the regex classifier."""
    try:
        ai_result = await run_detector(detector, text, context, timeout_seconds)
    except DetectorUnavailable as exc:
        logger.warning(
            "Intent detector unavailable for message %s, using regex fallback: %s",
            context.message_id,
            exc,
        )
        ai_result = None

    regex_result = extract_intent(text, now=now) if ai_result is None else None
    return merge_intent(ai_result, regex_result)
