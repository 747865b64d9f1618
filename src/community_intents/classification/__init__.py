"""Intent classification: regex heuristics plus the detector/regex merge.

Public API:
    classify(text, now=None) -> ClassificationResult
    extract_intent(text, now=None) -> DetectedIntent
    detect_intent(text, context, detector, timeout_seconds) -> MergedIntent
"""

from community_intents.classification.classifier import (
    ClassificationResult,
    build_event_details,
    classify,
    extract_intent,
    has_event_signal,
)
from community_intents.classification.merger import (
    MergedIntent,
    detect_intent,
    merge_intent,
    run_detector,
)

__all__ = [
    "ClassificationResult",
    "build_event_details",
    "classify",
    "extract_intent",
    "has_event_signal",
    "MergedIntent",
    "detect_intent",
    "merge_intent",
    "run_detector",
]
