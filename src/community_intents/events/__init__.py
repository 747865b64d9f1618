"""Event materialization and advisory review."""

from community_intents.events.materializer import announcement_text, compute_window, materialize
from community_intents.events.validation import EventReview, review_event_details

__all__ = [
    "announcement_text",
    "compute_window",
    "materialize",
    "EventReview",
    "review_event_details",
]
