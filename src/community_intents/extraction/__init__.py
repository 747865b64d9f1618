"""Deterministic extraction of dates, times and event fields from chat text.

Public API:
    extract_date(text, now=None) -> str | None
    extract_time(text) -> str | None
    extract_title / extract_location / extract_duration / extract_capacity /
    extract_tags / extract_meeting_url / is_online_message
"""

from community_intents.extraction.dates import extract_date, extract_time
from community_intents.extraction.fields import (
    extract_capacity,
    extract_duration,
    extract_location,
    extract_meeting_url,
    extract_tags,
    extract_title,
    is_online_message,
)

__all__ = [
    "extract_date",
    "extract_time",
    "extract_title",
    "extract_location",
    "extract_duration",
    "extract_capacity",
    "extract_tags",
    "extract_meeting_url",
    "is_online_message",
]
