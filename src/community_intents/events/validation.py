"""Advisory review of event details before an admin confirms them."""

from datetime import date, datetime

from pydantic import BaseModel

from community_intents.models.intent import EventDetails

MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10
MIN_DURATION_MINUTES = 15


class EventReview(BaseModel):
    is_valid: bool
    errors: list[str] = []
    suggestions: list[str] = []


def review_event_details(details: EventDetails, now: datetime | None = None) -> EventReview:
    """Check event details for blocking problems and optional improvements.

    Errors make the review invalid; suggestions never do. A date equal to
    today is not in the past.
    """
    today = (now or datetime.now()).date()
    errors: list[str] = []
    suggestions: list[str] = []

    if len(details.title.strip()) < MIN_TITLE_LENGTH:
        errors.append(f"Event title must be at least {MIN_TITLE_LENGTH} characters long")
    if len(details.description.strip()) < MIN_DESCRIPTION_LENGTH:
        errors.append(f"Event description must be at least {MIN_DESCRIPTION_LENGTH} characters long")
    if details.date and date.fromisoformat(details.date) < today:
        errors.append("Event date cannot be in the past")
    if details.suggested_capacity is not None and details.suggested_capacity < 1:
        errors.append("Event capacity must be at least 1")
    if details.suggested_duration is not None and details.suggested_duration < MIN_DURATION_MINUTES:
        errors.append(f"Event duration must be at least {MIN_DURATION_MINUTES} minutes")

    if not details.location and not details.is_online:
        suggestions.append("Consider adding a location or marking as online event")
    if not details.tags:
        suggestions.append("Adding tags helps others find your event")
    if not details.suggested_capacity:
        suggestions.append("Setting a capacity limit helps with planning")

    return EventReview(is_valid=not errors, errors=errors, suggestions=suggestions)
