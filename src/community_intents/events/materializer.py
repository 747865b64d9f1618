"""Turn a confirmed event intent into a calendar event and an announcement.

Every precondition is checked before the first write. The writes themselves
run in order (event, announcement post, mark processed) with no rollback:
if a later step fails, earlier rows stay in place.
"""

import logging
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from community_intents.errors import ValidationFailed
from community_intents.models.event import AnnouncementPost, CalendarEvent
from community_intents.models.intent import EventDetails, MessageIntent
from community_intents.store.base import EventStore, IntentStore, PostStore

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationFailed([f"Unknown timezone {name!r}"]) from exc


def compute_window(
    details: EventDetails,
    tz: str = "UTC",
    end_time: datetime | None = None,
    default_duration: int = DEFAULT_DURATION_MINUTES,
) -> tuple[datetime, datetime]:
    """Return (start, end) as timezone-aware datetimes.

    The end is ``end_time`` when given, else start plus the suggested
    duration (or ``default_duration``). Naive ``end_time`` values are read in
    ``tz``.

    Raises:
        ValidationFailed: Date or time missing, or end not after start.
    """
    missing = []
    if not details.date:
        missing.append("Event date is required")
    if not details.time:
        missing.append("Event time is required")
    if missing:
        raise ValidationFailed(missing)

    zone = _zone(tz)
    start = datetime.combine(
        date.fromisoformat(details.date),
        time.fromisoformat(details.time),
        tzinfo=zone,
    )
    if end_time is None:
        duration = (
            details.suggested_duration
            if details.suggested_duration is not None
            else default_duration
        )
        end = start + timedelta(minutes=duration)
    else:
        end = end_time if end_time.tzinfo else end_time.replace(tzinfo=zone)

    if end <= start:
        raise ValidationFailed(["Event end time must be after its start time"])
    return start, end


def announcement_text(title: str, start: datetime) -> str:
    return (
        f'📅 New event created: "{title}" on {start.strftime("%Y-%m-%d")} '
        f'at {start.strftime("%H:%M")}. Check the Events tab for details!'
    )


async def materialize(
    intent: MessageIntent,
    created_by: str,
    events: EventStore,
    posts: PostStore,
    intents: IntentStore,
    *,
    edited_details: EventDetails | None = None,
    end_time: datetime | None = None,
    timezone: str = "UTC",
    default_duration: int = DEFAULT_DURATION_MINUTES,
) -> CalendarEvent:
    """Create the calendar event and announcement for a confirmed event intent.

    Args:
        intent: Stored event intent, not yet processed.
        created_by: Admin confirming the event.
        events: Calendar event store.
        posts: Community post store.
        intents: Intent store, used to mark the intent processed.
        edited_details: Admin corrections that replace the stored details.
        end_time: Explicit end, overriding the duration-derived one.
        timezone: IANA zone the date/time fields are expressed in.
        default_duration: Minutes used when no duration was suggested.

    Returns:
        The stored CalendarEvent.

    Raises:
        ValidationFailed: Before any write, if a precondition is unmet.
        PersistenceFailure: If a write fails; earlier writes are kept.
    """
    details = edited_details or intent.event_details
    if details is None:
        raise ValidationFailed([f"Only event intents can be materialized, got {intent.intent_type.value}"])
    if intent.is_processed:
        raise ValidationFailed(["Intent has already been processed"])
    if intent.id is None:
        raise ValidationFailed(["Intent must be stored before it can be materialized"])

    start, end = compute_window(details, timezone, end_time, default_duration)

    event = await events.insert(
        CalendarEvent(
            community_id=intent.community_id,
            created_by=created_by,
            title=details.title,
            description=details.description,
            start_time=start,
            end_time=end,
            location=details.location,
            capacity=details.suggested_capacity,
            tags=details.tags,
            is_online=details.is_online,
            meeting_url=details.meeting_url,
            ai_generated=True,
            source_intent_id=intent.id,
        )
    )
    logger.info("Created event %s from intent %s", event.id, intent.id)

    await posts.insert(
        AnnouncementPost(
            community_id=intent.community_id,
            user_id=created_by,
            content=announcement_text(event.title, start),
            event_id=event.id,
        )
    )
    await intents.mark_processed(intent.id, created_by)
    return event
