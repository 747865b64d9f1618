"""Tests for the in-memory store implementations."""

from datetime import datetime, timedelta, timezone

import pytest

from community_intents.errors import DuplicateIntentError, IntentNotFound, ValidationFailed
from community_intents.models.event import CalendarEvent
from community_intents.models.intent import DetectedBy, EventDetails, IntentType, MessageIntent
from community_intents.store.memory import InMemoryEventStore, InMemoryIntentStore


def _make_intent(message_id: str = "msg-1") -> MessageIntent:
    """Return an unsaved event intent."""
    return MessageIntent(
        message_id=message_id,
        community_id="community-1",
        intent_type=IntentType.EVENT,
        confidence=0.8,
        details=EventDetails(title="Yoga", date="2026-10-20", time="09:00"),
        detected_by=DetectedBy.REGEX,
    )


async def test_create_assigns_id_and_timestamp():
    """create stores the intent with an id and created_at."""
    store = InMemoryIntentStore()
    stored = await store.create(_make_intent())

    assert stored.id
    assert stored.created_at is not None
    assert await store.get_by_message_id("msg-1") == stored


async def test_create_rejects_second_intent_for_message():
    """message_id is unique."""
    store = InMemoryIntentStore()
    await store.create(_make_intent())

    with pytest.raises(DuplicateIntentError) as exc_info:
        await store.create(_make_intent())
    assert exc_info.value.message_id == "msg-1"


async def test_mark_processed_sets_both_fields():
    """processed_at and processed_by are set together."""
    store = InMemoryIntentStore()
    stored = await store.create(_make_intent())

    processed = await store.mark_processed(stored.id, "admin-1")

    assert processed.is_processed is True
    assert processed.processed_by == "admin-1"
    assert processed.processed_at is not None


async def test_mark_processed_twice_fails():
    """An intent is processed at most once."""
    store = InMemoryIntentStore()
    stored = await store.create(_make_intent())
    await store.mark_processed(stored.id, "admin-1")

    with pytest.raises(ValidationFailed):
        await store.mark_processed(stored.id, "admin-2")


async def test_update_details_rejects_processed():
    """Processed intents are frozen."""
    store = InMemoryIntentStore()
    stored = await store.create(_make_intent())
    await store.mark_processed(stored.id, "admin-1")

    with pytest.raises(ValidationFailed):
        await store.update_details(stored.id, EventDetails(title="Changed"))


async def test_update_details_unknown_intent():
    """Unknown ids raise IntentNotFound."""
    with pytest.raises(IntentNotFound):
        await InMemoryIntentStore().update_details("nope", EventDetails(title="x"))


async def test_list_upcoming_orders_and_filters():
    """Only future events of the community, soonest first, limited."""
    store = InMemoryEventStore()
    now = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)

    def _event(title: str, hours: int, community_id: str = "community-1") -> CalendarEvent:
        start = now + timedelta(hours=hours)
        return CalendarEvent(
            community_id=community_id,
            created_by="admin-1",
            title=title,
            start_time=start,
            end_time=start + timedelta(hours=1),
        )

    for event in (_event("later", 48), _event("past", -2), _event("soon", 2), _event("other", 3, "c2")):
        await store.insert(event)

    upcoming = await store.list_upcoming("community-1", now, limit=5)
    assert [event.title for event in upcoming] == ["soon", "later"]
    assert len(await store.list_upcoming("community-1", now, limit=1)) == 1
