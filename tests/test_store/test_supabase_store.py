"""Supabase PostgREST store tests against an httpx.MockTransport."""

import json

import httpx
import pytest

from community_intents.errors import DuplicateIntentError, PersistenceFailure, ValidationFailed
from community_intents.models.intent import DetectedBy, EventDetails, IntentType, MessageIntent
from community_intents.models.notification import (
    AdminNotification,
    NotificationCategory,
    NotificationDetails,
    NotificationEnvelope,
    NotificationPriority,
)
from community_intents.store.supabase import (
    SupabaseIntentStore,
    SupabaseMembership,
    SupabaseNotificationStore,
    intent_from_row,
    intent_to_row,
)


def _make_intent() -> MessageIntent:
    """Return an unsaved event intent."""
    return MessageIntent(
        message_id="msg-1",
        community_id="community-1",
        intent_type=IntentType.EVENT,
        confidence=0.8,
        details=EventDetails(title="Yoga", date="2026-10-20", time="09:00"),
        detected_by=DetectedBy.REGEX,
    )


def _stored_row() -> dict:
    """Return a message_intents row as PostgREST would send it."""
    row = intent_to_row(_make_intent())
    row.update({"id": "intent-1", "created_at": "2026-10-19T10:00:00+00:00"})
    return row


def _make_notification() -> AdminNotification:
    """Return an unsaved notification for one admin."""
    details = EventDetails(title="Yoga", date="2026-10-20", time="09:00")
    return AdminNotification(
        community_id="community-1",
        message_id="msg-1",
        recipient_id="admin-1",
        intent_type=IntentType.EVENT,
        intent_details=NotificationEnvelope(
            type="event_suggestion",
            priority=NotificationPriority.MEDIUM,
            summary="Event suggestion: Yoga",
            category=NotificationCategory.EVENT_SUGGESTION,
            details=NotificationDetails(
                original_message="Let's plan a yoga session next Tuesday at 9am",
                extracted_details=details,
                suggested_actions=["Review and approve event details"],
            ),
        ),
        created_by="member-1",
    )


def _client(handler) -> httpx.AsyncClient:
    """AsyncClient routed through a mock transport."""
    return httpx.AsyncClient(base_url="https://db.test/rest/v1", transport=httpx.MockTransport(handler))


def test_row_round_trip_strips_and_restores_tag():
    """details is stored without its tag and rebuilt from intent_type."""
    row = intent_to_row(_make_intent())
    assert "intent_type" not in row["details"]

    restored = intent_from_row({**row, "id": "intent-1"})
    assert isinstance(restored.details, EventDetails)
    assert restored.details.title == "Yoga"


async def test_create_posts_row_and_parses_result():
    """create sends a POST with return=representation."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["prefer"] = request.headers.get("Prefer")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=[_stored_row()])

    async with _client(handler) as client:
        stored = await SupabaseIntentStore(client).create(_make_intent())

    assert stored.id == "intent-1"
    assert seen["method"] == "POST"
    assert seen["path"] == "/rest/v1/message_intents"
    assert seen["prefer"] == "return=representation"
    assert seen["body"]["message_id"] == "msg-1"


async def test_create_unique_violation_is_duplicate():
    """A 409 unique violation maps to DuplicateIntentError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"code": "23505", "message": "duplicate key"})

    async with _client(handler) as client:
        with pytest.raises(DuplicateIntentError):
            await SupabaseIntentStore(client).create(_make_intent())


async def test_server_error_is_persistence_failure():
    """Other HTTP failures map to PersistenceFailure."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    async with _client(handler) as client:
        with pytest.raises(PersistenceFailure):
            await SupabaseIntentStore(client).get_by_message_id("msg-1")


async def test_get_by_message_id_empty():
    """No rows means no intent."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["message_id"] == "eq.msg-1"
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        assert await SupabaseIntentStore(client).get_by_message_id("msg-1") is None


async def test_mark_processed_already_processed():
    """An empty PATCH result for an existing intent means it was already processed."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "PATCH":
            assert request.url.params["is_processed"] == "eq.false"
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=[_stored_row()])

    async with _client(handler) as client:
        with pytest.raises(ValidationFailed):
            await SupabaseIntentStore(client).mark_processed("intent-1", "admin-1")


async def test_list_admins_filters_roles():
    """Admins and co-admins are requested by role."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["role"] == "in.(admin,co-admin)"
        return httpx.Response(200, json=[{"user_id": "a1"}, {"user_id": "a2"}])

    async with _client(handler) as client:
        assert await SupabaseMembership(client).list_admins("community-1") == ["a1", "a2"]


async def test_create_body_matches_message_intents_columns():
    """The intent row carries detected_by and an untagged details payload."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=[_stored_row()])

    async with _client(handler) as client:
        await SupabaseIntentStore(client).create(_make_intent())

    assert set(seen["body"]) == {
        "message_id",
        "community_id",
        "intent_type",
        "confidence",
        "details",
        "detected_by",
        "is_processed",
        "processed_at",
        "processed_by",
    }
    assert seen["body"]["detected_by"] == "regex"
    assert "intent_type" not in seen["body"]["details"]


async def test_notification_insert_body_has_recipient_and_headline_columns():
    """Each admin row names its recipient and mirrors priority, category and summary."""
    seen = {}
    notification = _make_notification()

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=[{**seen["body"], "id": "notification-1"}])

    async with _client(handler) as client:
        stored = await SupabaseNotificationStore(client).insert(notification)

    assert seen["path"] == "/rest/v1/admin_notifications"
    body = seen["body"]
    assert body["recipient_id"] == "admin-1"
    assert body["message_id"] == "msg-1"
    assert body["created_by"] == "member-1"
    assert body["priority"] == "medium"
    assert body["category"] == "event_suggestion"
    assert body["summary"] == "Event suggestion: Yoga"
    assert body["suggested_actions"] == ["Review and approve event details"]
    assert "id" not in body
    assert stored.id == "notification-1"
    assert stored.recipient_id == "admin-1"
