"""In-process store implementations for tests and local runs."""

import uuid
from datetime import datetime, timezone

from community_intents.errors import DuplicateIntentError, IntentNotFound, PersistenceFailure, ValidationFailed
from community_intents.models.event import AnnouncementPost, CalendarEvent
from community_intents.models.intent import IntentDetails, MessageIntent
from community_intents.models.notification import AdminNotification


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryIntentStore:
    def __init__(self):
        self._intents: dict[str, MessageIntent] = {}
        self._by_message: dict[str, str] = {}

    async def get(self, intent_id: str) -> MessageIntent | None:
        return self._intents.get(intent_id)

    async def get_by_message_id(self, message_id: str) -> MessageIntent | None:
        intent_id = self._by_message.get(message_id)
        return self._intents.get(intent_id) if intent_id else None

    async def create(self, intent: MessageIntent) -> MessageIntent:
        if intent.message_id in self._by_message:
            raise DuplicateIntentError(intent.message_id)
        stored = intent.model_copy(update={"id": str(uuid.uuid4()), "created_at": _now()})
        self._intents[stored.id] = stored
        self._by_message[stored.message_id] = stored.id
        return stored

    async def update_details(self, intent_id: str, details: IntentDetails) -> MessageIntent:
        intent = self._require(intent_id)
        if intent.is_processed:
            raise ValidationFailed(["Intent has already been processed"])
        updated = MessageIntent.model_validate({**intent.model_dump(), "details": details})
        self._intents[intent_id] = updated
        return updated

    async def mark_processed(self, intent_id: str, processed_by: str) -> MessageIntent:
        intent = self._require(intent_id)
        if intent.is_processed:
            raise ValidationFailed(["Intent has already been processed"])
        updated = intent.model_copy(
            update={"is_processed": True, "processed_at": _now(), "processed_by": processed_by}
        )
        self._intents[intent_id] = updated
        return updated

    def _require(self, intent_id: str) -> MessageIntent:
        intent = self._intents.get(intent_id)
        if intent is None:
            raise IntentNotFound(f"Intent {intent_id} not found")
        return intent


class InMemoryNotificationStore:
    def __init__(self):
        self._rows: dict[str, AdminNotification] = {}

    async def insert(self, notification: AdminNotification) -> AdminNotification:
        stored = notification.model_copy(update={"id": str(uuid.uuid4()), "created_at": _now()})
        self._rows[stored.id] = stored
        return stored

    async def list_for_message(self, message_id: str) -> list[AdminNotification]:
        return [row for row in self._rows.values() if row.message_id == message_id]

    async def list_for_admin(
        self, community_id: str, admin_id: str, unread_only: bool = True
    ) -> list[AdminNotification]:
        rows = [
            row
            for row in self._rows.values()
            if row.community_id == community_id
            and row.recipient_id == admin_id
            and not (unread_only and row.is_read)
        ]
        return sorted(rows, key=lambda row: row.created_at, reverse=True)

    async def mark_read(self, notification_id: str) -> AdminNotification:
        row = self._rows.get(notification_id)
        if row is None:
            raise PersistenceFailure(f"Notification {notification_id} not found")
        updated = row.model_copy(update={"is_read": True, "read_at": _now()})
        self._rows[notification_id] = updated
        return updated


class InMemoryEventStore:
    def __init__(self):
        self.events: list[CalendarEvent] = []

    async def insert(self, event: CalendarEvent) -> CalendarEvent:
        stored = event.model_copy(update={"id": str(uuid.uuid4()), "created_at": _now()})
        self.events.append(stored)
        return stored

    async def list_upcoming(
        self, community_id: str, now: datetime, limit: int = 10
    ) -> list[CalendarEvent]:
        upcoming = [
            event
            for event in self.events
            if event.community_id == community_id and event.start_time >= now
        ]
        return sorted(upcoming, key=lambda event: event.start_time)[:limit]


class InMemoryPostStore:
    def __init__(self):
        self.posts: list[AnnouncementPost] = []

    async def insert(self, post: AnnouncementPost) -> AnnouncementPost:
        stored = post.model_copy(update={"id": str(uuid.uuid4()), "created_at": _now()})
        self.posts.append(stored)
        return stored


class InMemoryMembership:
    """Static admin roster keyed by community id."""

    def __init__(self, admins: dict[str, list[str]] | None = None):
        self.admins = admins or {}

    async def list_admins(self, community_id: str) -> list[str]:
        return list(self.admins.get(community_id, []))
