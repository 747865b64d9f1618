"""Persistence and membership boundaries.

The workflow only talks to these protocols; the in-memory and Supabase
modules provide implementations.
"""

from datetime import datetime
from typing import Protocol

from community_intents.models.event import AnnouncementPost, CalendarEvent
from community_intents.models.intent import IntentDetails, MessageIntent
from community_intents.models.notification import AdminNotification


class IntentStore(Protocol):
    """Message intents, unique per message_id.

    ``create`` raises DuplicateIntentError if the message already has one.
    ``mark_processed`` raises ValidationFailed if the intent is already processed.
    """

    async def get(self, intent_id: str) -> MessageIntent | None: ...

    async def get_by_message_id(self, message_id: str) -> MessageIntent | None: ...

    async def create(self, intent: MessageIntent) -> MessageIntent: ...

    async def update_details(self, intent_id: str, details: IntentDetails) -> MessageIntent: ...

    async def mark_processed(self, intent_id: str, processed_by: str) -> MessageIntent: ...


class NotificationStore(Protocol):
    async def insert(self, notification: AdminNotification) -> AdminNotification: ...

    async def list_for_message(self, message_id: str) -> list[AdminNotification]: ...

    async def list_for_admin(
        self, community_id: str, admin_id: str, unread_only: bool = True
    ) -> list[AdminNotification]: ...

    async def mark_read(self, notification_id: str) -> AdminNotification: ...


class EventStore(Protocol):
    async def insert(self, event: CalendarEvent) -> CalendarEvent: ...

    async def list_upcoming(
        self, community_id: str, now: datetime, limit: int = 10
    ) -> list[CalendarEvent]: ...


class PostStore(Protocol):
    async def insert(self, post: AnnouncementPost) -> AnnouncementPost: ...


class MembershipService(Protocol):
    async def list_admins(self, community_id: str) -> list[str]:
        """User ids holding the admin or co-admin role."""
        ...
