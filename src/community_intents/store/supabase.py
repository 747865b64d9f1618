"""Supabase-backed stores speaking PostgREST over httpx.

Column layout and constraints follow supabase/migrations. Connection
failures are retried with tenacity. A unique-constraint
violation on ``message_intents.message_id`` (HTTP 409 / Postgres 23505)
becomes DuplicateIntentError; every other HTTP failure becomes
PersistenceFailure.
"""

import logging
from datetime import datetime, timezone

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from community_intents.errors import DuplicateIntentError, IntentNotFound, PersistenceFailure, ValidationFailed
from community_intents.models.event import AnnouncementPost, CalendarEvent
from community_intents.models.intent import IntentDetails, MessageIntent
from community_intents.models.notification import AdminNotification
from community_intents.store.client import get_supabase_client

logger = logging.getLogger(__name__)

INTENTS_TABLE = "message_intents"
NOTIFICATIONS_TABLE = "admin_notifications"
EVENTS_TABLE = "community_events"
POSTS_TABLE = "community_posts"
MEMBERS_TABLE = "community_members"

ADMIN_ROLES = ("admin", "co-admin")
_UNIQUE_VIOLATION = "23505"
_RETURN_ROWS = {"Prefer": "return=representation"}


class _UniqueViolation(PersistenceFailure):
    pass


@retry(
    retry=retry_if_exception_type((httpx.ConnectError, httpx.ConnectTimeout)),
    wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
    stop=stop_after_attempt(3),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def _send(client: httpx.AsyncClient, method: str, path: str, **kwargs) -> httpx.Response:
    return await client.request(method, path, **kwargs)


def _error_code(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


async def _execute(client: httpx.AsyncClient, method: str, path: str, **kwargs) -> list[dict]:
    """Send one PostgREST request and return the decoded rows."""
    try:
        response = await _send(client, method, path, **kwargs)
    except httpx.HTTPError as exc:
        raise PersistenceFailure(f"{method} /{path} failed: {exc}") from exc

    if response.is_error:
        if response.status_code == 409 or _error_code(response) == _UNIQUE_VIOLATION:
            raise _UniqueViolation(f"{method} /{path} violated a unique constraint")
        raise PersistenceFailure(
            f"{method} /{path} returned HTTP {response.status_code}: {response.text[:200]}"
        )

    if not response.content:
        return []
    rows = response.json()
    return rows if isinstance(rows, list) else [rows]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def intent_from_row(row: dict) -> MessageIntent:
    """Rebuild a MessageIntent; the ``details`` column is stored without its tag."""
    details = dict(row.get("details") or {})
    details["intent_type"] = row["intent_type"]
    return MessageIntent.model_validate({**row, "details": details})


def intent_to_row(intent: MessageIntent) -> dict:
    row = intent.model_dump(mode="json", exclude={"id", "created_at"})
    row["details"].pop("intent_type", None)
    return row


def notification_to_row(notification: AdminNotification) -> dict:
    """Row for ``admin_notifications``; envelope headline fields are mirrored into their columns."""
    row = notification.model_dump(mode="json", exclude={"id", "created_at", "read_at"})
    envelope = row["intent_details"]
    row.update(
        priority=envelope["priority"],
        category=envelope["category"],
        summary=envelope["summary"],
        suggested_actions=envelope["details"]["suggested_actions"],
    )
    return row


def event_from_row(row: dict) -> CalendarEvent:
    metadata = row.get("metadata") or {}
    return CalendarEvent.model_validate(
        {
            **row,
            "description": row.get("description") or "",
            "tags": row.get("tags") or [],
            "ai_generated": metadata.get("ai_generated", False),
            "source_intent_id": metadata.get("source_intent_id"),
        }
    )


def event_to_row(event: CalendarEvent) -> dict:
    row = event.model_dump(
        mode="json", exclude={"id", "created_at", "ai_generated", "source_intent_id"}
    )
    row["metadata"] = {
        "ai_generated": event.ai_generated,
        "source_intent_id": event.source_intent_id,
    }
    return row


class SupabaseIntentStore:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_supabase_client()

    async def get(self, intent_id: str) -> MessageIntent | None:
        rows = await _execute(self.client, "GET", INTENTS_TABLE, params={"id": f"eq.{intent_id}"})
        return intent_from_row(rows[0]) if rows else None

    async def get_by_message_id(self, message_id: str) -> MessageIntent | None:
        rows = await _execute(
            self.client, "GET", INTENTS_TABLE, params={"message_id": f"eq.{message_id}"}
        )
        return intent_from_row(rows[0]) if rows else None

    async def create(self, intent: MessageIntent) -> MessageIntent:
        try:
            rows = await _execute(
                self.client, "POST", INTENTS_TABLE, json=intent_to_row(intent), headers=_RETURN_ROWS
            )
        except _UniqueViolation as exc:
            raise DuplicateIntentError(intent.message_id) from exc
        return intent_from_row(rows[0])

    async def update_details(self, intent_id: str, details: IntentDetails) -> MessageIntent:
        payload = details.model_dump(mode="json")
        payload.pop("intent_type", None)
        rows = await _execute(
            self.client,
            "PATCH",
            INTENTS_TABLE,
            params={"id": f"eq.{intent_id}", "is_processed": "eq.false"},
            json={"details": payload},
            headers=_RETURN_ROWS,
        )
        if not rows:
            await self._raise_for_missing_or_processed(intent_id)
        return intent_from_row(rows[0])

    async def mark_processed(self, intent_id: str, processed_by: str) -> MessageIntent:
        # Filter on is_processed so two confirmations cannot both succeed
        rows = await _execute(
            self.client,
            "PATCH",
            INTENTS_TABLE,
            params={"id": f"eq.{intent_id}", "is_processed": "eq.false"},
            json={"is_processed": True, "processed_at": _now_iso(), "processed_by": processed_by},
            headers=_RETURN_ROWS,
        )
        if not rows:
            await self._raise_for_missing_or_processed(intent_id)
        return intent_from_row(rows[0])

    async def _raise_for_missing_or_processed(self, intent_id: str) -> None:
        if await self.get(intent_id) is None:
            raise IntentNotFound(f"Intent {intent_id} not found")
        raise ValidationFailed(["Intent has already been processed"])


class SupabaseNotificationStore:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_supabase_client()

    async def insert(self, notification: AdminNotification) -> AdminNotification:
        rows = await _execute(
            self.client,
            "POST",
            NOTIFICATIONS_TABLE,
            json=notification_to_row(notification),
            headers=_RETURN_ROWS,
        )
        return AdminNotification.model_validate(rows[0])

    async def list_for_message(self, message_id: str) -> list[AdminNotification]:
        rows = await _execute(
            self.client, "GET", NOTIFICATIONS_TABLE, params={"message_id": f"eq.{message_id}"}
        )
        return [AdminNotification.model_validate(row) for row in rows]

    async def list_for_admin(
        self, community_id: str, admin_id: str, unread_only: bool = True
    ) -> list[AdminNotification]:
        params = {
            "community_id": f"eq.{community_id}",
            "recipient_id": f"eq.{admin_id}",
            "order": "created_at.desc",
        }
        if unread_only:
            params["is_read"] = "eq.false"
        rows = await _execute(self.client, "GET", NOTIFICATIONS_TABLE, params=params)
        return [AdminNotification.model_validate(row) for row in rows]

    async def mark_read(self, notification_id: str) -> AdminNotification:
        rows = await _execute(
            self.client,
            "PATCH",
            NOTIFICATIONS_TABLE,
            params={"id": f"eq.{notification_id}"},
            json={"is_read": True, "read_at": _now_iso()},
            headers=_RETURN_ROWS,
        )
        if not rows:
            raise PersistenceFailure(f"Notification {notification_id} not found")
        return AdminNotification.model_validate(rows[0])


class SupabaseEventStore:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_supabase_client()

    async def insert(self, event: CalendarEvent) -> CalendarEvent:
        rows = await _execute(
            self.client, "POST", EVENTS_TABLE, json=event_to_row(event), headers=_RETURN_ROWS
        )
        return event_from_row(rows[0])

    async def list_upcoming(
        self, community_id: str, now: datetime, limit: int = 10
    ) -> list[CalendarEvent]:
        rows = await _execute(
            self.client,
            "GET",
            EVENTS_TABLE,
            params={
                "community_id": f"eq.{community_id}",
                "start_time": f"gte.{now.isoformat()}",
                "order": "start_time.asc",
                "limit": str(limit),
            },
        )
        return [event_from_row(row) for row in rows]


class SupabasePostStore:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_supabase_client()

    async def insert(self, post: AnnouncementPost) -> AnnouncementPost:
        row = post.model_dump(mode="json", exclude={"id", "created_at"})
        rows = await _execute(self.client, "POST", POSTS_TABLE, json=row, headers=_RETURN_ROWS)
        return AnnouncementPost.model_validate(rows[0])


class SupabaseMembership:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_supabase_client()

    async def list_admins(self, community_id: str) -> list[str]:
        rows = await _execute(
            self.client,
            "GET",
            MEMBERS_TABLE,
            params={
                "select": "user_id",
                "community_id": f"eq.{community_id}",
                "role": f"in.({','.join(ADMIN_ROLES)})",
            },
        )
        return [row["user_id"] for row in rows]
