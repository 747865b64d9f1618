"""Admin notification models: one row per admin recipient."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from community_intents.models.intent import AIGeneratedDetails, IntentDetails, IntentType


class NotificationPriority(str, Enum):
    """Notification importance levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationCategory(str, Enum):
    """Notification categories accepted by the admin_notifications table."""

    EVENT_SUGGESTION = "event_suggestion"
    JOIN_REQUEST = "join_request"
    CONTENT_MODERATION = "content_moderation"
    MEMBER_ISSUE = "member_issue"
    SYSTEM_ALERT = "system_alert"
    AI_INSIGHT = "ai_insight"
    GENERAL = "general"


class NotificationDetails(BaseModel):
    original_message: str
    extracted_details: IntentDetails
    ai_generated_details: AIGeneratedDetails | None = None
    suggested_actions: list[str] = []


class NotificationEnvelope(BaseModel):
    """The ``intent_details`` column of an admin notification."""

    type: str
    priority: NotificationPriority
    summary: str
    category: NotificationCategory
    details: NotificationDetails


class AdminNotification(BaseModel):
    """A notification addressed to a single admin. Read state is per row."""

    id: str | None = None
    community_id: str
    message_id: str
    recipient_id: str
    intent_type: IntentType
    intent_details: NotificationEnvelope
    created_by: str
    created_at: datetime | None = None
    is_read: bool = False
    read_at: datetime | None = None
