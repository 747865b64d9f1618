"""Data models and enums for the intent pipeline."""

from community_intents.models.event import AnnouncementPost, CalendarEvent
from community_intents.models.intent import (
    AIGeneratedDetails,
    AnnouncementDetails,
    DetectedBy,
    DetectedIntent,
    EventDetails,
    FeedbackDetails,
    IntentType,
    MessageIntent,
    OtherDetails,
    QuestionDetails,
)
from community_intents.models.message import ChatMessage
from community_intents.models.notification import (
    AdminNotification,
    NotificationCategory,
    NotificationDetails,
    NotificationEnvelope,
    NotificationPriority,
)

__all__ = [
    "ChatMessage",
    "IntentType",
    "DetectedBy",
    "DetectedIntent",
    "MessageIntent",
    "EventDetails",
    "AIGeneratedDetails",
    "FeedbackDetails",
    "QuestionDetails",
    "AnnouncementDetails",
    "OtherDetails",
    "AdminNotification",
    "NotificationCategory",
    "NotificationDetails",
    "NotificationEnvelope",
    "NotificationPriority",
    "CalendarEvent",
    "AnnouncementPost",
]
