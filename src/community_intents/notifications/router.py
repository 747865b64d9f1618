"""Admin notification fan-out: one row per admin, never to the author.

The fan-out is not atomic. Failed inserts are collected and reported
together after every admin was attempted, and a retry only writes rows for
admins that do not have one yet.
"""

import logging

from community_intents.errors import NotificationPartialFailure, PersistenceFailure
from community_intents.models.intent import IntentType, MessageIntent
from community_intents.models.message import ChatMessage
from community_intents.models.notification import (
    AdminNotification,
    NotificationCategory,
    NotificationDetails,
    NotificationEnvelope,
    NotificationPriority,
)
from community_intents.notifications.roster import get_admin_ids
from community_intents.store.base import MembershipService, NotificationStore

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE = 0.9

_PRIORITY_LADDER = [
    NotificationPriority.LOW,
    NotificationPriority.MEDIUM,
    NotificationPriority.HIGH,
]

_CATEGORIES = {
    IntentType.EVENT: NotificationCategory.EVENT_SUGGESTION,
    IntentType.QUESTION: NotificationCategory.MEMBER_ISSUE,
    IntentType.FEEDBACK: NotificationCategory.MEMBER_ISSUE,
    IntentType.ANNOUNCEMENT: NotificationCategory.GENERAL,
    IntentType.OTHER: NotificationCategory.GENERAL,
}

_GENERIC_ACTIONS = [
    "Review the message",
    "Take appropriate action",
    "Respond to user if needed",
]

SUGGESTED_ACTIONS = {
    IntentType.EVENT: [
        "Review and approve event details",
        "Adjust date/time if needed",
        "Add location information",
        "Set capacity limits",
        "Add event tags",
    ],
    IntentType.QUESTION: [
        "Review the question",
        "Reply in the community chat",
        "Pin an answer if the question comes up often",
    ],
    IntentType.FEEDBACK: [
        "Review the feedback",
        "Thank the member or follow up",
        "Track recurring themes",
    ],
    IntentType.ANNOUNCEMENT: _GENERIC_ACTIONS,
    IntentType.OTHER: _GENERIC_ACTIONS,
}


def priority_for(intent_type: IntentType, confidence: float) -> NotificationPriority:
    """Event intents start at medium, the rest at low; high confidence bumps one level.

    ``urgent`` is reserved for humans and never assigned here.
    """
    level = 1 if intent_type == IntentType.EVENT else 0
    if confidence >= HIGH_CONFIDENCE:
        level += 1
    return _PRIORITY_LADDER[min(level, len(_PRIORITY_LADDER) - 1)]


def category_for(intent_type: IntentType) -> NotificationCategory:
    return _CATEGORIES[intent_type]


def _summary(intent: MessageIntent) -> str:
    details = intent.details
    if intent.intent_type == IntentType.EVENT:
        return f"Event suggestion: {details.title}"
    if intent.intent_type == IntentType.QUESTION:
        return f"Member question: {details.topic}"
    if intent.intent_type == IntentType.FEEDBACK:
        return f"Member feedback ({details.sentiment}): {details.topic}"
    if intent.intent_type == IntentType.ANNOUNCEMENT:
        return f"Member announcement: {details.summary}"
    return f"Admin alert: {intent.intent_type.value} intent detected"


def build_envelope(intent: MessageIntent, message: ChatMessage) -> NotificationEnvelope:
    """Build the notification payload shared by every recipient."""
    category = category_for(intent.intent_type)
    event = intent.event_details
    return NotificationEnvelope(
        type=category.value,
        priority=priority_for(intent.intent_type, intent.confidence),
        summary=_summary(intent),
        category=category,
        details=NotificationDetails(
            original_message=message.content,
            extracted_details=intent.details,
            ai_generated_details=event.ai_generated_details if event else None,
            suggested_actions=list(SUGGESTED_ACTIONS[intent.intent_type]),
        ),
    )


async def notify_admins(
    notifications: NotificationStore,
    membership: MembershipService,
    community_id: str,
    exclude_user_id: str,
    intent: MessageIntent,
    message: ChatMessage,
) -> list[AdminNotification]:
    """Insert one notification per admin that does not already have one.

    Returns:
        The rows written by this call.

    Raises:
        NotificationPartialFailure: One or more inserts failed; raised after
            every pending admin was attempted.
    """
    admin_ids = await get_admin_ids(membership, community_id)
    existing = {row.recipient_id for row in await notifications.list_for_message(message.id)}
    pending = [
        admin_id
        for admin_id in admin_ids
        if admin_id != exclude_user_id and admin_id not in existing
    ]
    if not pending:
        logger.info("No admins left to notify for message %s", message.id)
        return []

    envelope = build_envelope(intent, message)
    delivered: list[AdminNotification] = []
    failed: list[str] = []

    for admin_id in pending:
        try:
            row = await notifications.insert(
                AdminNotification(
                    community_id=community_id,
                    message_id=message.id,
                    recipient_id=admin_id,
                    intent_type=intent.intent_type,
                    intent_details=envelope,
                    created_by=exclude_user_id,
                )
            )
        except PersistenceFailure as exc:
            logger.warning(
                "Admin notification insert failed for admin %s (message %s): %s",
                admin_id,
                message.id,
                exc,
            )
            failed.append(admin_id)
            continue
        delivered.append(row)

    if failed:
        raise NotificationPartialFailure(delivered, failed)

    logger.info(
        "Notified %d admin(s) about %s intent on message %s",
        len(delivered),
        intent.intent_type.value,
        message.id,
    )
    return delivered


async def list_notifications(
    store: NotificationStore,
    community_id: str,
    admin_id: str,
    unread_only: bool = True,
) -> list[AdminNotification]:
    """An admin's notifications for one community, newest first."""
    return await store.list_for_admin(community_id, admin_id, unread_only=unread_only)


async def mark_read(store: NotificationStore, notification_id: str) -> AdminNotification:
    return await store.mark_read(notification_id)
