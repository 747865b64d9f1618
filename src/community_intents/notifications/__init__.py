"""Admin notification routing.

Public API:
    notify_admins(notifications, membership, community_id, exclude_user_id, intent, message)
        -> list[AdminNotification]
    list_notifications(store, community_id, admin_id, unread_only=True)
    mark_read(store, notification_id)
"""

from community_intents.notifications.roster import get_admin_ids, invalidate_roster_cache
from community_intents.notifications.router import (
    build_envelope,
    category_for,
    list_notifications,
    mark_read,
    notify_admins,
    priority_for,
)

__all__ = [
    "get_admin_ids",
    "invalidate_roster_cache",
    "build_envelope",
    "category_for",
    "list_notifications",
    "mark_read",
    "notify_admins",
    "priority_for",
]
