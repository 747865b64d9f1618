"""Persistence boundaries plus in-memory and Supabase implementations."""

from community_intents.store.base import (
    EventStore,
    IntentStore,
    MembershipService,
    NotificationStore,
    PostStore,
)
from community_intents.store.memory import (
    InMemoryEventStore,
    InMemoryIntentStore,
    InMemoryMembership,
    InMemoryNotificationStore,
    InMemoryPostStore,
)
from community_intents.store.supabase import (
    SupabaseEventStore,
    SupabaseIntentStore,
    SupabaseMembership,
    SupabaseNotificationStore,
    SupabasePostStore,
)

__all__ = [
    "IntentStore",
    "NotificationStore",
    "EventStore",
    "PostStore",
    "MembershipService",
    "InMemoryIntentStore",
    "InMemoryNotificationStore",
    "InMemoryEventStore",
    "InMemoryPostStore",
    "InMemoryMembership",
    "SupabaseIntentStore",
    "SupabaseNotificationStore",
    "SupabaseEventStore",
    "SupabasePostStore",
    "SupabaseMembership",
]
