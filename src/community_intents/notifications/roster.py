"""Admin roster lookup with a per-community TTL cache."""

from cachetools import TTLCache

from community_intents.store.base import MembershipService

_roster_cache: TTLCache = TTLCache(maxsize=256, ttl=300)  # 5-minute TTL


async def get_admin_ids(membership: MembershipService, community_id: str) -> list[str]:
    """Return admin and co-admin user ids for a community.

    Fetches from the membership service on first call or after TTL expiry.
    """
    cached = _roster_cache.get(community_id)
    if cached is not None:
        return list(cached)

    admin_ids = list(dict.fromkeys(await membership.list_admins(community_id)))
    _roster_cache[community_id] = admin_ids
    return list(admin_ids)


def invalidate_roster_cache(community_id: str | None = None) -> None:
    """Drop one community's roster, or all of them. Used for testing."""
    if community_id is None:
        _roster_cache.clear()
    else:
        _roster_cache.pop(community_id, None)
