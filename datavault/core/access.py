"""Access-control evaluation for data items.

The owner of an item can do anything with it. Everyone else needs an
active grant in the item's access-control list whose level is at least the
level being asked for. Mutating routes are restricted to the owner
regardless of grants; grants currently decide read visibility only.
"""
from datetime import datetime
from uuid import UUID

from datavault.models.data_item import AccessGrant, AccessLevel, DataItem

LEVEL_RANK = {
    AccessLevel.read: 0,
    AccessLevel.write: 1,
    AccessLevel.admin: 2,
}


def is_owner(item: DataItem, user_id: UUID) -> bool:
    return item.owner_id == user_id


def is_active(grant: AccessGrant, now: datetime | None = None) -> bool:
    if grant.expires_at is None:
        return True
    return grant.expires_at > (now or datetime.utcnow())


def find_grant(item: DataItem, grantee_id: UUID) -> AccessGrant | None:
    for grant in item.access_control:
        if grant.grantee_id == grantee_id:
            return grant
    return None


def active_grant(item: DataItem, grantee_id: UUID, now: datetime | None = None) -> AccessGrant | None:
    grant = find_grant(item, grantee_id)
    if grant is not None and is_active(grant, now):
        return grant
    return None


def can_access(
    item: DataItem,
    requester_id: UUID,
    required_level: AccessLevel = AccessLevel.read,
    now: datetime | None = None,
) -> bool:
    """Return whether ``requester_id`` may use ``item`` at ``required_level``.

    Expiry is checked against ``now`` (wall-clock UTC by default) with no
    grace period. Never raises.
    """
    if is_owner(item, requester_id):
        return True
    grant = active_grant(item, requester_id, now)
    if grant is None:
        return False
    return LEVEL_RANK[AccessLevel(grant.access_level)] >= LEVEL_RANK[AccessLevel(required_level)]


def upsert_grant(
    item: DataItem,
    grantee_id: UUID,
    level: AccessLevel,
    expires_at: datetime | None = None,
    now: datetime | None = None,
) -> AccessGrant:
    """Grant ``level`` to ``grantee_id``, replacing any grant they already hold.

    A replaced grant keeps its position in the list. When no ``expires_at``
    is given for a replacement the previous expiry is kept.
    """
    grant = find_grant(item, grantee_id)
    if grant is not None:
        grant.access_level = level
        if expires_at is not None:
            grant.expires_at = expires_at
        return grant

    grant = AccessGrant(
        grantee_id=grantee_id,
        access_level=level,
        expires_at=expires_at,
        granted_at=now or datetime.utcnow(),
    )
    item.access_control.append(grant)
    return grant


def remove_grant(item: DataItem, grantee_id: UUID) -> bool:
    """Drop any grant held by ``grantee_id``. Returns whether one existed."""
    grant = find_grant(item, grantee_id)
    if grant is None:
        return False
    item.access_control.remove(grant)
    return True
