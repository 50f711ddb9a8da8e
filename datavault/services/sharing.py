import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from datavault.core.access import remove_grant, upsert_grant
from datavault.core.errors import UnknownGrantee
from datavault.database import commit
from datavault.models.data_item import AccessLevel, DataItem
from datavault.models.user import User
from datavault.services.vault import get_owned_item

logger = logging.getLogger(__name__)


async def grant_access(
    db: AsyncSession,
    granter_id: UUID,
    item_id,
    grantee_email: str,
    level: AccessLevel,
    expires_at: datetime | None = None,
) -> DataItem:
    """Share ``item_id`` with the user registered under ``grantee_email``.

    Granting again to the same user replaces the earlier grant.
    """
    item = await get_owned_item(db, granter_id, item_id)

    result = await db.execute(select(User).where(User.email == grantee_email.lower()))
    grantee = result.scalar_one_or_none()
    if grantee is None:
        raise UnknownGrantee()

    upsert_grant(item, grantee.id, level, expires_at)
    item.touch()
    await commit(db)
    logger.info(f"Item {item.id} shared with {grantee.id} at level {level.value}")
    return item


async def revoke_access(db: AsyncSession, granter_id: UUID, item_id, grantee_id) -> DataItem:
    """Remove ``grantee_id`` from the item's access list. Revoking twice is fine."""
    item = await get_owned_item(db, granter_id, item_id)
    try:
        grantee_id = UUID(str(grantee_id))
    except ValueError:
        # no grant can reference a malformed id
        return item

    if remove_grant(item, grantee_id):
        item.touch()
        await commit(db)
        logger.info(f"Access to item {item.id} revoked for {grantee_id}")
    return item
