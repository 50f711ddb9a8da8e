"""CRUD over data items.

All authorization goes through ``datavault.core.access``; callers pass the
authenticated user's id and get domain errors back.
"""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from datavault.config import settings
from datavault.core.access import can_access, is_active, is_owner
from datavault.core.errors import NotFound, NotOwner, Unauthorized
from datavault.database import commit
from datavault.models.data_item import AccessGrant, AccessLevel, DataItem
from datavault.schemas.data_item import (
    DataItemCreate,
    DataItemSummary,
    DataItemUpdate,
    VaultStats,
)

logger = logging.getLogger(__name__)


def parse_item_id(item_id) -> UUID:
    """Malformed ids cannot name an item, so they are reported as NotFound."""
    if isinstance(item_id, UUID):
        return item_id
    try:
        return UUID(str(item_id))
    except ValueError:
        raise NotFound()


async def find_item(db: AsyncSession, item_id) -> DataItem:
    result = await db.execute(select(DataItem).where(DataItem.id == parse_item_id(item_id)))
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFound()
    return item


async def get_owned_item(db: AsyncSession, owner_id: UUID, item_id) -> DataItem:
    item = await find_item(db, item_id)
    if not is_owner(item, owner_id):
        logger.info(f"User {owner_id} denied mutation of item {item.id}")
        raise NotOwner()
    return item


async def get_item(
    db: AsyncSession,
    requester_id: UUID,
    item_id,
    required_level: AccessLevel = AccessLevel.read,
) -> DataItem:
    item = await find_item(db, item_id)
    if not can_access(item, requester_id, required_level):
        logger.info(f"User {requester_id} denied {required_level.value} access to item {item.id}")
        raise Unauthorized()
    return item


async def create_item(db: AsyncSession, owner_id: UUID, fields: DataItemCreate) -> DataItem:
    now = datetime.utcnow()
    item = DataItem(
        owner_id=owner_id,
        title=fields.title,
        description=fields.description,
        category=fields.category,
        data=fields.data,
        tags=list(fields.tags),
        is_encrypted=fields.is_encrypted,
        blockchain_verified=False,
        access_control=[],
        date_created=now,
        last_updated=now,
    )
    db.add(item)
    await commit(db)
    logger.info(f"User {owner_id} created item {item.id}")
    return item


async def update_item(
    db: AsyncSession, owner_id: UUID, item_id, changes: DataItemUpdate
) -> DataItem:
    item = await get_owned_item(db, owner_id, item_id)
    for field, value in changes.model_dump(exclude_unset=True).items():
        setattr(item, field, value)
    # a changed payload keeps its old stamp; /blockchain/validate reports the drift
    item.touch()
    await commit(db)
    return item


async def delete_item(db: AsyncSession, owner_id: UUID, item_id) -> None:
    item = await get_owned_item(db, owner_id, item_id)
    await db.delete(item)
    await commit(db)
    logger.info(f"User {owner_id} deleted item {item.id}")


async def list_items(db: AsyncSession, owner_id: UUID) -> list[DataItem]:
    result = await db.execute(
        select(DataItem)
        .where(DataItem.owner_id == owner_id)
        .order_by(DataItem.date_created.desc())
    )
    return list(result.scalars().all())


async def list_shared_items(db: AsyncSession, user_id: UUID) -> list[DataItem]:
    """Items other users shared with ``user_id`` through a still-active grant."""
    result = await db.execute(
        select(DataItem)
        .join(AccessGrant, AccessGrant.data_item_id == DataItem.id)
        .where(AccessGrant.grantee_id == user_id, DataItem.owner_id != user_id)
        .order_by(DataItem.date_created.desc())
    )
    now = datetime.utcnow()
    items = []
    for item in result.scalars().unique().all():
        grant = next(g for g in item.access_control if g.grantee_id == user_id)
        if is_active(grant, now):
            items.append(item)
    return items


async def vault_stats(db: AsyncSession, owner_id: UUID) -> VaultStats:
    total = await db.scalar(
        select(func.count(DataItem.id)).where(DataItem.owner_id == owner_id)
    )
    verified = await db.scalar(
        select(func.count(DataItem.id)).where(
            DataItem.owner_id == owner_id, DataItem.blockchain_verified.is_(True)
        )
    )
    shared = await db.scalar(
        select(func.count(func.distinct(AccessGrant.data_item_id)))
        .select_from(AccessGrant)
        .join(DataItem, AccessGrant.data_item_id == DataItem.id)
        .where(DataItem.owner_id == owner_id)
    )
    result = await db.execute(
        select(DataItem)
        .where(DataItem.owner_id == owner_id)
        .order_by(DataItem.date_created.desc())
        .limit(settings.RECENT_ITEMS_LIMIT)
    )
    return VaultStats(
        total_items=total or 0,
        verified_items=verified or 0,
        shared_items=shared or 0,
        recent_items=[DataItemSummary.model_validate(i) for i in result.scalars().all()],
    )
