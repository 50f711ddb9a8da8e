"""Simulated blockchain attestation of data items.

Nothing here talks to a ledger. A stamp is the SHA-256 digest of the
item's ``data`` plus a synthetic transaction id; checking integrity means
re-hashing the current ``data`` and comparing it with the stamped digest.
Editing ``data`` does not clear an existing stamp, so a stale stamp shows
up as ``is_valid=False`` (drift) until the item is stamped again.
"""
import hashlib
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from datavault.core.errors import NotVerified
from datavault.database import commit
from datavault.models.data_item import DataItem
from datavault.schemas.blockchain import IntegrityReport, StampStatus
from datavault.services.vault import get_item, get_owned_item
from datavault.utils.identifiers import generate_tx_id

logger = logging.getLogger(__name__)


def compute_digest(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def stamp(item: DataItem) -> DataItem:
    """Attest the item's current data, overwriting any previous stamp."""
    item.blockchain_hash = compute_digest(item.data)
    item.blockchain_tx_id = generate_tx_id()
    item.blockchain_verified = True
    item.touch()
    return item


def check_integrity(item: DataItem) -> IntegrityReport:
    if not item.blockchain_verified:
        raise NotVerified()
    current_hash = compute_digest(item.data)
    return IntegrityReport(
        is_valid=current_hash == item.blockchain_hash,
        stored_hash=item.blockchain_hash,
        current_hash=current_hash,
    )


def stamp_status_of(item: DataItem) -> StampStatus:
    return StampStatus(
        verified=item.blockchain_verified,
        hash=item.blockchain_hash,
        tx_id=item.blockchain_tx_id,
    )


async def verify_item(db: AsyncSession, owner_id: UUID, item_id) -> DataItem:
    item = await get_owned_item(db, owner_id, item_id)
    stamp(item)
    await commit(db)
    logger.info(f"Item {item.id} stamped with {item.blockchain_tx_id}")
    return item


async def stamp_status(db: AsyncSession, requester_id: UUID, item_id) -> StampStatus:
    item = await get_item(db, requester_id, item_id)
    return stamp_status_of(item)


async def validate_item(db: AsyncSession, requester_id: UUID, item_id) -> IntegrityReport:
    item = await get_item(db, requester_id, item_id)
    report = check_integrity(item)
    if not report.is_valid:
        logger.warning(f"Integrity drift on item {item.id}")
    return report
