from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from datavault.database import get_db
from datavault.models.user import User
from datavault.schemas.data_item import (
    DataItemCreate,
    DataItemOut,
    DataItemUpdate,
    MessageOut,
    ShareRequest,
    VaultStats,
)
from datavault.services import sharing, vault
from datavault.utils.auth import get_current_user

router = APIRouter(prefix="/data", tags=["Data"])


@router.get("", response_model=list[DataItemOut])
async def list_data_items(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All of the current user's items, newest first."""
    return await vault.list_items(db, current_user.id)


@router.post("", response_model=DataItemOut)
async def create_data_item(
    payload: DataItemCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await vault.create_item(db, current_user.id, payload)


@router.get("/shared", response_model=list[DataItemOut])
async def list_shared_with_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Items other users currently share with the caller."""
    return await vault.list_shared_items(db, current_user.id)


@router.get("/stats", response_model=VaultStats)
async def dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await vault.vault_stats(db, current_user.id)


@router.get("/{item_id}", response_model=DataItemOut)
async def get_data_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Readable by the owner and by users holding an unexpired grant."""
    return await vault.get_item(db, current_user.id, item_id)


@router.put("/{item_id}", response_model=DataItemOut)
async def update_data_item(
    item_id: str,
    payload: DataItemUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await vault.update_item(db, current_user.id, item_id, payload)


@router.delete("/{item_id}", response_model=MessageOut)
async def delete_data_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await vault.delete_item(db, current_user.id, item_id)
    return MessageOut(msg="Data item removed")


@router.post("/{item_id}/share", response_model=DataItemOut)
async def share_data_item(
    item_id: str,
    payload: ShareRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await sharing.grant_access(
        db,
        current_user.id,
        item_id,
        payload.email,
        payload.access_level,
        payload.expires_at,
    )


@router.delete("/{item_id}/share/{user_id}", response_model=DataItemOut)
async def unshare_data_item(
    item_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await sharing.revoke_access(db, current_user.id, item_id, user_id)
