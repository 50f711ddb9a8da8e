from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from datavault.database import get_db
from datavault.models.user import User
from datavault.schemas.blockchain import (
    DataIdRequest,
    IntegrityReport,
    StampStatus,
    VerifyResponse,
)
from datavault.schemas.data_item import DataItemOut
from datavault.services import integrity
from datavault.utils.auth import get_current_user

router = APIRouter(prefix="/blockchain", tags=["Blockchain"])


@router.post("/verify", response_model=VerifyResponse)
async def verify_data(
    payload: DataIdRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Stamp an item's current data with a simulated blockchain attestation.

    Only the owner may stamp. Stamping again replaces the previous digest and
    transaction id.
    """
    item = await integrity.verify_item(db, current_user.id, payload.data_id)
    return VerifyResponse(
        msg="Data verified on blockchain",
        data_item=DataItemOut.model_validate(item),
    )


@router.get("/status/{item_id}", response_model=StampStatus)
async def verification_status(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await integrity.stamp_status(db, current_user.id, item_id)


@router.post("/validate", response_model=IntegrityReport)
async def validate_data(
    payload: DataIdRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Re-hash the item's data and compare it with the stamped digest."""
    return await integrity.validate_item(db, current_user.id, payload.data_id)
