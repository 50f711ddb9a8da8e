from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from datavault.core.errors import ValidationError
from datavault.database import commit, get_db
from datavault.models.user import User
from datavault.schemas.data_item import MessageOut
from datavault.schemas.user import PasswordChange, ProfileUpdate, UserOut
from datavault.utils.auth import get_current_user
from datavault.utils.security import hash_password, verify_password

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserOut)
async def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)
    await commit(db)
    return current_user


@router.put("/password", response_model=MessageOut)
async def change_password(
    payload: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise ValidationError("Current password is incorrect")
    current_user.password_hash = hash_password(payload.new_password)
    await commit(db)
    return MessageOut(msg="Password updated")
