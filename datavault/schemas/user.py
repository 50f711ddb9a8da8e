from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    EmailStr,
    Field,
    StringConstraints,
    constr,
    field_validator,
)
from typing import Annotated, Optional
from uuid import UUID
from datetime import datetime

from datavault.core.addresses import normalize_wallet_address
from datavault.schemas.data_item import out_field

BCRYPT_MAX_BYTES = 72


def _fits_bcrypt(v: str) -> str:
    if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return v


Password = Annotated[str, StringConstraints(min_length=6), AfterValidator(_fits_bcrypt)]


class UserCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1)
    email: EmailStr
    password: Password
    wallet_address: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("walletAddress", "wallet_address")
    )

    @field_validator("wallet_address")
    @classmethod
    def _wallet_ok(cls, v):
        return normalize_wallet_address(v) if v else None


class UserOut(BaseModel):
    id: UUID
    email: EmailStr
    name: str
    wallet_address: str = out_field("walletAddress")
    created_at: datetime = out_field("createdAt")
    updated_at: datetime = out_field("updatedAt")

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    wallet_address: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("walletAddress", "wallet_address")
    )

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        if v is None:
            raise ValueError("name may not be null")
        return v

    @field_validator("wallet_address")
    @classmethod
    def _wallet_ok(cls, v):
        if v is None:
            raise ValueError("walletAddress may not be null")
        return normalize_wallet_address(v)


class PasswordChange(BaseModel):
    current_password: str = Field(
        validation_alias=AliasChoices("currentPassword", "current_password")
    )
    new_password: Password = Field(
        validation_alias=AliasChoices("newPassword", "new_password")
    )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
