from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, EmailStr, Field, constr, field_validator

from datavault.models.data_item import AccessLevel, Category

NonEmpty = constr(min_length=1)


def _alias(camel: str, snake: str):
    return Field(default=None, validation_alias=AliasChoices(camel, snake))


def _dedupe_tags(tags: List[str]) -> List[str]:
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Store timestamps as naive UTC, matching the database columns."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def out_field(camel: str, name: str | None = None, **kwargs):
    """Serialize under ``camel`` while still validating from either spelling."""
    choices = AliasChoices(name or _snake(camel), camel)
    return Field(serialization_alias=camel, validation_alias=choices, **kwargs)


def _snake(camel: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in camel)


class DataItemCreate(BaseModel):
    title: NonEmpty
    description: Optional[str] = None
    category: Category = Category.personal
    data: NonEmpty
    tags: List[str] = Field(default_factory=list)
    is_encrypted: bool = Field(
        default=True, validation_alias=AliasChoices("isEncrypted", "is_encrypted")
    )

    @field_validator("title")
    @classmethod
    def _not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("tags")
    @classmethod
    def _tags(cls, v):
        return _dedupe_tags(v)


class DataItemUpdate(BaseModel):
    """Partial update of a data item.

    Only fields present in the request body are applied; use
    ``model_dump(exclude_unset=True)``. Every field except ``description``
    rejects an explicit ``null``.
    """

    title: Optional[NonEmpty] = None
    description: Optional[str] = None
    category: Optional[Category] = None
    data: Optional[NonEmpty] = None
    tags: Optional[List[str]] = None
    is_encrypted: Optional[bool] = _alias("isEncrypted", "is_encrypted")

    @field_validator("title", "category", "data", "tags", "is_encrypted")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} may not be null")
        return v

    @field_validator("title")
    @classmethod
    def _not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("tags")
    @classmethod
    def _tags(cls, v):
        return _dedupe_tags(v)


class ShareRequest(BaseModel):
    email: EmailStr
    access_level: AccessLevel = Field(
        validation_alias=AliasChoices("accessLevel", "access_level")
    )
    expires_at: Optional[datetime] = _alias("expiresAt", "expires_at")

    @field_validator("expires_at")
    @classmethod
    def _naive_utc(cls, v):
        return to_naive_utc(v)


class AccessGrantOut(BaseModel):
    grantee_id: UUID = out_field("user", name="grantee_id")
    access_level: AccessLevel = out_field("accessLevel")
    expires_at: Optional[datetime] = out_field("expiresAt", default=None)

    class Config:
        from_attributes = True


class DataItemOut(BaseModel):
    id: UUID
    owner_id: UUID = out_field("user", name="owner_id")
    title: str
    description: Optional[str] = None
    category: Category
    data: str
    is_encrypted: bool = out_field("isEncrypted")
    tags: List[str] = Field(default_factory=list)
    access_control: List[AccessGrantOut] = out_field("accessControl", default_factory=list)
    blockchain_verified: bool = out_field("blockchainVerified")
    blockchain_hash: Optional[str] = out_field("blockchainHash", default=None)
    blockchain_tx_id: Optional[str] = out_field("blockchainTxId", default=None)
    date_created: datetime = out_field("dateCreated")
    last_updated: datetime = out_field("lastUpdated")

    class Config:
        from_attributes = True


class DataItemSummary(BaseModel):
    id: UUID
    title: str
    category: Category
    blockchain_verified: bool = out_field("blockchainVerified")
    date_created: datetime = out_field("dateCreated")

    class Config:
        from_attributes = True


class VaultStats(BaseModel):
    total_items: int = out_field("totalItems")
    verified_items: int = out_field("verifiedItems")
    shared_items: int = out_field("sharedItems")
    recent_items: List[DataItemSummary] = out_field("recentItems")


class MessageOut(BaseModel):
    msg: str
