from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
import uuid
from datetime import datetime

from datavault.database import Base


class Category(str, PyEnum):
    """Categories a vault item can be filed under."""

    personal = "personal"
    financial = "financial"
    medical = "medical"
    professional = "professional"
    other = "other"


class AccessLevel(str, PyEnum):
    """Capability granted to another user. Ordered read < write < admin."""

    read = "read"
    write = "write"
    admin = "admin"


class DataItem(Base):
    """A titled record owned by one user.

    ``is_encrypted`` is a display hint only: ``data`` is stored exactly as
    submitted. The ``blockchain_*`` columns hold the simulated attestation
    written by ``datavault.services.integrity.stamp``.
    """

    __tablename__ = "data_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(
        Enum(Category, name="data_category"), default=Category.personal, nullable=False
    )
    data = Column(Text, nullable=False)
    is_encrypted = Column(Boolean, default=True, nullable=False)
    tags = Column(JSON, default=list, nullable=False)

    blockchain_verified = Column(Boolean, default=False, nullable=False)
    blockchain_hash = Column(String(64), nullable=True)
    blockchain_tx_id = Column(String, nullable=True)

    date_created = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)

    owner = relationship("User", back_populates="data_items")
    access_control = relationship(
        "AccessGrant",
        back_populates="data_item",
        cascade="all, delete-orphan",
        order_by="AccessGrant.granted_at",
        lazy="selectin",
    )

    def touch(self, now: datetime | None = None):
        self.last_updated = max(now or datetime.utcnow(), self.date_created)

    def __repr__(self):
        return f"<DataItem id={self.id} owner={self.owner_id} verified={self.blockchain_verified}>"


class AccessGrant(Base):
    """One entry of a data item's access-control list."""

    __tablename__ = "access_grants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    data_item_id = Column(
        UUID(as_uuid=True), ForeignKey("data_items.id", ondelete="CASCADE"), nullable=False
    )
    grantee_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    access_level = Column(
        Enum(AccessLevel, name="access_level"), default=AccessLevel.read, nullable=False
    )
    expires_at = Column(DateTime, nullable=True)
    granted_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    data_item = relationship("DataItem", back_populates="access_control")

    __table_args__ = (
        UniqueConstraint("data_item_id", "grantee_id", name="uq_access_grants_item_grantee"),
    )
