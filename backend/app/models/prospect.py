"""SQLAlchemy models for prospects and their finalization history."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, INET
from .mixins import PersonContactMixin


class ProspectStatus(str, enum.Enum):
    """Lifecycle of an intake record."""

    PENDING = "pending"
    FINALIZED = "finalized"
    CANCELLED = "cancelled"


PROSPECT_STATUS_ENUM = SAEnum(
    ProspectStatus,
    name="prospect_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class Prospect(PersonContactMixin, Base):
    """A potential customer waiting for installation."""

    __tablename__ = "prospects"

    id = Column("prospect_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    phone3_signer = Column(String(20), nullable=True)
    ssid = Column(String(120), nullable=True)
    antenna_ip = Column(INET(), nullable=True)
    status = Column(PROSPECT_STATUS_ENUM, nullable=False, default=ProspectStatus.PENDING)
    finalized_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(64), nullable=True)

    change_history = relationship(
        "ProspectChangeHistory",
        back_populates="prospect",
        cascade="all, delete-orphan",
        order_by="ProspectChangeHistory.changed_at",
    )
    client = relationship("Client", back_populates="prospect", uselist=False)


class ProspectChangeHistory(Base):
    """Field-level edits captured while a prospect is finalized."""

    __tablename__ = "prospect_change_history"

    id = Column("change_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    prospect_id = Column(
        GUID(),
        ForeignKey("prospects.prospect_id", ondelete="CASCADE"),
        nullable=False,
    )
    client_id = Column(
        GUID(),
        ForeignKey("clients.client_id", ondelete="SET NULL"),
        nullable=True,
    )
    field_name = Column(String(64), nullable=False)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    changed_by = Column(String(64), nullable=True)
    changed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    prospect = relationship("Prospect", back_populates="change_history")


Index("prospects_status_idx", Prospect.status)
Index("prospects_city_idx", Prospect.city)
Index("prospect_change_history_prospect_idx", ProspectChangeHistory.prospect_id)
