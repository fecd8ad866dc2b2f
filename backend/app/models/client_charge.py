"""Charges posted against a client's balance."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID


class ChargeStatus(str, enum.Enum):
    """Settlement status of a charge."""

    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


CHARGE_STATUS_ENUM = SAEnum(
    ChargeStatus,
    name="client_charge_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class ClientCharge(Base):
    """A single amount owed by a client (monthly fee, installation, extras)."""

    __tablename__ = "client_charges"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_client_charges_amount_non_negative"),
    )

    id = Column("charge_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(
        GUID(),
        ForeignKey("clients.client_id", ondelete="CASCADE"),
        nullable=False,
    )
    description = Column(String(200), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(CHARGE_STATUS_ENUM, nullable=False, default=ChargeStatus.PENDING)
    due_date = Column(Date, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="charges")


Index("client_charges_description_idx", ClientCharge.description)
Index("client_charges_client_status_idx", ClientCharge.client_id, ClientCharge.status)
