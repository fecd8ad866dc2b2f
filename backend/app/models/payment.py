"""Payment records and the catalogs they reference."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID


class PaymentMethod(Base):
    """Catalog of accepted payment types (cash, transfer, deposit...)."""

    __tablename__ = "payment_methods"

    id = Column("method_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(80), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")

    payments = relationship("Payment", back_populates="method")


class Bank(Base):
    """Catalog of banks used for transfers and deposits."""

    __tablename__ = "banks"

    id = Column("bank_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(120), nullable=False, unique=True)
    short_name = Column(String(40), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")

    payments = relationship("Payment", back_populates="bank")


class Payment(Base):
    """Money received from a client."""

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        CheckConstraint(
            "period_month IS NULL OR (period_month >= 1 AND period_month <= 12)",
            name="ck_payments_period_month_range",
        ),
    )

    id = Column("payment_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(
        GUID(),
        ForeignKey("clients.client_id", ondelete="CASCADE"),
        nullable=False,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_type = Column(
        GUID(),
        ForeignKey("payment_methods.method_id", ondelete="RESTRICT"),
        nullable=False,
    )
    bank_id = Column(
        GUID(),
        ForeignKey("banks.bank_id", ondelete="SET NULL"),
        nullable=True,
    )
    receipt_number = Column(String(64), nullable=True)
    period_month = Column(Integer, nullable=True)
    period_year = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    recorded_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="payments")
    method = relationship("PaymentMethod", back_populates="payments")
    bank = relationship("Bank", back_populates="payments")

    @property
    def payment_type_name(self) -> str | None:
        return self.method.name if self.method is not None else None


Index("payments_payment_date_idx", Payment.payment_date)
Index("payments_client_idx", Payment.client_id)
