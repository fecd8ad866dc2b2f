"""Billing configuration and running balance per client."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID


class ClientBilling(Base):
    """Stores the proration snapshot taken at finalization and the balance."""

    __tablename__ = "client_billing"
    __table_args__ = (
        CheckConstraint(
            "billing_day >= 1 AND billing_day <= 28",
            name="ck_client_billing_day_range",
        ),
        CheckConstraint("monthly_fee >= 0", name="ck_client_billing_fee_non_negative"),
        CheckConstraint(
            "installation_cost >= 0",
            name="ck_client_billing_installation_non_negative",
        ),
        CheckConstraint("days_charged >= 0", name="ck_client_billing_days_non_negative"),
    )

    id = Column("billing_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(
        GUID(),
        ForeignKey("clients.client_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    service_plan_id = Column(
        Integer,
        ForeignKey("service_plans.plan_id", ondelete="SET NULL"),
        nullable=True,
    )
    monthly_fee = Column(Numeric(10, 2), nullable=False, default=0)
    installation_cost = Column(Numeric(10, 2), nullable=False, default=0)
    installation_date = Column(Date, nullable=False)
    first_billing_date = Column(Date, nullable=False)
    billing_day = Column(Integer, nullable=False, default=10)
    prorated_amount = Column(Numeric(10, 2), nullable=False, default=0)
    days_charged = Column(Integer, nullable=False, default=0)
    additional_charges = Column(Numeric(10, 2), nullable=False, default=0)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    client = relationship("Client", back_populates="billing")
    service_plan = relationship("ServicePlan", back_populates="client_billings")
