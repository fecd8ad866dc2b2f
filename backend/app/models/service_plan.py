"""Catalog of monthly internet plans."""

from __future__ import annotations

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base


class ServicePlanStatus(str, enum.Enum):
    """Operational status for catalog plans."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ServicePlan(Base):
    """A plan offered to clients; its price is the default monthly fee."""

    __tablename__ = "service_plans"
    __table_args__ = (
        CheckConstraint("monthly_price >= 0", name="ck_service_plans_price_non_negative"),
    )

    id = Column("plan_id", Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    download_speed_mbps = Column(Numeric(8, 2), nullable=True)
    upload_speed_mbps = Column(Numeric(8, 2), nullable=True)
    monthly_price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(
            ServicePlanStatus,
            name="service_plan_status_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        default=ServicePlanStatus.ACTIVE,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client_billings = relationship("ClientBilling", back_populates="service_plan")

    @property
    def is_active(self) -> bool:
        return self.status == ServicePlanStatus.ACTIVE
