"""SQLAlchemy model definitions for clients."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Column, Enum as SAEnum, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID
from .mixins import PersonContactMixin


class ClientStatus(str, enum.Enum):
    """Contract status for a client."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


CLIENT_STATUS_ENUM = SAEnum(
    ClientStatus,
    name="client_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class Client(PersonContactMixin, Base):
    """Represents a customer with an installed service."""

    __tablename__ = "clients"

    id = Column("client_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    phone3 = Column(String(20), nullable=True)
    prospect_id = Column(
        GUID(),
        ForeignKey("prospects.prospect_id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    status = Column(CLIENT_STATUS_ENUM, nullable=False, default=ClientStatus.ACTIVE)
    created_by = Column(String(64), nullable=True)

    prospect = relationship("Prospect", back_populates="client")
    billing = relationship(
        "ClientBilling",
        back_populates="client",
        uselist=False,
        cascade="all, delete-orphan",
    )
    equipment = relationship(
        "Equipment",
        back_populates="client",
        cascade="all, delete-orphan",
    )
    charges = relationship(
        "ClientCharge",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ClientCharge.created_at",
    )
    payments = relationship(
        "Payment",
        back_populates="client",
        cascade="all, delete-orphan",
    )
    scheduled_services = relationship("ScheduledService", back_populates="client")


Index("clients_status_idx", Client.status)
Index("clients_city_idx", Client.city)
