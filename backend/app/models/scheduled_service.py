"""Field-service visits assigned to technicians."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID


class VisitType(str, enum.Enum):
    """Kind of work scheduled at the customer's address."""

    INSTALLATION = "installation"
    MAINTENANCE = "maintenance"
    EQUIPMENT_CHANGE = "equipment_change"
    RELOCATION = "relocation"
    DISCONNECTION = "disconnection"
    COLLECTION = "collection"
    OTHER = "other"


class VisitStatus(str, enum.Enum):
    """Progress of a scheduled visit."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _enum_column(enum_cls: type[enum.Enum], name: str) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        validate_strings=True,
    )


class ScheduledService(Base):
    """A visit to a client or prospect on a given date."""

    __tablename__ = "scheduled_services"

    id = Column("service_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(
        GUID(),
        ForeignKey("clients.client_id", ondelete="SET NULL"),
        nullable=True,
    )
    prospect_id = Column(
        GUID(),
        ForeignKey("prospects.prospect_id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_to = Column(String(64), nullable=False)
    assigned_name = Column(String(160), nullable=True)
    service_type = Column(
        _enum_column(VisitType, "scheduled_service_type_enum"),
        nullable=False,
        default=VisitType.OTHER,
    )
    status = Column(
        _enum_column(VisitStatus, "scheduled_service_status_enum"),
        nullable=False,
        default=VisitStatus.SCHEDULED,
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(Time, nullable=True)
    visit_started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_notes = Column(Text, nullable=True)
    visit_latitude = Column(Numeric(9, 6), nullable=True)
    visit_longitude = Column(Numeric(9, 6), nullable=True)
    charge_amount = Column(Numeric(10, 2), nullable=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    client = relationship("Client", back_populates="scheduled_services")
    prospect = relationship("Prospect")

    @property
    def client_name(self) -> str | None:
        if self.client is not None:
            return self.client.full_name
        if self.prospect is not None:
            return self.prospect.full_name
        return None


Index("scheduled_services_date_idx", ScheduledService.scheduled_date)
Index("scheduled_services_assigned_idx", ScheduledService.assigned_to)
