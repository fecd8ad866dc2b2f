"""Customer premises equipment installed for a client."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, INET, MACADDR


class Equipment(Base):
    """Antenna and router details recorded at installation."""

    __tablename__ = "equipment"

    id = Column("equipment_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(
        GUID(),
        ForeignKey("clients.client_id", ondelete="CASCADE"),
        nullable=False,
    )
    antenna_ssid = Column(String(120), nullable=True)
    antenna_ip = Column(INET(), nullable=True)
    antenna_mac = Column(MACADDR(), nullable=True)
    router_mac = Column(MACADDR(), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="equipment")
