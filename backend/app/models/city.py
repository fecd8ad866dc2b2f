"""City catalog used to classify prospects and clients."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, func

from ..database import Base
from ..db_types import GUID


class City(Base):
    """A city where the service is offered."""

    __tablename__ = "cities"

    id = Column("city_id", GUID(), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(120), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
