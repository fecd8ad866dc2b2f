"""Column groups shared by prospects and clients."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func


class PersonContactMixin:
    """Name, phones and address captured for a prospect or a client."""

    first_name = Column(String(120), nullable=False)
    last_name_paterno = Column(String(120), nullable=False)
    last_name_materno = Column(String(120), nullable=True)
    phone1 = Column(String(20), nullable=False)
    phone1_country = Column(String(2), nullable=False, default="MX", server_default="MX")
    phone2 = Column(String(20), nullable=True)
    phone2_country = Column(String(2), nullable=False, default="MX", server_default="MX")
    phone3_country = Column(String(2), nullable=False, default="MX", server_default="MX")
    street = Column(String(200), nullable=False)
    exterior_number = Column(String(20), nullable=False)
    interior_number = Column(String(20), nullable=True)
    neighborhood = Column(String(120), nullable=False)
    city = Column(String(120), nullable=False)
    postal_code = Column(String(10), nullable=True)
    notes = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.last_name_paterno, self.last_name_materno]
        return " ".join(part for part in parts if part)
