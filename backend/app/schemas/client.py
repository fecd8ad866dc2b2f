"""Pydantic schemas for the client resources."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.client import ClientStatus
from .billing import ClientBillingRead, ClientChargeRead
from .common import (
    PaginatedResponse,
    blank_to_none,
    normalize_ip,
    normalize_mac,
    normalize_phone,
    normalize_phone_country,
)


class EquipmentRead(BaseModel):
    id: str
    antenna_ssid: Optional[str] = None
    antenna_ip: Optional[str] = None
    antenna_mac: Optional[str] = None
    router_mac: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EquipmentUpdate(BaseModel):
    antenna_ssid: Optional[str] = None
    antenna_ip: Optional[str] = None
    antenna_mac: Optional[str] = None
    router_mac: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("antenna_ip")
    @classmethod
    def _validate_ip(cls, value: Optional[str]) -> Optional[str]:
        return normalize_ip(value)

    @field_validator("antenna_mac", "router_mac")
    @classmethod
    def _validate_mac(cls, value: Optional[str]) -> Optional[str]:
        return normalize_mac(value)


class ClientRead(BaseModel):
    """Schema used when returning client data."""

    id: str
    prospect_id: Optional[str] = None
    first_name: str
    last_name_paterno: str
    last_name_materno: Optional[str] = None
    full_name: str
    phone1: str
    phone1_country: str
    phone2: Optional[str] = None
    phone2_country: str
    phone3: Optional[str] = None
    phone3_country: str
    street: str
    exterior_number: str
    interior_number: Optional[str] = None
    neighborhood: str
    city: str
    postal_code: Optional[str] = None
    notes: Optional[str] = None
    status: ClientStatus
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClientDetail(ClientRead):
    """Client with billing, equipment and charges expanded."""

    billing: Optional[ClientBillingRead] = None
    equipment: list[EquipmentRead] = Field(default_factory=list)
    charges: list[ClientChargeRead] = Field(default_factory=list)


class ClientUpdate(BaseModel):
    """Contact/address corrections for an existing client."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    last_name_paterno: Optional[str] = Field(default=None, min_length=1, max_length=120)
    last_name_materno: Optional[str] = None
    phone1: Optional[str] = None
    phone1_country: Optional[str] = None
    phone2: Optional[str] = None
    phone2_country: Optional[str] = None
    phone3: Optional[str] = None
    phone3_country: Optional[str] = None
    street: Optional[str] = Field(default=None, min_length=1)
    exterior_number: Optional[str] = Field(default=None, min_length=1)
    interior_number: Optional[str] = None
    neighborhood: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    postal_code: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("phone1", "phone2", "phone3")
    @classmethod
    def _validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return normalize_phone(value)

    @field_validator("phone1_country", "phone2_country", "phone3_country")
    @classmethod
    def _validate_country(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return normalize_phone_country(value)

    @field_validator("last_name_materno", "interior_number", "postal_code", "notes")
    @classmethod
    def _strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class ClientListResponse(PaginatedResponse[ClientRead]):
    """Paginated client listing."""

    pass
