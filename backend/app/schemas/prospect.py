"""Pydantic schemas for prospects and the finalize workflow."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.client import ClientStatus
from ..models.prospect import ProspectStatus
from .billing import AdditionalChargeIn, ClientBillingRead, ProrationRead
from .common import (
    EquipmentFields,
    PaginatedResponse,
    blank_to_none,
    normalize_ip,
    normalize_phone,
    normalize_phone_country,
)

FINALIZE_CONFIRMATION_CODE = "CONFIRMAR"


class ContactBase(BaseModel):
    """Name, phone and address fields validated the same way as the forms."""

    first_name: str = Field(..., min_length=1, max_length=120)
    last_name_paterno: str = Field(..., min_length=1, max_length=120)
    last_name_materno: Optional[str] = Field(default=None, max_length=120)
    phone1: str
    phone1_country: str = "MX"
    phone2: Optional[str] = None
    phone2_country: str = "MX"
    phone3_country: str = "MX"
    street: str = Field(..., min_length=1, max_length=200)
    exterior_number: str = Field(..., min_length=1, max_length=20)
    interior_number: Optional[str] = Field(default=None, max_length=20)
    neighborhood: str = Field(..., min_length=1, max_length=120)
    city: str = Field(..., min_length=1, max_length=120)
    postal_code: Optional[str] = Field(default=None, max_length=10)
    notes: Optional[str] = None

    @field_validator("phone1")
    @classmethod
    def _validate_required_phone(cls, value: str) -> str:
        normalized = normalize_phone(value)
        if normalized is None:
            raise ValueError("El teléfono es requerido")
        return normalized

    @field_validator("phone2")
    @classmethod
    def _validate_optional_phone(cls, value: Optional[str]) -> Optional[str]:
        return normalize_phone(value)

    @field_validator("phone1_country", "phone2_country", "phone3_country")
    @classmethod
    def _validate_country(cls, value: Optional[str]) -> str:
        return normalize_phone_country(value)

    @field_validator("last_name_materno", "interior_number", "postal_code", "notes")
    @classmethod
    def _strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class ProspectFields(ContactBase):
    phone3_signer: Optional[str] = None
    ssid: Optional[str] = Field(default=None, max_length=120)
    antenna_ip: Optional[str] = None

    @field_validator("phone3_signer")
    @classmethod
    def _validate_signer_phone(cls, value: Optional[str]) -> Optional[str]:
        return normalize_phone(value)

    @field_validator("antenna_ip")
    @classmethod
    def _validate_ip(cls, value: Optional[str]) -> Optional[str]:
        return normalize_ip(value)

    @field_validator("ssid")
    @classmethod
    def _strip_ssid(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class ProspectCreate(ProspectFields):
    created_by: Optional[str] = None


class ProspectUpdate(BaseModel):
    """Partial update; only provided fields are validated and applied."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    last_name_paterno: Optional[str] = Field(default=None, min_length=1, max_length=120)
    last_name_materno: Optional[str] = None
    phone1: Optional[str] = None
    phone1_country: Optional[str] = None
    phone2: Optional[str] = None
    phone2_country: Optional[str] = None
    phone3_signer: Optional[str] = None
    phone3_country: Optional[str] = None
    street: Optional[str] = Field(default=None, min_length=1)
    exterior_number: Optional[str] = Field(default=None, min_length=1)
    interior_number: Optional[str] = None
    neighborhood: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    postal_code: Optional[str] = None
    ssid: Optional[str] = None
    antenna_ip: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("phone1", "phone2", "phone3_signer")
    @classmethod
    def _validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return normalize_phone(value)

    @field_validator("phone1_country", "phone2_country", "phone3_country")
    @classmethod
    def _validate_country(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return normalize_phone_country(value)

    @field_validator("antenna_ip")
    @classmethod
    def _validate_ip(cls, value: Optional[str]) -> Optional[str]:
        return normalize_ip(value)


class ProspectRead(BaseModel):
    id: str
    first_name: str
    last_name_paterno: str
    last_name_materno: Optional[str] = None
    full_name: str
    phone1: str
    phone1_country: str
    phone2: Optional[str] = None
    phone2_country: str
    phone3_signer: Optional[str] = None
    phone3_country: str
    street: str
    exterior_number: str
    interior_number: Optional[str] = None
    neighborhood: str
    city: str
    postal_code: Optional[str] = None
    ssid: Optional[str] = None
    antenna_ip: Optional[str] = None
    notes: Optional[str] = None
    status: ProspectStatus
    finalized_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProspectListResponse(PaginatedResponse[ProspectRead]):
    pass


class CancellationRequest(BaseModel):
    reason: str = Field(..., max_length=500)

    @field_validator("reason")
    @classmethod
    def _require_reason(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Por favor ingresa un motivo de cancelación")
        return stripped


class ProspectChangeRead(BaseModel):
    id: str
    prospect_id: str
    client_id: Optional[str] = None
    field_name: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    changed_by: Optional[str] = None
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProspectFinalizeRequest(ProspectFields, EquipmentFields):
    """Corrected prospect data plus everything needed to open the account."""

    installation_date: date
    billing_day: int = Field(default=10, ge=1, le=28)
    service_plan_id: Optional[int] = Field(default=None, ge=1)
    monthly_fee: Optional[Decimal] = Field(default=None, ge=0)
    installation_cost: Decimal = Field(default=Decimal("0"), ge=0)
    additional_charges: list[AdditionalChargeIn] = Field(default_factory=list)
    changed_by: Optional[str] = None
    confirmation_code: str = Field(..., description="Debe ser CONFIRMAR")


class FinalizedClientSummary(BaseModel):
    id: str
    full_name: str
    status: ClientStatus

    model_config = ConfigDict(from_attributes=True)


class ProspectFinalizeResponse(BaseModel):
    message: str
    prospect: ProspectRead
    client: FinalizedClientSummary
    billing: Optional[ClientBillingRead] = None
    proration: ProrationRead
    initial_balance: Decimal
    changes_recorded: int = Field(..., ge=0)
    warnings: list[str] = Field(default_factory=list)
