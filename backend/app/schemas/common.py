"""Shared schema definitions."""

from __future__ import annotations

from typing import Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field, field_validator

from ..formatting import (
    PHONE_COUNTRIES,
    format_mac_address,
    format_phone_number,
    is_phone_complete,
    is_valid_ip_address,
    is_valid_mac_address,
)

T = TypeVar("T")

SUPPORTED_PHONE_COUNTRIES = {option.value for option in PHONE_COUNTRIES}


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard shape for paginated listings."""

    items: Sequence[T]
    total: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
    skip: int = Field(..., ge=0)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def normalize_phone(value: Optional[str]) -> Optional[str]:
    value = blank_to_none(value)
    if value is None:
        return None
    if not is_phone_complete(value):
        raise ValueError("El teléfono debe tener 10 dígitos")
    return format_phone_number(value)


def normalize_phone_country(value: Optional[str]) -> str:
    normalized = (value or "MX").strip().upper()
    if normalized not in SUPPORTED_PHONE_COUNTRIES:
        raise ValueError("País de teléfono no soportado")
    return normalized


def normalize_ip(value: Optional[str]) -> Optional[str]:
    value = blank_to_none(value)
    if value is None:
        return None
    if not is_valid_ip_address(value):
        raise ValueError("La dirección IP no es válida")
    return value


def normalize_mac(value: Optional[str]) -> Optional[str]:
    value = blank_to_none(value)
    if value is None:
        return None
    formatted = format_mac_address(value)
    if not is_valid_mac_address(formatted):
        raise ValueError("La dirección MAC debe tener 12 dígitos hexadecimales")
    return formatted


class EquipmentFields(BaseModel):
    """Antenna/router fields accepted wherever equipment is captured."""

    antenna_mac: Optional[str] = None
    router_mac: Optional[str] = None

    @field_validator("antenna_mac", "router_mac")
    @classmethod
    def _validate_mac(cls, value: Optional[str]) -> Optional[str]:
        return normalize_mac(value)
