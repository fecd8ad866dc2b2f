"""Schemas for payments and payment catalogs."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import PaginatedResponse


class PaymentMethodRead(BaseModel):
    id: str
    name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class PaymentMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)


class BankRead(BaseModel):
    id: str
    name: str
    short_name: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class BankCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    short_name: Optional[str] = Field(default=None, max_length=40)


class PaymentCreate(BaseModel):
    client_id: str
    amount: Decimal = Field(..., gt=0, description="Amount received")
    payment_date: Optional[date] = Field(
        default=None, description="Defaults to today when omitted"
    )
    payment_type: str = Field(..., description="Identifier of the payment method")
    bank_id: Optional[str] = None
    receipt_number: Optional[str] = Field(default=None, max_length=64)
    period_month: Optional[int] = Field(default=None, ge=1, le=12)
    period_year: Optional[int] = Field(default=None, ge=2000, le=2100)
    notes: Optional[str] = None
    recorded_by: Optional[str] = None

    @model_validator(mode="after")
    def _validate_period(self):
        if (self.period_month is None) != (self.period_year is None):
            raise ValueError("El periodo requiere mes y año.")
        return self


class PaymentClientSummary(BaseModel):
    id: str
    full_name: str

    model_config = ConfigDict(from_attributes=True)


class PaymentRead(BaseModel):
    id: str
    client_id: str
    amount: Decimal
    payment_date: date
    payment_type: str
    payment_type_name: Optional[str] = None
    bank_id: Optional[str] = None
    receipt_number: Optional[str] = None
    period_month: Optional[int] = None
    period_year: Optional[int] = None
    notes: Optional[str] = None
    recorded_by: Optional[str] = None
    created_at: datetime
    client: Optional[PaymentClientSummary] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentListResponse(PaginatedResponse[PaymentRead]):
    pass


class PaymentMonthlySummary(BaseModel):
    period: str
    total: Decimal
    count: int = Field(..., ge=0)
    average: Decimal
