"""Schemas for proration previews, billing records and charges."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.client_charge import ChargeStatus


class AdditionalChargeIn(BaseModel):
    """Ad-hoc amount added to the first balance (cable, extra router...)."""

    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0)


class ProrationRequest(BaseModel):
    installation_date: date
    billing_day: int = Field(default=10, ge=1, le=28)
    monthly_fee: Decimal = Field(..., ge=0)
    installation_cost: Decimal = Field(default=Decimal("0"), ge=0)
    additional_charges: list[AdditionalChargeIn] = Field(default_factory=list)


class ProrationRead(BaseModel):
    prorated_amount: Decimal
    days_charged: int = Field(..., ge=0)
    first_billing_date: date

    model_config = ConfigDict(from_attributes=True)


class ProrationPreview(ProrationRead):
    """Proration plus the balance the client would start with."""

    monthly_fee: Decimal
    installation_cost: Decimal
    additional_charges_total: Decimal
    initial_balance: Decimal
    formatted_initial_balance: str


class ClientChargeRead(BaseModel):
    id: str
    client_id: str
    description: str
    amount: Decimal
    status: ChargeStatus
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClientBillingRead(BaseModel):
    id: str
    client_id: str
    service_plan_id: Optional[int] = None
    monthly_fee: Decimal
    installation_cost: Decimal
    installation_date: date
    first_billing_date: date
    billing_day: int
    prorated_amount: Decimal
    days_charged: int
    additional_charges: Decimal
    balance: Decimal

    model_config = ConfigDict(from_attributes=True)


class ClientBillingStatement(BaseModel):
    """Billing record together with the client's charges."""

    billing: Optional[ClientBillingRead] = None
    charges: list[ClientChargeRead] = Field(default_factory=list)
    pending_total: Decimal = Decimal("0")


class MonthlyChargeRunRequest(BaseModel):
    as_of: Optional[date] = Field(
        default=None, description="Date used to pick the month; defaults to today"
    )


class MonthlyChargeSummary(BaseModel):
    success: bool = True
    message: str
    generated: int = Field(..., ge=0)
    balance_updates: int = Field(default=0, ge=0)
    month: str
    year: int
    total_clients: int = Field(default=0, ge=0)
