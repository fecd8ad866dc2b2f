"""Router for proration previews and monthly charge runs."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import (
    MonthlyChargeError,
    MonthlyChargeService,
    calculate_initial_balance,
    calculate_proration,
    format_currency,
)
from ..services.monthly_charges import billing_today

router = APIRouter()


@router.post("/proration", response_model=schemas.ProrationPreview)
def preview_proration(payload: schemas.ProrationRequest) -> schemas.ProrationPreview:
    """Return the proration and initial balance without persisting anything."""

    result = calculate_proration(payload.installation_date, payload.billing_day, payload.monthly_fee)
    extras = [item.amount for item in payload.additional_charges]
    initial_balance = calculate_initial_balance(
        result.prorated_amount,
        payload.installation_cost,
        payload.monthly_fee,
        extras,
    )
    return schemas.ProrationPreview(
        prorated_amount=result.prorated_amount,
        days_charged=result.days_charged,
        first_billing_date=result.first_billing_date,
        monthly_fee=payload.monthly_fee,
        installation_cost=payload.installation_cost,
        additional_charges_total=sum(extras, Decimal("0")),
        initial_balance=initial_balance,
        formatted_initial_balance=format_currency(initial_balance),
    )


@router.post("/monthly-charges", response_model=schemas.MonthlyChargeSummary)
def run_monthly_charges(
    payload: Optional[schemas.MonthlyChargeRunRequest] = Body(default=None),
    db: Session = Depends(get_db),
) -> schemas.MonthlyChargeSummary:
    as_of = payload.as_of if payload and payload.as_of else billing_today()
    try:
        run = MonthlyChargeService.generate_monthly_charges(db, as_of)
    except MonthlyChargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
    return run.to_schema()
