"""Router exposing payment operations and catalogs."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import PaymentService, PaymentServiceError

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=schemas.PaymentListResponse)
def list_payments(
    client_id: Optional[str] = Query(None, description="Filter by client"),
    period: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    date_from: Optional[date] = Query(None, description="Start date"),
    date_to: Optional[date] = Query(None, description="End date"),
    search: Optional[str] = Query(None, description="Client name, receipt or payment type"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> schemas.PaymentListResponse:
    try:
        items, total = PaymentService.list_payments(
            db,
            client_id=client_id,
            period=period,
            date_from=date_from,
            date_to=date_to,
            search=search,
            skip=skip,
            limit=limit,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        LOGGER.exception("Error al listar pagos")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudieron cargar los pagos. Inténtalo de nuevo más tarde.",
        ) from exc
    return schemas.PaymentListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("", response_model=schemas.PaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: schemas.PaymentCreate, db: Session = Depends(get_db)
) -> schemas.PaymentRead:
    try:
        return PaymentService.create_payment(db, payload)
    except PaymentServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/summary", response_model=schemas.PaymentMonthlySummary)
def get_monthly_summary(
    period: str = Query(..., description="Month in YYYY-MM format"),
    db: Session = Depends(get_db),
) -> schemas.PaymentMonthlySummary:
    try:
        return PaymentService.monthly_summary(db, period)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/methods", response_model=list[schemas.PaymentMethodRead])
def list_payment_methods(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
) -> list[schemas.PaymentMethodRead]:
    return PaymentService.list_methods(db, include_inactive=include_inactive)


@router.post(
    "/methods",
    response_model=schemas.PaymentMethodRead,
    status_code=status.HTTP_201_CREATED,
)
def create_payment_method(
    payload: schemas.PaymentMethodCreate, db: Session = Depends(get_db)
) -> schemas.PaymentMethodRead:
    try:
        return PaymentService.create_method(db, payload)
    except PaymentServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/banks", response_model=list[schemas.BankRead])
def list_banks(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
) -> list[schemas.BankRead]:
    return PaymentService.list_banks(db, include_inactive=include_inactive)


@router.post("/banks", response_model=schemas.BankRead, status_code=status.HTTP_201_CREATED)
def create_bank(payload: schemas.BankCreate, db: Session = Depends(get_db)) -> schemas.BankRead:
    try:
        return PaymentService.create_bank(db, payload)
    except PaymentServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/{payment_id}", response_model=schemas.PaymentRead)
def get_payment(payment_id: str, db: Session = Depends(get_db)) -> schemas.PaymentRead:
    payment = PaymentService.get_payment(db, payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pago no encontrado")
    return payment
