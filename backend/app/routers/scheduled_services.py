"""Router for technician visits, calendar data and visit reports."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..services import ScheduledServiceError, ScheduledServiceService

router = APIRouter()


def _get_service_or_404(db: Session, service_id: str) -> models.ScheduledService:
    service = ScheduledServiceService.get_service(db, service_id)
    if service is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Servicio no encontrado")
    return service


@router.get("", response_model=schemas.ScheduledServiceListResponse)
def list_scheduled_services(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    assigned_to: Optional[str] = Query(None, description="Technician identifier"),
    status_filter: Optional[models.VisitStatus] = Query(None, alias="status"),
    service_type: Optional[models.VisitType] = Query(None),
    client_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
) -> schemas.ScheduledServiceListResponse:
    items, total = ScheduledServiceService.list_services(
        db,
        date_from=date_from,
        date_to=date_to,
        assigned_to=assigned_to,
        status=status_filter,
        service_type=service_type,
        client_id=client_id,
        skip=skip,
        limit=limit,
    )
    return schemas.ScheduledServiceListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("", response_model=schemas.ScheduledServiceRead, status_code=status.HTTP_201_CREATED)
def create_scheduled_service(
    payload: schemas.ScheduledServiceCreate, db: Session = Depends(get_db)
) -> schemas.ScheduledServiceRead:
    try:
        return ScheduledServiceService.create_service(db, payload)
    except ScheduledServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/calendar", response_model=schemas.CalendarMonthResponse)
def get_calendar_month(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
) -> schemas.CalendarMonthResponse:
    return ScheduledServiceService.calendar_month(db, year, month)


@router.get("/grid", response_model=schemas.ScheduleGridResponse)
def get_schedule_grid(
    start_date: date = Query(...),
    days: int = Query(7, ge=1, le=31),
    assigned_to: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> schemas.ScheduleGridResponse:
    return ScheduledServiceService.schedule_grid(
        db, start_date, days=days, assigned_to=assigned_to
    )


@router.get("/reports/visits", response_model=schemas.VisitsReportResponse)
def get_visits_report(
    date_from: date = Query(...),
    date_to: date = Query(...),
    assigned_to: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> schemas.VisitsReportResponse:
    try:
        return ScheduledServiceService.visits_report(
            db, date_from, date_to, assigned_to=assigned_to
        )
    except ScheduledServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{service_id}", response_model=schemas.ScheduledServiceRead)
def get_scheduled_service(
    service_id: str, db: Session = Depends(get_db)
) -> schemas.ScheduledServiceRead:
    return _get_service_or_404(db, service_id)


@router.put("/{service_id}", response_model=schemas.ScheduledServiceRead)
def update_scheduled_service(
    service_id: str,
    payload: schemas.ScheduledServiceUpdate,
    db: Session = Depends(get_db),
) -> schemas.ScheduledServiceRead:
    service = _get_service_or_404(db, service_id)
    try:
        return ScheduledServiceService.update_service(db, service, payload)
    except ScheduledServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/{service_id}/start", response_model=schemas.ScheduledServiceRead)
def start_visit(
    service_id: str,
    payload: schemas.VisitStartRequest,
    db: Session = Depends(get_db),
) -> schemas.ScheduledServiceRead:
    service = _get_service_or_404(db, service_id)
    try:
        return ScheduledServiceService.start_visit(db, service, payload)
    except ScheduledServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/{service_id}/complete", response_model=schemas.ScheduledServiceRead)
def complete_visit(
    service_id: str,
    payload: schemas.VisitCompleteRequest,
    db: Session = Depends(get_db),
) -> schemas.ScheduledServiceRead:
    service = _get_service_or_404(db, service_id)
    try:
        return ScheduledServiceService.complete_visit(db, service, payload)
    except ScheduledServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/{service_id}/cancel", response_model=schemas.ScheduledServiceRead)
def cancel_scheduled_service(
    service_id: str,
    reason: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> schemas.ScheduledServiceRead:
    service = _get_service_or_404(db, service_id)
    try:
        return ScheduledServiceService.cancel_service(db, service, reason)
    except ScheduledServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_scheduled_service(service_id: str, db: Session = Depends(get_db)) -> None:
    service = _get_service_or_404(db, service_id)
    ScheduledServiceService.delete_service(db, service)
