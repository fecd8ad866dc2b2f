"""Scheduling of field visits and the reports built from them."""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from .. import models, schemas

LOGGER = logging.getLogger(__name__)

GRID_START_HOUR = 7
GRID_END_HOUR = 20
NOBODY_HOME_MARKER = "[No había nadie"

CLOSED_STATUSES = {models.VisitStatus.COMPLETED, models.VisitStatus.CANCELLED}
REPORT_STATUSES = (
    models.VisitStatus.IN_PROGRESS,
    models.VisitStatus.COMPLETED,
    models.VisitStatus.CANCELLED,
)


class ScheduledServiceError(RuntimeError):
    """Raised when a visit operation is not allowed."""


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ScheduledServiceService:
    """CRUD, status transitions and aggregated views for visits."""

    @staticmethod
    def _base_query(db: Session):
        return db.query(models.ScheduledService).options(
            selectinload(models.ScheduledService.client),
            selectinload(models.ScheduledService.prospect),
        )

    @classmethod
    def list_services(
        cls,
        db: Session,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        assigned_to: Optional[str] = None,
        status: Optional[models.VisitStatus] = None,
        service_type: Optional[models.VisitType] = None,
        client_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.ScheduledService], int]:
        query = cls._base_query(db)
        if date_from:
            query = query.filter(models.ScheduledService.scheduled_date >= date_from)
        if date_to:
            query = query.filter(models.ScheduledService.scheduled_date <= date_to)
        if assigned_to:
            query = query.filter(models.ScheduledService.assigned_to == assigned_to)
        if status:
            query = query.filter(models.ScheduledService.status == status)
        if service_type:
            query = query.filter(models.ScheduledService.service_type == service_type)
        if client_id:
            query = query.filter(models.ScheduledService.client_id == client_id)

        total = query.count()
        items = (
            query.order_by(
                models.ScheduledService.scheduled_date.asc(),
                models.ScheduledService.scheduled_time.asc(),
            )
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @classmethod
    def get_service(cls, db: Session, service_id: str) -> Optional[models.ScheduledService]:
        return cls._base_query(db).filter(models.ScheduledService.id == service_id).first()

    @staticmethod
    def create_service(
        db: Session, data: schemas.ScheduledServiceCreate
    ) -> models.ScheduledService:
        if data.client_id and db.get(models.Client, data.client_id) is None:
            raise ScheduledServiceError("El cliente no existe.")
        if data.prospect_id and db.get(models.Prospect, data.prospect_id) is None:
            raise ScheduledServiceError("El prospecto no existe.")

        service = models.ScheduledService(**data.model_dump(), status=models.VisitStatus.SCHEDULED)
        db.add(service)
        db.commit()
        db.refresh(service)
        LOGGER.info(
            "Servicio %s agendado para %s el %s",
            service.id,
            service.assigned_to,
            service.scheduled_date,
        )
        return service

    @staticmethod
    def update_service(
        db: Session,
        service: models.ScheduledService,
        data: schemas.ScheduledServiceUpdate,
    ) -> models.ScheduledService:
        if service.status in CLOSED_STATUSES:
            raise ScheduledServiceError("No se puede editar un servicio cerrado.")
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(service, field_name, value)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def start_visit(
        db: Session,
        service: models.ScheduledService,
        data: schemas.VisitStartRequest,
    ) -> models.ScheduledService:
        if service.status != models.VisitStatus.SCHEDULED:
            raise ScheduledServiceError("Solo se pueden iniciar servicios agendados.")
        service.status = models.VisitStatus.IN_PROGRESS
        service.visit_started_at = datetime.now(timezone.utc)
        if data.latitude is not None and data.longitude is not None:
            service.visit_latitude = data.latitude
            service.visit_longitude = data.longitude
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def complete_visit(
        db: Session,
        service: models.ScheduledService,
        data: schemas.VisitCompleteRequest,
    ) -> models.ScheduledService:
        if service.status in CLOSED_STATUSES:
            raise ScheduledServiceError("El servicio ya fue cerrado.")
        notes = (data.notes or "").strip()
        if data.nobody_home and NOBODY_HOME_MARKER not in notes:
            notes = f"{NOBODY_HOME_MARKER}] {notes}".strip()
        service.status = models.VisitStatus.COMPLETED
        service.completed_at = datetime.now(timezone.utc)
        service.completed_notes = notes or None
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def cancel_service(
        db: Session, service: models.ScheduledService, reason: Optional[str] = None
    ) -> models.ScheduledService:
        if service.status in CLOSED_STATUSES:
            raise ScheduledServiceError("El servicio ya fue cerrado.")
        service.status = models.VisitStatus.CANCELLED
        if reason:
            service.completed_notes = reason.strip()
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: models.ScheduledService) -> None:
        db.delete(service)
        db.commit()

    @classmethod
    def calendar_month(cls, db: Session, year: int, month: int) -> schemas.CalendarMonthResponse:
        if month < 1 or month > 12:
            raise ScheduledServiceError("Mes inválido.")
        first_day = date(year, month, 1)
        last_day = date(year, month, monthrange(year, month)[1])
        services, _ = cls.list_services(
            db, date_from=first_day, date_to=last_day, limit=10_000
        )

        days: dict[str, list[models.ScheduledService]] = {}
        counts = {status.value: 0 for status in models.VisitStatus}
        for service in services:
            days.setdefault(service.scheduled_date.isoformat(), []).append(service)
            counts[models.VisitStatus(service.status).value] += 1

        return schemas.CalendarMonthResponse(
            year=year,
            month=month,
            stats=schemas.StatusCounts(**counts),
            days=days,
        )

    @classmethod
    def schedule_grid(
        cls,
        db: Session,
        start_date: date,
        days: int = 7,
        assigned_to: Optional[str] = None,
    ) -> schemas.ScheduleGridResponse:
        days = max(days, 1)
        end_date = start_date + timedelta(days=days - 1)
        services, _ = cls.list_services(
            db,
            date_from=start_date,
            date_to=end_date,
            assigned_to=assigned_to,
            limit=10_000,
        )

        hours = list(range(GRID_START_HOUR, GRID_END_HOUR + 1))
        columns = []
        for offset in range(days):
            current = start_date + timedelta(days=offset)
            slots: dict[str, list[models.ScheduledService]] = {
                f"{hour:02d}:00": [] for hour in hours
            }
            unscheduled: list[models.ScheduledService] = []
            for service in services:
                if service.scheduled_date != current:
                    continue
                scheduled_time = service.scheduled_time
                if scheduled_time is None or not (
                    GRID_START_HOUR <= scheduled_time.hour <= GRID_END_HOUR
                ):
                    unscheduled.append(service)
                    continue
                slots[f"{scheduled_time.hour:02d}:00"].append(service)
            columns.append(
                schemas.ScheduleGridDay(day=current, slots=slots, unscheduled=unscheduled)
            )

        return schemas.ScheduleGridResponse(
            start_date=start_date, days=days, hours=hours, columns=columns
        )

    @classmethod
    def visits_report(
        cls,
        db: Session,
        date_from: date,
        date_to: date,
        assigned_to: Optional[str] = None,
    ) -> schemas.VisitsReportResponse:
        if date_to < date_from:
            raise ScheduledServiceError("El rango de fechas es inválido.")
        query = cls._base_query(db).filter(
            models.ScheduledService.scheduled_date >= date_from,
            models.ScheduledService.scheduled_date <= date_to,
            models.ScheduledService.status.in_(REPORT_STATUSES),
        )
        if assigned_to:
            query = query.filter(models.ScheduledService.assigned_to == assigned_to)
        items = query.order_by(models.ScheduledService.scheduled_date.desc()).all()

        completed = [item for item in items if item.status == models.VisitStatus.COMPLETED]
        no_one_home = [
            item
            for item in completed
            if item.completed_notes and NOBODY_HOME_MARKER in item.completed_notes
        ]
        with_gps = [
            item
            for item in items
            if item.visit_latitude is not None and item.visit_longitude is not None
        ]
        durations = [
            (_as_utc(item.completed_at) - _as_utc(item.visit_started_at)).total_seconds() / 60
            for item in completed
            if item.visit_started_at is not None and item.completed_at is not None
        ]
        average = round(sum(durations) / len(durations), 1) if durations else None

        return schemas.VisitsReportResponse(
            date_from=date_from,
            date_to=date_to,
            stats=schemas.VisitsReportStats(
                total=len(items),
                completed=len(completed),
                no_one_home=len(no_one_home),
                with_gps=len(with_gps),
                average_duration_minutes=average,
            ),
            items=items,
        )
