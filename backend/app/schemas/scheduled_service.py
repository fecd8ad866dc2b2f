"""Schemas for scheduled field visits and their reports."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.scheduled_service import VisitStatus, VisitType
from .common import PaginatedResponse


class ScheduledServiceCreate(BaseModel):
    client_id: Optional[str] = None
    prospect_id: Optional[str] = None
    assigned_to: str = Field(..., min_length=1, max_length=64)
    assigned_name: Optional[str] = Field(default=None, max_length=160)
    service_type: VisitType = VisitType.OTHER
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    scheduled_date: date
    scheduled_time: Optional[time] = None
    charge_amount: Optional[Decimal] = Field(default=None, ge=0)
    created_by: Optional[str] = None

    @model_validator(mode="after")
    def _require_target(self):
        if not self.client_id and not self.prospect_id:
            raise ValueError("El servicio debe estar ligado a un cliente o prospecto.")
        return self


class ScheduledServiceUpdate(BaseModel):
    assigned_to: Optional[str] = Field(default=None, min_length=1, max_length=64)
    assigned_name: Optional[str] = None
    service_type: Optional[VisitType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    charge_amount: Optional[Decimal] = Field(default=None, ge=0)


class VisitStartRequest(BaseModel):
    latitude: Optional[Decimal] = Field(default=None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(default=None, ge=-180, le=180)


class VisitCompleteRequest(BaseModel):
    notes: Optional[str] = None
    nobody_home: bool = False


class ScheduledServiceRead(BaseModel):
    id: str
    client_id: Optional[str] = None
    prospect_id: Optional[str] = None
    client_name: Optional[str] = None
    assigned_to: str
    assigned_name: Optional[str] = None
    service_type: VisitType
    status: VisitStatus
    title: str
    description: Optional[str] = None
    scheduled_date: date
    scheduled_time: Optional[time] = None
    visit_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_notes: Optional[str] = None
    visit_latitude: Optional[Decimal] = None
    visit_longitude: Optional[Decimal] = None
    charge_amount: Optional[Decimal] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScheduledServiceListResponse(PaginatedResponse[ScheduledServiceRead]):
    pass


class StatusCounts(BaseModel):
    scheduled: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    stats: StatusCounts
    days: dict[str, list[ScheduledServiceRead]]


class ScheduleGridDay(BaseModel):
    day: date
    slots: dict[str, list[ScheduledServiceRead]]
    unscheduled: list[ScheduledServiceRead] = Field(default_factory=list)


class ScheduleGridResponse(BaseModel):
    start_date: date
    days: int
    hours: list[int]
    columns: list[ScheduleGridDay]


class VisitsReportStats(BaseModel):
    total: int
    completed: int
    no_one_home: int
    with_gps: int
    average_duration_minutes: Optional[float] = None


class VisitsReportResponse(BaseModel):
    date_from: date
    date_to: date
    stats: VisitsReportStats
    items: list[ScheduledServiceRead]
