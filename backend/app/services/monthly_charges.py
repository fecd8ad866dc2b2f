"""Generation of recurring monthly charges and its daily scheduler."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import models, schemas
from ..database import session_scope
from .billing import (
    DEFAULT_BILLING_DAY,
    month_name,
    monthly_charge_description,
    round_currency,
    to_decimal,
)
from .scheduler_monitor import JOB_MONTHLY_CHARGES, SchedulerMonitor

LOGGER = logging.getLogger(__name__)

DEFAULT_BILLING_TIMEZONE = "America/Mexico_City"

_scheduler_thread: Optional[threading.Thread] = None
_scheduler_stop = threading.Event()


class MonthlyChargeError(RuntimeError):
    """Raised when the monthly charge run cannot be persisted."""


@dataclass
class MonthlyChargeRun:
    generated: int
    balance_updates: int
    month: str
    year: int
    total_clients: int

    @property
    def message(self) -> str:
        if self.generated:
            return f"Se generaron {self.generated} cargos de {self.month} {self.year}"
        return f"No hay cargos pendientes por generar para {self.month} {self.year}"

    def to_schema(self) -> schemas.MonthlyChargeSummary:
        return schemas.MonthlyChargeSummary(
            success=True,
            message=self.message,
            generated=self.generated,
            balance_updates=self.balance_updates,
            month=self.month,
            year=self.year,
            total_clients=self.total_clients,
        )


class MonthlyChargeService:
    """Posts the monthly fee of every active client once per month."""

    @staticmethod
    def generate_monthly_charges(db: Session, today: date) -> MonthlyChargeRun:
        description = monthly_charge_description(today)
        billings = (
            db.query(models.ClientBilling)
            .join(models.ClientBilling.client)
            .options(selectinload(models.ClientBilling.client))
            .filter(models.Client.status == models.ClientStatus.ACTIVE)
            .filter(models.ClientBilling.monthly_fee > 0)
            .all()
        )

        already_charged = {
            client_id
            for (client_id,) in db.query(models.ClientCharge.client_id)
            .filter(models.ClientCharge.description == description)
            .all()
        }

        generated = 0
        balance_updates = 0
        try:
            for billing in billings:
                if billing.client_id in already_charged:
                    continue
                billing_day = billing.billing_day or DEFAULT_BILLING_DAY
                cutover = date(today.year, today.month, billing_day)
                # Periods before the first billing date are covered by the proration.
                if billing.first_billing_date and billing.first_billing_date > cutover:
                    continue
                fee = round_currency(to_decimal(billing.monthly_fee))
                db.add(
                    models.ClientCharge(
                        client_id=billing.client_id,
                        description=description,
                        amount=fee,
                        status=models.ChargeStatus.PENDING,
                        due_date=date(today.year, today.month, billing_day),
                    )
                )
                generated += 1
                billing.balance = round_currency(to_decimal(billing.balance) + fee)
                db.add(billing)
                balance_updates += 1
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise MonthlyChargeError("No fue posible generar los cargos mensuales.") from exc

        LOGGER.info(
            "Cargos mensuales %s: %s generados de %s clientes",
            description,
            generated,
            len(billings),
        )
        return MonthlyChargeRun(
            generated=generated,
            balance_updates=balance_updates,
            month=month_name(today.month),
            year=today.year,
            total_clients=len(billings),
        )


def _read_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        LOGGER.warning("Valor inválido para %s=%s; usando %s", name, raw, default)
        return default


def billing_timezone() -> ZoneInfo:
    name = os.getenv("BILLING_TIMEZONE", DEFAULT_BILLING_TIMEZONE).strip()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        LOGGER.warning("Zona horaria inválida %s; usando %s", name, DEFAULT_BILLING_TIMEZONE)
        return ZoneInfo(DEFAULT_BILLING_TIMEZONE)


def billing_today(now: Optional[datetime] = None) -> date:
    """Return the current civil date in the billing timezone."""

    current = now or datetime.now(timezone.utc)
    return current.astimezone(billing_timezone()).date()


def _seconds_until_next_run(now: datetime, run_hour: int, run_minute: int) -> float:
    scheduled_time = time(hour=run_hour, minute=run_minute)
    local_now = now.astimezone(billing_timezone())
    next_run = datetime.combine(local_now.date(), scheduled_time, tzinfo=local_now.tzinfo)
    if next_run <= local_now:
        next_run += timedelta(days=1)
    delay = (next_run - local_now).total_seconds()
    return max(delay, 60.0)


def _execute_monthly_charge_cycle() -> None:
    try:
        with session_scope() as session:
            run = MonthlyChargeService.generate_monthly_charges(session, billing_today())
    except Exception as exc:
        LOGGER.exception("Error al generar los cargos mensuales: %s", exc)
        SchedulerMonitor.record_error(JOB_MONTHLY_CHARGES, str(exc))
        SchedulerMonitor.record_tick(JOB_MONTHLY_CHARGES)
        return
    LOGGER.info(run.message)
    SchedulerMonitor.record_tick(JOB_MONTHLY_CHARGES, run.message)


def _monthly_charge_worker() -> None:
    run_hour = min(max(_read_int("MONTHLY_CHARGES_RUN_HOUR", 0), 0), 23)
    run_minute = min(max(_read_int("MONTHLY_CHARGES_RUN_MINUTE", 5), 0), 59)

    if _read_bool("MONTHLY_CHARGES_RUN_ON_START", True):
        _execute_monthly_charge_cycle()

    while not _scheduler_stop.is_set():
        now = datetime.now(timezone.utc)
        wait_seconds = _seconds_until_next_run(now, run_hour, run_minute)
        if _scheduler_stop.wait(wait_seconds):
            break
        _execute_monthly_charge_cycle()


def start_monthly_charge_scheduler() -> None:
    """Start the background worker that posts monthly charges every day."""

    global _scheduler_thread
    if _scheduler_thread and _scheduler_thread.is_alive():
        return

    _scheduler_stop.clear()
    _scheduler_thread = threading.Thread(target=_monthly_charge_worker, daemon=True)
    _scheduler_thread.start()
    LOGGER.info("Programador de cargos mensuales iniciado.")


def stop_monthly_charge_scheduler() -> None:
    """Stop the monthly charge background worker."""

    _scheduler_stop.set()
    if _scheduler_thread and _scheduler_thread.is_alive():
        _scheduler_thread.join(timeout=5)
        LOGGER.info("Programador de cargos mensuales detenido.")
