"""Business logic for payment operations."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import models, schemas
from .billing_periods import BillingPeriodService
from .monthly_charges import billing_today

LOGGER = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHODS = ("Efectivo", "Transferencia", "Depósito")
DEFAULT_BANKS = (
    ("BBVA México", "BBVA"),
    ("Banorte", "Banorte"),
    ("Santander", "Santander"),
    ("Banco Azteca", "Azteca"),
)


class PaymentServiceError(RuntimeError):
    """Raised when payment operations cannot be completed."""


class PaymentService:
    """Operations for reading and recording client payments."""

    @staticmethod
    def ensure_catalogs(db: Session) -> None:
        existing_methods = {name for (name,) in db.query(models.PaymentMethod.name).all()}
        existing_banks = {name for (name,) in db.query(models.Bank.name).all()}
        created = False
        for name in DEFAULT_PAYMENT_METHODS:
            if name not in existing_methods:
                db.add(models.PaymentMethod(name=name, is_active=True))
                created = True
        for name, short_name in DEFAULT_BANKS:
            if name not in existing_banks:
                db.add(models.Bank(name=name, short_name=short_name, is_active=True))
                created = True
        if created:
            db.commit()

    @staticmethod
    def list_methods(db: Session, *, include_inactive: bool = False) -> list[models.PaymentMethod]:
        PaymentService.ensure_catalogs(db)
        query = db.query(models.PaymentMethod)
        if not include_inactive:
            query = query.filter(models.PaymentMethod.is_active.is_(True))
        return query.order_by(models.PaymentMethod.name.asc()).all()

    @staticmethod
    def list_banks(db: Session, *, include_inactive: bool = False) -> list[models.Bank]:
        PaymentService.ensure_catalogs(db)
        query = db.query(models.Bank)
        if not include_inactive:
            query = query.filter(models.Bank.is_active.is_(True))
        return query.order_by(models.Bank.name.asc()).all()

    @staticmethod
    def create_method(db: Session, data: schemas.PaymentMethodCreate) -> models.PaymentMethod:
        method = models.PaymentMethod(name=data.name.strip(), is_active=True)
        db.add(method)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PaymentServiceError("Ya existe un tipo de pago con ese nombre.") from exc
        db.refresh(method)
        return method

    @staticmethod
    def create_bank(db: Session, data: schemas.BankCreate) -> models.Bank:
        bank = models.Bank(name=data.name.strip(), short_name=data.short_name, is_active=True)
        db.add(bank)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PaymentServiceError("Ya existe un banco con ese nombre.") from exc
        db.refresh(bank)
        return bank

    @staticmethod
    def list_payments(
        db: Session,
        *,
        client_id: Optional[str] = None,
        period: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.Payment], int]:
        query = (
            db.query(models.Payment)
            .join(models.Payment.client)
            .join(models.Payment.method)
            .options(
                selectinload(models.Payment.client),
                selectinload(models.Payment.method),
            )
        )

        if client_id:
            query = query.filter(models.Payment.client_id == client_id)
        if period:
            billing_period = BillingPeriodService.parse_period(period)
            query = query.filter(
                models.Payment.payment_date >= billing_period.starts_on,
                models.Payment.payment_date <= billing_period.ends_on,
            )
        if date_from:
            query = query.filter(models.Payment.payment_date >= date_from)
        if date_to:
            query = query.filter(models.Payment.payment_date <= date_to)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(models.Client.first_name).like(pattern),
                    func.lower(models.Client.last_name_paterno).like(pattern),
                    func.lower(models.Client.last_name_materno).like(pattern),
                    func.lower(models.Payment.receipt_number).like(pattern),
                    func.lower(models.PaymentMethod.name).like(pattern),
                )
            )

        total = query.count()
        items = (
            query.order_by(
                models.Payment.payment_date.desc(),
                models.Payment.created_at.desc(),
            )
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_payment(db: Session, payment_id: str) -> Optional[models.Payment]:
        return (
            db.query(models.Payment)
            .options(selectinload(models.Payment.client), selectinload(models.Payment.method))
            .filter(models.Payment.id == payment_id)
            .first()
        )

    @staticmethod
    def _normalize_amount(value: Decimal | float | str) -> Decimal:
        cents = Decimal("0.01")
        return Decimal(str(value)).quantize(cents, rounding=ROUND_HALF_UP)

    @classmethod
    def create_payment(cls, db: Session, data: schemas.PaymentCreate) -> models.Payment:
        client = db.query(models.Client).filter(models.Client.id == data.client_id).first()
        if client is None:
            raise PaymentServiceError("El cliente no existe.")
        method = (
            db.query(models.PaymentMethod)
            .filter(models.PaymentMethod.id == data.payment_type)
            .first()
        )
        if method is None or not method.is_active:
            raise PaymentServiceError("El tipo de pago no es válido.")
        if data.bank_id:
            bank = db.query(models.Bank).filter(models.Bank.id == data.bank_id).first()
            if bank is None:
                raise PaymentServiceError("El banco seleccionado no existe.")

        amount = cls._normalize_amount(data.amount)
        payment = models.Payment(
            client_id=client.id,
            amount=amount,
            payment_date=data.payment_date or billing_today(),
            payment_type=method.id,
            bank_id=data.bank_id,
            receipt_number=data.receipt_number,
            period_month=data.period_month,
            period_year=data.period_year,
            notes=data.notes,
            recorded_by=data.recorded_by,
        )

        try:
            db.add(payment)
            cls._apply_to_account(db, client, amount)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PaymentServiceError("No fue posible registrar el pago.") from exc

        db.refresh(payment)
        LOGGER.info("Pago de %s registrado para el cliente %s", amount, client.id)
        return payment

    @staticmethod
    def _apply_to_account(db: Session, client: models.Client, amount: Decimal) -> None:
        billing = client.billing
        if billing is not None:
            billing.balance = (Decimal(billing.balance or 0) - amount).quantize(Decimal("0.01"))
            db.add(billing)

        remaining = amount
        pending = (
            db.query(models.ClientCharge)
            .filter(
                models.ClientCharge.client_id == client.id,
                models.ClientCharge.status == models.ChargeStatus.PENDING,
            )
            .order_by(models.ClientCharge.due_date.asc(), models.ClientCharge.created_at.asc())
            .all()
        )
        paid_at = datetime.now(timezone.utc)
        for charge in pending:
            charge_amount = Decimal(charge.amount)
            if charge_amount > remaining:
                break
            charge.status = models.ChargeStatus.PAID
            charge.paid_at = paid_at
            remaining -= charge_amount
            db.add(charge)

    @staticmethod
    def monthly_summary(db: Session, period: str) -> schemas.PaymentMonthlySummary:
        billing_period = BillingPeriodService.parse_period(period)
        total, count = (
            db.query(
                func.coalesce(func.sum(models.Payment.amount), 0),
                func.count(models.Payment.id),
            )
            .filter(
                models.Payment.payment_date >= billing_period.starts_on,
                models.Payment.payment_date <= billing_period.ends_on,
            )
            .one()
        )
        total = Decimal(str(total)).quantize(Decimal("0.01"))
        average = (total / count).quantize(Decimal("0.01")) if count else Decimal("0.00")
        return schemas.PaymentMonthlySummary(
            period=billing_period.period_key,
            total=total,
            count=count,
            average=average,
        )
