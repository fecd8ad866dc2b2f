"""Business logic for prospects and their conversion into clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from .billing import (
    ProrationResult,
    calculate_initial_balance,
    calculate_proration,
    monthly_charge_description,
    round_currency,
    to_decimal,
)

LOGGER = logging.getLogger(__name__)

# Field -> label stored in the change history.
TRACKED_FIELDS: tuple[tuple[str, str], ...] = (
    ("first_name", "Nombre"),
    ("last_name_paterno", "Apellido Paterno"),
    ("last_name_materno", "Apellido Materno"),
    ("phone1", "Teléfono 1"),
    ("phone2", "Teléfono 2"),
    ("phone3_signer", "Teléfono Firmante"),
    ("street", "Calle"),
    ("exterior_number", "Número Exterior"),
    ("interior_number", "Número Interior"),
    ("neighborhood", "Colonia"),
    ("city", "Ciudad"),
    ("postal_code", "Código Postal"),
    ("ssid", "SSID"),
    ("antenna_ip", "IP Antena"),
)

CONTACT_FIELDS = tuple(schemas.prospect.ContactBase.model_fields)
PROSPECT_FIELDS = tuple(schemas.prospect.ProspectFields.model_fields)


class ProspectServiceError(RuntimeError):
    """Raised when a prospect operation receives invalid data."""


class ProspectStateError(ProspectServiceError):
    """Raised when the prospect status does not allow the operation."""


@dataclass
class FinalizeResult:
    prospect: models.Prospect
    client: models.Client
    billing: Optional[models.ClientBilling]
    proration: ProrationResult
    initial_balance: Decimal
    changes_recorded: int
    warnings: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.changes_recorded:
            return (
                f"Prospecto finalizado con {self.changes_recorded} cambio(s) "
                "registrado(s) en historial"
            )
        return "Prospecto finalizado y cliente creado correctamente"


def _as_text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ProspectService:
    """CRUD and lifecycle operations for prospects."""

    @staticmethod
    def list_prospects(
        db: Session,
        *,
        status: Optional[models.ProspectStatus] = None,
        city: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[Iterable[models.Prospect], int]:
        query = db.query(models.Prospect)

        if status:
            query = query.filter(models.Prospect.status == status)
        if city:
            query = query.filter(func.lower(models.Prospect.city) == city.strip().lower())
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(models.Prospect.first_name).like(pattern),
                    func.lower(models.Prospect.last_name_paterno).like(pattern),
                    func.lower(models.Prospect.last_name_materno).like(pattern),
                    models.Prospect.phone1.like(pattern),
                    models.Prospect.phone2.like(pattern),
                )
            )

        total = query.count()
        items = (
            query.order_by(models.Prospect.created_at.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_prospect(db: Session, prospect_id: str) -> Optional[models.Prospect]:
        return db.query(models.Prospect).filter(models.Prospect.id == prospect_id).first()

    @staticmethod
    def create_prospect(db: Session, data: schemas.ProspectCreate) -> models.Prospect:
        prospect = models.Prospect(**data.model_dump(), status=models.ProspectStatus.PENDING)
        db.add(prospect)
        db.commit()
        db.refresh(prospect)
        LOGGER.info("Prospecto %s registrado", prospect.id)
        return prospect

    @staticmethod
    def update_prospect(
        db: Session, prospect: models.Prospect, data: schemas.ProspectUpdate
    ) -> models.Prospect:
        if prospect.status == models.ProspectStatus.FINALIZED:
            raise ProspectStateError("No se puede editar un prospecto finalizado.")

        update_data = data.model_dump(exclude_unset=True)
        for required in ("first_name", "last_name_paterno", "phone1", "street",
                         "exterior_number", "neighborhood", "city"):
            if required in update_data and update_data[required] is None:
                raise ProspectServiceError(f"El campo {required} es obligatorio.")
        for field_name, value in update_data.items():
            setattr(prospect, field_name, value)
        db.add(prospect)
        db.commit()
        db.refresh(prospect)
        return prospect

    @staticmethod
    def cancel_prospect(db: Session, prospect: models.Prospect, reason: str) -> models.Prospect:
        if prospect.status != models.ProspectStatus.PENDING:
            raise ProspectStateError("Solo se pueden cancelar prospectos pendientes.")
        reason = (reason or "").strip()
        if not reason:
            raise ProspectServiceError("Por favor ingresa un motivo de cancelación")

        prospect.status = models.ProspectStatus.CANCELLED
        prospect.cancelled_at = datetime.now(timezone.utc)
        prospect.cancellation_reason = reason
        db.add(prospect)
        db.commit()
        db.refresh(prospect)
        LOGGER.info("Prospecto %s cancelado", prospect.id)
        return prospect

    @staticmethod
    def reactivate_prospect(db: Session, prospect: models.Prospect) -> models.Prospect:
        if prospect.status != models.ProspectStatus.CANCELLED:
            raise ProspectStateError("Solo se pueden reactivar prospectos cancelados.")

        prospect.status = models.ProspectStatus.PENDING
        prospect.cancelled_at = None
        prospect.cancellation_reason = None
        db.add(prospect)
        db.commit()
        db.refresh(prospect)
        return prospect

    @staticmethod
    def delete_prospect(db: Session, prospect: models.Prospect) -> None:
        if prospect.status == models.ProspectStatus.FINALIZED:
            raise ProspectStateError(
                "No se puede eliminar un prospecto que ya fue convertido en cliente."
            )
        db.delete(prospect)
        db.commit()

    @staticmethod
    def list_history(db: Session, prospect_id: str) -> list[models.ProspectChangeHistory]:
        return (
            db.query(models.ProspectChangeHistory)
            .filter(models.ProspectChangeHistory.prospect_id == prospect_id)
            .order_by(models.ProspectChangeHistory.changed_at.asc())
            .all()
        )

    @classmethod
    def finalize_prospect(
        cls,
        db: Session,
        prospect: models.Prospect,
        data: schemas.ProspectFinalizeRequest,
    ) -> FinalizeResult:
        """Convert a pending prospect into a client with billing.

        Prospect update, client creation and change history are persisted
        together. Equipment and billing each run in their own savepoint; a
        failure there is logged and reported as a warning while the client is
        kept.
        """

        if prospect.status != models.ProspectStatus.PENDING:
            raise ProspectStateError("Solo se pueden finalizar prospectos pendientes.")
        if data.confirmation_code.strip().upper() != schemas.FINALIZE_CONFIRMATION_CODE:
            raise ProspectServiceError(
                f"Escribe {schemas.FINALIZE_CONFIRMATION_CODE} para finalizar el prospecto."
            )

        plan = cls._resolve_plan(db, data.service_plan_id)
        monthly_fee = cls._resolve_monthly_fee(plan, data.monthly_fee)
        submitted = data.model_dump(include=set(PROSPECT_FIELDS))

        changes = [
            (label, _as_text(getattr(prospect, name)), _as_text(submitted.get(name)))
            for name, label in TRACKED_FIELDS
        ]
        changes = [change for change in changes if change[1] != change[2]]

        for field_name, value in submitted.items():
            setattr(prospect, field_name, value)
        prospect.status = models.ProspectStatus.FINALIZED
        prospect.finalized_at = datetime.now(timezone.utc)

        client = models.Client(
            **{name: getattr(prospect, name) for name in CONTACT_FIELDS},
            phone3=prospect.phone3_signer,
            prospect_id=prospect.id,
            status=models.ClientStatus.ACTIVE,
            created_by=data.changed_by,
        )
        db.add(prospect)
        db.add(client)
        try:
            db.flush()
            for label, old_value, new_value in changes:
                db.add(
                    models.ProspectChangeHistory(
                        prospect_id=prospect.id,
                        client_id=client.id,
                        field_name=label,
                        old_value=old_value,
                        new_value=new_value,
                        changed_by=data.changed_by,
                    )
                )
            db.flush()
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.exception("No se pudo crear el cliente para el prospecto %s", prospect.id)
            raise ProspectServiceError("No se pudo crear el cliente.") from exc

        warnings: list[str] = []

        try:
            with db.begin_nested():
                cls._create_equipment(db, client, data)
        except SQLAlchemyError:
            LOGGER.exception("Error al registrar el equipo del cliente %s", client.id)
            warnings.append("No se pudo registrar el equipo del cliente.")

        proration = calculate_proration(data.installation_date, data.billing_day, monthly_fee)
        extras = [item.amount for item in data.additional_charges]
        initial_balance = calculate_initial_balance(
            proration.prorated_amount,
            data.installation_cost,
            monthly_fee,
            extras,
        )

        billing: Optional[models.ClientBilling] = None
        try:
            with db.begin_nested():
                billing = cls._create_billing(
                    db,
                    client,
                    data,
                    plan=plan,
                    monthly_fee=monthly_fee,
                    proration=proration,
                    initial_balance=initial_balance,
                )
        except SQLAlchemyError:
            billing = None
            LOGGER.exception("Error al registrar la facturación del cliente %s", client.id)
            warnings.append("No se pudo registrar la facturación ni los cargos iniciales.")

        db.commit()
        db.refresh(prospect)
        db.refresh(client)
        if billing is not None:
            db.refresh(billing)

        LOGGER.info(
            "Prospecto %s finalizado como cliente %s (%s cambios)",
            prospect.id,
            client.id,
            len(changes),
        )
        return FinalizeResult(
            prospect=prospect,
            client=client,
            billing=billing,
            proration=proration,
            initial_balance=initial_balance,
            changes_recorded=len(changes),
            warnings=warnings,
        )

    @staticmethod
    def _resolve_plan(db: Session, plan_id: Optional[int]) -> Optional[models.ServicePlan]:
        if plan_id is None:
            return None
        plan = db.query(models.ServicePlan).filter(models.ServicePlan.id == plan_id).first()
        if plan is None:
            raise ProspectServiceError("El plan de servicio seleccionado no existe.")
        return plan

    @staticmethod
    def _resolve_monthly_fee(
        plan: Optional[models.ServicePlan], monthly_fee: Optional[Decimal]
    ) -> Decimal:
        if monthly_fee is not None:
            return round_currency(to_decimal(monthly_fee))
        if plan is not None:
            return round_currency(to_decimal(plan.monthly_price))
        raise ProspectServiceError("Selecciona un plan de servicio o captura la mensualidad.")

    @staticmethod
    def _create_equipment(
        db: Session, client: models.Client, data: schemas.ProspectFinalizeRequest
    ) -> models.Equipment:
        equipment = models.Equipment(
            client_id=client.id,
            antenna_ssid=data.ssid,
            antenna_ip=data.antenna_ip,
            antenna_mac=data.antenna_mac,
            router_mac=data.router_mac,
        )
        db.add(equipment)
        db.flush()
        return equipment

    @staticmethod
    def _create_billing(
        db: Session,
        client: models.Client,
        data: schemas.ProspectFinalizeRequest,
        *,
        plan: Optional[models.ServicePlan],
        monthly_fee: Decimal,
        proration: ProrationResult,
        initial_balance: Decimal,
    ) -> models.ClientBilling:
        extras_total = sum(
            (to_decimal(item.amount) for item in data.additional_charges), Decimal("0")
        )
        billing = models.ClientBilling(
            client_id=client.id,
            service_plan_id=plan.id if plan is not None else None,
            monthly_fee=monthly_fee,
            installation_cost=round_currency(to_decimal(data.installation_cost)),
            installation_date=data.installation_date,
            first_billing_date=proration.first_billing_date,
            billing_day=data.billing_day,
            prorated_amount=proration.prorated_amount,
            days_charged=proration.days_charged,
            additional_charges=round_currency(extras_total),
            balance=initial_balance,
        )
        db.add(billing)

        charges: list[tuple[str, Decimal]] = []
        if proration.days_charged > 0:
            charges.append(
                (
                    f"Prorrateo {proration.days_charged} día(s) hasta "
                    f"{proration.first_billing_date.isoformat()}",
                    proration.prorated_amount,
                )
            )
        if data.installation_cost > 0:
            charges.append(("Costo de instalación", to_decimal(data.installation_cost)))
        if monthly_fee > 0:
            charges.append(
                (monthly_charge_description(proration.first_billing_date), monthly_fee)
            )
        for item in data.additional_charges:
            charges.append((item.description.strip(), to_decimal(item.amount)))

        for description, amount in charges:
            db.add(
                models.ClientCharge(
                    client_id=client.id,
                    description=description,
                    amount=round_currency(amount),
                    status=models.ChargeStatus.PENDING,
                    due_date=proration.first_billing_date,
                )
            )
        db.flush()
        return billing
