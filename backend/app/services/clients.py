"""Business logic related to client resources."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from .. import models, schemas

LOGGER = logging.getLogger(__name__)

REQUIRED_CONTACT_FIELDS = (
    "first_name",
    "last_name_paterno",
    "phone1",
    "street",
    "exterior_number",
    "neighborhood",
    "city",
)


class ClientServiceError(RuntimeError):
    """Raised when a client operation cannot be completed."""


class ClientService:
    """Encapsulates read and update operations for clients."""

    @staticmethod
    def list_clients(
        db: Session,
        *,
        status: Optional[models.ClientStatus] = None,
        city: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[Iterable[models.Client], int]:
        query = db.query(models.Client)

        if status:
            query = query.filter(models.Client.status == status)
        if city:
            query = query.filter(func.lower(models.Client.city) == city.strip().lower())
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(models.Client.first_name).like(pattern),
                    func.lower(models.Client.last_name_paterno).like(pattern),
                    func.lower(models.Client.last_name_materno).like(pattern),
                    models.Client.phone1.like(pattern),
                    func.lower(models.Client.neighborhood).like(pattern),
                )
            )

        total = query.count()
        items = (
            query.order_by(models.Client.last_name_paterno.asc(), models.Client.first_name.asc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_client(db: Session, client_id: str) -> Optional[models.Client]:
        return (
            db.query(models.Client)
            .options(
                selectinload(models.Client.billing),
                selectinload(models.Client.equipment),
                selectinload(models.Client.charges),
            )
            .filter(models.Client.id == client_id)
            .first()
        )

    @staticmethod
    def update_client(
        db: Session, client: models.Client, data: schemas.ClientUpdate
    ) -> models.Client:
        if client.status == models.ClientStatus.CANCELLED:
            raise ClientServiceError("No se puede editar un cliente cancelado.")

        update_data = data.model_dump(exclude_unset=True)
        for field_name in REQUIRED_CONTACT_FIELDS:
            if field_name in update_data and update_data[field_name] is None:
                raise ClientServiceError(f"El campo {field_name} es obligatorio.")
        for field_name, value in update_data.items():
            setattr(client, field_name, value)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def cancel_client(db: Session, client: models.Client, reason: str) -> models.Client:
        if client.status == models.ClientStatus.CANCELLED:
            raise ClientServiceError("El cliente ya está cancelado.")
        reason = (reason or "").strip()
        if not reason:
            raise ClientServiceError("Por favor ingresa un motivo de cancelación")

        client.status = models.ClientStatus.CANCELLED
        client.cancelled_at = datetime.now(timezone.utc)
        client.cancellation_reason = reason
        db.add(client)
        db.commit()
        db.refresh(client)
        LOGGER.info("Cliente %s cancelado: %s", client.id, reason)
        return client

    @staticmethod
    def update_equipment(
        db: Session,
        client: models.Client,
        data: schemas.EquipmentUpdate,
    ) -> models.Equipment:
        """Update the client's latest equipment record, creating one if missing."""

        equipment = client.equipment[-1] if client.equipment else None
        if equipment is None:
            equipment = models.Equipment(client_id=client.id)
        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(equipment, field_name, value)
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def billing_statement(db: Session, client: models.Client) -> schemas.ClientBillingStatement:
        charges = (
            db.query(models.ClientCharge)
            .filter(models.ClientCharge.client_id == client.id)
            .order_by(models.ClientCharge.created_at.asc())
            .all()
        )
        pending_total = sum(
            (
                Decimal(charge.amount)
                for charge in charges
                if charge.status == models.ChargeStatus.PENDING
            ),
            Decimal("0"),
        )
        return schemas.ClientBillingStatement(
            billing=client.billing,
            charges=charges,
            pending_total=pending_total,
        )
