"""Business logic for managing the internet plan catalog."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas


DEFAULT_SERVICE_PLANS = [
    {
        "name": "Internet 5 Mbps",
        "description": "Plan residencial básico",
        "download_speed_mbps": Decimal("5"),
        "upload_speed_mbps": Decimal("1"),
        "monthly_price": Decimal("300"),
        "status": models.ServicePlanStatus.ACTIVE,
    },
    {
        "name": "Internet 10 Mbps",
        "description": "Plan residencial estándar",
        "download_speed_mbps": Decimal("10"),
        "upload_speed_mbps": Decimal("2"),
        "monthly_price": Decimal("400"),
        "status": models.ServicePlanStatus.ACTIVE,
    },
    {
        "name": "Internet 20 Mbps",
        "description": "Plan para negocio",
        "download_speed_mbps": Decimal("20"),
        "upload_speed_mbps": Decimal("4"),
        "monthly_price": Decimal("550"),
        "status": models.ServicePlanStatus.ACTIVE,
    },
]


class ServicePlanError(RuntimeError):
    """Raised when operations on the service plan catalog fail."""


class ServicePlanService:
    """Encapsulates catalog operations for service plans."""

    @staticmethod
    def ensure_defaults(db: Session) -> None:
        if db.query(models.ServicePlan.id).first() is not None:
            return
        for plan in DEFAULT_SERVICE_PLANS:
            db.add(models.ServicePlan(**plan))
        db.commit()

    @staticmethod
    def list_plans(
        db: Session,
        *,
        include_inactive: bool = True,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.ServicePlan], int]:
        ServicePlanService.ensure_defaults(db)

        query = db.query(models.ServicePlan)

        if not include_inactive:
            query = query.filter(models.ServicePlan.status == models.ServicePlanStatus.ACTIVE)

        if search:
            normalized = f"%{search.strip().lower()}%"
            query = query.filter(func.lower(models.ServicePlan.name).like(normalized))

        total = query.count()
        items = (
            query.order_by(models.ServicePlan.monthly_price.asc(), models.ServicePlan.name.asc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_plan(db: Session, plan_id: int) -> Optional[models.ServicePlan]:
        return db.query(models.ServicePlan).filter(models.ServicePlan.id == plan_id).first()

    @staticmethod
    def create_plan(db: Session, data: schemas.ServicePlanCreate) -> models.ServicePlan:
        payload = data.model_dump()
        payload["name"] = payload["name"].strip()
        plan = models.ServicePlan(**payload)
        db.add(plan)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ServicePlanError("Ya existe un plan con ese nombre.") from exc
        db.refresh(plan)
        return plan

    @staticmethod
    def update_plan(
        db: Session,
        plan: models.ServicePlan,
        data: schemas.ServicePlanUpdate,
    ) -> models.ServicePlan:
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data and update_data["name"]:
            update_data["name"] = update_data["name"].strip()
        for required in ("name", "monthly_price", "status"):
            if required in update_data and update_data[required] is None:
                update_data.pop(required)
        for field, value in update_data.items():
            setattr(plan, field, value)
        try:
            db.add(plan)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ServicePlanError("Ya existe un plan con ese nombre.") from exc
        db.refresh(plan)
        return plan

    @staticmethod
    def delete_plan(db: Session, plan: models.ServicePlan) -> None:
        in_use = (
            db.query(models.ClientBilling.id)
            .filter(models.ClientBilling.service_plan_id == plan.id)
            .first()
        )
        if in_use is not None:
            raise ServicePlanError(
                "El plan está asignado a clientes; desactívalo en lugar de eliminarlo."
            )
        db.delete(plan)
        db.commit()
