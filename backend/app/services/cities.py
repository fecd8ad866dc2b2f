"""City catalog operations."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas


class CityServiceError(RuntimeError):
    """Raised when the city catalog cannot be updated."""


class CityService:
    @staticmethod
    def list_cities(db: Session, *, active_only: bool = False) -> list[models.City]:
        query = db.query(models.City)
        if active_only:
            query = query.filter(models.City.is_active.is_(True))
        return query.order_by(models.City.name.asc()).all()

    @staticmethod
    def get_city(db: Session, city_id: str) -> Optional[models.City]:
        return db.query(models.City).filter(models.City.id == city_id).first()

    @staticmethod
    def _ensure_unique_name(db: Session, name: str, *, exclude_id: Optional[str] = None) -> None:
        query = db.query(models.City).filter(func.lower(models.City.name) == name.lower())
        if exclude_id:
            query = query.filter(models.City.id != exclude_id)
        if query.first() is not None:
            raise CityServiceError("Ya existe una ciudad con ese nombre.")

    @classmethod
    def create_city(cls, db: Session, data: schemas.CityCreate) -> models.City:
        name = data.name.strip()
        if not name:
            raise CityServiceError("El nombre de la ciudad es obligatorio.")
        cls._ensure_unique_name(db, name)
        city = models.City(name=name, is_active=data.is_active)
        db.add(city)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise CityServiceError("Ya existe una ciudad con ese nombre.") from exc
        db.refresh(city)
        return city

    @classmethod
    def update_city(cls, db: Session, city: models.City, data: schemas.CityUpdate) -> models.City:
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            name = (update_data["name"] or "").strip()
            if not name:
                raise CityServiceError("El nombre de la ciudad es obligatorio.")
            cls._ensure_unique_name(db, name, exclude_id=city.id)
            update_data["name"] = name
        if update_data.get("is_active") is None:
            update_data.pop("is_active", None)
        for field_name, value in update_data.items():
            setattr(city, field_name, value)
        db.add(city)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise CityServiceError("Ya existe una ciudad con ese nombre.") from exc
        db.refresh(city)
        return city
