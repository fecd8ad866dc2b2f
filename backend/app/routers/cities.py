"""API router for the city catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import CityService, CityServiceError

router = APIRouter()


@router.get("", response_model=list[schemas.CityRead])
def list_cities(
    active_only: bool = Query(False, description="Return only active cities"),
    db: Session = Depends(get_db),
) -> list[schemas.CityRead]:
    return CityService.list_cities(db, active_only=active_only)


@router.post("", response_model=schemas.CityRead, status_code=status.HTTP_201_CREATED)
def create_city(payload: schemas.CityCreate, db: Session = Depends(get_db)) -> schemas.CityRead:
    try:
        return CityService.create_city(db, payload)
    except CityServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.put("/{city_id}", response_model=schemas.CityRead)
def update_city(
    city_id: str,
    payload: schemas.CityUpdate,
    db: Session = Depends(get_db),
) -> schemas.CityRead:
    city = CityService.get_city(db, city_id)
    if city is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ciudad no encontrada")
    try:
        return CityService.update_city(db, city, payload)
    except CityServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
