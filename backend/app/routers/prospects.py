"""Router for prospect intake and finalization."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..services import ProspectService, ProspectServiceError, ProspectStateError

router = APIRouter()


def _get_prospect_or_404(db: Session, prospect_id: str) -> models.Prospect:
    prospect = ProspectService.get_prospect(db, prospect_id)
    if prospect is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prospecto no encontrado")
    return prospect


def _raise_http(exc: ProspectServiceError) -> None:
    if isinstance(exc, ProspectStateError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("", response_model=schemas.ProspectListResponse)
def list_prospects(
    status_filter: Optional[models.ProspectStatus] = Query(
        None, alias="status", description="Filter by prospect status"
    ),
    city: Optional[str] = Query(None, description="Filter by city name"),
    search: Optional[str] = Query(None, description="Search by name or phone"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> schemas.ProspectListResponse:
    items, total = ProspectService.list_prospects(
        db,
        status=status_filter,
        city=city,
        search=search,
        skip=skip,
        limit=limit,
    )
    return schemas.ProspectListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("", response_model=schemas.ProspectRead, status_code=status.HTTP_201_CREATED)
def create_prospect(
    payload: schemas.ProspectCreate, db: Session = Depends(get_db)
) -> schemas.ProspectRead:
    return ProspectService.create_prospect(db, payload)


@router.get("/{prospect_id}", response_model=schemas.ProspectRead)
def get_prospect(prospect_id: str, db: Session = Depends(get_db)) -> schemas.ProspectRead:
    return _get_prospect_or_404(db, prospect_id)


@router.put("/{prospect_id}", response_model=schemas.ProspectRead)
def update_prospect(
    prospect_id: str,
    payload: schemas.ProspectUpdate,
    db: Session = Depends(get_db),
) -> schemas.ProspectRead:
    prospect = _get_prospect_or_404(db, prospect_id)
    try:
        return ProspectService.update_prospect(db, prospect, payload)
    except ProspectServiceError as exc:
        _raise_http(exc)


@router.delete("/{prospect_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prospect(prospect_id: str, db: Session = Depends(get_db)) -> None:
    prospect = _get_prospect_or_404(db, prospect_id)
    try:
        ProspectService.delete_prospect(db, prospect)
    except ProspectServiceError as exc:
        _raise_http(exc)


@router.post("/{prospect_id}/cancel", response_model=schemas.ProspectRead)
def cancel_prospect(
    prospect_id: str,
    payload: schemas.CancellationRequest,
    db: Session = Depends(get_db),
) -> schemas.ProspectRead:
    prospect = _get_prospect_or_404(db, prospect_id)
    try:
        return ProspectService.cancel_prospect(db, prospect, payload.reason)
    except ProspectServiceError as exc:
        _raise_http(exc)


@router.post("/{prospect_id}/reactivate", response_model=schemas.ProspectRead)
def reactivate_prospect(prospect_id: str, db: Session = Depends(get_db)) -> schemas.ProspectRead:
    prospect = _get_prospect_or_404(db, prospect_id)
    try:
        return ProspectService.reactivate_prospect(db, prospect)
    except ProspectServiceError as exc:
        _raise_http(exc)


@router.get("/{prospect_id}/history", response_model=list[schemas.ProspectChangeRead])
def get_prospect_history(
    prospect_id: str, db: Session = Depends(get_db)
) -> list[schemas.ProspectChangeRead]:
    prospect = _get_prospect_or_404(db, prospect_id)
    return ProspectService.list_history(db, prospect.id)


@router.post("/{prospect_id}/finalize", response_model=schemas.ProspectFinalizeResponse)
def finalize_prospect(
    prospect_id: str,
    payload: schemas.ProspectFinalizeRequest,
    db: Session = Depends(get_db),
) -> schemas.ProspectFinalizeResponse:
    """Convert the prospect into a client, computing proration and balance."""

    prospect = _get_prospect_or_404(db, prospect_id)
    try:
        result = ProspectService.finalize_prospect(db, prospect, payload)
    except ProspectServiceError as exc:
        _raise_http(exc)

    return schemas.ProspectFinalizeResponse(
        message=result.message,
        prospect=result.prospect,
        client=result.client,
        billing=result.billing,
        proration=result.proration,
        initial_balance=result.initial_balance,
        changes_recorded=result.changes_recorded,
        warnings=result.warnings,
    )
