"""Router containing read and maintenance operations for clients."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..services import ClientService, ClientServiceError

router = APIRouter()


def _get_client_or_404(db: Session, client_id: str) -> models.Client:
    client = ClientService.get_client(db, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")
    return client


@router.get("", response_model=schemas.ClientListResponse)
def list_clients(
    skip: int = Query(0, ge=0, description="Number of clients to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of clients to return"),
    search: Optional[str] = Query(None, description="Case-insensitive search by name or phone"),
    city: Optional[str] = Query(None, description="Filter by city"),
    status_filter: Optional[models.ClientStatus] = Query(
        None, alias="status", description="Filter by client status"
    ),
    db: Session = Depends(get_db),
) -> schemas.ClientListResponse:
    """Return clients with pagination and optional filters."""
    normalized_search = search.strip() if search else None

    items, total = ClientService.list_clients(
        db,
        skip=skip,
        limit=limit,
        search=normalized_search,
        city=city,
        status=status_filter,
    )
    return schemas.ClientListResponse(items=items, total=total, limit=limit, skip=skip)


@router.get("/{client_id}", response_model=schemas.ClientDetail)
def get_client(client_id: str, db: Session = Depends(get_db)) -> schemas.ClientDetail:
    """Retrieve a single client with billing, equipment and charges."""
    return _get_client_or_404(db, client_id)


@router.put("/{client_id}", response_model=schemas.ClientRead)
def update_client(
    client_id: str,
    client_in: schemas.ClientUpdate,
    db: Session = Depends(get_db),
) -> schemas.ClientRead:
    """Update a client's contact or address information."""
    client = _get_client_or_404(db, client_id)
    try:
        return ClientService.update_client(db, client, client_in)
    except ClientServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.put("/{client_id}/equipment", response_model=schemas.EquipmentRead)
def update_client_equipment(
    client_id: str,
    payload: schemas.EquipmentUpdate,
    db: Session = Depends(get_db),
) -> schemas.EquipmentRead:
    client = _get_client_or_404(db, client_id)
    return ClientService.update_equipment(db, client, payload)


@router.post("/{client_id}/cancel", response_model=schemas.ClientRead)
def cancel_client(
    client_id: str,
    payload: schemas.CancellationRequest,
    db: Session = Depends(get_db),
) -> schemas.ClientRead:
    client = _get_client_or_404(db, client_id)
    try:
        return ClientService.cancel_client(db, client, payload.reason)
    except ClientServiceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/{client_id}/billing", response_model=schemas.ClientBillingStatement)
def get_client_billing(
    client_id: str, db: Session = Depends(get_db)
) -> schemas.ClientBillingStatement:
    client = _get_client_or_404(db, client_id)
    return ClientService.billing_statement(db, client)
