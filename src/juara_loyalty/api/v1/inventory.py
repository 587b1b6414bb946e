"""Inventory endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import ServiceError
from ...schemas import InventoryItemCreate, InventoryItemRead, UsageCreate, UsageLogRead
from ...services import inventory_service
from ..deps import require_admin

router = APIRouter(prefix="/inventory", tags=["inventory"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[InventoryItemRead], summary="List inventory items")
def list_items(db: Session = Depends(get_db)) -> List[InventoryItemRead]:
    return list(inventory_service.list_items(db))


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED, summary="Add an item")
def create_item(payload: InventoryItemCreate, db: Session = Depends(get_db)) -> InventoryItemRead:
    try:
        item = inventory_service.create_item(db, name=payload.name, stock=payload.stock, unit=payload.unit)
        db.commit()
        db.refresh(item)
        return item
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/usage", response_model=List[UsageLogRead], summary="Most recent usage records")
def recent_usage(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
) -> List[UsageLogRead]:
    return list(inventory_service.recent_usage(db, limit=limit))


@router.post(
    "/{item_id}/usage",
    response_model=UsageLogRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record stock usage",
    responses={
        400: {"description": "Insufficient stock"},
        404: {"description": "Item not found"},
    },
)
def record_usage(item_id: UUID, payload: UsageCreate, db: Session = Depends(get_db)) -> UsageLogRead:
    """Decrement stock and append a usage log.

    Example request body::

        {"quantity_used": 1.5}
    """

    try:
        log = inventory_service.record_usage(db, item_id=item_id, quantity_used=payload.quantity_used)
        db.commit()
        db.refresh(log)
        return log
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
