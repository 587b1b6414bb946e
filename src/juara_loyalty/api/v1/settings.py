"""Store settings endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import StoreSettingsRead, StoreSettingsUpdate
from ...services import settings_service
from ...services.auth_service import AuthContext
from ..deps import require_admin

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/store", response_model=StoreSettingsRead, summary="Store address and points rules")
def read_store_settings(db: Session = Depends(get_db)) -> StoreSettingsRead:
    store = settings_service.get_store_settings(db)
    db.commit()
    return store


@router.put("/store", response_model=StoreSettingsRead, summary="Update store settings")
def update_store_settings(
    payload: StoreSettingsUpdate,
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> StoreSettingsRead:
    store = settings_service.update_store_settings(
        db,
        address=payload.address.model_dump() if payload.address else None,
        redemption_points=payload.redemption_points,
        points_per_transaction=payload.points_per_transaction,
    )
    db.commit()
    db.refresh(store)
    return store
