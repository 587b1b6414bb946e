"""Admin dashboard endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.config import Settings, get_settings
from ...core.database import get_db
from ...schemas import DashboardStats
from ...services import dashboard_service
from ...services.auth_service import AuthContext
from ..deps import require_admin

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Dashboard counters",
    responses={
        200: {
            "description": "Current totals",
            "content": {
                "application/json": {
                    "example": {
                        "total_members": 42,
                        "total_points": 1875,
                        "pending_redemptions": 2,
                        "low_stock_items": 1,
                    }
                }
            },
        }
    },
)
def read_stats(
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DashboardStats:
    """Recomputed from the database on every call."""

    stats = dashboard_service.compute_stats(db, low_stock_threshold=settings.low_stock_threshold)
    return DashboardStats(**stats)
