"""Admin endpoints for processing redemption requests."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import ServiceError
from ...models import RedemptionStatus
from ...schemas import RedemptionDecision, RedemptionRead
from ...services import redemption_service
from ...services.auth_service import AuthContext
from ..deps import require_admin

router = APIRouter(prefix="/redemptions", tags=["redemptions"])

_DECISION_RESPONSES = {
    200: {
        "description": "Request processed",
        "content": {
            "application/json": {
                "example": {
                    "redemption": {
                        "redemption_id": "88888888-8888-8888-8888-888888888888",
                        "member_id": "3fa2c1d09b8e4f6a9d1b2c3d4e5f6a7b",
                        "member_code": "MJ-3FA2C1",
                        "member_name": "Siti Rahma",
                        "points_to_redeem": 300,
                        "status": "approved",
                        "requested_at": "2025-11-12T14:30:00+00:00",
                        "processed_at": "2025-11-12T15:00:00+00:00",
                    },
                    "member_points": 20,
                }
            }
        },
    },
    400: {"description": "Insufficient points"},
    404: {"description": "Request or member not found"},
    409: {"description": "Request already processed"},
}


@router.get("", response_model=List[RedemptionRead], summary="List redemption requests")
def list_redemptions(
    *,
    status: Optional[RedemptionStatus] = Query(None, description="Filter by status"),
    member_id: Optional[str] = Query(None, description="Filter by member id"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[RedemptionRead]:
    """Pending requests come oldest first; other listings newest first."""

    return list(
        redemption_service.list_redemptions(db, status=status, member_id=member_id, limit=limit, offset=offset)
    )


@router.post(
    "/{redemption_id}/approve",
    response_model=RedemptionDecision,
    summary="Approve a pending request",
    responses=_DECISION_RESPONSES,
)
def approve_redemption(
    redemption_id: UUID,
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> RedemptionDecision:
    try:
        redemption, balance = redemption_service.approve_redemption(db, redemption_id=redemption_id)
        db.commit()
        db.refresh(redemption)
        return RedemptionDecision(redemption=RedemptionRead.model_validate(redemption), member_points=balance)
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{redemption_id}/reject",
    response_model=RedemptionDecision,
    summary="Reject a pending request",
    responses=_DECISION_RESPONSES,
)
def reject_redemption(
    redemption_id: UUID,
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> RedemptionDecision:
    try:
        redemption, balance = redemption_service.reject_redemption(db, redemption_id=redemption_id)
        db.commit()
        db.refresh(redemption)
        return RedemptionDecision(redemption=RedemptionRead.model_validate(redemption), member_points=balance)
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
