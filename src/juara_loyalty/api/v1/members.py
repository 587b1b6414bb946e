"""Member profile, lookup and points endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import ServiceError
from ...schemas import (
    Address,
    MemberLookupResult,
    MemberQRCode,
    MemberRead,
    PointsAwardReceipt,
    RedemptionCreate,
    RedemptionRead,
)
from ...services import member_service, qr_service, redemption_service
from ...services.auth_service import AuthContext
from ...services.settings_service import get_store_settings
from ..deps import require_admin, require_member

router = APIRouter(prefix="/members", tags=["members"])


@router.get("/me", response_model=MemberRead, summary="Current member profile")
def read_own_profile(
    context: AuthContext = Depends(require_member),
    db: Session = Depends(get_db),
) -> MemberRead:
    try:
        return member_service.get_member(db, context.account_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.put("/me/address", response_model=MemberRead, summary="Update delivery address")
def update_own_address(
    payload: Address,
    context: AuthContext = Depends(require_member),
    db: Session = Depends(get_db),
) -> MemberRead:
    try:
        member = member_service.update_member_address(
            db,
            member_id=context.account_id,
            address=payload.model_dump(),
        )
        db.commit()
        db.refresh(member)
        return member
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("/me/qr", response_model=MemberQRCode, summary="Member code as a QR image")
def read_own_qr(
    context: AuthContext = Depends(require_member),
    db: Session = Depends(get_db),
) -> MemberQRCode:
    """Return a PNG data URL; a placeholder image is returned if encoding fails."""

    try:
        member = member_service.get_member(db, context.account_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

    data_url, placeholder = qr_service.encode_member_code(member.member_code)
    return MemberQRCode(member_code=member.member_code, qr_data_url=data_url, placeholder=placeholder)


@router.get("/me/redemptions", response_model=List[RedemptionRead], summary="Own redemption history")
def list_own_redemptions(
    context: AuthContext = Depends(require_member),
    db: Session = Depends(get_db),
) -> List[RedemptionRead]:
    return list(redemption_service.list_redemptions(db, member_id=context.account_id))


@router.post(
    "/me/redemptions",
    response_model=RedemptionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request a redemption",
    responses={
        201: {"description": "Request queued as pending"},
        400: {"description": "Balance below the requested amount"},
        409: {"description": "A request is already pending"},
    },
)
def request_redemption(
    payload: RedemptionCreate,
    context: AuthContext = Depends(require_member),
    db: Session = Depends(get_db),
) -> RedemptionRead:
    """Queue a redemption for admin approval.

    Example request body::

        {"points_to_redeem": 300}
    """

    try:
        redemption = redemption_service.request_redemption(
            db,
            member_id=context.account_id,
            points_to_redeem=payload.points_to_redeem,
        )
        db.commit()
        db.refresh(redemption)
        return redemption
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get("", response_model=List[MemberRead], summary="List all members")
def list_members(
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[MemberRead]:
    return list(member_service.list_members(db))


@router.get("/lookup", response_model=MemberLookupResult, summary="Find a member by member code")
def lookup_member(
    code: str = Query(..., min_length=1, description="Member code, any case, e.g. mj-3fa2c1"),
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MemberLookupResult:
    """A miss is reported as ``found: false`` rather than an error status."""

    member = member_service.find_member_by_code(db, code)
    if member is None:
        return MemberLookupResult(found=False)
    return MemberLookupResult(found=True, member=MemberRead.model_validate(member))


@router.get("/{member_id}", response_model=MemberRead, summary="Member profile")
def read_member(
    member_id: str,
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MemberRead:
    try:
        return member_service.get_member(db, member_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/{member_id}/transactions",
    response_model=PointsAwardReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Record a purchase and award points",
    responses={
        201: {
            "description": "Points awarded",
            "content": {
                "application/json": {
                    "example": {"member_id": "3fa2c1d09b8e4f6a9d1b2c3d4e5f6a7b", "points_added": 5, "points": 15}
                }
            },
        },
        404: {"description": "Member not found"},
    },
)
def record_transaction(
    member_id: str,
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> PointsAwardReceipt:
    """Award the store's configured points-per-transaction."""

    try:
        points = get_store_settings(db).points_per_transaction
        balance = member_service.add_points(db, member_id=member_id, points=points)
        db.commit()
        return PointsAwardReceipt(member_id=member_id, points_added=points, points=balance)
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
