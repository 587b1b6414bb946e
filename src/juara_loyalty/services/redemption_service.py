"""Domain logic for member redemptions.

A request starts ``pending`` and is processed exactly once by an admin.
The member balance is only checked, and only deducted, at approval time.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, PreconditionViolation
from ..models import Member, Redemption, RedemptionStatus
from ..utils.datetime import utcnow
from .settings_service import get_store_settings

logger = logging.getLogger(__name__)

ALREADY_PROCESSED = "Request already processed."


def _ensure_member(session: Session, member_id: str) -> Member:
    stmt = select(Member).where(Member.member_id == member_id).with_for_update()
    member = session.execute(stmt).scalar_one_or_none()
    if member is None:
        raise NotFoundError(f"Member {member_id} not found")
    return member


def _ensure_pending(session: Session, redemption_id: UUID) -> Redemption:
    stmt = select(Redemption).where(Redemption.redemption_id == redemption_id).with_for_update()
    redemption = session.execute(stmt).scalar_one_or_none()
    if redemption is None:
        raise NotFoundError(f"Redemption request {redemption_id} not found")
    if redemption.status != RedemptionStatus.PENDING:
        raise PreconditionViolation(ALREADY_PROCESSED, status_code=409)
    return redemption


def _transition(session: Session, redemption: Redemption, target: RedemptionStatus) -> None:
    # Conditional write: a concurrent processor that already moved the
    # request out of pending leaves nothing to update.
    result = session.execute(
        update(Redemption)
        .where(
            Redemption.redemption_id == redemption.redemption_id,
            Redemption.status == RedemptionStatus.PENDING,
        )
        .values(status=target, processed_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise PreconditionViolation(ALREADY_PROCESSED, status_code=409)


def create_redemption(session: Session, *, member_id: str, points_to_redeem: int) -> Redemption:
    """Persist a pending request; the balance is not checked here."""

    if points_to_redeem <= 0:
        raise PreconditionViolation("Points to redeem must be positive.")

    member = _ensure_member(session, member_id)
    redemption = Redemption(
        member_id=member.member_id,
        member_code=member.member_code,
        member_name=member.name,
        points_to_redeem=points_to_redeem,
        status=RedemptionStatus.PENDING,
        requested_at=utcnow(),
    )
    session.add(redemption)
    session.flush()
    session.refresh(redemption)
    logger.info("redemption %s requested by %s for %s points", redemption.redemption_id, member.member_code, points_to_redeem)
    return redemption


def has_pending_request(session: Session, member_id: str) -> bool:
    stmt = (
        select(Redemption.redemption_id)
        .where(Redemption.member_id == member_id, Redemption.status == RedemptionStatus.PENDING)
        .limit(1)
    )
    return session.execute(stmt).first() is not None


def request_redemption(
    session: Session,
    *,
    member_id: str,
    points_to_redeem: Optional[int] = None,
) -> Redemption:
    """Member-initiated request, gated on current eligibility.

    The amount defaults to the store's redemption threshold. Eligibility is
    re-checked at approval, so nothing is reserved here.
    """

    if points_to_redeem is None:
        amount = get_store_settings(session).redemption_points
    else:
        amount = points_to_redeem
    if amount <= 0:
        raise PreconditionViolation("Points to redeem must be positive.")

    member = _ensure_member(session, member_id)

    if has_pending_request(session, member.member_id):
        raise PreconditionViolation("Masih ada permintaan penukaran yang sedang diproses.", status_code=409)
    if member.points < amount:
        raise PreconditionViolation(
            f"Poin tidak cukup. Dibutuhkan {amount} poin, saldo saat ini {member.points} poin."
        )

    return create_redemption(session, member_id=member.member_id, points_to_redeem=amount)


def approve_redemption(session: Session, *, redemption_id: UUID) -> tuple[Redemption, int]:
    """Deduct the requested points and mark the request approved.

    Returns the request and the member's remaining balance.
    """

    redemption = _ensure_pending(session, redemption_id)
    member = session.execute(
        select(Member).where(Member.member_id == redemption.member_id).with_for_update()
    ).scalar_one_or_none()
    if member is None:
        raise NotFoundError("Associated member not found.")

    if member.points < redemption.points_to_redeem:
        raise PreconditionViolation("Insufficient points.")

    member.points -= redemption.points_to_redeem
    session.flush()
    _transition(session, redemption, RedemptionStatus.APPROVED)
    session.refresh(redemption)
    logger.info(
        "redemption %s approved, %s points deducted from %s",
        redemption.redemption_id,
        redemption.points_to_redeem,
        member.member_code,
    )
    return redemption, member.points


def reject_redemption(session: Session, *, redemption_id: UUID) -> tuple[Redemption, int]:
    """Mark the request rejected; the balance is untouched."""

    redemption = _ensure_pending(session, redemption_id)
    member = session.execute(select(Member).where(Member.member_id == redemption.member_id)).scalar_one_or_none()
    if member is None:
        raise NotFoundError("Associated member not found.")

    _transition(session, redemption, RedemptionStatus.REJECTED)
    session.refresh(redemption)
    logger.info("redemption %s rejected", redemption.redemption_id)
    return redemption, member.points


def list_redemptions(
    session: Session,
    *,
    status: Optional[RedemptionStatus] = None,
    member_id: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> Sequence[Redemption]:
    """Pending queues are served oldest first, history newest first."""

    stmt = select(Redemption)
    if status is not None:
        stmt = stmt.where(Redemption.status == status)
    if member_id is not None:
        stmt = stmt.where(Redemption.member_id == member_id)

    if status is RedemptionStatus.PENDING:
        stmt = stmt.order_by(Redemption.requested_at.asc())
    else:
        stmt = stmt.order_by(Redemption.requested_at.desc())

    return session.execute(stmt.offset(offset).limit(limit)).scalars().all()
