"""Domain logic for member profiles and points accrual."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, PreconditionViolation
from ..models import Member
from .auth_service import AuthContext, AuthProvider

logger = logging.getLogger(__name__)

MEMBER_CODE_PREFIX = "MJ-"


def derive_member_code(account_id: str) -> str:
    """Return the shareable member code for an account id."""

    return f"{MEMBER_CODE_PREFIX}{account_id[:6].upper()}"


def normalize_member_code(code: str) -> str:
    return code.strip().upper()


def _ensure_member(session: Session, member_id: str, *, for_update: bool = False) -> Member:
    stmt = select(Member).where(Member.member_id == member_id)
    if for_update:
        stmt = stmt.with_for_update()
    member = session.execute(stmt).scalar_one_or_none()
    if member is None:
        raise NotFoundError(f"Member {member_id} not found")
    return member


def register_member(
    session: Session,
    auth: AuthProvider,
    *,
    email: str,
    password: str,
    name: str,
    phone: str,
    birth_date: Optional[str] = None,
    address: Optional[dict[str, Any]] = None,
) -> tuple[Member, AuthContext]:
    """Create the account and member profile with a zero balance."""

    account = auth.sign_up(session, email=email, password=password)
    member_code = derive_member_code(account.account_id)

    taken = session.execute(select(Member.member_id).where(Member.member_code == member_code)).first()
    if taken is not None:
        raise PreconditionViolation("Gagal membuat kode member, silakan coba lagi.", status_code=409)

    member = Member(
        member_id=account.account_id,
        name=name.strip(),
        email=account.email,
        phone=phone.strip(),
        birth_date=birth_date,
        member_code=member_code,
        points=0,
        address=address,
    )
    session.add(member)
    session.flush()
    logger.info("member %s registered", member_code)
    return member, auth.context_for(account)


def get_member(session: Session, member_id: str) -> Member:
    return _ensure_member(session, member_id)


def list_members(session: Session) -> Sequence[Member]:
    stmt = select(Member).order_by(Member.name.asc(), Member.member_code.asc())
    return session.execute(stmt).scalars().all()


def find_member_by_code(session: Session, code: str) -> Optional[Member]:
    """Exact, case-insensitive lookup; ``None`` when nothing matches."""

    normalized = normalize_member_code(code)
    if not normalized:
        return None
    stmt = select(Member).where(Member.member_code == normalized)
    return session.execute(stmt).scalar_one_or_none()


def add_points(session: Session, *, member_id: str, points: int) -> int:
    """Add ``points`` to the member balance and return the new balance."""

    if points <= 0:
        raise PreconditionViolation("Points to add must be positive.")

    member = _ensure_member(session, member_id, for_update=True)
    member.points = (member.points or 0) + points
    session.flush()
    logger.info("added %s points to member %s, balance %s", points, member.member_code, member.points)
    return member.points


def update_member_address(session: Session, *, member_id: str, address: dict[str, Any]) -> Member:
    member = _ensure_member(session, member_id, for_update=True)
    member.address = address
    session.flush()
    return member
