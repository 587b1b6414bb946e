"""Authentication account model."""

import enum

from sqlalchemy import Column, DateTime, Enum as SAEnum, String, UniqueConstraint

from ..core.database import Base
from ..utils.datetime import utcnow


class Role(str, enum.Enum):
    """Roles carried on an account and in its access tokens."""

    MEMBER = "member"
    ADMIN = "admin"


class Account(Base):
    """Email/password credentials; the account id doubles as the member id."""

    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("email", name="accounts_email_unique"),)

    account_id = Column(String(32), primary_key=True)
    email = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(
        SAEnum(Role, name="account_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.MEMBER,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
