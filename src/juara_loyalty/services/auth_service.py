"""Email/password accounts, access tokens and auth-change notifications."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..core.errors import PreconditionViolation, ServiceError
from ..models import Account, Role
from ..utils.datetime import expires_in

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email atau password salah."


class AuthenticationError(ServiceError):
    """Raised when credentials or tokens cannot be validated."""

    def __init__(self, detail: str = INVALID_CREDENTIALS) -> None:
        super().__init__(detail, status_code=401)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, passed explicitly to anything that needs it."""

    account_id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


AuthListener = Callable[[str, Optional[AuthContext]], None]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf8"), bcrypt.gensalt()).decode("utf8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf8"), password_hash.encode("utf8"))
    except ValueError:
        return False


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthProvider:
    """Creates accounts, signs callers in and out, and notifies subscribers.

    Listeners receive ``(event, context)`` where ``event`` is one of
    ``"sign_up"``, ``"sign_in"`` or ``"sign_out"``.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._listeners: list[AuthListener] = []
        self._lock = threading.Lock()

    def on_auth_change(self, listener: AuthListener) -> Callable[[], None]:
        """Subscribe ``listener``; returns a callable that unsubscribes it."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _notify(self, event: str, context: Optional[AuthContext]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, context)
            except Exception:
                logger.exception("auth listener failed for event %s", event)

    def sign_up(
        self,
        session: Session,
        *,
        email: str,
        password: str,
        role: Role = Role.MEMBER,
    ) -> Account:
        """Create an account; the caller commits, then calls ``announce_sign_up``."""

        normalized = _normalize_email(email)
        existing = session.execute(select(Account).where(Account.email == normalized)).scalar_one_or_none()
        if existing is not None:
            raise PreconditionViolation("Email sudah terdaftar.", status_code=409)

        account = Account(
            account_id=uuid.uuid4().hex,
            email=normalized,
            password_hash=hash_password(password),
            role=role,
        )
        session.add(account)
        session.flush()
        return account

    def announce_sign_up(self, context: AuthContext) -> None:
        """Notify listeners of a new account once its transaction has committed."""

        self._notify("sign_up", context)

    def sign_in(self, session: Session, *, email: str, password: str) -> AuthContext:
        account = session.execute(
            select(Account).where(Account.email == _normalize_email(email))
        ).scalar_one_or_none()
        # Same message for unknown email and wrong password.
        if account is None or not verify_password(password, account.password_hash):
            raise AuthenticationError()

        context = self.context_for(account)
        self._notify("sign_in", context)
        return context

    def sign_in_admin(self, session: Session, *, email: str, password: str) -> AuthContext:
        context = self.sign_in(session, email=email, password=password)
        if not context.is_admin:
            raise ServiceError("Akun ini bukan akun admin.", status_code=403)
        return context

    def sign_out(self, context: AuthContext) -> None:
        self._notify("sign_out", context)

    @staticmethod
    def context_for(account: Account) -> AuthContext:
        return AuthContext(account_id=account.account_id, email=account.email, role=Role(account.role))

    def issue_token(self, context: AuthContext) -> str:
        claims = {
            "sub": context.account_id,
            "email": context.email,
            "role": context.role.value,
            "exp": expires_in(self._settings.access_token_expire_minutes),
        }
        return jwt.encode(claims, self._settings.jwt_secret, algorithm=self._settings.jwt_algorithm)

    def decode_token(self, token: str) -> AuthContext:
        try:
            payload = jwt.decode(token, self._settings.jwt_secret, algorithms=[self._settings.jwt_algorithm])
        except JWTError as exc:
            raise AuthenticationError("Could not validate credentials") from exc

        account_id = payload.get("sub")
        email = payload.get("email")
        role = payload.get("role")
        if not account_id or not email or role not in {r.value for r in Role}:
            raise AuthenticationError("Could not validate credentials")
        return AuthContext(account_id=account_id, email=email, role=Role(role))

    def ensure_admin(self, session: Session, *, email: str, password: str) -> Account:
        """Create the bootstrap admin account if it does not exist yet."""

        normalized = _normalize_email(email)
        account = session.execute(select(Account).where(Account.email == normalized)).scalar_one_or_none()
        if account is None:
            account = self.sign_up(session, email=normalized, password=password, role=Role.ADMIN)
            logger.info("bootstrap admin account created for %s", normalized)
        elif account.role is not Role.ADMIN:
            account.role = Role.ADMIN
            logger.warning("promoted existing account %s to admin", normalized)
        return account


_provider: AuthProvider | None = None


def get_auth_provider() -> AuthProvider:
    """Return the process-wide auth provider."""

    global _provider
    if _provider is None:
        _provider = AuthProvider()
    return _provider
