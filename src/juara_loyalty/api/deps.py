"""Request-scoped authentication dependencies."""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..models import Role
from ..services.auth_service import AuthContext, AuthenticationError, AuthProvider, get_auth_provider

bearer = HTTPBearer(auto_error=False)


def get_optional_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    auth: AuthProvider = Depends(get_auth_provider),
) -> Optional[AuthContext]:
    """Return the caller's context, or ``None`` for anonymous requests."""

    if credentials is None:
        return None
    try:
        return auth.decode_token(credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_auth_context(context: Optional[AuthContext] = Depends(get_optional_auth_context)) -> AuthContext:
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


def require_member(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if context.role is not Role.MEMBER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Member account required")
    return context


def require_admin(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not context.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin account required")
    return context
