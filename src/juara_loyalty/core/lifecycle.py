"""Startup and shutdown hooks for auth state and bootstrap data."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import FastAPI

from ..services.assistant_service import get_chat_sessions
from ..services.auth_service import AuthContext, get_auth_provider
from .config import get_settings
from .database import init_db, session_scope

logger = logging.getLogger(__name__)

_unsubscribe: Optional[Callable[[], None]] = None


def audit_auth_change(event: str, context: Optional[AuthContext]) -> None:
    if context is None:
        logger.info("auth event %s", event)
    else:
        logger.info("auth event %s for %s (%s)", event, context.email, context.role.value)


def bootstrap_admin() -> None:
    """Create the configured admin account if credentials are set."""

    settings = get_settings()
    if not settings.admin_email or not settings.admin_password:
        return

    try:
        with session_scope() as session:
            get_auth_provider().ensure_admin(session, email=settings.admin_email, password=settings.admin_password)
    except Exception:
        logger.exception("admin bootstrap failed")
        raise


def register_lifecycle(app: FastAPI, *, create_tables: bool = True) -> None:
    """Attach startup/shutdown hooks to the FastAPI app."""

    @app.on_event("startup")
    async def start_auth_listener() -> None:
        global _unsubscribe
        if create_tables:
            init_db()
            bootstrap_admin()
        if _unsubscribe is None:
            _unsubscribe = get_auth_provider().on_auth_change(audit_auth_change)
            logger.info("auth change listener subscribed")

    @app.on_event("shutdown")
    async def stop_auth_listener() -> None:
        global _unsubscribe
        if _unsubscribe is not None:
            _unsubscribe()
            _unsubscribe = None
            logger.info("auth change listener unsubscribed")
        get_chat_sessions().clear()
