"""Registration and sign-in endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import ServiceError
from ...schemas import AccessToken, MemberRead, RegistrationCreate, RegistrationReceipt, SignInRequest
from ...services import member_service
from ...services.assistant_service import generate_welcome_message, get_assistant
from ...services.auth_service import AuthContext, AuthProvider, get_auth_provider
from ..deps import get_auth_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_for(auth: AuthProvider, context: AuthContext) -> AccessToken:
    return AccessToken(access_token=auth.issue_token(context), role=context.role.value)


def registration_conflict_detail(exc: IntegrityError) -> str:
    """Name the unique constraint a concurrent registration collided on."""

    message = str(exc.orig)
    if "member_code" in message:
        return "Gagal membuat kode member, silakan coba lagi."
    if "email" in message:
        return "Email sudah terdaftar."
    return "Registrasi bentrok dengan data lain, silakan coba lagi."


@router.post(
    "/register",
    response_model=RegistrationReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new member",
    responses={
        201: {
            "description": "Member created",
            "content": {
                "application/json": {
                    "example": {
                        "member": {
                            "member_id": "3fa2c1d09b8e4f6a9d1b2c3d4e5f6a7b",
                            "member_code": "MJ-3FA2C1",
                            "name": "Siti Rahma",
                            "email": "siti@example.com",
                            "phone": "081234567890",
                            "birth_date": "1995-04-17",
                            "points": 0,
                            "address": None,
                            "created_at": "2025-11-12T10:15:30+00:00",
                        },
                        "token": {"access_token": "<jwt>", "token_type": "bearer", "role": "member"},
                        "welcome_message": "Selamat datang di Klub Pecinta Martabak, Siti Rahma!",
                    }
                }
            },
        },
        409: {"description": "Email or member code already taken"},
    },
)
def register(
    payload: RegistrationCreate,
    db: Session = Depends(get_db),
    auth: AuthProvider = Depends(get_auth_provider),
    assistant=Depends(get_assistant),
) -> RegistrationReceipt:
    """Create an account and member profile starting at zero points.

    Example request body::

        {
            "email": "siti@example.com",
            "password": "rahasia123",
            "name": "Siti Rahma",
            "phone": "081234567890",
            "birth_date": "1995-04-17"
        }
    """

    try:
        member, context = member_service.register_member(
            db,
            auth,
            email=payload.email,
            password=payload.password,
            name=payload.name,
            phone=payload.phone,
            birth_date=payload.birth_date,
            address=payload.address.model_dump() if payload.address else None,
        )
        db.commit()
        db.refresh(member)
    except ServiceError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    except IntegrityError as exc:
        db.rollback()
        logger.warning("registration conflict for %s: %s", payload.email, exc.orig)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=registration_conflict_detail(exc)) from exc

    auth.announce_sign_up(context)
    welcome_message = generate_welcome_message(assistant, member.name)
    return RegistrationReceipt(
        member=MemberRead.model_validate(member),
        token=_token_for(auth, context),
        welcome_message=welcome_message,
    )


@router.post("/login", response_model=AccessToken, summary="Member sign-in")
def login(
    payload: SignInRequest,
    db: Session = Depends(get_db),
    auth: AuthProvider = Depends(get_auth_provider),
) -> AccessToken:
    try:
        context = auth.sign_in(db, email=payload.email, password=payload.password)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return _token_for(auth, context)


@router.post("/admin/login", response_model=AccessToken, summary="Admin sign-in")
def admin_login(
    payload: SignInRequest,
    db: Session = Depends(get_db),
    auth: AuthProvider = Depends(get_auth_provider),
) -> AccessToken:
    """Sign in an account that carries the admin role."""

    try:
        context = auth.sign_in_admin(db, email=payload.email, password=payload.password)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return _token_for(auth, context)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
def logout(
    context: AuthContext = Depends(get_auth_context),
    auth: AuthProvider = Depends(get_auth_provider),
) -> Response:
    auth.sign_out(context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
