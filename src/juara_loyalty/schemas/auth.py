"""Pydantic schemas for registration and sign-in."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .member import Address, MemberRead


class RegistrationCreate(BaseModel):
    """Incoming payload for member sign-up."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=1, max_length=120)
    phone: str = Field(..., min_length=6, max_length=20)
    birth_date: Optional[str] = Field(None, description="ISO date, e.g. 1995-04-17.")
    address: Optional[Address] = None


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str


class RegistrationReceipt(BaseModel):
    """Response returned after a successful registration."""

    member: MemberRead
    token: AccessToken
    welcome_message: str
