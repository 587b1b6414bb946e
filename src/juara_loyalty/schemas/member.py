"""Pydantic schemas for member profiles."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Address(BaseModel):
    """Delivery or store address as captured by the client."""

    type: Literal["manual", "gps", "search"]
    display_address: str = Field(..., min_length=1, max_length=500)
    coords: Optional[Coordinates] = None
    map_url: Optional[str] = None


class MemberRead(BaseModel):
    """Member profile with current points balance."""

    model_config = ConfigDict(from_attributes=True)

    member_id: str
    member_code: str
    name: str
    email: str
    phone: str
    birth_date: Optional[str]
    points: int
    address: Optional[Address]
    created_at: datetime


class MemberLookupResult(BaseModel):
    """Outcome of a member-code lookup; a miss is not an error."""

    found: bool
    member: Optional[MemberRead] = None


class PointsAwardReceipt(BaseModel):
    """Response returned after recording a purchase."""

    member_id: str
    points_added: int
    points: int = Field(..., ge=0, description="Balance after the award.")


class MemberQRCode(BaseModel):
    member_code: str
    qr_data_url: str
    placeholder: bool = Field(False, description="True when the encoder failed and a placeholder was returned.")
