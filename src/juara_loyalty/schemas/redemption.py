"""Pydantic schemas for redemption workflows."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.redemption import RedemptionStatus


class RedemptionCreate(BaseModel):
    """Incoming payload for requesting a redemption."""

    points_to_redeem: Optional[int] = Field(
        None,
        gt=0,
        description="Points to exchange; defaults to the store's redemption threshold.",
    )


class RedemptionRead(BaseModel):
    """Represents a redemption request."""

    model_config = ConfigDict(from_attributes=True)

    redemption_id: UUID
    member_id: str
    member_code: str
    member_name: str
    points_to_redeem: int
    status: RedemptionStatus
    requested_at: datetime
    processed_at: Optional[datetime]


class RedemptionDecision(BaseModel):
    """Response returned after an admin processes a request."""

    redemption: RedemptionRead
    member_points: int = Field(..., ge=0, description="Member balance after processing.")
