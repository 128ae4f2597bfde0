"""
User-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from schemas.proposal import ProposalResponse


class UserResponse(BaseModel):
    """Schema for user responses (public-safe)."""

    id: str
    email: Optional[str] = None
    ranking: list[str] = []
    proposals: list[ProposalResponse] = []
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
