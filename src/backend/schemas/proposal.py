"""
Proposal-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ProposalCreate(BaseModel):
    """Schema for submitting a proposal.

    Blank content is rejected by the service layer so that the error
    comes back as InvalidInput rather than a validation error.
    """

    content: str


class ProposalResponse(BaseModel):
    id: str
    content: str
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
