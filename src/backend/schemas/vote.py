"""
Vote-related Pydantic schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for placing, moving or removing a proposal in the caller's ranking."""

    proposal_id: str = Field(..., min_length=1)
    position: Optional[int] = Field(
        None,
        description="1-indexed slot; omitted, zero or negative removes the proposal",
    )


class VoteResponse(BaseModel):
    """Response after a vote was applied."""

    success: bool
    ranking: list[str] = []


class RankingResponse(BaseModel):
    """The caller's ranked proposal ids, most preferred first."""

    ranking: list[str]
