"""
Vote endpoints.

A vote places a proposal in the caller's personal ranking, moves it, or
removes it (position omitted, zero or negative).
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_identity_optional, get_ranking_service
from db.session import get_db
from schemas.vote import RankingResponse, VoteCreate, VoteResponse
from services.identity import Identity
from services.ranking import RankingService

router = APIRouter()


@router.post("", response_model=VoteResponse)
async def cast_vote(
    vote_data: VoteCreate,
    identity: Annotated[Optional[Identity], Depends(get_identity_optional)],
    service: Annotated[RankingService, Depends(get_ranking_service)],
    db: AsyncSession = Depends(get_db),
) -> VoteResponse:
    """
    Apply a vote to the caller's ranking.

    Anonymous callers get 403 and nothing is written.
    """
    success = await service.apply_vote(identity, vote_data.proposal_id, vote_data.position)
    await db.commit()
    ranking = await service.get_ranking(identity)
    return VoteResponse(success=success, ranking=ranking)


@router.get("", response_model=RankingResponse)
async def get_ranking(
    identity: Annotated[Optional[Identity], Depends(get_identity_optional)],
    service: Annotated[RankingService, Depends(get_ranking_service)],
) -> RankingResponse:
    """The caller's current ranking, most preferred first."""
    return RankingResponse(ranking=await service.get_ranking(identity))
