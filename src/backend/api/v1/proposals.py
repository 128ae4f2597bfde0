"""
Proposal endpoints.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_identity_optional, get_proposal_service
from db.session import get_db
from schemas.proposal import ProposalCreate, ProposalResponse
from services.identity import Identity
from services.proposals import ProposalService

router = APIRouter()


@router.get("", response_model=list[ProposalResponse])
async def list_proposals(
    service: Annotated[ProposalService, Depends(get_proposal_service)],
) -> list[ProposalResponse]:
    """All proposals, oldest first."""
    proposals = await service.list_proposals()
    return [ProposalResponse.model_validate(p) for p in proposals]


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: str,
    service: Annotated[ProposalService, Depends(get_proposal_service)],
) -> ProposalResponse:
    proposal = await service.get_proposal(proposal_id)
    return ProposalResponse.model_validate(proposal)


@router.post("", response_model=ProposalResponse, status_code=status.HTTP_201_CREATED)
async def add_proposal(
    proposal_data: ProposalCreate,
    identity: Annotated[Optional[Identity], Depends(get_identity_optional)],
    service: Annotated[ProposalService, Depends(get_proposal_service)],
    db: AsyncSession = Depends(get_db),
) -> ProposalResponse:
    """
    Submit a proposal.

    Ownership is attached when the caller is signed in. Anonymous
    submissions are accepted only when ALLOW_ANONYMOUS_PROPOSALS is on.
    """
    proposal = await service.create_proposal(proposal_data.content, identity)
    await db.commit()
    return ProposalResponse.model_validate(proposal)
