"""
Proposal store.

Whether anonymous callers may submit proposals is a deployment choice
(ALLOW_ANONYMOUS_PROPOSALS); there is no implicit fallback.
"""

from typing import Optional

import structlog

from core.exceptions import InvalidInput, NotFound, Unauthorized
from models.proposal import Proposal
from repositories.proposal_repository import ProposalRepository
from services.identity import Identity

logger = structlog.get_logger(__name__)


class ProposalService:
    def __init__(
        self,
        proposals: ProposalRepository,
        allow_anonymous: bool = False,
        max_length: int = 10_000,
    ):
        self.proposals = proposals
        self.allow_anonymous = allow_anonymous
        self.max_length = max_length

    async def create_proposal(self, content: Optional[str], owner: Optional[Identity]) -> Proposal:
        """
        Store a new proposal.

        Raises:
            Unauthorized: anonymous caller while anonymous submissions are off.
            InvalidInput: blank or oversized content.
        """
        if owner is None and not self.allow_anonymous:
            raise Unauthorized("Sign in to submit a proposal")

        text = (content or "").strip()
        if not text:
            raise InvalidInput("Proposal content must not be empty")
        if len(text) > self.max_length:
            raise InvalidInput(f"Proposal content exceeds {self.max_length} characters")

        proposal = await self.proposals.create(text, owner_id=owner.user_id if owner else None)
        logger.info(
            "proposal_created",
            proposal_id=proposal.id,
            owner_id=proposal.owner_id,
            anonymous=owner is None,
        )
        return proposal

    async def get_proposal(self, proposal_id: str) -> Proposal:
        proposal = await self.proposals.get_by_id(proposal_id)
        if proposal is None:
            raise NotFound("Proposal not found")
        return proposal

    async def list_proposals(self) -> list[Proposal]:
        return await self.proposals.list_all()

    async def list_user_proposals(self, user_id: str) -> list[Proposal]:
        return await self.proposals.list_by_owner(user_id)
