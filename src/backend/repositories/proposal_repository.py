"""
Proposal repository for database operations.
"""

from typing import Optional
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.proposal import Proposal


class ProposalRepository:
    """Repository for proposal database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, proposal_id: str) -> Optional[Proposal]:
        """Get a proposal by ID."""
        result = await self.db.execute(select(Proposal).where(Proposal.id == proposal_id))
        return result.scalar_one_or_none()

    async def exists(self, proposal_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(Proposal.id)).where(Proposal.id == proposal_id)
        )
        count = result.scalar() or 0
        return count > 0

    async def list_all(self) -> list[Proposal]:
        """All proposals, oldest first."""
        result = await self.db.execute(
            select(Proposal).order_by(Proposal.created_at.asc(), Proposal.id.asc())
        )
        return list(result.scalars().all())

    async def list_by_owner(self, owner_id: str) -> list[Proposal]:
        result = await self.db.execute(
            select(Proposal)
            .where(Proposal.owner_id == owner_id)
            .order_by(Proposal.created_at.asc(), Proposal.id.asc())
        )
        return list(result.scalars().all())

    async def create(self, content: str, owner_id: Optional[str] = None) -> Proposal:
        """Insert a proposal and return it with its generated id."""
        proposal = Proposal(
            id=str(uuid4()),
            owner_id=owner_id,
            content=content,
        )

        self.db.add(proposal)
        await self.db.flush()
        await self.db.refresh(proposal)

        return proposal
