"""
Ranking engine.

Every user keeps an ordered list of proposal ids expressing their vote
preference. A vote inserts a proposal at a 1-indexed position, moves it
there if it is already ranked, or removes it when the position is absent
or not positive. The list never holds the same id twice.
"""

from collections.abc import Sequence
from typing import Optional

import structlog

from core.exceptions import InvalidInput, NotFound, RankingConflict, Unauthorized
from repositories.proposal_repository import ProposalRepository
from repositories.user_repository import UserRepository
from services.identity import Identity

logger = structlog.get_logger(__name__)


def reorder(ranking: Sequence[str], proposal_id: str, position: Optional[int]) -> list[str]:
    """
    Return a new ranking with `proposal_id` placed at `position`.

    - position None or <= 0: drop the id (no-op if absent)
    - position beyond the end: append
    - otherwise: insert at the 1-indexed slot after removing any
      existing occurrence

    The input sequence is left untouched.
    """
    ranked = [item for item in ranking if item != proposal_id]
    if position is None or position <= 0:
        return ranked
    ranked.insert(min(position - 1, len(ranked)), proposal_id)
    return ranked


class RankingService:
    """Applies votes to a user's stored ranking."""

    def __init__(
        self,
        users: UserRepository,
        proposals: ProposalRepository,
        max_retries: int = 3,
    ):
        self.users = users
        self.proposals = proposals
        self.max_retries = max_retries

    async def get_ranking(self, identity: Optional[Identity]) -> list[str]:
        if identity is None:
            raise Unauthorized("Sign in to see your ranking")
        state = await self.users.get_ranking_state(identity.user_id)
        if state is None:
            raise NotFound("User not found")
        return state[0]

    async def apply_vote(
        self,
        identity: Optional[Identity],
        proposal_id: str,
        position: Optional[int] = None,
    ) -> bool:
        """
        Place, move or remove a proposal in the caller's ranking.

        The new ranking is written in a single conditional update keyed on
        the version that was read; a concurrent write makes the update miss
        and the vote is recomputed from fresh state. Nothing is written
        unless the whole reordering commits.

        Raises:
            Unauthorized: no resolved identity.
            InvalidInput: empty proposal id.
            NotFound: unknown user, or placing an unknown proposal.
            RankingConflict: still losing races after max_retries attempts.
        """
        if identity is None:
            raise Unauthorized("Sign in to vote")
        if not proposal_id:
            raise InvalidInput("proposal_id is required")

        inserting = position is not None and position > 0
        if inserting and not await self.proposals.exists(proposal_id):
            raise NotFound("Proposal not found")

        for attempt in range(1, self.max_retries + 1):
            state = await self.users.get_ranking_state(identity.user_id)
            if state is None:
                raise NotFound("User not found")
            current, version = state

            updated = reorder(current, proposal_id, position)
            if updated == current:
                return True

            if await self.users.update_ranking(identity.user_id, updated, version):
                logger.info(
                    "vote_applied",
                    user_id=identity.user_id,
                    proposal_id=proposal_id,
                    position=position,
                    ranking_size=len(updated),
                )
                return True

            logger.info(
                "vote_retry",
                user_id=identity.user_id,
                attempt=attempt,
                seen_version=version,
            )

        logger.warning("vote_conflict", user_id=identity.user_id, attempts=self.max_retries)
        raise RankingConflict()
