"""
User repository for database operations.
"""

from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.proposal import Proposal
from models.user import User


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_by_session_token_hash(self, token_hash: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.session_token_hash == token_hash))
        return result.scalar_one_or_none()

    async def get_by_external_subject(self, subject: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.external_subject == subject))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.db.execute(select(func.count(User.id)).where(User.email == email.lower()))
        count = result.scalar() or 0
        return count > 0

    async def create(
        self,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        external_subject: Optional[str] = None,
    ) -> User:
        """Create a new user with an empty ranking."""
        user = User(
            id=str(uuid4()),
            email=email.lower() if email else None,
            password_hash=password_hash,
            external_subject=external_subject,
            ranking=[],
            ranking_version=0,
        )

        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)

        return user

    async def get_or_create_by_external_subject(
        self,
        subject: str,
        email: Optional[str] = None,
    ) -> User:
        """Find the user for an identity-provider subject, creating it on first sign-in."""
        user = await self.get_by_external_subject(subject)
        if user is not None:
            return user

        if email and await self.email_exists(email):
            email = None

        try:
            return await self.create(email=email, external_subject=subject)
        except IntegrityError:
            # Lost a race with a concurrent first sign-in for the same subject
            await self.db.rollback()
            user = await self.get_by_external_subject(subject)
            if user is None:
                raise
            return user

    async def set_session_token_hash(self, user_id: str, token_hash: Optional[str]) -> bool:
        """Store (or clear, with None) the user's session token hash."""
        result = await self.db.execute(
            update(User).where(User.id == user_id).values(session_token_hash=token_hash)
        )
        return self._get_rowcount(result) > 0

    async def get_ranking_state(self, user_id: str) -> Optional[tuple[list[str], int]]:
        """Read the stored ranking and its version, bypassing the identity map."""
        result = await self.db.execute(
            select(User.ranking, User.ranking_version).where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return list(row[0] or []), row[1]

    async def update_ranking(
        self,
        user_id: str,
        ranking: list[str],
        expected_version: int,
    ) -> bool:
        """
        Write a new ranking if nobody else wrote one since it was read.

        Returns False when the stored version moved on, in which case
        nothing was written.
        """
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id, User.ranking_version == expected_version)
            .values(ranking=ranking, ranking_version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        return self._get_rowcount(result) == 1

    async def delete_user(self, user_id: str) -> bool:
        """Delete a user; their proposals stay but lose their owner."""
        await self.db.execute(
            update(Proposal).where(Proposal.owner_id == user_id).values(owner_id=None)
        )
        result = await self.db.execute(delete(User).where(User.id == user_id))
        return self._get_rowcount(result) > 0
