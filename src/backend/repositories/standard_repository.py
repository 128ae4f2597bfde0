"""
Standard repository (read-only).
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.standard import Standard


class StandardRepository:
    """Repository for reading promoted standards."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_latest(self) -> Optional[Standard]:
        """Most recently created standard, ties broken by highest id."""
        result = await self.db.execute(
            select(Standard).order_by(Standard.created_at.desc(), Standard.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int = 10) -> list[Standard]:
        """The `limit` most recent standards, newest first."""
        result = await self.db.execute(
            select(Standard).order_by(Standard.created_at.desc(), Standard.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, version: str, content: str) -> Standard:
        """Insert a standard. Used by the seed script only."""
        standard = Standard(version=version, content=content)
        self.db.add(standard)
        await self.db.flush()
        await self.db.refresh(standard)
        return standard
