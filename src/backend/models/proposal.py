"""
Proposal model.

Proposals are free-text submissions. They are never edited or deleted;
deleting the owning account only clears owner_id.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from models.user import User


class Proposal(Base):
    """A user-submitted text item eligible for ranking."""

    __tablename__ = "proposals"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Null for anonymous submissions or after the owner deleted their account
    owner_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    owner: Mapped[Optional["User"]] = relationship("User", back_populates="proposals")

    def __repr__(self) -> str:
        return f"<Proposal {self.id} by {self.owner_id or 'anonymous'}>"
