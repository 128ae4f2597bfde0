"""
User model.

Holds credentials for whichever authentication strategy the deployment
runs, and the user's ranked sequence of proposal ids.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from models.proposal import Proposal


class User(Base):
    """
    User account model.

    Authentication fields (only the ones used by the active strategy are set):
    - email + password_hash: local sign-in (stored_token / signed_token)
    - session_token_hash: SHA-256 of the current opaque session token
    - external_subject: `sub` claim from the external identity provider
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True, nullable=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    external_subject: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, index=True, nullable=True
    )
    session_token_hash: Mapped[Optional[str]] = mapped_column(
        String(64), unique=True, index=True, nullable=True
    )

    # Ranked votes: ordered proposal ids, no duplicates
    ranking: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # Bumped on every ranking write; guards against lost updates
    ranking_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    proposals: Mapped[list["Proposal"]] = relationship(
        "Proposal",
        back_populates="owner",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.id}>"
