"""Repository modules for database access."""

from repositories.proposal_repository import ProposalRepository
from repositories.standard_repository import StandardRepository
from repositories.user_repository import UserRepository

__all__ = [
    "ProposalRepository",
    "StandardRepository",
    "UserRepository",
]
