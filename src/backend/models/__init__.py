"""Database models module."""

from models.proposal import Proposal
from models.standard import Standard
from models.user import User

__all__ = [
    "User",
    "Proposal",
    "Standard",
]
