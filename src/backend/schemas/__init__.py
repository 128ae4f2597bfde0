"""Schemas module initialization."""

from schemas.auth import RegisterRequest, SignInRequest, SignInResponse
from schemas.proposal import ProposalCreate, ProposalResponse
from schemas.standard import StandardResponse
from schemas.user import UserResponse
from schemas.vote import RankingResponse, VoteCreate, VoteResponse

__all__ = [
    "RegisterRequest",
    "SignInRequest",
    "SignInResponse",
    "ProposalCreate",
    "ProposalResponse",
    "StandardResponse",
    "UserResponse",
    "VoteCreate",
    "VoteResponse",
    "RankingResponse",
]
