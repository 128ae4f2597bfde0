"""
Shared dependencies for API endpoints.

Includes:
- Identity resolution from the bearer credential
- Service construction over the request-scoped session

The verifier, settings and database all live on app.state; they are
built once in create_application and never read from module globals here.
"""

from collections.abc import Sequence
from typing import Annotated, Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.exceptions import Unauthenticated
from db.session import get_db
from models.proposal import Proposal
from models.user import User
from repositories.proposal_repository import ProposalRepository
from repositories.standard_repository import StandardRepository
from repositories.user_repository import UserRepository
from schemas.proposal import ProposalResponse
from schemas.user import UserResponse
from services.identity import CredentialVerifier, Identity
from services.proposals import ProposalService
from services.ranking import RankingService

logger = structlog.get_logger(__name__)

# Missing credentials mean "anonymous", not an automatic 403
security_optional = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.verifier


def get_credential(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security_optional)],
) -> Optional[str]:
    """Raw bearer credential, if any."""
    if credentials is None:
        return None
    return credentials.credentials


async def get_identity_optional(
    credential: Annotated[Optional[str], Depends(get_credential)],
    verifier: Annotated[CredentialVerifier, Depends(get_verifier)],
    db: AsyncSession = Depends(get_db),
) -> Optional[Identity]:
    """
    Resolve the caller's identity.

    Returns None for anonymous callers and for any credential that does
    not verify. Never raises for a bad credential.
    """
    if not credential:
        return None
    identity = await verifier.resolve(credential, UserRepository(db))
    if identity is None:
        logger.info("credential_rejected", strategy=verifier.strategy.value)
    return identity


async def get_current_identity(
    identity: Annotated[Optional[Identity], Depends(get_identity_optional)],
) -> Identity:
    """Require a resolved identity."""
    if identity is None:
        raise Unauthenticated("Invalid or missing credential")
    return identity


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_standard_repository(db: AsyncSession = Depends(get_db)) -> StandardRepository:
    return StandardRepository(db)


def get_proposal_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
    db: AsyncSession = Depends(get_db),
) -> ProposalService:
    return ProposalService(
        ProposalRepository(db),
        allow_anonymous=settings.ALLOW_ANONYMOUS_PROPOSALS,
        max_length=settings.PROPOSAL_MAX_LENGTH,
    )


def get_ranking_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
    db: AsyncSession = Depends(get_db),
) -> RankingService:
    return RankingService(
        UserRepository(db),
        ProposalRepository(db),
        max_retries=settings.VOTE_MAX_RETRIES,
    )


def _user_model_to_schema(user: User, proposals: Sequence[Proposal] = ()) -> UserResponse:
    """
    Convert a User model (plus the proposals they own) to a UserResponse.

    Relationships are never touched here so the conversion is safe
    outside of an async lazy-load context.
    """
    return UserResponse(
        id=str(user.id),
        email=user.email,
        ranking=list(user.ranking or []),
        proposals=[ProposalResponse.model_validate(p) for p in proposals],
        created_at=user.created_at,
    )
