"""
User profile endpoints.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from api.deps import (
    _user_model_to_schema,
    get_current_identity,
    get_proposal_service,
    get_user_repository,
)
from core.exceptions import NotFound
from repositories.user_repository import UserRepository
from schemas.user import UserResponse
from services.identity import Identity
from services.proposals import ProposalService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    identity: Annotated[Identity, Depends(get_current_identity)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
    proposal_service: Annotated[ProposalService, Depends(get_proposal_service)],
) -> UserResponse:
    """The caller's account, ranking and own proposals."""
    user = await users.get_by_id(identity.user_id)
    if user is None:
        raise NotFound("User not found")
    proposals = await proposal_service.list_user_proposals(user.id)
    return _user_model_to_schema(user, proposals)


@router.delete("/me")
async def delete_account(
    identity: Annotated[Identity, Depends(get_current_identity)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> dict[str, str]:
    """
    Delete the caller's account.

    Proposals they submitted stay visible but no longer have an owner.
    """
    if not await users.delete_user(identity.user_id):
        raise NotFound("User not found")
    await users.db.commit()
    logger.info("account_deleted", user_id=identity.user_id)
    return {"message": "Account deleted successfully"}
