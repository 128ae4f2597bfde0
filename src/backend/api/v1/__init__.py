"""
API v1 router aggregating all endpoints.
"""

from fastapi import APIRouter

from api.v1.auth import router as auth_router
from api.v1.proposals import router as proposals_router
from api.v1.standards import router as standards_router
from api.v1.users import router as users_router
from api.v1.votes import router as votes_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(proposals_router, prefix="/proposals", tags=["Proposals"])
router.include_router(votes_router, prefix="/votes", tags=["Votes"])
router.include_router(standards_router, prefix="/standards", tags=["Standards"])
