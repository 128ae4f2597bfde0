"""
Standard endpoints (read-only).
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_standard_repository
from repositories.standard_repository import StandardRepository
from schemas.standard import StandardResponse

router = APIRouter()


@router.get("/latest", response_model=Optional[StandardResponse])
async def get_latest_standard(
    standards: Annotated[StandardRepository, Depends(get_standard_repository)],
) -> Optional[StandardResponse]:
    """The most recent standard, or null when none has been published."""
    standard = await standards.get_latest()
    if standard is None:
        return None
    return StandardResponse.model_validate(standard)


@router.get("", response_model=list[StandardResponse])
async def list_recent_standards(
    standards: Annotated[StandardRepository, Depends(get_standard_repository)],
    limit: int = Query(10, ge=1, le=100),
) -> list[StandardResponse]:
    """The most recent standards, newest first."""
    return [StandardResponse.model_validate(s) for s in await standards.list_recent(limit)]
