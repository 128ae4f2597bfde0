"""
Standard schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StandardResponse(BaseModel):
    """A promoted proposal snapshot."""

    id: str
    version: str
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
