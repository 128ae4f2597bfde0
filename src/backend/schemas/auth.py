"""
Authentication-related Pydantic schemas.

Which fields of SignInRequest are required depends on AUTH_STRATEGY:
email + password for the local strategies, credential (the identity
provider's ID token) for the external one.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from schemas.user import UserResponse


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=256)


class SignInRequest(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    credential: Optional[str] = None


class SignInResponse(BaseModel):
    """Sign-in result. access_token is None for the external strategy."""

    access_token: Optional[str] = None
    token_type: str = "bearer"
    user: UserResponse
